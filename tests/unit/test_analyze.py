"""Tests for Python project analysis."""

from core.analyze import (
    analyze_python_project,
    detect_package_manager,
    detect_python_version,
)
from core.models import BrowserConfig, PackageManager


class TestPackageManager:
    """Poetry needs positive evidence."""

    def test_default_is_pip(self, load_evidence):
        assert detect_package_manager(load_evidence()) == PackageManager.PIP

    def test_poetry_section(self, load_evidence, sample_poetry_pyproject):
        evidence = load_evidence({"pyproject.toml": sample_poetry_pyproject})
        assert detect_package_manager(evidence) == PackageManager.POETRY

    def test_poetry_lock_alone(self, load_evidence):
        """An empty poetry.lock still counts as evidence."""
        evidence = load_evidence({"poetry.lock": "", "requirements.txt": "pytest\n"})
        assert detect_package_manager(evidence) == PackageManager.POETRY

    def test_poetry_section_wins_over_requirements(self, load_evidence, sample_poetry_pyproject):
        evidence = load_evidence({
            "pyproject.toml": sample_poetry_pyproject,
            "requirements.txt": "pytest==8.0.0\n",
        })
        assert detect_package_manager(evidence) == PackageManager.POETRY

    def test_python_key_alone_is_not_poetry(self, load_evidence):
        """A python version key without [tool.poetry] stays pip."""
        evidence = load_evidence({
            "pyproject.toml": '[tool.something.dependencies]\npython = "^3.11"\n'
        })
        assert detect_package_manager(evidence) == PackageManager.PIP


class TestPythonVersion:
    """Language version comes from pyproject first, .python-version second."""

    def test_caret_constraint(self, load_evidence):
        evidence = load_evidence({"pyproject.toml": 'python = "^3.11"\n'})
        assert detect_python_version(evidence) == "3.11"

    def test_range_constraint_takes_first(self, load_evidence):
        evidence = load_evidence({"pyproject.toml": 'python = ">=3.9,<3.13"\n'})
        assert detect_python_version(evidence) == "3.9"

    def test_requires_python(self, load_evidence):
        evidence = load_evidence({"pyproject.toml": '[project]\nrequires-python = ">=3.10"\n'})
        assert detect_python_version(evidence) == "3.10"

    def test_python_version_file(self, load_evidence):
        evidence = load_evidence({".python-version": "  3.12.4\n"})
        assert detect_python_version(evidence) == "3.12"

    def test_pyproject_wins(self, load_evidence):
        evidence = load_evidence({
            "pyproject.toml": 'python = "~3.10"\n',
            ".python-version": "3.12.4\n",
        })
        assert detect_python_version(evidence) == "3.10"

    def test_unrelated_python_keys_ignored(self, load_evidence):
        evidence = load_evidence({
            "pyproject.toml": '[tool.mypy]\npython_version = "3.8"\n',
            ".python-version": "3.12\n",
        })
        assert detect_python_version(evidence) == "3.12"

    def test_no_version(self, load_evidence):
        evidence = load_evidence({".python-version": "system\n"})
        assert detect_python_version(evidence) is None


class TestAnalyzePythonProject:
    """Full analysis of a Python test project."""

    def test_empty_project(self, load_evidence):
        """No manifests means pip, API only, nothing pinned, default browser."""
        analysis = analyze_python_project(load_evidence())

        assert analysis.package_manager == PackageManager.PIP
        assert analysis.is_api_only is True
        assert analysis.python_version is None
        assert analysis.playwright_version is None
        assert analysis.browser_config == BrowserConfig()

    def test_pinned_playwright_requirement(self, load_evidence):
        analysis = analyze_python_project(load_evidence({
            "requirements.txt": "pytest==8.3.2\nplaywright==1.55.0\n",
        }))

        assert analysis.has_playwright is True
        assert analysis.playwright_version == "1.55.0"
        assert analysis.is_api_only is False

    def test_plugin_implies_playwright(self, load_evidence):
        """pytest-playwright implies playwright but carries no version."""
        analysis = analyze_python_project(load_evidence({
            "requirements.txt": "pytest-playwright==0.5.2\n",
        }))

        assert analysis.has_playwright is True
        assert analysis.playwright_version is None

    def test_selenium_only(self, load_evidence):
        analysis = analyze_python_project(load_evidence({
            "requirements.txt": "pytest\npytest-selenium\n",
        }))

        assert analysis.has_selenium is True
        assert analysis.has_playwright is False
        assert analysis.is_api_only is False

    def test_api_only_with_allure(self, load_evidence):
        analysis = analyze_python_project(load_evidence({
            "requirements.txt": "pytest\nrequests\nallure-pytest==2.13.5\n",
        }))

        assert analysis.has_allure is True
        assert analysis.is_api_only is True

    def test_poetry_project(self, load_evidence, sample_poetry_pyproject):
        analysis = analyze_python_project(load_evidence({
            "pyproject.toml": sample_poetry_pyproject,
        }))

        assert analysis.package_manager == PackageManager.POETRY
        assert analysis.python_version == "3.12"
        assert analysis.has_playwright is True
        assert analysis.has_allure is True

    def test_python_key_without_poetry(self, load_evidence):
        """python = "^3.11" alone gives the version but not poetry."""
        analysis = analyze_python_project(load_evidence({
            "pyproject.toml": 'python = "^3.11"\n',
        }))

        assert analysis.python_version == "3.11"
        assert analysis.package_manager == PackageManager.PIP

    def test_comment_mention_counts(self, load_evidence):
        """Detection is substring search, so comments still count."""
        analysis = analyze_python_project(load_evidence({
            "requirements.txt": "requests\n# TODO: try selenium later\n",
        }))

        assert analysis.has_selenium is True
        assert analysis.is_api_only is False

    def test_unrelated_files_do_not_count(self, load_evidence):
        """Only manifests are searched, not arbitrary project files."""
        analysis = analyze_python_project(load_evidence({
            "requirements.txt": "requests\n",
            "README.md": "We used to use playwright here.",
        }))

        assert analysis.has_playwright is False

    def test_browser_config_embedded(self, load_evidence):
        analysis = analyze_python_project(load_evidence({
            "requirements.txt": "pytest-playwright\n",
            "pytest.ini": "[pytest]\naddopts = --browser firefox\n",
        }))

        assert analysis.browser_config.browser == "firefox"
