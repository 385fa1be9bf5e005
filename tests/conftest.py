"""Pytest configuration and fixtures."""


import pytest

from core.manifests import read_evidence


@pytest.fixture
def make_project(tmp_path):
    """Create a project directory from a mapping of file name to content."""

    def _make(files: dict[str, str] | None = None):
        for name, content in (files or {}).items():
            (tmp_path / name).write_text(content)
        return tmp_path

    return _make


@pytest.fixture
def load_evidence(make_project):
    """Write files to a temporary project and read them back as evidence."""

    def _load(files: dict[str, str] | None = None):
        return read_evidence(make_project(files))

    return _load


@pytest.fixture
def sample_package_json():
    """Sample package.json content for a Playwright project."""
    return """
{
  "name": "@acme/e2e-tests",
  "devDependencies": {
    "@playwright/test": "^1.44.0"
  }
}
"""


@pytest.fixture
def sample_package_lock():
    """Sample package-lock.json with a resolved @playwright/test."""
    return """
{
  "name": "e2e-tests",
  "lockfileVersion": 3,
  "packages": {
    "": {"devDependencies": {"@playwright/test": "^1.44.0"}},
    "node_modules/@playwright/test": {"version": "1.44.1"},
    "node_modules/playwright": {"version": "1.44.1"}
  }
}
"""


@pytest.fixture
def sample_poetry_pyproject():
    """Sample pyproject.toml for a poetry-managed pytest project."""
    return """[tool.poetry]
name = "checkout-tests"
version = "0.1.0"

[tool.poetry.dependencies]
python = "^3.12"
pytest-playwright = "^0.5.0"
allure-pytest = "^2.13"
"""
