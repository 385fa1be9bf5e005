"""Environment analysis for Python test projects."""

import logging
import re

from .browser import detect_browser_config
from .manifests import POETRY_LOCK, PYPROJECT, PYTHON_VERSION_FILE, REQUIREMENTS
from .models import PackageManager, ProjectAnalysis, ProjectEvidence
from .versions import pinned_requirement_version

logger = logging.getLogger(__name__)

# Canonical package name first, then pytest plugin aliases that pull it in.
# Matching is plain substring search over the manifest text.
PLAYWRIGHT_PACKAGES = ("playwright", "pytest-playwright")
ALLURE_PACKAGES = ("allure-pytest",)
SELENIUM_PACKAGES = ("selenium", "pytest-selenium")

POETRY_SECTION = "[tool.poetry]"

_PYTHON_CONSTRAINT = re.compile(
    r"""^\s*(?:python|requires-python)\s*=\s*["']([^"']+)["']""", re.MULTILINE
)
_MAJOR_MINOR = re.compile(r"(\d+\.\d+)")


def detect_package_manager(evidence: ProjectEvidence) -> PackageManager:
    """Poetry only on positive evidence, pip otherwise."""
    if evidence.has(POETRY_LOCK) or POETRY_SECTION in evidence.text(PYPROJECT):
        return PackageManager.POETRY
    return PackageManager.PIP


def detect_python_version(evidence: ProjectEvidence) -> str | None:
    """``X.Y`` from the pyproject python constraint, else from .python-version."""
    match = _PYTHON_CONSTRAINT.search(evidence.text(PYPROJECT))
    if match:
        version = _MAJOR_MINOR.search(match.group(1))
        if version:
            return version.group(1)

    pinned = _MAJOR_MINOR.search(evidence.text(PYTHON_VERSION_FILE).strip())
    return pinned.group(1) if pinned else None


def dependency_corpus(evidence: ProjectEvidence) -> str:
    """All dependency declarations as one searchable text."""
    return evidence.text(PYPROJECT) + "\n" + evidence.text(REQUIREMENTS)


def mentions_any(corpus: str, packages: tuple[str, ...]) -> bool:
    return any(package in corpus for package in packages)


def analyze_python_project(evidence: ProjectEvidence) -> ProjectAnalysis:
    """Work out what a Python test project needs.

    Args:
        evidence: Manifest contents of the project

    Returns:
        Analysis with dependency flags, versions and browser policy
    """
    corpus = dependency_corpus(evidence)

    analysis = ProjectAnalysis(
        has_playwright=mentions_any(corpus, PLAYWRIGHT_PACKAGES),
        has_allure=mentions_any(corpus, ALLURE_PACKAGES),
        has_selenium=mentions_any(corpus, SELENIUM_PACKAGES),
        package_manager=detect_package_manager(evidence),
        python_version=detect_python_version(evidence),
        playwright_version=pinned_requirement_version(corpus, "playwright"),
        browser_config=detect_browser_config(evidence),
    )
    logger.debug("Analysis of %s: %s", evidence.root, analysis)
    return analysis
