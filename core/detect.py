"""Framework and project name detection."""

import re
from pathlib import Path

from .manifests import PYPROJECT, PYTEST_INI, REQUIREMENTS, SETUP_CFG
from .models import Framework, ProjectEvidence
from .versions import PLAYWRIGHT_TEST_PACKAGE

PLAYWRIGHT_CONFIGS = (
    "playwright.config.ts",
    "playwright.config.js",
    "playwright.config.mjs",
    "playwright.config.cjs",
)


def identify(evidence: ProjectEvidence) -> Framework:
    """Detect the test framework a project is built around.

    A Playwright config file or an ``@playwright/test`` dependency marks a
    Node.js Playwright project and takes precedence. pytest configuration or a
    pytest dependency marks a Python project.

    Args:
        evidence: Manifest contents of the project

    Returns:
        Detected framework, or ``Framework.UNKNOWN``
    """
    if any(evidence.has(name) for name in PLAYWRIGHT_CONFIGS):
        return Framework.PLAYWRIGHT

    for section in ("devDependencies", "dependencies"):
        deps = evidence.package_json.get(section)
        if isinstance(deps, dict) and PLAYWRIGHT_TEST_PACKAGE in deps:
            return Framework.PLAYWRIGHT

    if evidence.has(PYTEST_INI) or evidence.has("conftest.py"):
        return Framework.PYTEST
    if "[tool:pytest]" in evidence.text(SETUP_CFG):
        return Framework.PYTEST
    if "pytest" in evidence.text(REQUIREMENTS) or "pytest" in evidence.text(PYPROJECT):
        return Framework.PYTEST

    return Framework.UNKNOWN


_NPM_SCOPE = re.compile(r"^@[^/]+/")
_PROJECT_NAME = re.compile(
    r"""^\[(?:project|tool\.poetry)\][^\[]*?^name\s*=\s*["']([^"']+)["']""",
    re.MULTILINE | re.DOTALL,
)
_ILLEGAL_IMAGE_CHARS = re.compile(r"[^a-z0-9._-]+")


def sanitize_image_name(name: str) -> str:
    """Lower-case a name and reduce it to characters Docker accepts."""
    cleaned = _ILLEGAL_IMAGE_CHARS.sub("-", name.strip().lower())
    return cleaned.strip(".-_")


def detect_project_name(evidence: ProjectEvidence) -> str:
    """Image name from package.json, pyproject.toml, or the directory name."""
    candidates = []

    name = evidence.package_json.get("name")
    if isinstance(name, str):
        candidates.append(_NPM_SCOPE.sub("", name))

    match = _PROJECT_NAME.search(evidence.text(PYPROJECT))
    if match:
        candidates.append(match.group(1))

    candidates.append(Path(evidence.root).resolve().name)

    for candidate in candidates:
        cleaned = sanitize_image_name(candidate)
        if cleaned:
            return cleaned
    return "automation-tests"
