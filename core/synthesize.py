"""Build configuration synthesis.

Combines what the analyzer inferred with what the user said explicitly. The
user always wins; ``merge_choices`` is the single place that rule lives.
"""

import logging
from dataclasses import fields, replace

from packaging.version import InvalidVersion, Version

from .analyze import analyze_python_project
from .config import DEFAULT_PLATFORMS, DEFAULT_PLAYWRIGHT_VERSION, DEFAULT_PYTHON_VERSION
from .detect import identify
from .errors import FrameworkNotDetectedError, InvalidOverrideError
from .manifests import PACKAGE_LOCK, PNPM_LOCK, YARN_LOCK
from .models import (
    BuildConfiguration,
    Choices,
    Framework,
    InstallStrategy,
    Overrides,
    PackageManager,
    ProjectAnalysis,
    ProjectEvidence,
)
from .versions import detect_playwright_version

logger = logging.getLogger(__name__)

PLAYWRIGHT_NODE_IMAGE = "mcr.microsoft.com/playwright:v{version}-jammy"
PLAYWRIGHT_PYTHON_IMAGE = "mcr.microsoft.com/playwright/python:v{version}-jammy"
PYTHON_IMAGE = "python:{version}-slim"

PIP_INSTALL = InstallStrategy(
    name="pip",
    copy_files=("requirements.txt",),
    commands=("pip install --no-cache-dir -r requirements.txt",),
)
POETRY_INSTALL = InstallStrategy(
    name="poetry",
    copy_files=("pyproject.toml", "poetry.lock*"),
    commands=(
        "pip install --no-cache-dir poetry",
        "poetry config virtualenvs.create false",
        "poetry install --no-interaction --no-ansi --no-root",
    ),
)
NPM_INSTALL = InstallStrategy(
    name="npm",
    copy_files=("package*.json",),
    commands=("npm ci",),
)
YARN_INSTALL = InstallStrategy(
    name="yarn",
    copy_files=("package.json", "yarn.lock"),
    commands=("corepack enable", "yarn install --frozen-lockfile"),
)
PNPM_INSTALL = InstallStrategy(
    name="pnpm",
    copy_files=("package.json", "pnpm-lock.yaml"),
    commands=("corepack enable", "pnpm install --frozen-lockfile"),
)

# First lockfile found decides; npm when there is none
NODE_INSTALLS = (
    (PACKAGE_LOCK, NPM_INSTALL),
    (YARN_LOCK, YARN_INSTALL),
    (PNPM_LOCK, PNPM_INSTALL),
)


def normalize_version(value: str, label: str) -> str:
    """Validate an explicit version and return it as ``X.Y[.Z]``.

    Raises:
        InvalidOverrideError: If the value is not a plain release version
    """
    try:
        parsed = Version(value.strip())
    except InvalidVersion:
        raise InvalidOverrideError(f"Invalid {label} version: {value!r}")

    if parsed.epoch or parsed.pre or parsed.post or parsed.dev or parsed.local:
        raise InvalidOverrideError(f"{label} version must be a plain release: {value!r}")
    if not 2 <= len(parsed.release) <= 3:
        raise InvalidOverrideError(f"{label} version must look like X.Y or X.Y.Z: {value!r}")

    return ".".join(str(part) for part in parsed.release)


def inferred_choices(analysis: ProjectAnalysis) -> Choices:
    return Choices(
        has_playwright=analysis.has_playwright,
        has_selenium=analysis.has_selenium,
        has_allure=analysis.has_allure,
        python_version=analysis.python_version,
        playwright_version=analysis.playwright_version,
    )


def override_choices(overrides: Overrides) -> Choices:
    """Translate user answers into the same shape as inferred choices."""
    return Choices(
        # "No browser" switches off every browser driver; there is no way to
        # force one on that the manifests don't mention.
        has_playwright=False if overrides.no_browser else None,
        has_selenium=False if overrides.no_browser else None,
        has_allure=overrides.has_allure,
        python_version=(
            normalize_version(overrides.python_version, "Python")
            if overrides.python_version
            else None
        ),
        playwright_version=(
            normalize_version(overrides.playwright_version, "Playwright")
            if overrides.playwright_version
            else None
        ),
    )


def merge_choices(inferred: Choices, override: Choices) -> Choices:
    """Field-wise merge where any value set in ``override`` wins."""
    merged = {}
    for f in fields(Choices):
        value = getattr(override, f.name)
        merged[f.name] = value if value is not None else getattr(inferred, f.name)
    return Choices(**merged)


def apply_overrides(analysis: ProjectAnalysis, overrides: Overrides) -> ProjectAnalysis:
    """Return a new analysis with the user's explicit answers applied."""
    merged = merge_choices(inferred_choices(analysis), override_choices(overrides))
    return replace(
        analysis,
        has_playwright=bool(merged.has_playwright),
        has_selenium=bool(merged.has_selenium),
        has_allure=bool(merged.has_allure),
        python_version=merged.python_version,
        playwright_version=merged.playwright_version,
    )


def resolve_framework(evidence: ProjectEvidence, overrides: Overrides) -> Framework:
    """Explicit framework choice, else detection.

    Raises:
        FrameworkNotDetectedError: If neither yields a framework
    """
    if overrides.framework and overrides.framework != Framework.UNKNOWN:
        return overrides.framework

    framework = identify(evidence)
    if framework == Framework.UNKNOWN:
        raise FrameworkNotDetectedError(evidence.root)
    return framework


def install_strategy(package_manager: PackageManager) -> InstallStrategy:
    if package_manager == PackageManager.POETRY:
        return POETRY_INSTALL
    return PIP_INSTALL


def node_install_strategy(evidence: ProjectEvidence) -> InstallStrategy:
    for lockfile, strategy in NODE_INSTALLS:
        if evidence.has(lockfile):
            return strategy
    return NPM_INSTALL


def split_system_packages(raw: str) -> tuple[str, ...]:
    return tuple(token for token in raw.split() if token)


def select_platforms(
    available: tuple[str, ...], requested: list[str] | None
) -> tuple[str, ...]:
    """Platforms to build, optionally narrowed by the user.

    Raises:
        InvalidOverrideError: If the request is empty or adds a platform
    """
    if requested is None:
        return available
    if not requested:
        raise InvalidOverrideError("At least one platform is required")

    extra = [platform for platform in requested if platform not in available]
    if extra:
        raise InvalidOverrideError(
            f"Cannot build for {', '.join(extra)}; available: {', '.join(available)}"
        )
    return tuple(requested)


def synthesize_python(analysis: ProjectAnalysis, overrides: Overrides) -> BuildConfiguration:
    """Build configuration for a pytest project."""
    analysis = apply_overrides(analysis, overrides)
    browser = analysis.browser_config

    if analysis.has_playwright:
        playwright_version = analysis.playwright_version or DEFAULT_PLAYWRIGHT_VERSION
        base_image = PLAYWRIGHT_PYTHON_IMAGE.format(version=playwright_version)
        browser_install = browser.docker_install_command
    else:
        playwright_version = None
        base_image = PYTHON_IMAGE.format(
            version=analysis.python_version or DEFAULT_PYTHON_VERSION
        )
        browser_install = None

    return BuildConfiguration(
        framework=Framework.PYTEST,
        base_image=base_image,
        install=install_strategy(analysis.package_manager),
        system_packages=split_system_packages(overrides.system_packages),
        platforms=select_platforms(browser.platforms, overrides.platforms),
        browser_install=browser_install,
        use_allure=analysis.has_allure,
        playwright_version=playwright_version,
        python_version=analysis.python_version,
        warning_message=browser.warning_message,
    )


def synthesize_playwright(evidence: ProjectEvidence, overrides: Overrides) -> BuildConfiguration:
    """Build configuration for a Node.js Playwright project."""
    if overrides.playwright_version:
        version = normalize_version(overrides.playwright_version, "Playwright")
    else:
        version = detect_playwright_version(evidence)

    if overrides.platforms is not None:
        logger.warning("Platform selection is ignored for Playwright projects")

    return BuildConfiguration(
        framework=Framework.PLAYWRIGHT,
        base_image=PLAYWRIGHT_NODE_IMAGE.format(version=version),
        install=node_install_strategy(evidence),
        system_packages=split_system_packages(overrides.system_packages),
        platforms=DEFAULT_PLATFORMS,
        playwright_version=version,
    )


def synthesize(
    evidence: ProjectEvidence,
    overrides: Overrides | None = None,
    analysis: ProjectAnalysis | None = None,
) -> BuildConfiguration:
    """Turn project evidence and user answers into a build configuration.

    Args:
        evidence: Manifest contents of the project
        overrides: Explicit user answers; inference is used where absent
        analysis: Precomputed analysis of the same evidence, if any

    Returns:
        Immutable configuration for the template renderer
    """
    overrides = overrides or Overrides()
    framework = resolve_framework(evidence, overrides)
    logger.debug("Synthesizing %s configuration for %s", framework.value, evidence.root)

    if framework == Framework.PLAYWRIGHT:
        return synthesize_playwright(evidence, overrides)

    if analysis is None:
        analysis = analyze_python_project(evidence)
    return synthesize_python(analysis, overrides)
