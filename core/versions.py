"""Pinned version lookup across lockfiles and manifests.

Each source knows one file format. ``VersionExtractor`` asks them in order of
trust and stops at the first one that finds the package:

1. package-lock.json (exact resolved version)
2. yarn.lock
3. pnpm-lock.yaml
4. package.json (declared range, prefix stripped)
"""

import logging
import re
from typing import Any

from .config import DEFAULT_PLAYWRIGHT_VERSION
from .manifests import PNPM_LOCK, YARN_LOCK
from .models import ProjectEvidence

logger = logging.getLogger(__name__)

PLAYWRIGHT_TEST_PACKAGE = "@playwright/test"

_LEADING_NON_DIGITS = re.compile(r"^[^\d]*")
_VERSION_CORE = re.compile(r"^\d+\.\d+(?:\.\d+)?")


def clean_version(raw: str | None) -> str | None:
    """Reduce a matched version to a bare ``X.Y[.Z]``.

    Range operators, ``=`` and a leading ``v`` are stripped. Returns None when
    nothing version-like is left (e.g. ``latest`` or ``workspace:*``).
    """
    if not raw:
        return None
    stripped = _LEADING_NON_DIGITS.sub("", raw.strip())
    match = _VERSION_CORE.match(stripped)
    return match.group(0) if match else None


class VersionSource:
    """One place a package version may be recorded."""

    name = "source"

    def find(self, evidence: ProjectEvidence, package: str) -> str | None:
        """Return the raw recorded version, or None if the package is absent."""
        raise NotImplementedError

    def extract(self, evidence: ProjectEvidence, package: str) -> str | None:
        return clean_version(self.find(evidence, package))


class PackageLockSource(VersionSource):
    """npm lockfile, keyed by the resolved ``node_modules`` path."""

    name = "package-lock.json"

    def find(self, evidence: ProjectEvidence, package: str) -> str | None:
        lock = evidence.package_lock
        entry = _as_dict(_as_dict(lock.get("packages")).get(f"node_modules/{package}"))
        if not entry:
            # lockfileVersion 1
            entry = _as_dict(_as_dict(lock.get("dependencies")).get(package))
        version = entry.get("version")
        return version if isinstance(version, str) else None


class YarnLockSource(VersionSource):
    """yarn.lock blocks: a ``name@range:`` header then a version line."""

    name = "yarn.lock"

    def find(self, evidence: ProjectEvidence, package: str) -> str | None:
        pattern = re.compile(
            rf'^"?{re.escape(package)}@[^\n]*:[ \t]*\n[ \t]+version:?[ \t]+"?([^"\s]+)"?',
            re.MULTILINE,
        )
        match = pattern.search(evidence.text(YARN_LOCK))
        return match.group(1) if match else None


class PnpmLockSource(VersionSource):
    """pnpm-lock.yaml, as an importer ``specifier`` block or a ``name@version`` key."""

    name = "pnpm-lock.yaml"

    def find(self, evidence: ProjectEvidence, package: str) -> str | None:
        content = evidence.text(PNPM_LOCK)
        if not content:
            return None

        quoted = rf"""['"]?{re.escape(package)}['"]?"""
        specifier_block = re.compile(
            rf"^[ \t]*{quoted}:[ \t]*\n[ \t]+specifier:[^\n]*\n[ \t]+version:[ \t]*['\"]?(\d[^\s'\"(]*)",
            re.MULTILINE,
        )
        inline_key = re.compile(
            rf"""^[ \t]*['"]?/?{re.escape(package)}@(\d[^\s'"(:]*)""",
            re.MULTILINE,
        )
        for pattern in (specifier_block, inline_key):
            match = pattern.search(content)
            if match:
                return match.group(1)
        return None


class PackageJsonSource(VersionSource):
    """Declared dependency range in package.json."""

    name = "package.json"

    def find(self, evidence: ProjectEvidence, package: str) -> str | None:
        for section in ("devDependencies", "dependencies"):
            version = _as_dict(evidence.package_json.get(section)).get(package)
            if isinstance(version, str):
                return version
        return None


DEFAULT_SOURCES: tuple[VersionSource, ...] = (
    PackageLockSource(),
    YarnLockSource(),
    PnpmLockSource(),
    PackageJsonSource(),
)


class VersionExtractor:
    """Runs version sources in priority order."""

    def __init__(self, sources: tuple[VersionSource, ...] = DEFAULT_SOURCES):
        self.sources = sources

    def extract(self, evidence: ProjectEvidence, package: str) -> str | None:
        """Version from the first source that knows the package, else None."""
        for source in self.sources:
            version = source.extract(evidence, package)
            if version:
                logger.debug("Found %s %s in %s", package, version, source.name)
                return version
        return None


def detect_playwright_version(evidence: ProjectEvidence) -> str:
    """Version of @playwright/test, falling back to the default image tag."""
    version = VersionExtractor().extract(evidence, PLAYWRIGHT_TEST_PACKAGE)
    return version or DEFAULT_PLAYWRIGHT_VERSION


def pinned_requirement_version(content: str, package: str) -> str | None:
    """Exact ``package==X.Y.Z`` pin at the start of a requirements line."""
    match = re.search(
        rf"^{re.escape(package)}==(\d+\.\d+\.\d+)", content, re.MULTILINE
    )
    return match.group(1) if match else None


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}
