"""Best-effort loading of manifest files from a project root."""

import json
import logging
from pathlib import Path
from typing import Any

from .models import ProjectEvidence

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
PACKAGE_LOCK = "package-lock.json"
YARN_LOCK = "yarn.lock"
PNPM_LOCK = "pnpm-lock.yaml"
PYPROJECT = "pyproject.toml"
POETRY_LOCK = "poetry.lock"
REQUIREMENTS = "requirements.txt"
PYTHON_VERSION_FILE = ".python-version"
PYTEST_INI = "pytest.ini"
SETUP_CFG = "setup.cfg"

BYTE_ORDER_MARK = "\ufeff"

# Files whose text is read
MANIFEST_FILES = (
    PACKAGE_JSON,
    PACKAGE_LOCK,
    YARN_LOCK,
    PNPM_LOCK,
    PYPROJECT,
    REQUIREMENTS,
    PYTHON_VERSION_FILE,
    PYTEST_INI,
    SETUP_CFG,
)

# Files where only presence matters
MARKER_FILES = (
    POETRY_LOCK,
    "conftest.py",
    "playwright.config.ts",
    "playwright.config.js",
    "playwright.config.mjs",
    "playwright.config.cjs",
)


def try_read(path: str | Path) -> str:
    """Read a text file, returning an empty string if it cannot be read.

    Missing files, directories, permission problems and undecodable content
    all count as absent. A leading byte order mark is dropped.
    """
    try:
        return Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Skipping %s: %s", path, e)
        return ""


def load_json(content: str) -> dict[str, Any]:
    """Decode a JSON object, treating malformed input like an absent file."""
    if not content.strip():
        return {}
    try:
        data = json.loads(content)
    except ValueError:
        logger.debug("Ignoring malformed JSON manifest")
        return {}
    return data if isinstance(data, dict) else {}


def evidence_from_files(files: dict[str, str], root: str = ".") -> ProjectEvidence:
    """Build evidence from in-memory file contents keyed by file name."""
    texts = {}
    for name in MANIFEST_FILES:
        content = files.get(name, "").removeprefix(BYTE_ORDER_MARK)
        if content:
            texts[name] = content
    markers = frozenset(
        name for name in (*MANIFEST_FILES, *MARKER_FILES) if name in files
    )
    return ProjectEvidence(
        root=root,
        files=texts,
        markers=markers,
        package_json=load_json(texts.get(PACKAGE_JSON, "")),
        package_lock=load_json(texts.get(PACKAGE_LOCK, "")),
    )


def read_evidence(root: str | Path) -> ProjectEvidence:
    """Load every known manifest file under a project root.

    Args:
        root: Project directory, absolute or relative

    Returns:
        Evidence holding the text of each readable manifest
    """
    root_path = Path(root).resolve()
    files: dict[str, str] = {}

    for name in MANIFEST_FILES:
        path = root_path / name
        content = try_read(path)
        if content or path.is_file():
            files[name] = content

    for name in MARKER_FILES:
        if (root_path / name).is_file():
            files[name] = ""

    logger.debug("Evidence in %s: %s", root_path, sorted(files))
    return evidence_from_files(files, root=str(root_path))
