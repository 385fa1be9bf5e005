"""Rendering of Dockerfile, entrypoint and .dockerignore."""

import logging
from pathlib import Path

from .errors import RenderError
from .models import BuildConfiguration, FileSpec, Framework

logger = logging.getLogger(__name__)

DOCKERIGNORE = """.git
.env
node_modules
__pycache__
.venv
"""

ENTRYPOINT = """#!/bin/sh

FOLDER=$1

if [ -f .env ]; then
  echo "Removing local .env to enforce injected configuration..."
  rm .env
fi

if [ -z "$FOLDER" ] || [ "$FOLDER" = "all" ]; then
  echo "Running ALL tests..."
  exec {command}
else
  echo "Running tests in folder: $FOLDER"
  exec {command} "$FOLDER"
fi
"""


def enforce_lf(content: str) -> str:
    """Strip CRLF so shell scripts run inside Linux containers."""
    return content.replace("\r\n", "\n")


def render_dockerfile(config: BuildConfiguration) -> str:
    lines = [f"FROM {config.base_image}", "", "WORKDIR /app", ""]

    if config.system_packages:
        packages = " ".join(config.system_packages)
        lines += [
            "RUN apt-get update \\",
            f"    && apt-get install -y --no-install-recommends {packages} \\",
            "    && rm -rf /var/lib/apt/lists/*",
            "",
        ]

    lines.append(f"COPY {' '.join(config.install.copy_files)} ./")
    lines += [f"RUN {command}" for command in config.install.commands]
    lines.append("")

    if config.browser_install:
        lines += [config.browser_install, ""]

    lines += ["COPY . .", "", "RUN chmod +x /app/entrypoint.sh", ""]
    return "\n".join(lines)


def render_entrypoint(config: BuildConfiguration) -> str:
    if config.framework == Framework.PLAYWRIGHT:
        command = "npx playwright test"
    elif config.use_allure:
        command = "pytest --alluredir=allure-results"
    else:
        command = "pytest"
    return ENTRYPOINT.format(command=command)


def render_files(config: BuildConfiguration) -> list[FileSpec]:
    """Return the ordered list of files to generate."""
    return [
        FileSpec(name=".dockerignore", content=DOCKERIGNORE),
        FileSpec(name="entrypoint.sh", content=render_entrypoint(config), mode=0o755),
        FileSpec(name="Dockerfile", content=render_dockerfile(config)),
    ]


def find_conflicts(root: str | Path, files: list[FileSpec]) -> list[str]:
    """Names of files that already exist in the target directory."""
    return [f.name for f in files if (Path(root) / f.name).exists()]


def write_files(
    root: str | Path, files: list[FileSpec], skip: set[str] | None = None
) -> list[str]:
    """Write files with LF line endings, leaving names in ``skip`` untouched.

    Returns:
        Names of the files written
    """
    skip = skip or set()
    written = []

    for f in files:
        if f.name in skip:
            continue
        path = Path(root) / f.name
        path.write_text(enforce_lf(f.content), encoding="utf-8", newline="\n")
        path.chmod(f.mode)
        written.append(f.name)
        logger.debug("Wrote %s", path)

    return written


def verify_outputs(root: str | Path, files: list[FileSpec]) -> None:
    """Make sure every expected file is on disk.

    Raises:
        RenderError: If any file is missing after generation
    """
    missing = [f.name for f in files if not (Path(root) / f.name).is_file()]
    if missing:
        raise RenderError(f"Expected files were not generated: {', '.join(missing)}")
