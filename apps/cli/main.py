"""CLI application for testcrate."""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from core.analyze import analyze_python_project
from core.config import Settings
from core.deploy import build_commands, image_reference
from core.detect import detect_project_name, identify, sanitize_image_name
from core.manifests import read_evidence
from core.models import Framework, Overrides, ProjectAnalysis, ProjectEvidence
from core.render import find_conflicts, render_files, verify_outputs, write_files
from core.synthesize import synthesize

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool, settings: Settings) -> None:
    """Route core logging through rich on stderr."""
    level = logging.DEBUG if verbose else logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def parse_framework(value: str | None) -> Framework | None:
    """Convert a --framework value to a Framework."""
    if value is None:
        return None
    try:
        framework = Framework(value.strip().lower())
    except ValueError:
        framework = Framework.UNKNOWN
    if framework == Framework.UNKNOWN:
        raise typer.BadParameter("Choose 'playwright' or 'pytest'", param_hint="--framework")
    return framework


def resolve_root(path: str) -> Path:
    root = Path(path)
    if not root.is_dir():
        console.print(f"Error: Directory {path} not found", style="red")
        raise typer.Exit(1)
    return root


def resolve_image_name(project_name: str | None, evidence: ProjectEvidence) -> str:
    """Docker-legal image name from --project-name or the project itself."""
    if project_name is None:
        return detect_project_name(evidence)
    name = sanitize_image_name(project_name)
    if not name:
        raise typer.BadParameter(
            "Use letters, digits, '.', '_' or '-'", param_hint="--project-name"
        )
    return name


def format_analysis_table(framework: Framework, analysis: ProjectAnalysis) -> Table:
    """Human-readable summary of an analysis."""
    table = Table(title="Project analysis", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    browser = analysis.browser_config
    rows = [
        ("Framework", framework.value),
        ("Package manager", analysis.package_manager.value),
        ("Python version", analysis.python_version or "not pinned"),
        ("Playwright", str(analysis.has_playwright)),
        ("Playwright version", analysis.playwright_version or "not pinned"),
        ("Selenium", str(analysis.has_selenium)),
        ("Allure", str(analysis.has_allure)),
        ("API only", str(analysis.is_api_only)),
        ("Browser", browser.browser or "none"),
        ("Channel", browser.channel or "none"),
        ("Platforms", ", ".join(browser.platforms)),
    ]
    for name, value in rows:
        table.add_row(name, value)
    return table


app = typer.Typer(
    name="testcrate",
    help="testcrate - Containerize any test automation project",
    add_completion=False,
)


@app.command()
def analyze(
    path: str = typer.Argument(".", help="Project directory to inspect"),
    format_type: str = typer.Option("text", "--format", help="Output format: text or json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Show what testcrate infers about a project."""
    configure_logging(verbose, Settings.from_env())
    root = resolve_root(path)

    evidence = read_evidence(root)
    framework = identify(evidence)
    analysis = analyze_python_project(evidence)

    if format_type == "json":
        output = json.dumps(
            {"framework": framework.value, "analysis": analysis.as_dict()}, indent=2
        )
        console.print(output, markup=False, highlight=False, soft_wrap=True)
    else:
        console.print(format_analysis_table(framework, analysis))
        if analysis.browser_config.warning_message:
            console.print(analysis.browser_config.warning_message, style="yellow")


@app.command()
def init(
    path: str = typer.Argument(".", help="Project directory to containerize"),
    framework: str | None = typer.Option(None, "--framework", "-f", help="playwright or pytest"),
    no_browser: bool = typer.Option(False, "--no-browser", help="Project does not drive a browser"),
    allure: bool | None = typer.Option(None, "--allure/--no-allure", help="Write Allure results"),
    python_version: str | None = typer.Option(None, "--python-version", help="Python image version"),
    playwright_version: str | None = typer.Option(None, "--playwright-version", help="Playwright image version"),
    system_packages: str = typer.Option("", "--system-packages", help="Extra apt packages, space separated"),
    platforms: list[str] | None = typer.Option(None, "--platform", help="Target platform (repeatable)"),
    username: str | None = typer.Option(None, "--username", "-u", help="Docker Hub username"),
    project_name: str | None = typer.Option(None, "--project-name", help="Image name"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing files"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print files without writing them"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Generate Dockerfile, entrypoint.sh and .dockerignore for a project."""
    settings = Settings.from_env()
    configure_logging(verbose, settings)

    try:
        root = resolve_root(path)
        evidence = read_evidence(root)
        image_name = resolve_image_name(project_name, evidence)

        overrides = Overrides(
            framework=parse_framework(framework),
            no_browser=no_browser,
            has_allure=allure,
            python_version=python_version,
            playwright_version=playwright_version,
            system_packages=system_packages,
            platforms=list(platforms) if platforms else None,
        )
        config = synthesize(evidence, overrides)

        console.print(f"Framework: {config.framework.value}")
        console.print(f"Base image: {config.base_image}")
        if config.warning_message:
            console.print(config.warning_message, style="yellow")

        files = render_files(config)

        if dry_run:
            for f in files:
                console.print(f"--- {f.name}", style="bold")
                console.print(f.content, markup=False, highlight=False, soft_wrap=True)
            return

        skip = set() if force else set(find_conflicts(root, files))
        for name in sorted(skip):
            console.print(f"Skipping existing {name} (use --force to overwrite)", style="yellow")

        if len(skip) == len(files):
            console.print("All files were skipped. No changes were made.", style="yellow")
            return

        written = write_files(root, files, skip)
        verify_outputs(root, [f for f in files if f.name not in skip])

        for name in written:
            console.print(f"Created {name}", style="green")

        image = image_reference(
            username or settings.docker_user or "your-username",
            image_name,
        )
        console.print("\nNext steps to build and push your image:")
        for step, command in enumerate(build_commands(image, config.platforms), start=1):
            console.print(f"  {step}. {' '.join(command)}", markup=False, soft_wrap=True)

    except typer.Exit:
        raise
    except typer.BadParameter:
        raise
    except Exception as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
