"""Core data models for testcrate."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from .config import DEFAULT_PLATFORMS


class Framework(str, Enum):
    """Test framework a project is built around."""

    PLAYWRIGHT = "playwright"  # @playwright/test on Node.js
    PYTEST = "pytest"
    UNKNOWN = "unknown"


class PackageManager(str, Enum):
    """Package manager for the Python branch."""

    PIP = "pip"
    POETRY = "poetry"


@dataclass
class ProjectEvidence:
    """Contents of whatever manifest files a project root holds."""

    root: str
    files: dict[str, str] = field(default_factory=dict)
    markers: frozenset[str] = frozenset()
    package_json: dict[str, Any] = field(default_factory=dict)
    package_lock: dict[str, Any] = field(default_factory=dict)

    def text(self, name: str) -> str:
        """Text of a manifest file, empty when it was absent."""
        return self.files.get(name, "")

    def has(self, name: str) -> bool:
        return name in self.markers


@dataclass(frozen=True)
class BrowserConfig:
    """How the browser requirement shapes the image build."""

    browser: str | None = "chromium"  # chromium, firefox, webkit
    channel: str | None = None  # chrome, msedge
    requires_amd64_only: bool = False
    docker_install_command: str | None = None
    platforms: tuple[str, ...] = DEFAULT_PLATFORMS
    warning_message: str | None = None

    def __post_init__(self):
        if self.channel is not None and (
            not self.requires_amd64_only or len(self.platforms) != 1
        ):
            raise ValueError(
                f"Browser channel {self.channel} requires a single platform"
            )


@dataclass(frozen=True)
class ProjectAnalysis:
    """What a Python test project needs to run in a container."""

    has_playwright: bool = False
    has_allure: bool = False
    has_selenium: bool = False
    package_manager: PackageManager = PackageManager.PIP
    python_version: str | None = None
    playwright_version: str | None = None
    browser_config: BrowserConfig = field(default_factory=BrowserConfig)

    @property
    def is_api_only(self) -> bool:
        return not (self.has_playwright or self.has_selenium)

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["is_api_only"] = self.is_api_only
        data["package_manager"] = self.package_manager.value
        data["browser_config"]["platforms"] = list(self.browser_config.platforms)
        return data


@dataclass(frozen=True)
class Choices:
    """Overridable part of an analysis; None means "no opinion"."""

    has_playwright: bool | None = None
    has_selenium: bool | None = None
    has_allure: bool | None = None
    python_version: str | None = None
    playwright_version: str | None = None


@dataclass
class Overrides:
    """Explicit answers collected from the user."""

    framework: Framework | None = None
    no_browser: bool = False
    has_allure: bool | None = None
    python_version: str | None = None
    playwright_version: str | None = None
    system_packages: str = ""
    platforms: list[str] | None = None


@dataclass(frozen=True)
class InstallStrategy:
    """Files copied ahead of the dependency install and the commands it runs."""

    name: str  # pip, poetry, npm
    copy_files: tuple[str, ...]
    commands: tuple[str, ...]


@dataclass(frozen=True)
class BuildConfiguration:
    """Render-ready description of the container build."""

    framework: Framework
    base_image: str
    install: InstallStrategy
    system_packages: tuple[str, ...] = ()
    platforms: tuple[str, ...] = DEFAULT_PLATFORMS
    browser_install: str | None = None
    use_allure: bool = False
    playwright_version: str | None = None
    python_version: str | None = None
    warning_message: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "framework": self.framework.value,
            "base_image": self.base_image,
            "install": {
                "name": self.install.name,
                "copy_files": list(self.install.copy_files),
                "commands": list(self.install.commands),
            },
            "system_packages": list(self.system_packages),
            "platforms": list(self.platforms),
            "browser_install": self.browser_install,
            "use_allure": self.use_allure,
            "playwright_version": self.playwright_version,
            "python_version": self.python_version,
            "warning_message": self.warning_message,
        }


@dataclass
class FileSpec:
    """A single file to be generated."""

    name: str
    content: str
    mode: int = 0o644
