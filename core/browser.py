"""Browser selection from pytest-playwright configuration."""

import logging

from .config import DEFAULT_PLATFORMS, PRIMARY_PLATFORM
from .manifests import PYPROJECT, PYTEST_INI, SETUP_CFG
from .models import BrowserConfig, ProjectEvidence

logger = logging.getLogger(__name__)

# Branded channels are only published for amd64 Linux
CHANNEL_VENDORS = {
    "chrome": "Google Chrome",
    "msedge": "Microsoft Edge",
}
ALTERNATE_ENGINES = ("firefox", "webkit")
DEFAULT_ENGINE = "chromium"


def browser_config_text(evidence: ProjectEvidence) -> str:
    """Lower-cased text of every file that may carry pytest addopts."""
    parts = [evidence.text(name) for name in (PYTEST_INI, SETUP_CFG, PYPROJECT)]
    return "\n".join(parts).lower()


def resolve_browser_config(config_text: str) -> BrowserConfig:
    """Map ``--browser-channel`` / ``--browser`` directives to a build policy.

    A channel directive wins over an engine directive; no directive at all
    means multi-platform chromium.
    """
    text = config_text.lower()

    for channel, vendor in CHANNEL_VENDORS.items():
        if f"--browser-channel {channel}" in text:
            logger.debug("Browser channel %s restricts build to %s", channel, PRIMARY_PLATFORM)
            return BrowserConfig(
                browser=DEFAULT_ENGINE,
                channel=channel,
                requires_amd64_only=True,
                docker_install_command=f"RUN playwright install {channel}",
                platforms=(PRIMARY_PLATFORM,),
                warning_message=(
                    f"{vendor} does not support Linux ARM64. "
                    f"Building for {PRIMARY_PLATFORM} only."
                ),
            )

    browser = DEFAULT_ENGINE
    for engine in ALTERNATE_ENGINES:
        if f"--browser {engine}" in text:
            browser = engine
            break

    return BrowserConfig(browser=browser, platforms=DEFAULT_PLATFORMS)


def detect_browser_config(evidence: ProjectEvidence) -> BrowserConfig:
    return resolve_browser_config(browser_config_text(evidence))
