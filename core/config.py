"""Defaults and environment-driven settings for testcrate."""

import os
from dataclasses import dataclass

# Image tag used when no Playwright version can be found anywhere
DEFAULT_PLAYWRIGHT_VERSION = "1.50.0"
DEFAULT_PYTHON_VERSION = "3.11"

PRIMARY_PLATFORM = "linux/amd64"
SECONDARY_PLATFORM = "linux/arm64"
DEFAULT_PLATFORMS = (PRIMARY_PLATFORM, SECONDARY_PLATFORM)

ENV_PREFIX = "TESTCRATE_"


@dataclass
class Settings:
    """Process-level settings read from the environment."""

    log_level: str = "WARNING"
    docker_user: str | None = None
    web_host: str = "127.0.0.1"
    web_port: int = 8000

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        level = (env.get(f"{ENV_PREFIX}LOG_LEVEL") or "").strip().upper()
        user = (env.get(f"{ENV_PREFIX}DOCKER_USER") or "").strip()
        host = (env.get(f"{ENV_PREFIX}WEB_HOST") or "").strip()
        port = (env.get(f"{ENV_PREFIX}WEB_PORT") or "").strip()
        return cls(
            log_level=level or cls.log_level,
            docker_user=user or None,
            web_host=host or cls.web_host,
            web_port=int(port) if port.isdigit() else cls.web_port,
        )
