#!/usr/bin/env python3
"""Serve the testcrate web API with uvicorn.

Host and port come from TESTCRATE_WEB_HOST and TESTCRATE_WEB_PORT.
"""

import uvicorn

from core.config import Settings


def main() -> None:
    settings = Settings.from_env()
    print(f"testcrate web API on http://{settings.web_host}:{settings.web_port} (docs at /docs)")

    uvicorn.run(
        "apps.web.main:app",
        host=settings.web_host,
        port=settings.web_port,
        reload=True,
        reload_dirs=["apps", "core"],
    )


if __name__ == "__main__":
    main()
