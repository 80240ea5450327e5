"""
forgeclaw_portal.api.__main__

`python -m forgeclaw_portal.api` / `forgeclaw-portal-api`: serve the portal API with uvicorn.
"""

from __future__ import annotations

import uvicorn

from forgeclaw_portal.api.app import create_app
from forgeclaw_portal.settings import get_settings


def main() -> None:
    settings = get_settings()

    # Access lines come from RequestContextMiddleware; uvicorn's own would duplicate them.
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        access_log=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()
