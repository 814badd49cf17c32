"""Main application entry point."""

import os

from devevents.config.environment import IS_PRODUCTION_ENVIRONMENT
from devevents.api.app import app  # noqa: F401

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get('PORT', 8000))

    if not IS_PRODUCTION_ENVIRONMENT:
        # Development mode - import string so hot-reload can re-import the app
        uvicorn.run(
            "devevents.api.app:app",
            host="127.0.0.1",
            port=port,
            reload=True,
            log_level="debug"
        )
    else:
        # Production mode - every worker builds its own connection cache at startup
        uvicorn.run(
            "devevents.api.app:app",
            host="0.0.0.0",
            port=port,
            reload=False,
            workers=int(os.environ.get('WEB_CONCURRENCY', 4)),
            log_level="info",
            proxy_headers=True,
            forwarded_allow_ips="*"
        )
