"""Entry point for the User Records API.

Builds the FastAPI application and serves it with Uvicorn on the host
and port from the settings (``HOST``/``PORT``, default ``0.0.0.0:3000``).
Database credentials and the record shape are read from the
environment; see ``user_records_api/app/core/config.py``.

If the database cannot be reached at startup the process exits with a
non-zero status instead of serving requests.

Usage:
    python run.py
"""
import asyncio
import logging
import sys

from uvicorn import Config, Server

from user_records_api.app.core.config import settings
from user_records_api.app.main import create_app


async def run_api() -> bool:
    """Serve the API until shutdown.  Returns False if startup failed."""
    app = create_app(settings)
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        lifespan="on",
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()
    return server.started


def main() -> int:
    try:
        started = asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        return 0
    if not started:
        logging.getLogger(__name__).error("Server did not start; check database settings")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
