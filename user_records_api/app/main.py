"""
Main entrypoint for the User Records API.

This module assembles the FastAPI application, sets up logging,
registers the error mapping and includes the routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Run it with uvicorn
or another ASGI server, e.g.::

    uvicorn user_records_api.app.main:app

or use ``run.py`` at the repository root.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.router import router as api_router
from .core.config import Settings, settings
from .core.db import UserStore
from .core.errors import RecordValidationError, StoreError, UserNotFoundError
from .core.logging_config import setup_logging
from .schemas.fields import Fields, resolve_fields
from .services.user_service import UserService

logger = logging.getLogger(__name__)


def _request_error_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "body: invalid request"
    error = errors[0]
    loc = [part for part in error.get("loc", ()) if isinstance(part, str)]
    field = loc[-1] if loc else "body"
    return f"{field}: {error.get('msg', 'invalid value')}"


def register_exception_handlers(app: FastAPI) -> None:
    """Map service exceptions onto the JSON error responses clients expect."""

    @app.exception_handler(RecordValidationError)
    async def record_validation_handler(request: Request, exc: RecordValidationError) -> JSONResponse:
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _request_error_message(exc)
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})

    @app.exception_handler(UserNotFoundError)
    async def not_found_handler(request: Request, exc: UserNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": "User not found"})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)})


def create_app(
    app_settings: Optional[Settings] = None,
    user_store=None,
    fields: Optional[Fields] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use; defaults to the module-level ``settings``.
    user_store : optional
        Store used by the service.  When omitted a PostgreSQL
        ``UserStore`` is built from ``app_settings`` at startup.  Tests
        pass a substitute here.
    fields : Optional[Fields]
        Record shape; defaults to ``app_settings.user_schema``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or settings
    setup_logging(app_settings.log_level, logfile=app_settings.log_file or None)

    if fields is None:
        fields = resolve_fields(app_settings.user_schema)
    service = UserService(user_store, fields, app_settings.users_table)

    app = FastAPI(title=app_settings.project_name, version=app_settings.api_version)
    app.state.user_service = service

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.on_event("startup")
    async def startup_event() -> None:
        # A failed connectivity check propagates and aborts startup; the
        # server exits instead of serving without a database.
        if service.store is None:
            service.store = UserStore.from_settings(app_settings)
        await service.store.open()
        logger.info(
            "Serving table %s with fields %s",
            service.table,
            ", ".join(field.name for field in fields),
        )

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        if service.store is not None:
            await service.store.close()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can locate it.  No database connection is made until startup.
app = create_app()
