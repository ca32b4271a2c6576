from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from safetynet.core.config import Settings, get_settings
from safetynet.core.errors import (
    ConflictError,
    InvalidFormatError,
    NotFoundError,
    PersistenceError,
    SafetyNetError,
)
from safetynet.core.log import configure_logging
from safetynet.repositories import Storage, build_storage
from safetynet.routers import alerts as alerts_router
from safetynet.routers import firestations as firestations_router
from safetynet.routers import medical_records as medical_records_router
from safetynet.routers import persons as persons_router
from safetynet.services.query_service import QueryService
from safetynet.services.store import Store

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotFoundError: 404,
    ConflictError: 409,
    InvalidFormatError: 400,
    PersistenceError: 500,
}


def _error_status(exc: SafetyNetError) -> int:
    for kind, status in ERROR_STATUS.items():
        if isinstance(exc, kind):
            return status
    return 400


async def safetynet_error_handler(request: Request, exc: SafetyNetError) -> JSONResponse:
    status = _error_status(exc)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    else:
        logger.warning("%s %s -> %d: %s", request.method, request.url.path, status, exc.message)
    return JSONResponse(status_code=status, content={"detail": exc.message})


def create_app(settings: Settings | None = None, storage: Storage | None = None) -> FastAPI:
    """Build the API with its store loaded from the configured storage."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    store = Store(storage or build_storage(settings))
    store.load()

    app = FastAPI(title="SafetyNet Alerts API")
    app.state.settings = settings
    app.state.store = store
    app.state.query_service = QueryService(store)

    if settings.app_env != "prod":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[
                "http://localhost:8080",
                "http://127.0.0.1:8080",
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            ],
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_exception_handler(SafetyNetError, safetynet_error_handler)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(persons_router.router)
    app.include_router(firestations_router.router)
    app.include_router(medical_records_router.router)
    app.include_router(alerts_router.router)
    logger.info("SafetyNet API ready (%s storage, env=%s)", settings.storage_backend, settings.app_env)
    return app
