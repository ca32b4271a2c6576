"""Accessors for the services stored on app.state."""
from __future__ import annotations

from fastapi import Request

from safetynet.services.query_service import QueryService
from safetynet.services.store import Store


def get_store(request: Request) -> Store:
    store = getattr(getattr(request.app, "state", None), "store", None)
    if store is None:
        raise RuntimeError("Store not configured")
    return store


def get_query_service(request: Request) -> QueryService:
    svc = getattr(getattr(request.app, "state", None), "query_service", None)
    if svc is None:
        raise RuntimeError("QueryService not configured")
    return svc
