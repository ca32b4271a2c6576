from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Request, Response

from safetynet.routers.deps import get_store
from safetynet.routers.schemas import PersonPayload

router = APIRouter(prefix="/person", tags=["person"])
logger = logging.getLogger(__name__)


@router.get("/all")
def list_persons(request: Request):
    people = get_store(request).list_people()
    logger.info("Retrieved %d persons", len(people))
    return [p.to_dict() for p in people]


@router.get("")
def get_person(
    request: Request,
    first_name: str = Query(..., alias="firstName", min_length=1),
    last_name: str = Query(..., alias="lastName", min_length=1),
):
    logger.debug("Received request for person %s %s", first_name, last_name)
    return get_store(request).get_person(first_name, last_name).to_dict()


@router.get("/address")
def persons_by_address(request: Request, address: str = Query(..., min_length=1)):
    logger.debug("Received request for persons at %s", address)
    return [p.to_dict() for p in get_store(request).people_at(address)]


@router.post("")
def create_person(payload: PersonPayload, request: Request):
    get_store(request).create_person(payload.to_entity())
    return payload.model_dump()


@router.put("")
def update_person(payload: PersonPayload, request: Request):
    get_store(request).update_person(payload.to_entity())
    return payload.model_dump()


@router.delete("", status_code=204)
def delete_person(
    request: Request,
    first_name: str = Query(..., alias="firstName", min_length=1),
    last_name: str = Query(..., alias="lastName", min_length=1),
):
    get_store(request).delete_person(first_name, last_name)
    return Response(status_code=204)
