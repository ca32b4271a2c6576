from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Request, Response

from safetynet.routers.deps import get_store
from safetynet.routers.schemas import FireStationPayload

router = APIRouter(prefix="/firestations", tags=["firestations"])
logger = logging.getLogger(__name__)


@router.get("/all")
def list_stations(request: Request):
    logger.debug("Received request for all fire stations")
    stations = get_store(request).list_stations()
    logger.info("Retrieved %d fire stations", len(stations))
    return [s.to_dict() for s in stations]


@router.get("")
def stations_by_number(request: Request, number: str = Query(..., min_length=1)):
    logger.debug("Received request for fire station by station number: %s", number)
    stations = get_store(request).stations_by_number(number)
    if not stations:
        logger.error("No fire station found for station number: %s", number)
        raise HTTPException(404, "Fire station not found")
    logger.info("Retrieved %d fire stations by station number", len(stations))
    return [s.to_dict() for s in stations]


@router.get("/address")
def station_by_address(request: Request, address: str = Query(..., min_length=1)):
    logger.debug("Received request for fire station by address: %s", address)
    return [get_store(request).get_station(address).to_dict()]


@router.post("")
def create_station(payload: FireStationPayload, request: Request):
    get_store(request).create_station(payload.to_entity())
    return payload.model_dump()


@router.put("")
def update_station(payload: FireStationPayload, request: Request):
    get_store(request).update_station(payload.to_entity())
    return payload.model_dump()


@router.delete("", status_code=204)
def delete_station_by_address(request: Request, address: str = Query(..., min_length=1)):
    logger.debug("Received request to delete fire station by address: %s", address)
    get_store(request).delete_station_by_address(address)
    return Response(status_code=204)


@router.delete("/station", status_code=204)
def delete_station_by_number(request: Request, number: str = Query(..., min_length=1)):
    logger.debug("Received request to delete fire station by station number: %s", number)
    get_store(request).delete_station_by_number(number)
    return Response(status_code=204)
