"""Alert endpoints. An empty answer is reported as 404, like the other lookups."""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Request

from safetynet.routers.deps import get_query_service

router = APIRouter(tags=["alerts"])
logger = logging.getLogger(__name__)


def _not_found(message: str, value: str):
    logger.error("%s: %s", message, value)
    raise HTTPException(404, message)


@router.get("/firestation")
def coverage_by_station(request: Request, station_number: str = Query(..., alias="stationNumber", min_length=1)):
    logger.debug("Received request for persons covered by station %s", station_number)
    coverage = get_query_service(request).coverage_by_station(station_number)
    if not coverage.persons:
        _not_found("No person found for station number", station_number)
    return [coverage.to_dict()]


@router.get("/childAlert")
def child_alert(request: Request, address: str = Query(..., min_length=1)):
    logger.debug("Received request for child alert at %s", address)
    alerts = get_query_service(request).child_alert(address)
    if not alerts:
        _not_found("No child alert found for address", address)
    logger.info("Returning %d children for address %s", len(alerts), address)
    return [a.to_dict() for a in alerts]


@router.get("/phoneAlert")
def phone_alert(request: Request, firestation: str = Query(..., min_length=1)):
    logger.debug("Received request for phone alert for station %s", firestation)
    phones = get_query_service(request).phone_alert(firestation)
    if not phones:
        _not_found("No phone number found for station number", firestation)
    logger.info("Returning %d phones for station %s", len(phones), firestation)
    return sorted(phones)


@router.get("/fire")
def fire(request: Request, address: str = Query(..., min_length=1)):
    logger.debug("Received request for fire info at %s", address)
    infos = get_query_service(request).fire_info(address)
    if not infos:
        _not_found("No fire station found for address", address)
    return [i.to_dict() for i in infos]


@router.get("/flood/stations")
def flood(request: Request, stations: str = Query(..., min_length=1)):
    logger.debug("Received request for flood coverage of stations %s", stations)
    households = get_query_service(request).flood_coverage(stations)
    if not households:
        _not_found("No person found for stations", stations)
    logger.info("Returning %d households for stations %s", len(households), stations)
    return [h.to_dict() for h in households]


@router.get("/personInfo")
def person_info(request: Request, last_name: str = Query(..., alias="lastName", min_length=1)):
    logger.debug("Received request for person info with last name %s", last_name)
    infos = get_query_service(request).person_info(last_name)
    if not infos:
        _not_found("No person found for last name", last_name)
    return [i.to_dict() for i in infos]


@router.get("/communityEmail")
def community_email(request: Request, city: str = Query(..., min_length=1)):
    logger.debug("Received request for community emails in %s", city)
    emails = get_query_service(request).community_email(city)
    if not emails:
        _not_found("No email found for city", city)
    logger.info("Returning %d emails for city %s", len(emails), city)
    return sorted(emails)
