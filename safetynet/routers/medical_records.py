from __future__ import annotations

from fastapi import APIRouter, Query, Request, Response

from safetynet.routers.deps import get_store
from safetynet.routers.schemas import MedicalRecordPayload

router = APIRouter(prefix="/medicalrecord", tags=["medicalrecord"])


@router.get("/all")
def list_records(request: Request):
    return [r.to_dict() for r in get_store(request).list_records()]


@router.get("")
def get_record(
    request: Request,
    first_name: str = Query(..., alias="firstName", min_length=1),
    last_name: str = Query(..., alias="lastName", min_length=1),
):
    return get_store(request).get_record(first_name, last_name).to_dict()


@router.post("")
def create_record(payload: MedicalRecordPayload, request: Request):
    return get_store(request).create_record(payload.to_entity()).to_dict()


@router.put("")
def update_record(payload: MedicalRecordPayload, request: Request):
    return get_store(request).update_record(payload.to_entity()).to_dict()


@router.delete("", status_code=204)
def delete_record(
    request: Request,
    first_name: str = Query(..., alias="firstName", min_length=1),
    last_name: str = Query(..., alias="lastName", min_length=1),
):
    get_store(request).delete_record(first_name, last_name)
    return Response(status_code=204)
