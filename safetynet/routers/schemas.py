"""Request bodies accepted by the CRUD routers."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator

from safetynet.domain.models import FireStation, MedicalRecord, Person

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _not_blank(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must not be blank")
    return value


class PersonPayload(BaseModel):
    firstName: str = Field(min_length=2)
    lastName: str
    address: str
    city: str
    zip: str = Field(min_length=5, max_length=5)
    phone: str
    email: str = Field(pattern=EMAIL_PATTERN)

    @field_validator("firstName", "lastName", "address", "city", "zip", "phone", "email")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)

    def to_entity(self) -> Person:
        return Person.from_dict(self.model_dump())


class FireStationPayload(BaseModel):
    address: str
    station: str

    @field_validator("address", "station")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)

    def to_entity(self) -> FireStation:
        return FireStation.from_dict(self.model_dump())


class MedicalRecordPayload(BaseModel):
    firstName: str = Field(min_length=2)
    lastName: str
    birthdate: str
    medications: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)

    @field_validator("firstName", "lastName", "birthdate")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)

    def to_entity(self) -> MedicalRecord:
        return MedicalRecord.from_dict(self.model_dump())
