"""
Entities held by the store.

Field names are snake_case; the persisted document uses the camelCase names
of the original data file, so every entity knows how to read itself from a
document entry (from_dict) and how to write its canonical fields back
(to_dict). Derived links (Person.medical_record, FireStation.persons) are
maintained by the store only and never serialized.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

NameKey = Tuple[str, str]


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


@dataclass
class MedicalRecord:
    first_name: str
    last_name: str
    birthdate: str
    medications: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)

    @property
    def key(self) -> NameKey:
        return (self.first_name, self.last_name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MedicalRecord":
        return cls(
            first_name=_text(data, "firstName"),
            last_name=_text(data, "lastName"),
            birthdate=_text(data, "birthdate"),
            medications=[str(m) for m in data.get("medications") or []],
            allergies=[str(a) for a in data.get("allergies") or []],
        )

    def to_dict(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "birthdate": self.birthdate,
            "medications": list(self.medications),
            "allergies": list(self.allergies),
        }


@dataclass
class Person:
    first_name: str
    last_name: str
    address: str
    city: str
    zip: str
    phone: str
    email: str
    medical_record: Optional[MedicalRecord] = field(default=None, repr=False, compare=False)

    @property
    def key(self) -> NameKey:
        return (self.first_name, self.last_name)

    @property
    def birthdate(self) -> Optional[str]:
        return self.medical_record.birthdate if self.medical_record else None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Person":
        return cls(
            first_name=_text(data, "firstName"),
            last_name=_text(data, "lastName"),
            address=_text(data, "address"),
            city=_text(data, "city"),
            zip=_text(data, "zip"),
            phone=_text(data, "phone"),
            email=_text(data, "email"),
        )

    def to_dict(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "address": self.address,
            "city": self.city,
            "zip": self.zip,
            "phone": self.phone,
            "email": self.email,
        }


@dataclass
class FireStation:
    address: str
    station: str
    persons: list[Person] = field(default_factory=list, repr=False, compare=False)

    @property
    def key(self) -> str:
        return self.address

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FireStation":
        return cls(address=_text(data, "address"), station=_text(data, "station"))

    def to_dict(self) -> dict:
        return {"address": self.address, "station": self.station}
