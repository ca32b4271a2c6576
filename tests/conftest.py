from __future__ import annotations

import copy
import sys
from datetime import date
from pathlib import Path

import pytest

# Make the safetynet package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from safetynet.services.store import Store  # noqa: E402

TODAY = date(2026, 10, 19)


class MemoryStorage:
    """Storage double keeping the document in memory and counting saves."""

    def __init__(self, db: dict | None = None) -> None:
        self.db = copy.deepcopy(db) if db else {"persons": [], "firestations": [], "medicalrecords": []}
        self.saves = 0

    def load(self) -> dict:
        return copy.deepcopy(self.db)

    def save(self, db: dict) -> None:
        self.db = copy.deepcopy(db)
        self.saves += 1


def person(first, last, address="1509 Culver St", city="Culver", phone="841-874-6512", email=None):
    return {
        "firstName": first,
        "lastName": last,
        "address": address,
        "city": city,
        "zip": "97451",
        "phone": phone,
        "email": email or f"{first.lower()}@email.com",
    }


def record(first, last, birthdate, medications=(), allergies=()):
    return {
        "firstName": first,
        "lastName": last,
        "birthdate": birthdate,
        "medications": list(medications),
        "allergies": list(allergies),
    }


@pytest.fixture()
def sample_db() -> dict:
    """Ages are relative to TODAY: John 42, Jacob 37, Tenley 14, Roger 9, Peter 26."""
    return {
        "persons": [
            person("John", "Boyd", phone="841-874-6512", email="jaboyd@email.com"),
            person("Jacob", "Boyd", phone="841-874-6513", email="drk@email.com"),
            person("Tenley", "Boyd", phone="841-874-6512", email="tenz@email.com"),
            person("Roger", "Boyd", phone="841-874-6512", email="jaboyd@email.com"),
            person("Peter", "Duncan", address="644 Gershwin Cir", phone="841-874-6512", email="jaboyd@email.com"),
            person("Eric", "Cadigan", address="951 LoneTree Rd", city="Springfield", phone="841-874-7458", email="gramps@email.com"),
        ],
        "firestations": [
            {"address": "1509 Culver St", "station": "3"},
            {"address": "644 Gershwin Cir", "station": "1"},
            {"address": "951 LoneTree Rd", "station": "2"},
            {"address": "489 Manchester St", "station": "4"},
        ],
        "medicalrecords": [
            record("John", "Boyd", "03/06/1984", ["aznol:350mg", "hydrapermazol:100mg"], ["nillacilan"]),
            record("Jacob", "Boyd", "03/06/1989", ["pharmacol:5000mg"]),
            record("Tenley", "Boyd", "02/18/2012", allergies=["peanut"]),
            record("Roger", "Boyd", "09/06/2017"),
            record("Peter", "Duncan", "09/06/2000", allergies=["shellfish"]),
        ],
    }


@pytest.fixture()
def storage(sample_db) -> MemoryStorage:
    return MemoryStorage(sample_db)


@pytest.fixture()
def store(storage) -> Store:
    s = Store(storage)
    s.load()
    return s
