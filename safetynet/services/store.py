"""
In-memory store for people, fire stations and medical records.

The store owns the three collections and is the only place that maintains
the derived links between them:

- Person.medical_record is the record sharing the person's name, if any;
- FireStation.persons is every person living at the station's address.

Every mutation runs under the write lock and follows the same steps:
validate, apply, relink, persist. Readers take the read lock and therefore
never observe a person updated while its station's resident list is stale.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator, Sequence

from safetynet.core.errors import ConflictError, NotFoundError, PersistenceError
from safetynet.core.locks import ReadWriteLock
from safetynet.domain.ages import parse_birthdate
from safetynet.domain.models import FireStation, MedicalRecord, NameKey, Person
from safetynet.repositories import Storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreView:
    """Read-only view of the collections, valid while the read lock is held."""

    people: Sequence[Person]
    stations: Sequence[FireStation]
    records: Sequence[MedicalRecord]


def _unique(items: list, kind: str) -> list:
    seen = set()
    kept = []
    for item in items:
        if item.key in seen:
            logger.warning("Ignoring duplicate %s %r in data file", kind, item.key)
            continue
        seen.add(item.key)
        kept.append(item)
    return kept


def _copy_record(record: MedicalRecord | None) -> MedicalRecord | None:
    if record is None:
        return None
    return replace(record, medications=list(record.medications), allergies=list(record.allergies))


def _copy_person(person: Person) -> Person:
    return replace(person, medical_record=_copy_record(person.medical_record))


def _copy_station(station: FireStation) -> FireStation:
    return replace(station, persons=[_copy_person(p) for p in station.persons])


class Store:
    """Owns the collections, enforces uniqueness/referential rules and persists."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self._lock = ReadWriteLock()
        self._people: list[Person] = []
        self._stations: list[FireStation] = []
        self._records: list[MedicalRecord] = []

    # -------------------------- loading --------------------------
    def load(self) -> None:
        db = self.storage.load()
        try:
            people = _unique([Person.from_dict(p) for p in db["persons"]], "person")
            stations = _unique([FireStation.from_dict(s) for s in db["firestations"]], "fire station")
            records = _unique([MedicalRecord.from_dict(r) for r in db["medicalrecords"]], "medical record")
        except (AttributeError, KeyError, TypeError) as exc:
            raise PersistenceError("Failed to load data: malformed document") from exc
        with self._lock.write():
            self._people = people
            self._stations = stations
            self._records = records
            self._relink()

    def to_document(self) -> dict:
        """Canonical fields only; derived links never reach the storage."""
        return {
            "persons": [p.to_dict() for p in self._people],
            "firestations": [s.to_dict() for s in self._stations],
            "medicalrecords": [r.to_dict() for r in self._records],
        }

    # -------------------------- internals --------------------------
    def _relink(self) -> None:
        records = {r.key: r for r in self._records}
        by_address: dict[str, list[Person]] = {}
        for person in self._people:
            person.medical_record = records.get(person.key)
            by_address.setdefault(person.address, []).append(person)
        for station in self._stations:
            station.persons = list(by_address.get(station.address, ()))

    def _persist(self) -> None:
        self.storage.save(self.to_document())

    def _find_person(self, key: NameKey) -> Person | None:
        return next((p for p in self._people if p.key == key), None)

    def _find_station(self, address: str) -> FireStation | None:
        return next((s for s in self._stations if s.address == address), None)

    def _find_record(self, key: NameKey) -> MedicalRecord | None:
        return next((r for r in self._records if r.key == key), None)

    # -------------------------- reads --------------------------
    # Everything handed out below is a copy taken under the read lock.
    @contextmanager
    def reading(self) -> Iterator[StoreView]:
        """Live entities for in-lock queries; callers must not keep or modify them."""
        with self._lock.read():
            yield StoreView(tuple(self._people), tuple(self._stations), tuple(self._records))

    def list_people(self) -> list[Person]:
        with self._lock.read():
            return [_copy_person(p) for p in self._people]

    def list_stations(self) -> list[FireStation]:
        with self._lock.read():
            return [_copy_station(s) for s in self._stations]

    def list_records(self) -> list[MedicalRecord]:
        with self._lock.read():
            return [_copy_record(r) for r in self._records]

    def get_person(self, first_name: str, last_name: str) -> Person:
        with self._lock.read():
            person = self._find_person((first_name, last_name))
            if person is None:
                raise NotFoundError("Person not found")
            return _copy_person(person)

    def people_at(self, address: str) -> list[Person]:
        with self._lock.read():
            return [_copy_person(p) for p in self._people if p.address == address]

    def get_station(self, address: str) -> FireStation:
        with self._lock.read():
            station = self._find_station(address)
            if station is None:
                raise NotFoundError("Fire station not found")
            return _copy_station(station)

    def stations_by_number(self, number: str) -> list[FireStation]:
        with self._lock.read():
            return [_copy_station(s) for s in self._stations if s.station == number]

    def get_record(self, first_name: str, last_name: str) -> MedicalRecord:
        with self._lock.read():
            record = self._find_record((first_name, last_name))
            if record is None:
                raise NotFoundError("Medical record not found")
            return _copy_record(record)

    # -------------------------- people --------------------------
    def create_person(self, person: Person) -> Person:
        with self._lock.write():
            if self._find_person(person.key):
                raise ConflictError("Person already exists")
            person = replace(person, medical_record=None)
            self._people.append(person)
            self._relink()
            self._persist()
            person = _copy_person(person)
        logger.info("Created person %s %s", *person.key)
        return person

    def update_person(self, person: Person) -> Person:
        with self._lock.write():
            existing = self._find_person(person.key)
            if existing is None:
                raise NotFoundError("Person not found")
            updated = replace(existing, address=person.address, city=person.city, zip=person.zip,
                              phone=person.phone, email=person.email)
            self._people[self._people.index(existing)] = updated
            self._relink()
            self._persist()
            updated = _copy_person(updated)
        logger.info("Updated person %s %s", *person.key)
        return updated

    def delete_person(self, first_name: str, last_name: str) -> None:
        key = (first_name, last_name)
        with self._lock.write():
            existing = self._find_person(key)
            if existing is None:
                raise NotFoundError("Person not found")
            self._people.remove(existing)
            record = self._find_record(key)
            if record is not None:
                self._records.remove(record)
            existing.medical_record = None
            self._relink()
            self._persist()
        logger.info("Deleted person %s %s (medical record removed: %s)", first_name, last_name, record is not None)

    # -------------------------- fire stations --------------------------
    def create_station(self, station: FireStation) -> FireStation:
        with self._lock.write():
            if self._find_station(station.address):
                raise ConflictError("Fire station already exists")
            station = replace(station, persons=[])
            self._stations.append(station)
            self._relink()
            self._persist()
            station = _copy_station(station)
        logger.info("Created fire station %s at %s", station.station, station.address)
        return station

    def update_station(self, station: FireStation) -> FireStation:
        with self._lock.write():
            existing = self._find_station(station.address)
            if existing is None:
                raise NotFoundError("Fire station not found")
            existing.station = station.station
            self._relink()
            self._persist()
            existing = _copy_station(existing)
        logger.info("Updated fire station at %s to %s", station.address, station.station)
        return existing

    def _delete_stations(self, matches: list[FireStation]) -> None:
        if not matches:
            raise NotFoundError("Fire station not found")
        self._stations = [s for s in self._stations if not any(s is m for m in matches)]
        for station in matches:
            station.persons = []
        self._persist()

    def delete_station_by_address(self, address: str) -> None:
        with self._lock.write():
            self._delete_stations([s for s in self._stations if s.address == address])
        logger.info("Deleted fire station at %s", address)

    def delete_station_by_number(self, number: str) -> None:
        with self._lock.write():
            self._delete_stations([s for s in self._stations if s.station == number])
        logger.info("Deleted fire stations numbered %s", number)

    # -------------------------- medical records --------------------------
    def create_record(self, record: MedicalRecord) -> MedicalRecord:
        with self._lock.write():
            if self._find_person(record.key) is None:
                raise NotFoundError("There is no person with this name")
            if self._find_record(record.key):
                raise ConflictError("Medical record already exists")
            parse_birthdate(record.birthdate)
            record = replace(record, medications=list(record.medications), allergies=list(record.allergies))
            self._records.append(record)
            self._relink()
            self._persist()
            record = _copy_record(record)
        logger.info("Created medical record for %s %s", *record.key)
        return record

    def update_record(self, record: MedicalRecord) -> MedicalRecord:
        with self._lock.write():
            existing = self._find_record(record.key)
            if existing is None:
                raise NotFoundError("Medical record not found")
            parse_birthdate(record.birthdate)
            existing.birthdate = record.birthdate
            existing.medications = list(record.medications)
            existing.allergies = list(record.allergies)
            self._relink()
            self._persist()
            existing = _copy_record(existing)
        logger.info("Updated medical record for %s %s", *record.key)
        return existing

    def delete_record(self, first_name: str, last_name: str) -> None:
        with self._lock.write():
            existing = self._find_record((first_name, last_name))
            if existing is None:
                raise NotFoundError("Medical record not found")
            self._records.remove(existing)
            self._relink()
            self._persist()
        logger.info("Deleted medical record for %s %s", first_name, last_name)
