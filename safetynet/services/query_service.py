"""
Alert and reporting queries joining people, fire stations and medical records.

Every query runs inside Store.reading(), so the whole answer comes from one
consistent state, and projects its result to frozen dataclasses before the
read lock is released. Nothing here mutates the store or persists.

Two different keys lead into the fire station collection: coverage, phone
and flood queries join on the station number, fire info joins on the
address.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from safetynet.domain.ages import calculate_age, count_adults, count_children, is_child
from safetynet.domain.models import FireStation, Person
from safetynet.services.store import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoveredPerson:
    first_name: str
    last_name: str
    address: str
    phone: str

    def to_dict(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "address": self.address,
            "phone": self.phone,
        }


@dataclass(frozen=True)
class StationCoverage:
    persons: list[CoveredPerson]
    number_of_adults: int
    number_of_children: int

    def to_dict(self) -> dict:
        return {
            "persons": [p.to_dict() for p in self.persons],
            "numberOfAdults": self.number_of_adults,
            "numberOfChildren": self.number_of_children,
        }


@dataclass(frozen=True)
class HouseholdMember:
    first_name: str
    last_name: str

    def to_dict(self) -> dict:
        return {"firstName": self.first_name, "lastName": self.last_name}


@dataclass(frozen=True)
class ChildSummary:
    first_name: str
    last_name: str
    age: int

    def to_dict(self) -> dict:
        return {"firstName": self.first_name, "lastName": self.last_name, "age": self.age}


@dataclass(frozen=True)
class ChildAlert:
    child: ChildSummary
    other_household_members: list[HouseholdMember]

    def to_dict(self) -> dict:
        return {
            "child": self.child.to_dict(),
            "otherHouseholdMembers": [m.to_dict() for m in self.other_household_members],
        }


@dataclass(frozen=True)
class Resident:
    """A resident with phone and medical details, as reported in fire/flood alerts."""

    first_name: str
    last_name: str
    phone: str
    age: Optional[int]
    medications: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phone": self.phone,
            "age": self.age,
            "medications": list(self.medications),
            "allergies": list(self.allergies),
        }


@dataclass(frozen=True)
class FireInfo:
    station_number: str
    residents: list[Resident]

    def to_dict(self) -> dict:
        return {"stationNumber": self.station_number, "residents": [r.to_dict() for r in self.residents]}


@dataclass(frozen=True)
class FloodAddress:
    address: str
    residents: list[Resident]

    def to_dict(self) -> dict:
        return {"address": self.address, "residents": [r.to_dict() for r in self.residents]}


@dataclass(frozen=True)
class PersonInfo:
    first_name: str
    last_name: str
    address: str
    age: Optional[int]
    email: str
    medications: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "address": self.address,
            "age": self.age,
            "email": self.email,
            "medications": list(self.medications),
            "allergies": list(self.allergies),
        }


def parse_station_numbers(value: str) -> list[str]:
    """Split a comma-separated station list, dropping blanks and repeats."""
    numbers: list[str] = []
    for part in (value or "").split(","):
        number = part.strip()
        if number and number not in numbers:
            numbers.append(number)
    return numbers


class QueryService:
    """Read-only queries over the store."""

    def __init__(self, store: Store, today: Optional[date] = None) -> None:
        self.store = store
        self._today = today

    def today(self) -> date:
        return self._today or date.today()

    # -------------------------- helpers --------------------------
    def _age(self, person: Person, today: date) -> Optional[int]:
        if person.medical_record is None:
            return None
        return calculate_age(person.medical_record.birthdate, today)

    def _resident(self, person: Person, today: date) -> Resident:
        record = person.medical_record
        return Resident(
            first_name=person.first_name,
            last_name=person.last_name,
            phone=person.phone,
            age=self._age(person, today),
            medications=list(record.medications) if record else [],
            allergies=list(record.allergies) if record else [],
        )

    @staticmethod
    def _covered_by(stations: Iterable[FireStation], number: str) -> list[Person]:
        return [p for s in stations if s.station == number for p in s.persons]

    # -------------------------- queries --------------------------
    def coverage_by_station(self, station_number: str) -> StationCoverage:
        """People covered by a station number, with adult/child counts.

        People without a medical record are listed but cannot be classified,
        so they count toward neither total.
        """
        today = self.today()
        with self.store.reading() as view:
            people = self._covered_by(view.stations, station_number)
            birthdates = [p.birthdate for p in people if p.medical_record is not None]
            coverage = StationCoverage(
                persons=[CoveredPerson(p.first_name, p.last_name, p.address, p.phone) for p in people],
                number_of_adults=count_adults(birthdates, today),
                number_of_children=count_children(birthdates, today),
            )
        logger.debug("Station %s covers %d people", station_number, len(coverage.persons))
        return coverage

    def child_alert(self, address: str) -> list[ChildAlert]:
        """Children (18 or younger) living at an address, with the rest of the household."""
        today = self.today()
        with self.store.reading() as view:
            residents = [p for p in view.people if p.address == address]
            children = [
                p for p in residents
                if p.medical_record is not None and is_child(p.medical_record.birthdate, today)
            ]
            alerts = [
                ChildAlert(
                    child=ChildSummary(child.first_name, child.last_name, self._age(child, today)),
                    other_household_members=[
                        HouseholdMember(p.first_name, p.last_name) for p in residents if p.key != child.key
                    ],
                )
                for child in children
            ]
        return alerts

    def phone_alert(self, station_number: str) -> set[str]:
        with self.store.reading() as view:
            return {p.phone for p in self._covered_by(view.stations, station_number)}

    def fire_info(self, address: str) -> list[FireInfo]:
        """Station number(s) serving an address and the residents with medical details."""
        today = self.today()
        with self.store.reading() as view:
            return [
                FireInfo(station.station, [self._resident(p, today) for p in station.persons])
                for station in view.stations
                if station.address == address
            ]

    def flood_coverage(self, station_numbers: str) -> list[FloodAddress]:
        """Households served by a list of stations, one entry per fire station record."""
        today = self.today()
        numbers = parse_station_numbers(station_numbers)
        with self.store.reading() as view:
            return [
                FloodAddress(station.address, [self._resident(p, today) for p in station.persons])
                for number in numbers
                for station in view.stations
                if station.station == number
            ]

    def person_info(self, last_name: str) -> list[PersonInfo]:
        today = self.today()
        with self.store.reading() as view:
            infos = []
            for person in view.people:
                if person.last_name != last_name:
                    continue
                record = person.medical_record
                infos.append(
                    PersonInfo(
                        first_name=person.first_name,
                        last_name=person.last_name,
                        address=person.address,
                        age=self._age(person, today),
                        email=person.email,
                        medications=list(record.medications) if record else [],
                        allergies=list(record.allergies) if record else [],
                    )
                )
            return infos

    def community_email(self, city: str) -> set[str]:
        with self.store.reading() as view:
            return {p.email for p in view.people if p.city == city}
