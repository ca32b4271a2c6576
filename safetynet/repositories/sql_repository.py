"""SQL persistence adapter with the same load/save contract as JsonStorage."""
from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from safetynet.core.errors import PersistenceError
from safetynet.db.models import FireStationRow, MedicalRecordRow, PersonRow
from safetynet.db.session import get_session
from safetynet.repositories.json_storage import db_defaults, empty_document

logger = logging.getLogger(__name__)


def _person_row(position: int, data: dict) -> PersonRow:
    return PersonRow(
        position=position,
        first_name=data.get("firstName") or "",
        last_name=data.get("lastName") or "",
        address=data.get("address") or "",
        city=data.get("city") or "",
        zip=data.get("zip") or "",
        phone=data.get("phone") or "",
        email=data.get("email") or "",
    )


def _station_row(position: int, data: dict) -> FireStationRow:
    return FireStationRow(
        position=position,
        address=data.get("address") or "",
        station=data.get("station") or "",
    )


def _record_row(position: int, data: dict) -> MedicalRecordRow:
    return MedicalRecordRow(
        position=position,
        first_name=data.get("firstName") or "",
        last_name=data.get("lastName") or "",
        birthdate=data.get("birthdate") or "",
        medications=list(data.get("medications") or []),
        allergies=list(data.get("allergies") or []),
    )


class SQLRepository:
    """Stores the document in three tables, keeping array order in `position`."""

    def load(self) -> dict:
        db = empty_document()
        try:
            with get_session() as session:
                for row in session.execute(select(PersonRow).order_by(PersonRow.position)).scalars():
                    db["persons"].append(
                        {
                            "firstName": row.first_name,
                            "lastName": row.last_name,
                            "address": row.address,
                            "city": row.city,
                            "zip": row.zip,
                            "phone": row.phone,
                            "email": row.email,
                        }
                    )
                for row in session.execute(select(FireStationRow).order_by(FireStationRow.position)).scalars():
                    db["firestations"].append({"address": row.address, "station": row.station})
                for row in session.execute(select(MedicalRecordRow).order_by(MedicalRecordRow.position)).scalars():
                    db["medicalrecords"].append(
                        {
                            "firstName": row.first_name,
                            "lastName": row.last_name,
                            "birthdate": row.birthdate,
                            "medications": list(row.medications or []),
                            "allergies": list(row.allergies or []),
                        }
                    )
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to load data from the database") from exc
        logger.info(
            "Loaded %d persons, %d fire stations, %d medical records from the database",
            len(db["persons"]),
            len(db["firestations"]),
            len(db["medicalrecords"]),
        )
        return db

    def save(self, db: dict) -> None:
        db = db_defaults(dict(db))
        try:
            with get_session() as session:
                session.execute(delete(PersonRow))
                session.execute(delete(FireStationRow))
                session.execute(delete(MedicalRecordRow))
                session.add_all(_person_row(i, p) for i, p in enumerate(db["persons"]))
                session.add_all(_station_row(i, s) for i, s in enumerate(db["firestations"]))
                session.add_all(_record_row(i, r) for i, r in enumerate(db["medicalrecords"]))
                session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to save data to the database") from exc
        logger.debug("Saved data to the database")
