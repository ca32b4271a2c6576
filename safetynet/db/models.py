"""SQLAlchemy tables mirroring the three arrays of the JSON document."""
from __future__ import annotations

from sqlalchemy import Column, Integer, String, JSON

from .session import Base


class PersonRow(Base):
    __tablename__ = "persons"

    first_name = Column(String(255), primary_key=True)
    last_name = Column(String(255), primary_key=True)
    position = Column(Integer, nullable=False, index=True)
    address = Column(String(255), nullable=False, default="")
    city = Column(String(255), nullable=False, default="")
    zip = Column(String(16), nullable=False, default="")
    phone = Column(String(64), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")


class FireStationRow(Base):
    __tablename__ = "firestations"

    address = Column(String(255), primary_key=True)
    position = Column(Integer, nullable=False, index=True)
    station = Column(String(64), nullable=False)


class MedicalRecordRow(Base):
    __tablename__ = "medicalrecords"

    first_name = Column(String(255), primary_key=True)
    last_name = Column(String(255), primary_key=True)
    position = Column(Integer, nullable=False, index=True)
    birthdate = Column(String(10), nullable=False)
    medications = Column(JSON, nullable=False, default=list)
    allergies = Column(JSON, nullable=False, default=list)
