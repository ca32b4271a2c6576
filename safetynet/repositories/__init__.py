"""
Persistence adapters.

Each adapter exposes load() -> dict and save(dict) over the
{persons, firestations, medicalrecords} document. The store depends on that
contract only, never on a file path or a database session.
"""

from __future__ import annotations

from typing import Protocol

from safetynet.core.config import Settings


class Storage(Protocol):
    def load(self) -> dict: ...

    def save(self, db: dict) -> None: ...


def build_storage(settings: Settings) -> Storage:
    """Pick the adapter named by settings.storage_backend."""
    if settings.storage_backend == "sql":
        from safetynet.repositories.sql_repository import SQLRepository

        return SQLRepository()
    from safetynet.repositories.json_storage import JsonStorage

    return JsonStorage(settings.data_file)
