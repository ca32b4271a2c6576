"""
JSON file persistence adapter.

The whole document is rewritten on every save: it goes to a temporary file in
the same directory which then replaces the target, so readers of the file
never see a half-written document.
"""

from __future__ import annotations

from pathlib import Path
import json
import logging
import os
import tempfile

from safetynet.core.errors import PersistenceError

logger = logging.getLogger(__name__)

COLLECTIONS = ("persons", "firestations", "medicalrecords")


def empty_document() -> dict:
    return {name: [] for name in COLLECTIONS}


def db_defaults(db: dict) -> dict:
    for name in COLLECTIONS:
        if db.get(name) is None:
            db[name] = []
    return db


class JsonStorage:
    """Reads and writes the {persons, firestations, medicalrecords} document."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> dict:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                db = json.load(f)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Failed to load data from {self.path}") from exc
        if not isinstance(db, dict):
            raise PersistenceError(f"Failed to load data from {self.path}: root is not an object")
        db = db_defaults(db)
        for name in COLLECTIONS:
            items = db[name]
            if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
                raise PersistenceError(f"Failed to load data from {self.path}: {name} is not a list of objects")
        logger.info(
            "Loaded %d persons, %d fire stations, %d medical records from %s",
            len(db["persons"]),
            len(db["firestations"]),
            len(db["medicalrecords"]),
            self.path,
        )
        return db

    def save(self, db: dict) -> None:
        payload = json.dumps(db, ensure_ascii=False, indent=2)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise PersistenceError(f"Failed to save data to {self.path}") from exc
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.debug("Saved data to %s", self.path)
