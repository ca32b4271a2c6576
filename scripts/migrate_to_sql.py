#!/usr/bin/env python3
"""
Copy the JSON data file into the SQL tables.

Usage:
  DATABASE_URL=postgresql+psycopg://... python scripts/migrate_to_sql.py [--data path/to/data.json] [--reset]
"""
from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Make the safetynet package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from safetynet.core.config import get_settings  # noqa: E402
from safetynet.db.create_tables import create_all  # noqa: E402
from safetynet.repositories.json_storage import JsonStorage  # noqa: E402
from safetynet.repositories.sql_repository import SQLRepository  # noqa: E402


def migrate(data_file: Path, reset: bool = False) -> dict:
    if not data_file.exists():
        raise SystemExit(f"Data file not found: {data_file}")
    db = JsonStorage(data_file).load()
    create_all(reset=reset)
    SQLRepository().save(db)
    return {name: len(items) for name, items in db.items()}


def main() -> None:
    ap = argparse.ArgumentParser(description="Migrate data.json into the SQL backend")
    ap.add_argument("--data", type=Path, default=get_settings().data_file, help="JSON data file")
    ap.add_argument("--reset", action="store_true", help="Drop and recreate the tables first")
    args = ap.parse_args()

    counts = migrate(args.data, reset=args.reset)
    print("JSON data migrated successfully.")
    for name, count in counts.items():
        print(f"  {name}: {count}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
