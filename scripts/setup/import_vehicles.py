# scripts/setup/import_vehicles.py
"""
Import vehicles from a MySQL dump (INSERT INTO `vehicles` ... statements).
Tables are created first if needed. Rows already present (same name and
category) are skipped unless --allow-duplicates is given.

Usage:
  python scripts/setup/import_vehicles.py elite_vinewood_vehicles.sql
  python scripts/setup/import_vehicles.py dump.sql --dry-run
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import argparse
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from dealership.database import SessionLocal, create_tables, get_engine
from dealership.models.vehicle import Vehicle
from dealership.utils.sql_dump import parse_vehicle_inserts, to_vehicle_fields

REQUIRED = ("name", "category", "price", "trunk_weight", "image_url", "seats")


def main():
    parser = argparse.ArgumentParser(description="Import vehicles from a MySQL dump")
    parser.add_argument("dump", help="Path to the .sql file")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, write nothing")
    parser.add_argument("--allow-duplicates", action="store_true",
                        help="Insert rows even if name+category already exists")
    args = parser.parse_args()

    with open(args.dump, encoding="utf-8") as f:
        rows = [to_vehicle_fields(r) for r in parse_vehicle_inserts(f.read())]

    valid = [r for r in rows if all(r.get(k) is not None for k in REQUIRED)]
    print(f"📄 Found {len(rows)} vehicle rows ({len(rows) - len(valid)} incomplete, skipped)")
    if args.dry_run or not valid:
        return

    get_engine()
    create_tables()
    db = SessionLocal()
    imported = skipped = 0
    try:
        for i, row in enumerate(valid, start=1):
            if not args.allow_duplicates:
                exists = db.query(Vehicle.id).filter(
                    Vehicle.name == row["name"], Vehicle.category == row["category"]
                ).first()
                if exists:
                    skipped += 1
                    continue
            now = datetime.utcnow()
            db.add(Vehicle(**row, created_at=now, updated_at=now))
            imported += 1
            if i % 50 == 0:
                db.commit()
                print(f"   … {i}/{len(valid)}")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        print(f"❌ Import failed: {e}")
        sys.exit(1)
    finally:
        db.close()

    print(f"✅ Imported {imported} vehicles ({skipped} already present)")


if __name__ == "__main__":
    main()
