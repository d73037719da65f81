# scripts/setup/init_db.py
"""
Initialize database: creates all tables, adds late columns, seeds
default categories and the bootstrap admin.
Safe to run repeatedly.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from dealership.database import create_tables, get_engine
from dealership.config import settings
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError


def main():
    print(f"🗄️  {settings.STORE_NAME} DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL.split('@')[-1]}")

    engine = get_engine()

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except SQLAlchemyError as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nCheck DATABASE_URL (or EXTERNAL_DATABASE_URL) in .env")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    print("✅ Tables, late columns and seed data ready")

    tables = sorted(inspect(engine).get_table_names())
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn dealership.main:app --host 0.0.0.0 --port {settings.PORT}")


if __name__ == "__main__":
    main()
