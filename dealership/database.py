# dealership/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL (SQLite for local dev and tests).
The engine is created lazily on first use from settings.DATABASE_URL.
All models are auto-imported in create_tables() so every table exists after one call.
"""

import secrets
from datetime import datetime

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from dealership.config import settings
from dealership.utils.logger import get_logger

logger = get_logger(__name__)

SessionLocal = sessionmaker(autocommit=False, autoflush=False)

Base = declarative_base()

_engine = None

DEFAULT_CATEGORIES = [
    "Compacts", "Coupes", "Motos", "Muscle", "Off Road", "SUVs",
    "Sedans", "Sports", "Sports classics", "Super", "Vans",
]

# Columns added after the first release: (table, column, DDL type)
LATE_COLUMNS = [
    ("orders", "validated_by", "VARCHAR(100)"),
    ("orders", "validated_at", "TIMESTAMP"),
    ("orders", "client_ip", "VARCHAR(45)"),
    ("orders", "cancellation_reason", "TEXT"),
    ("vehicles", "page_catalog", "INTEGER"),
    ("vehicles", "manufacturer", "VARCHAR(255)"),
    ("vehicles", "realname", "VARCHAR(255)"),
    ("activity_logs", "admin_ip", "VARCHAR(45)"),
]


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # SQLite needs check_same_thread=False for FastAPI's threaded model
        return {"connect_args": {"check_same_thread": False}, "echo": False}
    return {
        "pool_pre_ping": True,   # Auto-reconnect if DB connection drops
        "pool_size": 10,
        "max_overflow": 20,
        "echo": False,
    }


def get_engine():
    """Return the shared engine, creating it on first call."""
    global _engine
    if _engine is None:
        _engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))
        SessionLocal.configure(bind=_engine)
    return _engine


def get_db():
    """FastAPI dependency: yields a DB session and closes it after request."""
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _add_column_if_missing(engine, table: str, column: str, col_type: str):
    """Best-effort ALTER TABLE; an existing column is not an error."""
    existing = {c["name"] for c in inspect(engine).get_columns(table)}
    if column in existing:
        return
    try:
        with engine.begin() as conn:
            conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}"))
        logger.info(f"Added column {table}.{column}")
    except SQLAlchemyError as e:
        logger.debug(f"Column {table}.{column} not added: {e}")


def _seed_categories(db: Session):
    from dealership.models.category import Category

    existing = {name for (name,) in db.query(Category.name).all()}
    from dealership.models.vehicle import Vehicle
    used = {c for (c,) in db.query(Vehicle.category).distinct().all() if c}

    for name in sorted((used | set(DEFAULT_CATEGORIES)) - existing):
        now = datetime.utcnow()
        db.add(Category(name=name, is_active=True, created_at=now, updated_at=now))
    db.commit()


def _seed_default_admin(db: Session):
    from dealership.models.admin_user import AdminUser
    from dealership.permissions import FULL_PERMISSIONS

    if db.query(AdminUser.id).first() is not None:
        return

    access_key = settings.DEFAULT_ADMIN_ACCESS_KEY
    if not access_key:
        access_key = secrets.token_urlsafe(16)
        logger.warning(
            f"No DEFAULT_ADMIN_ACCESS_KEY set, generated access key for "
            f"'{settings.DEFAULT_ADMIN_USERNAME}': {access_key}"
        )

    db.add(AdminUser(
        username=settings.DEFAULT_ADMIN_USERNAME,
        access_key=access_key,
        permissions=FULL_PERMISSIONS,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow(),
    ))
    db.commit()
    logger.info(f"Default admin '{settings.DEFAULT_ADMIN_USERNAME}' created with full permissions")


def create_tables(bind=None):
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    engine = bind if bind is not None else get_engine()

    from dealership.models.vehicle import Vehicle                  # noqa
    from dealership.models.category import Category                # noqa
    from dealership.models.particularity import Particularity      # noqa
    from dealership.models.order import Order, OrderItem           # noqa
    from dealership.models.banned_unique_id import BannedUniqueId  # noqa
    from dealership.models.admin_user import AdminUser             # noqa
    from dealership.models.announcement import Announcement        # noqa
    from dealership.models.activity_log import ActivityLog         # noqa
    from dealership.models.audit_log import AuditLog               # noqa

    Base.metadata.create_all(bind=engine)

    for table, column, col_type in LATE_COLUMNS:
        _add_column_if_missing(engine, table, column, col_type)

    db = Session(bind=engine)
    try:
        _seed_categories(db)
        _seed_default_admin(db)
    finally:
        db.close()
