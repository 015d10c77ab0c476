"""Idempotent, additive schema upgrades for databases created by older releases."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger("equipment_tracker.migrate")


def _utcnow() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def _table_columns(engine: Engine, table: str) -> list[dict[str, object]]:
    """Fetch SQLite's description of a table so we know what columns exist."""

    with engine.connect() as conn:
        return conn.execute(text(f"PRAGMA table_info({table})")).mappings().all()


def _column_names(engine: Engine, table: str) -> set[str]:
    return {record["name"] for record in _table_columns(engine, table)}


def _add_column_sqlite(engine: Engine, table: str, col_def: str) -> None:
    with engine.begin() as conn:
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {col_def}"))


def _migrate_legacy_brands(engine: Engine) -> None:
    """Move the old free-text ``equipment.brand`` column onto the ``brands`` table."""

    ecols = _column_names(engine, "equipment")
    if "brand_id" not in ecols:
        _add_column_sqlite(engine, "equipment", "brand_id INTEGER REFERENCES brands(id) ON DELETE SET NULL")
    if "brand" not in ecols:
        return

    with engine.begin() as conn:
        rows = conn.execute(
            text("SELECT DISTINCT brand FROM equipment WHERE brand IS NOT NULL AND TRIM(brand) != ''")
        ).all()
        for (brand,) in rows:
            conn.execute(
                text("INSERT OR IGNORE INTO brands (name, created_at) VALUES (:name, :created_at)"),
                {"name": brand.strip(), "created_at": _utcnow()},
            )
        conn.execute(
            text(
                """
                UPDATE equipment
                SET brand_id = (SELECT id FROM brands WHERE brands.name = TRIM(equipment.brand))
                WHERE brand IS NOT NULL AND brand_id IS NULL
                """
            )
        )
    logger.info("migrate.brands", extra={"extra_data": {"legacy_brands": len(rows)}})


def run_migrations(engine: Engine) -> None:
    """Bring an existing SQLite schema up to what the models expect."""

    if engine.dialect.name != "sqlite":
        return

    ucols = _column_names(engine, "users")
    if ucols and "role" not in ucols:
        _add_column_sqlite(engine, "users", "role TEXT NOT NULL DEFAULT 'user'")

    if _column_names(engine, "equipment") and _column_names(engine, "brands"):
        _migrate_legacy_brands(engine)
