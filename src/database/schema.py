"""Schema management for project databases.

The schema is versionless: the models in ``database.models`` are the single
source of truth. ``ensure_schema`` brings any project store up to that
definition by creating missing tables, indexes and columns. Nothing is ever
dropped, so tables or columns written by other builds are left intact.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from sqlalchemy import Engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError

from services.errors import StoreIOError

from .base import Base
from . import models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


def missing_columns(engine: Engine) -> Dict[str, List[str]]:
    """Return {table: [column, ...]} for model columns absent from existing tables."""
    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())
    missing: Dict[str, List[str]] = {}

    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            continue
        present = {col["name"] for col in inspector.get_columns(table.name)}
        absent = [col.name for col in table.columns if col.name not in present]
        if absent:
            missing[table.name] = absent

        extra = present - {col.name for col in table.columns}
        if extra:
            logger.debug("Keeping unknown columns on %s: %s", table.name, sorted(extra))

    return missing


def _add_column(engine: Engine, table_name: str, column_name: str) -> None:
    column = Base.metadata.tables[table_name].columns[column_name]
    if column.primary_key:
        # SQLite cannot add a primary key after the fact
        raise StoreIOError(
            f"Table '{table_name}' lacks primary key column '{column_name}' and cannot be upgraded"
        )
    column_type = column.type.compile(dialect=engine.dialect)
    # Added columns are nullable: SQLite rejects NOT NULL without a constant default
    ddl = f'ALTER TABLE "{table_name}" ADD COLUMN "{column_name}" {column_type}'
    with engine.begin() as conn:
        conn.execute(text(ddl))
    logger.info(
        "Added column %s.%s",
        table_name,
        column_name,
        extra={"event": "schema.add_column", "table": table_name, "column": column_name},
    )


def ensure_schema(engine: Engine) -> None:
    """Bring the store behind ``engine`` to the current schema. Idempotent."""
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)

        for table_name, columns in missing_columns(engine).items():
            for column_name in columns:
                _add_column(engine, table_name, column_name)

        for table in Base.metadata.sorted_tables:
            for index in table.indexes:
                index.create(bind=engine, checkfirst=True)
    except SQLAlchemyError as exc:
        raise StoreIOError(f"Failed to apply project schema: {exc}") from exc
