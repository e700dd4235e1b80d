"""Utilities for building a SchemaRegistry from external sources.

SQLAlchemy converter
--------------------
:func:`registry_from_sqlalchemy` reflects a live database engine and returns
a :class:`~chainql.schema.registry.SchemaRegistry`.

Install the optional dependency before using this module::

    pip install "chainql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from chainql.schema.converters import registry_from_sqlalchemy

    engine = create_engine("sqlite:///mydb.db")
    registry = registry_from_sqlalchemy(engine)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from chainql.schema.registry import SERIAL_TYPE, FieldInfo, SchemaRegistry, TableInfo

if TYPE_CHECKING:
    from sqlalchemy import Column, Engine, MetaData, Table

logger = logging.getLogger(__name__)


def registry_from_json(path: str | Path) -> SchemaRegistry:
    """Load a :class:`SchemaRegistry` from a JSON file.

    Args:
        path: File holding ``{"tables": [{"name": ..., "fields": [...]}]}``.

    Returns:
        The validated registry.
    """
    data = json.loads(Path(path).read_text())
    return SchemaRegistry.model_validate(data)


def registry_from_sqlalchemy(
    engine: Engine,
    *,
    include_tables: list[str] | None = None,
    schema: str | None = None,
) -> SchemaRegistry:
    """Build a :class:`SchemaRegistry` by reflecting a SQLAlchemy engine.

    All tables visible to the engine (or a subset via *include_tables*) are
    reflected using SQLAlchemy's :class:`~sqlalchemy.schema.MetaData`.

    **Type mapping**

    * A single-column integer primary key that auto-increments becomes the
      identity type (``"Serial"``), which is what drives one-row
      classification of ``filter(table.id == ...)`` queries.
    * Every other column keeps SQLAlchemy's rendering of its type
      (``"INTEGER"``, ``"VARCHAR(50)"``...).
    * A column with a foreign key records the referenced table in
      ``related_table``.

    Args:
        engine: A connected :class:`sqlalchemy.engine.Engine` instance.
        include_tables: Optional allowlist of table names to reflect.
            When ``None`` all tables in the schema are reflected.
        schema: Optional database schema name, passed directly to
            :meth:`sqlalchemy.schema.MetaData.reflect`.

    Returns:
        A fully populated :class:`SchemaRegistry`.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy import MetaData as _MetaData
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for registry_from_sqlalchemy(). "
            'Install it with: pip install "chainql[sqlalchemy]"'
        ) from exc

    metadata = _MetaData()
    with engine.connect() as conn:
        metadata.reflect(bind=conn, only=include_tables, schema=schema)

    registry = _metadata_to_registry(metadata)
    logger.debug("Reflected %d table(s) into the schema registry", len(registry.tables))
    return registry


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _metadata_to_registry(metadata: MetaData) -> SchemaRegistry:
    """Convert a reflected :class:`~sqlalchemy.schema.MetaData` into a
    :class:`SchemaRegistry`.

    Separated from :func:`registry_from_sqlalchemy` so it can be reused with
    declaratively built ``MetaData`` objects that were never reflected.
    """
    tables = [
        TableInfo(
            name=table.name,
            fields=[_column_to_field(table, col) for col in table.columns],
        )
        for table in metadata.sorted_tables
    ]
    return SchemaRegistry(tables=tables)


def _column_to_field(table: Table, col: Column) -> FieldInfo:
    related_table = None
    for fk in col.foreign_keys:
        related_table = fk.column.table.name
        break

    return FieldInfo(
        name=col.name,
        type=SERIAL_TYPE if _is_serial(table, col) else str(col.type),
        # col.nullable is True/False for reflected columns; treat an unset
        # value (None) as nullable.
        nullable=col.nullable is not False and not col.primary_key,
        related_table=related_table,
    )


def _is_serial(table: Table, col: Column) -> bool:
    """True for the sole integer primary-key column of an auto-increment table."""
    from sqlalchemy import Integer

    if not col.primary_key or len(table.primary_key.columns) != 1:
        return False
    if col.autoincrement is False:
        return False
    return isinstance(col.type, Integer)
