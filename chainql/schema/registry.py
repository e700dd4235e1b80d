"""Pydantic models for the SchemaRegistry consulted during classification.

The SchemaRegistry describes the tables a query may reference and the
declared type of every field.  It is produced by the caller (loaded from
JSON, or reflected with :func:`~chainql.schema.converters.registry_from_sqlalchemy`)
and passed explicitly to the functions that need it; chainQL keeps no
process-wide registry.

By the time a query reaches classification its tables and fields have
already been validated, so :meth:`SchemaRegistry.field_type` treats a miss as
an internal fault rather than a user error.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from chainql.errors import SchemaLookupError

#: Declared type of an auto-incrementing identity column.
SERIAL_TYPE = "Serial"

#: Other spellings accepted for the identity type (compared case-insensitively).
IDENTITY_TYPE_ALIASES: frozenset[str] = frozenset({"serial", "primarykey", "primary_key"})


class FieldInfo(BaseModel):
    """Metadata for a single field.

    Attributes:
        name: Field name.
        type: Declared type name (e.g. ``'Serial'``, ``'String'``, ``'i32'``).
        nullable: Whether the field can be NULL.
        related_table: Referenced table when the field is a foreign key.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    type: str
    nullable: bool = False
    related_table: str | None = None

    @property
    def is_identity(self) -> bool:
        """True when the field is an auto-increment identity column."""
        return self.type.lower() in IDENTITY_TYPE_ALIASES

    @property
    def is_relation(self) -> bool:
        """True when the field references another table."""
        return self.related_table is not None


class TableInfo(BaseModel):
    """Metadata for a single table.

    Attributes:
        name: Table name.
        fields: Ordered list of field metadata.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    fields: list[FieldInfo]

    @property
    def field_names(self) -> list[str]:
        """Returns all field names for this table."""
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldInfo | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    @property
    def primary_key(self) -> FieldInfo | None:
        """Returns the first identity field, or ``None``."""
        for field in self.fields:
            if field.is_identity:
                return field
        return None


class SchemaRegistry(BaseModel):
    """Read-only table and field type lookup.

    Attributes:
        tables: All known tables.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    tables: list[TableInfo] = Field(default_factory=list)

    def get_table(self, name: str) -> TableInfo | None:
        """Returns the TableInfo for the given table name, or ``None``."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def get_field(self, table_name: str, field_name: str) -> FieldInfo | None:
        """Returns the FieldInfo for a table.field pair, or ``None``."""
        table = self.get_table(table_name)
        if table is None:
            return None
        return table.get_field(field_name)

    def require_field(self, table_name: str, field_name: str) -> FieldInfo:
        """Returns the FieldInfo for a table.field pair.

        Raises:
            SchemaLookupError: If the table or the field is unknown.
        """
        table = self.get_table(table_name)
        if table is None:
            raise SchemaLookupError(table_name)
        field = table.get_field(field_name)
        if field is None:
            raise SchemaLookupError(table_name, field_name)
        return field

    def field_type(self, table_name: str, field_name: str) -> str:
        """Returns the declared type of ``table_name.field_name``.

        Raises:
            SchemaLookupError: If the table or the field is unknown.
        """
        return self.require_field(table_name, field_name).type

    @property
    def table_names(self) -> list[str]:
        """Returns all table names in the registry."""
        return [t.name for t in self.tables]
