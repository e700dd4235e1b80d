"""chainQL schema models: SchemaRegistry and its loaders."""
from chainql.schema.converters import registry_from_json, registry_from_sqlalchemy
from chainql.schema.registry import (
    IDENTITY_TYPE_ALIASES,
    SERIAL_TYPE,
    FieldInfo,
    SchemaRegistry,
    TableInfo,
)

__all__ = [
    "IDENTITY_TYPE_ALIASES",
    "SERIAL_TYPE",
    "FieldInfo",
    "SchemaRegistry",
    "TableInfo",
    "registry_from_json",
    "registry_from_sqlalchemy",
]
