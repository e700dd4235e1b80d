"""Unit tests for SchemaRegistry lookups."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from chainql.errors import InternalError, SchemaLookupError
from chainql.schema.registry import FieldInfo, SchemaRegistry, TableInfo


@pytest.mark.parametrize("type_name", ["Serial", "serial", "SERIAL", "PrimaryKey", "primary_key"])
def test_identity_type_spellings(type_name):
    assert FieldInfo(name="id", type=type_name).is_identity


@pytest.mark.parametrize("type_name", ["String", "i32", "INTEGER", "ForeignKey", "SerialNumber"])
def test_non_identity_types(type_name):
    assert not FieldInfo(name="x", type=type_name).is_identity


def test_relation_flag(registry):
    assert registry.get_field("users", "team_id").is_relation
    assert registry.get_field("users", "team_id").related_table == "teams"
    assert not registry.get_field("users", "age").is_relation


def test_field_type(registry):
    assert registry.field_type("users", "id") == "Serial"
    assert registry.field_type("users", "age") == "i32"
    assert registry.field_type("tags", "weight") == "f64"


def test_table_names_keep_declaration_order(registry):
    assert registry.table_names == ["teams", "users", "tags"]


def test_primary_key(registry):
    assert registry.get_table("users").primary_key.name == "id"
    assert registry.get_table("tags").primary_key is None


def test_soft_lookups_return_none(registry):
    assert registry.get_table("ghosts") is None
    assert registry.get_field("ghosts", "id") is None
    assert registry.get_field("users", "nickname") is None


class TestRequireField:
    def test_unknown_table(self, registry):
        with pytest.raises(SchemaLookupError) as info:
            registry.require_field("ghosts", "id")
        assert info.value.table == "ghosts"
        assert info.value.field is None
        assert info.value.clause == "schema"

    def test_unknown_field(self, registry):
        with pytest.raises(SchemaLookupError) as info:
            registry.field_type("users", "nickname")
        assert info.value.field == "nickname"
        assert "nickname" in str(info.value)

    def test_is_an_internal_error(self, registry):
        with pytest.raises(InternalError):
            registry.require_field("users", "nickname")


def test_registry_is_immutable():
    registry = SchemaRegistry(tables=[TableInfo(name="t", fields=[])])
    with pytest.raises(ValidationError):
        registry.tables = []  # type: ignore[misc]


def test_unknown_field_keys_are_rejected():
    with pytest.raises(ValidationError):
        FieldInfo.model_validate({"name": "id", "type": "Serial", "unique": True})
