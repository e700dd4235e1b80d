"""Test fixtures: sample SchemaRegistry JSON and expression helpers."""

from __future__ import annotations

from pathlib import Path

from chainql.parse.expression import Expression
from chainql.schema.converters import registry_from_json
from chainql.schema.registry import SchemaRegistry

_FIXTURES_DIR = Path(__file__).parent


def load_registry() -> SchemaRegistry:
    """Load the canonical sample SchemaRegistry from registry.json."""
    return registry_from_json(_FIXTURES_DIR / "registry.json")


def expr(source: str) -> Expression:
    """Shorthand for :meth:`Expression.parse` in test bodies."""
    return Expression.parse(source)
