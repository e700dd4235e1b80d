"""Shared pytest fixtures for chainQL unit tests."""
from __future__ import annotations

import pytest

from chainql.schema.registry import SchemaRegistry
from tests.fixtures import load_registry


@pytest.fixture(scope="session")
def registry() -> SchemaRegistry:
    """Canonical schema registry shared across all tests."""
    return load_registry()
