"""Derived properties of a query: its table and its result shape.

``query_type`` decides whether the generated accessor returns zero-or-one
row, many rows, or nothing.  A ``Select`` is one-row when either

* its filter is a single comparison whose left-hand side is an identity
  (``Serial``) column, whatever the operator, or ``pk == value``, or
* its limit is a single ``[index]``.

Those are the only triggers.
"""

from __future__ import annotations

from enum import Enum

from chainql.errors import InternalError
from chainql.query.nodes import (
    Aggregate,
    CreateTable,
    Delete,
    Drop,
    Filter,
    Identifier,
    Index,
    Insert,
    PrimaryKey,
    Query,
    Select,
    Update,
)
from chainql.query.operators import RelationalOperator
from chainql.schema.registry import SchemaRegistry


class QueryType(str, Enum):
    """Expected result shape of a query."""

    AGGREGATE_MULTI = "aggregate_multi"
    AGGREGATE_ONE = "aggregate_one"
    EXEC = "exec"
    INSERT_ONE = "insert_one"
    SELECT_MULTI = "select_multi"
    SELECT_ONE = "select_one"


def query_table(query: Query) -> str:
    """Returns the name of the table ``query`` operates on."""
    if isinstance(query, (Aggregate, CreateTable, Delete, Drop, Insert, Select, Update)):
        return query.table
    raise InternalError(f"Unknown query type: {type(query).__name__}", clause="query")


def query_type(query: Query, registry: SchemaRegistry) -> QueryType:
    """Classify ``query`` by the shape of its result.

    Args:
        query: A semantically accepted query.
        registry: Schema used to look up the declared type of a filtered field.

    Returns:
        The :class:`QueryType` of ``query``.

    Raises:
        SchemaLookupError: If a filtered field is missing from ``registry``.
        InternalError: If ``query`` is not a known query variant.
    """
    if isinstance(query, Aggregate):
        return QueryType.AGGREGATE_MULTI if query.groups else QueryType.AGGREGATE_ONE
    if isinstance(query, Insert):
        return QueryType.INSERT_ONE
    if isinstance(query, Select):
        return _select_type(query, registry)
    if isinstance(query, (CreateTable, Delete, Drop, Update)):
        return QueryType.EXEC
    raise InternalError(f"Unknown query type: {type(query).__name__}", clause="query")


def _select_type(query: Select, registry: SchemaRegistry) -> QueryType:
    typ = QueryType.SELECT_MULTI
    if isinstance(query.filter, Filter) and _is_unique_match(query.filter, registry):
        typ = QueryType.SELECT_ONE
    if isinstance(query.limit, Index):
        typ = QueryType.SELECT_ONE
    return typ


def _is_unique_match(filter: Filter, registry: SchemaRegistry) -> bool:
    """True for a comparison on an identity column, and for ``pk == value``."""
    operand = filter.operand1
    if isinstance(operand, PrimaryKey):
        return filter.operator is RelationalOperator.EQUAL
    if isinstance(operand, Identifier):
        # The table and the field were validated upstream; a miss raises.
        return registry.require_field(operand.table, operand.name).is_identity
    return False
