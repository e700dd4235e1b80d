"""Unit tests for query_table and query_type."""

from __future__ import annotations

import pytest

from chainql.errors import InternalError, SchemaLookupError
from chainql.query.classify import QueryType, query_table, query_type
from chainql.query.nodes import (
    Aggregate,
    AggregateFunction,
    Assignment,
    CreateTable,
    Delete,
    Drop,
    EndRange,
    Filter,
    Filters,
    Identifier,
    Index,
    Insert,
    MethodCall,
    NoFilters,
    ParenFilter,
    PrimaryKey,
    Range,
    Select,
    StartRange,
    TypedField,
    Update,
)
from chainql.query.operators import LogicalOperator, RelationalOperator
from tests.fixtures import expr


def _eq(table: str, field: str, value: str = "value") -> Filter:
    return Filter(
        operand1=Identifier(table=table, name=field),
        operator=RelationalOperator.EQUAL,
        operand2=expr(value),
    )


ALL_QUERIES = [
    Aggregate(table="users", aggregates=[AggregateFunction(field="age", function="avg")]),
    CreateTable(table="users", fields=[TypedField(identifier="id", type_name="Serial")]),
    Delete(table="users"),
    Drop(table="users"),
    Insert(table="users", assignments=[Assignment(field="name", value=expr("name"))]),
    Select(table="users"),
    Update(table="users"),
]


@pytest.mark.parametrize("query", ALL_QUERIES, ids=lambda q: type(q).__name__)
def test_query_table_is_total(query):
    assert query_table(query) == "users"


def test_query_table_rejects_unknown_node():
    with pytest.raises(InternalError):
        query_table(object())  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        (Insert(table="users"), QueryType.INSERT_ONE),
        (CreateTable(table="users"), QueryType.EXEC),
        (Delete(table="users", filter=_eq("users", "id")), QueryType.EXEC),
        (Drop(table="users"), QueryType.EXEC),
        (Update(table="users", filter=_eq("users", "id")), QueryType.EXEC),
        (Aggregate(table="users"), QueryType.AGGREGATE_ONE),
        (Aggregate(table="users", groups=["team_id"]), QueryType.AGGREGATE_MULTI),
        (Select(table="users"), QueryType.SELECT_MULTI),
    ],
    ids=lambda v: getattr(v, "value", type(v).__name__),
)
def test_query_type_by_variant(registry, query, expected):
    assert query_type(query, registry) is expected


class TestSelectOne:
    def test_identity_equality_is_one(self, registry):
        query = Select(table="users", filter=_eq("users", "id"))
        assert query_type(query, registry) is QueryType.SELECT_ONE

    @pytest.mark.parametrize(
        "limit",
        [Range(start=expr("1"), end=expr("5")), StartRange(start=expr("2")), EndRange(end=expr("3"))],
    )
    def test_identity_equality_is_one_regardless_of_limit(self, registry, limit):
        query = Select(table="users", filter=_eq("users", "id"), limit=limit)
        assert query_type(query, registry) is QueryType.SELECT_ONE

    def test_index_limit_is_one_regardless_of_filter(self, registry):
        filter = Filters(
            operand1=_eq("users", "name"),
            operator=LogicalOperator.OR,
            operand2=_eq("users", "age"),
        )
        query = Select(table="users", filter=filter, limit=Index(expression=expr("0")))
        assert query_type(query, registry) is QueryType.SELECT_ONE

    def test_non_identity_equality_is_multi(self, registry):
        query = Select(table="users", filter=_eq("users", "name"))
        assert query_type(query, registry) is QueryType.SELECT_MULTI

    @pytest.mark.parametrize(
        "operator",
        [RelationalOperator.GREATER_THAN, RelationalOperator.NOT_EQUAL, RelationalOperator.LESSER_THAN_EQUAL],
    )
    def test_identity_comparison_is_one_for_any_operator(self, registry, operator):
        filter = Filter(
            operand1=Identifier(table="users", name="id"),
            operator=operator,
            operand2=expr("5"),
        )
        assert query_type(Select(table="users", filter=filter), registry) is QueryType.SELECT_ONE

    def test_primary_key_inequality_is_multi(self, registry):
        filter = Filter(
            operand1=PrimaryKey(table="users"),
            operator=RelationalOperator.GREATER_THAN,
            operand2=expr("pk"),
        )
        assert query_type(Select(table="users", filter=filter), registry) is QueryType.SELECT_MULTI

    def test_primary_key_equality_is_one(self, registry):
        filter = Filter(
            operand1=PrimaryKey(table="users"),
            operator=RelationalOperator.EQUAL,
            operand2=expr("pk"),
        )
        assert query_type(Select(table="users", filter=filter), registry) is QueryType.SELECT_ONE

    def test_combined_filter_is_multi(self, registry):
        filter = Filters(
            operand1=_eq("users", "id"),
            operator=LogicalOperator.AND,
            operand2=_eq("users", "name"),
        )
        assert query_type(Select(table="users", filter=filter), registry) is QueryType.SELECT_MULTI

    def test_parenthesised_identity_is_multi(self, registry):
        query = Select(table="users", filter=ParenFilter(expression=_eq("users", "id")))
        assert query_type(query, registry) is QueryType.SELECT_MULTI

    def test_method_call_filter_is_multi(self, registry):
        filter = Filter(
            operand1=MethodCall(method_name="contains", object_name="name", arguments=[expr("'x'")]),
            operator=RelationalOperator.EQUAL,
            operand2=expr("True"),
        )
        assert query_type(Select(table="users", filter=filter), registry) is QueryType.SELECT_MULTI

    def test_table_without_identity_is_multi(self, registry):
        query = Select(table="tags", filter=_eq("tags", "label"))
        assert query_type(query, registry) is QueryType.SELECT_MULTI


class TestLookupFaults:
    def test_unknown_field_raises(self, registry):
        query = Select(table="users", filter=_eq("users", "nickname"))
        with pytest.raises(SchemaLookupError) as info:
            query_type(query, registry)
        assert info.value.table == "users"
        assert info.value.field == "nickname"

    def test_unknown_table_raises(self, registry):
        query = Select(table="ghosts", filter=_eq("ghosts", "id"))
        with pytest.raises(SchemaLookupError):
            query_type(query, registry)

    def test_lookup_fault_is_internal(self, registry):
        with pytest.raises(InternalError):
            query_type(Select(table="users", filter=_eq("users", "nickname")), registry)

    def test_no_lookup_without_single_filter(self, registry):
        # No schema access is needed, so an unknown table is fine here.
        assert query_type(Select(table="ghosts", filter=NoFilters()), registry) is QueryType.SELECT_MULTI


class TestRangeDesugar:
    def test_length_is_synthesized_subtraction(self):
        offset = Range(start=expr("2"), end=expr("10")).desugar()
        assert offset.length.source == "10 - 2"
        assert offset.length.is_literal is False
        assert offset.offset == expr("2")

    def test_bounds_are_not_mutated(self):
        start, end = expr("a"), expr("b")
        Range(start=start, end=end).desugar()
        assert start.source == "a"
        assert end.source == "b"
