"""chainQL query AST: node models, operators and classification."""
from chainql.query.classify import QueryType, query_table, query_type
from chainql.query.nodes import (
    Aggregate,
    AggregateFilter,
    AggregateFilterExpression,
    AggregateFilters,
    AggregateFunction,
    AggregateNegFilter,
    AggregateParenFilter,
    AggregateValueFilter,
    Ascending,
    Assignment,
    CreateTable,
    Delete,
    Descending,
    Drop,
    EndRange,
    Filter,
    FilterExpression,
    Filters,
    FilterValue,
    Identifier,
    Index,
    Insert,
    Join,
    Limit,
    LimitOffset,
    MethodCall,
    NegFilter,
    NoAggregateFilters,
    NoFilters,
    NoLimit,
    Order,
    ParenFilter,
    PrimaryKey,
    Query,
    Range,
    Select,
    StartRange,
    TypedField,
    UnsetFilterValue,
    Update,
    ValueFilter,
)
from chainql.query.operators import AssignmentOperator, LogicalOperator, RelationalOperator

__all__ = [
    "QueryType",
    "query_table",
    "query_type",
    "Aggregate",
    "AggregateFilter",
    "AggregateFilterExpression",
    "AggregateFilters",
    "AggregateFunction",
    "AggregateNegFilter",
    "AggregateParenFilter",
    "AggregateValueFilter",
    "Ascending",
    "Assignment",
    "CreateTable",
    "Delete",
    "Descending",
    "Drop",
    "EndRange",
    "Filter",
    "FilterExpression",
    "Filters",
    "FilterValue",
    "Identifier",
    "Index",
    "Insert",
    "Join",
    "Limit",
    "LimitOffset",
    "MethodCall",
    "NegFilter",
    "NoAggregateFilters",
    "NoFilters",
    "NoLimit",
    "Order",
    "ParenFilter",
    "PrimaryKey",
    "Query",
    "Range",
    "Select",
    "StartRange",
    "TypedField",
    "UnsetFilterValue",
    "Update",
    "ValueFilter",
    "AssignmentOperator",
    "LogicalOperator",
    "RelationalOperator",
]
