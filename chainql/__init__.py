"""chainQL – compile fluent query chains into parameterized query structures.

Write queries as Python method chains, get back an ordered call list, a
typed query AST, and the exact positional parameters the generated SQL
binds.

Public API
----------
``parse_source`` / ``parse_call_chain``
    Turn a chained-call expression into a :class:`CallChain`.

``query_table`` / ``query_type``
    Derived properties of a completed :data:`Query`.

``extract_arguments``
    Split a query's values into dynamic and literal arguments, in
    positional-parameter order.

``prepare_query``
    Run all of the above once and bundle the result::

        prepared = chainql.prepare_query(query, registry)
        cursor.execute(sql, [values[src] for src in prepared.parameter_sources])

Re-exported types
-----------------
``CallChain``, ``Expression``, ``SchemaRegistry``, the query AST nodes,
``QueryType``, ``Arg``, ``PreparedQuery``, and all error classes.
"""

from __future__ import annotations

from chainql.compile.arguments import Arg, ArgumentExtractor, extract_arguments
from chainql.compile.prepare import PreparedQuery, QueryPreparer, prepare_query
from chainql.errors import (
    ChainQLError,
    ChainSyntaxError,
    InternalError,
    ParseError,
    QuerySyntaxError,
    SchemaLookupError,
    SynthesisError,
    UnsetFilterValueError,
)
from chainql.parse.chain import Call, CallChain, CallChainParser, parse_call_chain, parse_source
from chainql.parse.expression import Expression, Position
from chainql.query.classify import QueryType, query_table, query_type
from chainql.query.nodes import (
    Aggregate,
    CreateTable,
    Delete,
    Drop,
    Insert,
    Query,
    Select,
    Update,
)
from chainql.schema.converters import registry_from_json, registry_from_sqlalchemy
from chainql.schema.registry import FieldInfo, SchemaRegistry, TableInfo

__all__ = [
    # Parsing
    "parse_source",
    "parse_call_chain",
    "Call",
    "CallChain",
    "CallChainParser",
    "Expression",
    "Position",
    # Query AST
    "Query",
    "Aggregate",
    "CreateTable",
    "Delete",
    "Drop",
    "Insert",
    "Select",
    "Update",
    "QueryType",
    "query_table",
    "query_type",
    # Arguments
    "Arg",
    "ArgumentExtractor",
    "extract_arguments",
    "PreparedQuery",
    "QueryPreparer",
    "prepare_query",
    # Schema
    "SchemaRegistry",
    "TableInfo",
    "FieldInfo",
    "registry_from_json",
    "registry_from_sqlalchemy",
    # Errors
    "ChainQLError",
    "ParseError",
    "QuerySyntaxError",
    "ChainSyntaxError",
    "InternalError",
    "SchemaLookupError",
    "UnsetFilterValueError",
    "SynthesisError",
]
