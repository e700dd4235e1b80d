"""Query preparation: everything the renderer and binder need from a query.

``QueryPreparer`` runs the derived operations of a completed query once
(table projection, result-shape classification, argument extraction) and
bundles them in a :class:`PreparedQuery`.  The SQL renderer assigns
positional placeholders in ``arguments`` order; the runtime binder supplies
values in that same order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from chainql.compile.arguments import Arg, ArgumentExtractor
from chainql.query.classify import QueryType, query_table, query_type
from chainql.query.nodes import Query
from chainql.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedQuery:
    """The output of a successful preparation.

    Attributes:
        query: The prepared query.
        table: Name of the table the query operates on.
        query_type: Expected result shape.
        arguments: Dynamic arguments, in positional-parameter order.
        literals: Literal arguments the renderer may inline.
    """

    query: Query
    table: str
    query_type: QueryType
    arguments: list[Arg]
    literals: list[Arg]

    @property
    def placeholder_count(self) -> int:
        """Number of positional parameters the statement binds."""
        return len(self.arguments)

    @property
    def parameter_sources(self) -> list[str]:
        """Source text of each dynamic argument, in binding order."""
        return [arg.expression.source for arg in self.arguments]


class QueryPreparer:
    """Prepares completed queries against a schema registry.

    Args:
        registry: Read-only schema used for result-shape classification.
    """

    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry
        self._extractor = ArgumentExtractor()

    def prepare(self, query: Query) -> PreparedQuery:
        """Classify ``query`` and extract its arguments.

        Raises:
            InternalError: (or subclass) if an upstream invariant was violated.
        """
        typ = query_type(query, self._registry)
        arguments, literals = self._extractor.extract(query)
        prepared = PreparedQuery(
            query=query,
            table=query_table(query),
            query_type=typ,
            arguments=arguments,
            literals=literals,
        )
        logger.debug(
            "Prepared %s query on %r with %d placeholder(s)",
            typ.value,
            prepared.table,
            prepared.placeholder_count,
        )
        return prepared


def prepare_query(query: Query, registry: SchemaRegistry) -> PreparedQuery:
    """Prepare ``query``.  See :meth:`QueryPreparer.prepare`."""
    return QueryPreparer(registry).prepare(query)
