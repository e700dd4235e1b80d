"""Query argument extraction.

``ArgumentExtractor`` walks a completed query and splits every value-bearing
node into *dynamic* arguments (bound as positional parameters at runtime) and
*literal* arguments (constant tokens the renderer may inline).  An
expression is literal iff it is a constant token; everything else, including
every argument of a method-call predicate, is dynamic.

The walk order fixes the positional-parameter numbering used by the
renderer, so it is part of the contract:

=============  ===============================================
Query          Order
=============  ===============================================
Aggregate      filter, then aggregate filter
Delete         filter
Insert         assignments
Select         filter, then limit
Update         assignments, then filter
CreateTable    nothing
Drop           nothing
=============  ===============================================

A ``[start:end]`` limit contributes two dynamic arguments: the synthesized
``end - start`` length first, then ``start``.  Both are bound even when the
bounds are constants.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from chainql.errors import InternalError, UnsetFilterValueError
from chainql.parse.expression import Expression
from chainql.query.nodes import (
    Aggregate,
    AggregateFilter,
    AggregateFilterExpression,
    AggregateFilters,
    AggregateNegFilter,
    AggregateParenFilter,
    AggregateValueFilter,
    Assignment,
    CreateTable,
    Delete,
    Drop,
    EndRange,
    Filter,
    FilterExpression,
    Filters,
    FilterValue,
    Identifier,
    Index,
    Insert,
    Limit,
    LimitOffset,
    MethodCall,
    NegFilter,
    NoAggregateFilters,
    NoFilters,
    NoLimit,
    ParenFilter,
    PrimaryKey,
    Query,
    Range,
    Select,
    StartRange,
    UnsetFilterValue,
    Update,
    ValueFilter,
)

logger = logging.getLogger(__name__)


class Arg(BaseModel):
    """An expression to be sent as a parameter of the generated query.

    Attributes:
        expression: The value expression.
        field_name: The field the value is compared with or assigned to.
        table_name: The table owning that field (or the primary key).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    expression: Expression
    field_name: str | None = None
    table_name: str | None = None

    @property
    def is_literal(self) -> bool:
        return self.expression.is_literal


@dataclass
class ArgumentCollector:
    """Accumulates arguments during a single extraction run."""

    arguments: list[Arg] = field(default_factory=list)
    literals: list[Arg] = field(default_factory=list)

    def add(
        self,
        expression: Expression,
        field_name: str | None = None,
        table_name: str | None = None,
    ) -> None:
        """Store ``expression`` in the literal or the dynamic list."""
        arg = Arg(expression=expression, field_name=field_name, table_name=table_name)
        if arg.is_literal:
            self.literals.append(arg)
        else:
            self.arguments.append(arg)

    def bind(self, expression: Expression) -> None:
        """Store ``expression`` in the dynamic list, even if it is a constant."""
        self.arguments.append(Arg(expression=expression))


class ArgumentExtractor:
    """Extracts the dynamic and literal arguments of a query.

    The extractor is stateless; every :meth:`extract` call starts from a
    fresh :class:`ArgumentCollector`.
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(self, query: Query) -> tuple[list[Arg], list[Arg]]:
        """Return ``(dynamic, literal)`` arguments of ``query``.

        Raises:
            UnsetFilterValueError: If a filter still holds an unset value.
            SynthesisError: If a range length cannot be synthesized.
            InternalError: On an unknown node type.
        """
        collector = ArgumentCollector()

        if isinstance(query, Aggregate):
            self._add_filter(query.filter, collector)
            self._add_aggregate_filter(query.aggregate_filter, collector)
        elif isinstance(query, Delete):
            self._add_filter(query.filter, collector)
        elif isinstance(query, Insert):
            self._add_assignments(query.assignments, collector)
        elif isinstance(query, Select):
            self._add_filter(query.filter, collector)
            self._add_limit(query.limit, collector)
        elif isinstance(query, Update):
            self._add_assignments(query.assignments, collector)
            self._add_filter(query.filter, collector)
        elif isinstance(query, (CreateTable, Drop)):
            pass
        else:
            raise InternalError(f"Unknown query type: {type(query).__name__}", clause="query")

        logger.debug(
            "Extracted %d dynamic and %d literal argument(s) from %s on %r",
            len(collector.arguments),
            len(collector.literals),
            type(query).__name__,
            query.table,
        )
        return collector.arguments, collector.literals

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def _add_filter(self, filter: FilterExpression, collector: ArgumentCollector) -> None:
        if isinstance(filter, Filter):
            self._add_filter_value(filter.operand1, collector, filter.operand2)
        elif isinstance(filter, Filters):
            self._add_filter(filter.operand1, collector)
            self._add_filter(filter.operand2, collector)
        elif isinstance(filter, (NegFilter, ParenFilter)):
            self._add_filter(filter.expression, collector)
        elif isinstance(filter, NoFilters):
            pass
        elif isinstance(filter, ValueFilter):
            self._add_filter_value(filter.value, collector, None)
        else:
            raise InternalError(f"Unknown filter node: {type(filter).__name__}", clause="filter")

    def _add_filter_value(
        self,
        value: FilterValue,
        collector: ArgumentCollector,
        expression: Expression | None,
    ) -> None:
        if isinstance(value, Identifier):
            # A boolean field may be used without a comparison.
            if expression is not None:
                collector.add(expression, field_name=value.name, table_name=value.table)
        elif isinstance(value, MethodCall):
            # The call arguments replace the right-hand side entirely.
            for argument in value.arguments:
                collector.bind(argument)
        elif isinstance(value, PrimaryKey):
            if expression is not None:
                collector.add(expression, table_name=value.table)
        elif isinstance(value, UnsetFilterValue):
            raise UnsetFilterValueError()
        else:
            raise InternalError(f"Unknown filter value: {type(value).__name__}", clause="filter")

    # ------------------------------------------------------------------
    # HAVING
    # ------------------------------------------------------------------

    def _add_aggregate_filter(
        self, filter: AggregateFilterExpression, collector: ArgumentCollector
    ) -> None:
        if isinstance(filter, AggregateFilter):
            collector.add(filter.operand2)
        elif isinstance(filter, AggregateFilters):
            self._add_aggregate_filter(filter.operand1, collector)
            self._add_aggregate_filter(filter.operand2, collector)
        elif isinstance(filter, (AggregateNegFilter, AggregateParenFilter)):
            self._add_aggregate_filter(filter.expression, collector)
        elif isinstance(filter, (NoAggregateFilters, AggregateValueFilter)):
            pass
        else:
            raise InternalError(
                f"Unknown aggregate filter node: {type(filter).__name__}", clause="aggregate_filter"
            )

    # ------------------------------------------------------------------
    # LIMIT
    # ------------------------------------------------------------------

    def _add_limit(self, limit: Limit, collector: ArgumentCollector) -> None:
        if isinstance(limit, Index):
            collector.add(limit.expression)
        elif isinstance(limit, StartRange):
            collector.add(limit.start)
        elif isinstance(limit, EndRange):
            collector.add(limit.end)
        elif isinstance(limit, Range):
            # LIMIT and OFFSET of a range are both positional parameters.
            collector.bind(limit.desugar().length)
            collector.bind(limit.start)
        elif isinstance(limit, (LimitOffset, NoLimit)):
            # A LimitOffset only exists after desugaring and renders inline.
            pass
        else:
            raise InternalError(f"Unknown limit: {type(limit).__name__}", clause="limit")

    # ------------------------------------------------------------------
    # INSERT / UPDATE
    # ------------------------------------------------------------------

    def _add_assignments(
        self, assignments: list[Assignment], collector: ArgumentCollector
    ) -> None:
        for assignment in assignments:
            collector.add(assignment.value, field_name=assignment.field)


def extract_arguments(query: Query) -> tuple[list[Arg], list[Arg]]:
    """Extract ``(dynamic, literal)`` arguments.  See :meth:`ArgumentExtractor.extract`."""
    return ArgumentExtractor().extract(query)
