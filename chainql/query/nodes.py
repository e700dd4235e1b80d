"""Pydantic models for the chainQL query AST.

Every supported query shape is one variant of the :data:`Query` union; its
sub-clauses (filters, aggregate filters, limits, assignments, joins,
ordering) are unions of their own.  Each variant carries a ``kind`` literal
so Pydantic can discriminate them, and every model is frozen: trees are built
strictly bottom-up and never mutated afterwards, so plain ownership is enough
(no back-references, no cycles).

Value positions inside the tree hold opaque
:class:`~chainql.parse.expression.Expression` tokens.

Usage::

    from chainql.parse.expression import Expression
    from chainql.query.nodes import Filter, Identifier, Index, Select
    from chainql.query.operators import RelationalOperator

    query = Select(
        table="users",
        filter=Filter(
            operand1=Identifier(table="users", name="id"),
            operator=RelationalOperator.EQUAL,
            operand2=Expression.parse("user_id"),
        ),
        limit=Index(expression=Expression.parse("0")),
    )
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from chainql.parse.expression import Expression, Position, synthesize_subtraction
from chainql.query.operators import (
    AssignmentOperator,
    LogicalOperator,
    RelationalOperator,
)

_NODE = ConfigDict(extra="forbid", frozen=True)


# ---------------------------------------------------------------------------
# Filter values (left-hand side of a WHERE comparison)
# ---------------------------------------------------------------------------


class Identifier(BaseModel):
    """A column reference: ``users.name``.

    Attributes:
        table: The table owning the column.
        name: Column name.
    """

    model_config = _NODE

    kind: Literal["identifier"] = "identifier"
    table: str
    name: str


class MethodCall(BaseModel):
    """A method-call predicate: ``users.name.contains(term)``.

    Attributes:
        method_name: Name of the called method (``contains``).
        object_name: The field the method is called on (``name``).
        arguments: Call arguments, in call order.
        template: SQL template the renderer fills with the arguments.
    """

    model_config = _NODE

    kind: Literal["method_call"] = "method_call"
    method_name: str
    object_name: str
    arguments: list[Expression] = Field(default_factory=list)
    template: str = ""


class PrimaryKey(BaseModel):
    """The primary key of ``table``, compared as a whole."""

    model_config = _NODE

    kind: Literal["primary_key"] = "primary_key"
    table: str


class UnsetFilterValue(BaseModel):
    """Placeholder used while a filter is being built.

    Must never remain in a completed tree; walking one is an internal fault.
    """

    model_config = _NODE

    kind: Literal["unset"] = "unset"


FilterValue = Annotated[
    Union[Identifier, MethodCall, PrimaryKey, UnsetFilterValue],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Filter tree (WHERE)
# ---------------------------------------------------------------------------


class Filter(BaseModel):
    """A single comparison: ``operand1 <operator> operand2``."""

    model_config = _NODE

    kind: Literal["filter"] = "filter"
    operand1: FilterValue
    operator: RelationalOperator
    operand2: Expression


class Filters(BaseModel):
    """Two filter sub-trees combined with a logical operator."""

    model_config = _NODE

    kind: Literal["filters"] = "filters"
    operand1: FilterExpression
    operator: LogicalOperator
    operand2: FilterExpression


class NegFilter(BaseModel):
    """``NOT (expression)``."""

    model_config = _NODE

    kind: Literal["neg"] = "neg"
    expression: FilterExpression


class ParenFilter(BaseModel):
    """``(expression)``."""

    model_config = _NODE

    kind: Literal["paren"] = "paren"
    expression: FilterExpression


class NoFilters(BaseModel):
    """The empty filter."""

    model_config = _NODE

    kind: Literal["none"] = "none"


class ValueFilter(BaseModel):
    """A filter value used on its own, e.g. a boolean column."""

    model_config = _NODE

    kind: Literal["value"] = "value"
    value: FilterValue
    position: Position | None = None


FilterExpression = Annotated[
    Union[Filter, Filters, NegFilter, ParenFilter, NoFilters, ValueFilter],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Aggregate filter tree (HAVING)
# ---------------------------------------------------------------------------


class AggregateFunction(BaseModel):
    """An aggregate such as ``avg(age) AS average``.

    Attributes:
        field: Aggregated field; ``None`` for ``count(*)``-style aggregates.
        function: SQL function name.
        result_name: Optional result alias.
    """

    model_config = _NODE

    field: str | None = None
    function: str
    result_name: str | None = None


class AggregateFilter(BaseModel):
    """A single comparison on an aggregate: ``avg(age) > 18``."""

    model_config = _NODE

    kind: Literal["filter"] = "filter"
    operand1: AggregateFunction
    operator: RelationalOperator
    operand2: Expression


class AggregateFilters(BaseModel):
    """Two aggregate filter sub-trees combined with a logical operator."""

    model_config = _NODE

    kind: Literal["filters"] = "filters"
    operand1: AggregateFilterExpression
    operator: LogicalOperator
    operand2: AggregateFilterExpression


class AggregateNegFilter(BaseModel):
    model_config = _NODE

    kind: Literal["neg"] = "neg"
    expression: AggregateFilterExpression


class AggregateParenFilter(BaseModel):
    model_config = _NODE

    kind: Literal["paren"] = "paren"
    expression: AggregateFilterExpression


class NoAggregateFilters(BaseModel):
    model_config = _NODE

    kind: Literal["none"] = "none"


class AggregateValueFilter(BaseModel):
    model_config = _NODE

    kind: Literal["value"] = "value"
    value: AggregateFunction
    position: Position | None = None


AggregateFilterExpression = Annotated[
    Union[
        AggregateFilter,
        AggregateFilters,
        AggregateNegFilter,
        AggregateParenFilter,
        NoAggregateFilters,
        AggregateValueFilter,
    ],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# LIMIT
# ---------------------------------------------------------------------------


class NoLimit(BaseModel):
    """No limit was specified."""

    model_config = _NODE

    kind: Literal["none"] = "none"


class Index(BaseModel):
    """``[index]``: exactly one row at ``index``."""

    model_config = _NODE

    kind: Literal["index"] = "index"
    expression: Expression


class StartRange(BaseModel):
    """``[start:]``."""

    model_config = _NODE

    kind: Literal["start_range"] = "start_range"
    start: Expression


class EndRange(BaseModel):
    """``[:end]``."""

    model_config = _NODE

    kind: Literal["end_range"] = "end_range"
    end: Expression


class LimitOffset(BaseModel):
    """``LIMIT length OFFSET offset``.

    Never produced by parsing; only by :meth:`Range.desugar`.
    """

    model_config = _NODE

    kind: Literal["limit_offset"] = "limit_offset"
    length: Expression
    offset: Expression


class Range(BaseModel):
    """``[start:end]``."""

    model_config = _NODE

    kind: Literal["range"] = "range"
    start: Expression
    end: Expression

    def desugar(self) -> LimitOffset:
        """Rewrite as ``LIMIT (end - start) OFFSET start``.

        The length is always a freshly synthesized subtraction, even when
        both bounds are constants.

        Raises:
            SynthesisError: If the subtraction cannot be built.
        """
        return LimitOffset(
            length=synthesize_subtraction(self.end, self.start),
            offset=self.start,
        )


Limit = Annotated[
    Union[NoLimit, Index, StartRange, EndRange, Range, LimitOffset],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Other clauses
# ---------------------------------------------------------------------------


class Assignment(BaseModel):
    """``field <operator> value`` in an INSERT or UPDATE."""

    model_config = _NODE

    field: str
    operator: AssignmentOperator = AssignmentOperator.EQUAL
    value: Expression
    position: Position | None = None


class Join(BaseModel):
    """A join of ``base_table.base_field`` with ``joined_table.joined_field``."""

    model_config = _NODE

    base_table: str
    base_field: str
    joined_table: str
    joined_field: str


class Ascending(BaseModel):
    """Comes from ``sort(field)``."""

    model_config = _NODE

    kind: Literal["asc"] = "asc"
    field: str

    @property
    def direction(self) -> str:
        return "ASC"


class Descending(BaseModel):
    """Comes from ``sort(-field)``."""

    model_config = _NODE

    kind: Literal["desc"] = "desc"
    field: str

    @property
    def direction(self) -> str:
        return "DESC"


Order = Annotated[Union[Ascending, Descending], Field(discriminator="kind")]


class TypedField(BaseModel):
    """A column declaration of a CREATE TABLE."""

    model_config = _NODE

    identifier: str
    type_name: str


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class Aggregate(BaseModel):
    """``SELECT <aggregates> ... GROUP BY <groups> HAVING <aggregate_filter>``."""

    model_config = _NODE

    kind: Literal["aggregate"] = "aggregate"
    table: str
    aggregates: list[AggregateFunction] = Field(default_factory=list)
    aggregate_filter: AggregateFilterExpression = Field(default_factory=NoAggregateFilters)
    filter: FilterExpression = Field(default_factory=NoFilters)
    groups: list[str] = Field(default_factory=list)
    joins: list[Join] = Field(default_factory=list)


class CreateTable(BaseModel):
    model_config = _NODE

    kind: Literal["create_table"] = "create_table"
    table: str
    fields: list[TypedField] = Field(default_factory=list)


class Delete(BaseModel):
    model_config = _NODE

    kind: Literal["delete"] = "delete"
    table: str
    filter: FilterExpression = Field(default_factory=NoFilters)


class Drop(BaseModel):
    model_config = _NODE

    kind: Literal["drop"] = "drop"
    table: str


class Insert(BaseModel):
    model_config = _NODE

    kind: Literal["insert"] = "insert"
    table: str
    assignments: list[Assignment] = Field(default_factory=list)


class Select(BaseModel):
    """``SELECT <fields> FROM <table> <joins> WHERE <filter> ORDER BY ... LIMIT ...``."""

    model_config = _NODE

    kind: Literal["select"] = "select"
    table: str
    fields: list[str] = Field(default_factory=list)
    filter: FilterExpression = Field(default_factory=NoFilters)
    joins: list[Join] = Field(default_factory=list)
    limit: Limit = Field(default_factory=NoLimit)
    order: list[Order] = Field(default_factory=list)


class Update(BaseModel):
    model_config = _NODE

    kind: Literal["update"] = "update"
    table: str
    assignments: list[Assignment] = Field(default_factory=list)
    filter: FilterExpression = Field(default_factory=NoFilters)


Query = Annotated[
    Union[Aggregate, CreateTable, Delete, Drop, Insert, Select, Update],
    Field(discriminator="kind"),
]


# Resolve forward references in recursive types.
Filters.model_rebuild()
NegFilter.model_rebuild()
ParenFilter.model_rebuild()
AggregateFilters.model_rebuild()
AggregateNegFilter.model_rebuild()
AggregateParenFilter.model_rebuild()
Aggregate.model_rebuild()
Delete.model_rebuild()
Select.model_rebuild()
Update.model_rebuild()
