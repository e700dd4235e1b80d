"""Call-chain parsing: fluent Python expression → flat, ordered call list.

A query is written as a chain of method calls rooted at a table name::

    Table.filter(Table.age > 18).sort(-Table.age)[2:10]

Python parses that inside-out (the last call is the outermost node).
:class:`CallChainParser` walks the receiver side first and appends each call
on the way back, so the resulting list reads left to right, in the order the
calls are applied.

Recognised shapes
-----------------
``Name``
    The root table identifier.  Terminates the walk.
``receiver.method(args...)``
    A chained call.
``receiver[index]``
    Sugar for ``receiver.limit(index)``.  The synthetic call is positioned at
    ``index`` rather than at the whole subscript.

Anything else is recorded as a :class:`~chainql.errors.QuerySyntaxError` and
the walk stops on that branch.  Errors are collected, not raised, so a
caller can report every problem in one pass.
"""

from __future__ import annotations

import ast
import logging

from pydantic import BaseModel, ConfigDict, Field

from chainql.errors import ChainSyntaxError, ParseError, QuerySyntaxError
from chainql.parse.expression import Expression, Position

logger = logging.getLogger(__name__)

#: Name of the synthetic call produced by ``receiver[index]``.
INDEX_CALL_NAME = "limit"


class Call(BaseModel):
    """A single method call in a chain.

    Attributes:
        name: Method name.
        arguments: Positional arguments, in call order.
        position: Span of the method name (or of the index for ``[...]``).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    arguments: list[Expression] = Field(default_factory=list)
    position: Position | None = None


class CallChain(BaseModel):
    """An ordered list of calls applied to a root identifier.

    Attributes:
        root: The identifier at the start of the chain, ``""`` if none was found.
        calls: Calls in left-to-right (application) order.
        position: Span of the whole chain expression.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    root: str = ""
    calls: list[Call] = Field(default_factory=list)
    position: Position | None = None

    @property
    def has_root(self) -> bool:
        return bool(self.root)

    @property
    def call_names(self) -> list[str]:
        """Returns the method names in chain order."""
        return [c.name for c in self.calls]


class CallChainParser:
    """Converts a chained-call expression into a :class:`CallChain`.

    One instance may be reused; state is reset on every :meth:`parse` call.
    """

    def __init__(self) -> None:
        self._root = ""
        self._calls: list[Call] = []
        self._errors: list[QuerySyntaxError] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, expression: ast.expr) -> tuple[CallChain, list[QuerySyntaxError]]:
        """Parse ``expression`` and return the chain plus every syntax error.

        Args:
            expression: The Python expression node holding the chain.

        Returns:
            ``(chain, errors)``.  ``errors`` is empty for well-formed input;
            ``chain.root`` is empty if no root identifier was found.
        """
        self._root = ""
        self._calls = []
        self._errors = []

        self._add_calls(expression)

        chain = CallChain(
            root=self._root,
            calls=self._calls,
            position=Position.of(expression),
        )
        logger.debug(
            "Parsed call chain rooted at %r: %d call(s), %d error(s)",
            chain.root,
            len(chain.calls),
            len(self._errors),
        )
        return chain, list(self._errors)

    # ------------------------------------------------------------------
    # Recursive walk
    # ------------------------------------------------------------------

    def _add_calls(self, node: ast.expr) -> None:
        if isinstance(node, ast.Call) and isinstance(node.func, ast.Attribute):
            self._add_method_call(node, node.func)
        elif isinstance(node, ast.Name):
            self._root = node.id
        elif isinstance(node, ast.Subscript):
            self._add_calls(node.value)
            self._calls.append(
                Call(
                    name=INDEX_CALL_NAME,
                    arguments=[Expression(node.slice)],
                    position=Position.of(node.slice),
                )
            )
        else:
            self._errors.append(QuerySyntaxError("Expected method call", Position.of(node)))

    def _add_method_call(self, node: ast.Call, method: ast.Attribute) -> None:
        self._add_calls(method.value)

        arguments: list[Expression] = []
        for arg in node.args:
            if isinstance(arg, ast.Starred):
                self._errors.append(
                    QuerySyntaxError("Unexpected starred argument", Position.of(arg))
                )
                continue
            arguments.append(Expression(arg))
        for keyword in node.keywords:
            name = f"'{keyword.arg}'" if keyword.arg else "'**'"
            self._errors.append(
                QuerySyntaxError(f"Unexpected keyword argument {name}", Position.of(keyword))
            )

        self._calls.append(
            Call(
                name=method.attr,
                arguments=arguments,
                position=Position.of_attribute_name(method),
            )
        )


def parse_call_chain(expression: ast.expr) -> tuple[CallChain, list[QuerySyntaxError]]:
    """Parse a chained-call expression node.  See :meth:`CallChainParser.parse`."""
    return CallChainParser().parse(expression)


def parse_source(source: str) -> CallChain:
    """Parse Python source text holding a query chain.

    Args:
        source: A single Python expression, e.g. ``"Table.all()[:10]"``.

    Returns:
        The parsed :class:`CallChain`.

    Raises:
        ParseError: If ``source`` is not valid Python expression syntax.
        ChainSyntaxError: If the chain has any syntax error, or no root
            table identifier.  Carries the full error list.
    """
    try:
        tree = ast.parse(source.strip(), mode="eval")
    except SyntaxError as exc:
        raise ParseError(f"Invalid query expression: {exc.msg}", raw=source) from exc

    chain, errors = parse_call_chain(tree.body)
    if not errors and not chain.has_root:
        errors.append(QuerySyntaxError("Expected table name", chain.position))
    if errors:
        raise ChainSyntaxError(errors)
    return chain
