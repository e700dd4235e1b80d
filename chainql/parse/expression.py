"""Opaque expression tokens and source positions.

A query chain is written in Python syntax, so every value it carries is a
Python ``ast.expr`` node.  The core never interprets those nodes; it only
needs to know whether one is a constant literal (safe to inline) or not
(bound as a runtime parameter).  :class:`Expression` wraps the node and
exposes exactly that, plus the raw node for the downstream renderer.

Usage::

    from chainql.parse.expression import Expression

    expr = Expression.parse("42")
    assert expr.is_literal
    assert Expression.parse("user_id").is_literal is False
"""

from __future__ import annotations

import ast
import copy
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic_core import core_schema

from chainql.errors import ParseError, SynthesisError


class Position(BaseModel):
    """A source span, as reported by Python's ``ast`` module.

    Attributes:
        line: First line (1-based).
        column: First column (0-based, UTF-8 byte offset).
        end_line: Last line (1-based).
        end_column: Column just past the span on ``end_line``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    line: int
    column: int
    end_line: int
    end_column: int

    @classmethod
    def of(cls, node: ast.AST) -> Position | None:
        """Return the span of ``node``, or ``None`` for synthesized nodes."""
        line = getattr(node, "lineno", None)
        if line is None:
            return None
        column = node.col_offset  # type: ignore[attr-defined]
        end_line = getattr(node, "end_lineno", None)
        end_column = getattr(node, "end_col_offset", None)
        return cls(
            line=line,
            column=column,
            end_line=line if end_line is None else end_line,
            end_column=column if end_column is None else end_column,
        )

    @classmethod
    def of_attribute_name(cls, node: ast.Attribute) -> Position | None:
        """Return the span of the attribute name only (``method`` in ``a.method``)."""
        end_line = getattr(node, "end_lineno", None)
        end_column = getattr(node, "end_col_offset", None)
        if end_line is None or end_column is None:
            return cls.of(node)
        return cls(
            line=end_line,
            column=end_column - len(node.attr.encode("utf-8")),
            end_line=end_line,
            end_column=end_column,
        )

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class Expression:
    """An opaque host-language value expression.

    Equality and hashing are structural (based on ``ast.dump``) so that two
    independent walks over the same input compare equal even when one of
    them synthesized fresh nodes.

    Args:
        node: The wrapped Python expression node.
    """

    __slots__ = ("node",)

    def __init__(self, node: ast.expr) -> None:
        if not isinstance(node, ast.AST):
            raise TypeError(f"Expression expects an ast node, got {type(node).__name__}")
        self.node = node

    @classmethod
    def parse(cls, source: str) -> Expression:
        """Build an expression from Python source text.

        Raises:
            ParseError: If ``source`` is not a single Python expression.
        """
        try:
            tree = ast.parse(source.strip(), mode="eval")
        except SyntaxError as exc:
            raise ParseError(f"Invalid expression: {exc.msg}", raw=source) from exc
        return cls(tree.body)

    @property
    def is_literal(self) -> bool:
        """True when the expression is a constant literal token."""
        return isinstance(self.node, ast.Constant)

    @property
    def source(self) -> str:
        return ast.unparse(self.node)

    @property
    def position(self) -> Position | None:
        return Position.of(self.node)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Expression):
            return NotImplemented
        return ast.dump(self.node) == ast.dump(other.node)

    def __hash__(self) -> int:
        return hash(ast.dump(self.node))

    def __repr__(self) -> str:
        return f"Expression({self.source!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        # Models hold the token as-is; dumps render it as source text.
        return core_schema.is_instance_schema(
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda expression: expression.source
            ),
        )


def synthesize_subtraction(end: Expression, start: Expression) -> Expression:
    """Build a fresh ``end - start`` expression.

    The result is a new ``ast.BinOp`` (never folded into a constant), so it
    is never literal.  Both operands are deep-copied so the input tokens are
    left untouched.

    Raises:
        SynthesisError: If the resulting node is not a compilable expression.
    """
    node = ast.BinOp(
        left=copy.deepcopy(end.node),
        op=ast.Sub(),
        right=copy.deepcopy(start.node),
    )
    ast.copy_location(node, end.node)
    ast.fix_missing_locations(node)
    try:
        compile(ast.Expression(body=node), "<chainql>", "eval")
    except (SyntaxError, TypeError, ValueError) as exc:
        raise SynthesisError(
            f"Cannot build subtraction from {end!r} and {start!r}: {exc}", clause="limit"
        ) from exc
    return Expression(node)
