"""Custom exception hierarchy for chainQL.

All public errors inherit from ChainQLError so callers can catch the base
class for any chainQL-specific failure.

Two disjoint families live here:

* ``QuerySyntaxError`` records a malformed call-chain shape.  The parser
  *collects* them so the caller can report the whole set at once.
* ``InternalError`` (and subclasses) signal that an upstream invariant was
  violated.  They are raised immediately and never collected.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chainql.parse.expression import Position


class ChainQLError(Exception):
    """Base exception for all chainQL errors."""


class ParseError(ChainQLError):
    """Raised when source text is not a valid Python expression.

    Args:
        message: Human-readable description.
        raw: The raw string that failed to parse.
    """

    def __init__(self, message: str, raw: str | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class QuerySyntaxError(ChainQLError):
    """A malformed call-chain shape found by the parser.

    Args:
        message: Human-readable description.
        position: Source position of the offending sub-expression.
    """

    def __init__(self, message: str, position: Position | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response for diagnostics."""
        return {
            "error": "SYNTAX_ERROR",
            "message": self.message,
            "position": self.position.model_dump() if self.position else None,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuerySyntaxError):
            return NotImplemented
        return self.message == other.message and self.position == other.position

    def __hash__(self) -> int:
        return hash((self.message, self.position))

    def __repr__(self) -> str:
        return f"QuerySyntaxError({self.message!r}, {self.position!r})"


class ChainSyntaxError(ChainQLError):
    """Raised when a call chain has one or more syntax errors.

    Args:
        errors: Every syntax error collected during the parse, in the order
            they were found.
    """

    def __init__(self, errors: list[QuerySyntaxError]) -> None:
        summary = "; ".join(str(e) for e in errors)
        super().__init__(f"{len(errors)} syntax error(s): {summary}")
        self.errors = list(errors)

    def to_error_response(self) -> list[dict[str, Any]]:
        return [e.to_error_response() for e in self.errors]


class InternalError(ChainQLError):
    """Raised when an upstream invariant was violated.

    The schema is assumed validated and the AST semantically accepted by the
    time the core runs, so these are never recoverable.

    Args:
        message: Human-readable description.
        clause: The query clause being processed when the fault occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class SchemaLookupError(InternalError):
    """Raised when a table/field pair is missing from the schema registry."""

    def __init__(self, table: str, field: str | None = None) -> None:
        if field is None:
            message = f"Table '{table}' is not in the schema registry."
        else:
            message = f"Field '{field}' on table '{table}' is not in the schema registry."
        super().__init__(message, clause="schema")
        self.table = table
        self.field = field


class UnsetFilterValueError(InternalError):
    """Raised when an unset filter value placeholder reaches a completed tree."""

    def __init__(self, clause: str = "filter") -> None:
        super().__init__("Unset filter value found in a completed filter tree.", clause=clause)


class SynthesisError(InternalError):
    """Raised when a synthesized expression cannot be constructed."""
