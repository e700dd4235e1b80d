"""Operator enums used inside filter trees and assignments."""

from __future__ import annotations

from enum import Enum


class RelationalOperator(str, Enum):
    """Comparison between a filter value and an expression."""

    EQUAL = "=="
    NOT_EQUAL = "!="
    LESSER_THAN = "<"
    LESSER_THAN_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_EQUAL = ">="

    @property
    def sql(self) -> str:
        """The SQL spelling of the operator."""
        return "=" if self is RelationalOperator.EQUAL else self.value

    def __str__(self) -> str:
        return self.value


class LogicalOperator(str, Enum):
    """Connective combining two filter sub-trees."""

    AND = "AND"
    NOT = "NOT"
    OR = "OR"

    def __str__(self) -> str:
        return self.value


class AssignmentOperator(str, Enum):
    """Operator of an INSERT / UPDATE assignment."""

    EQUAL = "="
    ADD = "+="
    SUB = "-="
    MUL = "*="
    DIVIDE = "/="
    MODULO = "%="

    def __str__(self) -> str:
        return self.value
