"""Unit tests for the call-chain parser."""

from __future__ import annotations

import ast

import pytest

from chainql.errors import ChainSyntaxError, ParseError, QuerySyntaxError
from chainql.parse.chain import CallChainParser, parse_call_chain, parse_source
from chainql.parse.expression import Expression, Position
from tests.fixtures import expr


def _parse(source: str):
    return parse_call_chain(ast.parse(source, mode="eval").body)


def _content(chain):
    return [(c.name, c.arguments) for c in chain.calls]


def test_calls_are_in_source_order():
    chain, errors = _parse("Table.filter(x).limit(3)")
    assert errors == []
    assert chain.root == "Table"
    assert _content(chain) == [("filter", [expr("x")]), ("limit", [expr("3")])]


def test_bare_table_has_no_calls():
    chain, errors = _parse("Table")
    assert errors == []
    assert chain.root == "Table"
    assert chain.calls == []


def test_call_position_is_method_name():
    chain, _ = _parse("Table.filter(x).limit(3)")
    assert chain.calls[0].position == Position(line=1, column=6, end_line=1, end_column=12)
    assert chain.calls[1].position.column == 16


def test_non_ascii_method_name_position_is_in_bytes():
    source = "Tablé.fïlter(x)"
    chain, _ = _parse(source)
    position = chain.calls[0].position
    assert position == Position(line=1, column=7, end_line=1, end_column=14)
    assert source.encode("utf-8")[position.column : position.end_column].decode("utf-8") == "fïlter"


def test_chain_position_is_whole_expression():
    chain, _ = _parse("Table.all()")
    assert chain.position == Position(line=1, column=0, end_line=1, end_column=11)


def test_index_is_limit_sugar():
    indexed, _ = _parse("Table.all()[5]")
    called, _ = _parse("Table.all().limit(5)")
    assert _content(indexed) == _content(called)
    assert indexed.call_names == ["all", "limit"]


def test_index_call_is_positioned_at_index():
    chain, _ = _parse("Table.all()[5]")
    assert chain.calls[-1].position == Position(line=1, column=12, end_line=1, end_column=13)


def test_slice_is_passed_through_as_one_argument():
    chain, errors = _parse("Table.sort(age)[1:10]")
    assert errors == []
    limit = chain.calls[-1]
    assert limit.name == "limit"
    assert len(limit.arguments) == 1
    assert isinstance(limit.arguments[0].node, ast.Slice)
    assert limit.arguments[0].is_literal is False


def test_multiline_chain():
    chain, errors = _parse("(Table\n    .filter(age > 18)\n    .sort(name))")
    assert errors == []
    assert chain.call_names == ["filter", "sort"]
    assert chain.calls[1].position.line == 3


def test_non_method_call_root_is_an_error():
    chain, errors = _parse("f(x).filter(y)")
    assert chain.root == ""
    assert chain.call_names == ["filter"]
    assert errors == [
        QuerySyntaxError("Expected method call", Position(line=1, column=0, end_line=1, end_column=4))
    ]


def test_errors_are_collected_not_raised():
    chain, errors = _parse("Table.filter(age=1).sort(*fields)")
    assert chain.root == "Table"
    assert chain.call_names == ["filter", "sort"]
    assert [e.message for e in errors] == [
        "Unexpected keyword argument 'age'",
        "Unexpected starred argument",
    ]


def test_literal_receiver_is_an_error():
    _, errors = _parse("(1 + 2).filter(x)")
    assert len(errors) == 1
    assert errors[0].message == "Expected method call"


def test_parser_instance_is_reusable():
    parser = CallChainParser()
    first, _ = parser.parse(ast.parse("A.all()", mode="eval").body)
    second, _ = parser.parse(ast.parse("B.get(1)", mode="eval").body)
    assert first.root == "A" and first.call_names == ["all"]
    assert second.root == "B" and second.call_names == ["get"]


def test_error_response_shape():
    _, errors = _parse("f().all()")
    response = errors[0].to_error_response()
    assert response["error"] == "SYNTAX_ERROR"
    assert response["position"]["line"] == 1


class TestParseSource:
    def test_valid_source(self):
        chain = parse_source("  Table.filter(id == 1).get()  ")
        assert chain.root == "Table"
        assert chain.call_names == ["filter", "get"]

    def test_invalid_python_raises_parse_error(self):
        with pytest.raises(ParseError) as info:
            parse_source("Table.filter(")
        assert info.value.raw == "Table.filter("

    def test_syntax_errors_are_raised_together(self):
        with pytest.raises(ChainSyntaxError) as info:
            parse_source("f().filter(a=1, b=2)")
        assert len(info.value.errors) == 3
        assert len(info.value.to_error_response()) == 3


class TestExpression:
    @pytest.mark.parametrize("source", ["42", "3.5", "'text'", "True", "None", "b'x'"])
    def test_constants_are_literal(self, source):
        assert Expression.parse(source).is_literal

    @pytest.mark.parametrize("source", ["x", "-1", "a + 1", "f(2)", "[1, 2]", "user.id"])
    def test_other_expressions_are_not_literal(self, source):
        assert not Expression.parse(source).is_literal

    def test_structural_equality(self):
        assert Expression.parse("a + 1") == Expression.parse("a  +  1")
        assert hash(Expression.parse("x")) == hash(Expression.parse("x"))
        assert Expression.parse("a") != Expression.parse("b")

    def test_source_round_trip(self):
        assert Expression.parse("end - start").source == "end - start"

    def test_rejects_non_node(self):
        with pytest.raises(TypeError):
            Expression("x")  # type: ignore[arg-type]
