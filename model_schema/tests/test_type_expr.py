"""
Tests for the type expression parser.
"""

from __future__ import annotations

import pytest

from model_schema.pipeline.declaration_ast import (
    BorrowType,
    InferType,
    OpaqueType,
    PathType,
    SequenceType,
    TupleType,
    parse_type_expr,
)
from model_schema.pipeline.errors import TypeExprSyntaxError


def test_simple_path():
    expr = parse_type_expr("String")
    assert isinstance(expr, PathType)
    assert expr.segments == ["String"]
    assert expr.args == []
    assert expr.text == "String"


def test_nested_generics_close_with_double_bracket():
    expr = parse_type_expr("Option<Vec<String>>")
    assert isinstance(expr, PathType)
    assert expr.name == "Option"
    inner = expr.args[0]
    assert isinstance(inner, PathType)
    assert inner.name == "Vec"
    assert inner.args[0].name == "String"
    assert inner.text == "Vec<String>"


def test_map_arguments():
    expr = parse_type_expr("HashMap<String, ObjectId>")
    assert [arg.name for arg in expr.args] == ["String", "ObjectId"]


def test_qualified_path():
    expr = parse_type_expr("crate::models::UserJson")
    assert expr.segments == ["crate", "models", "UserJson"]
    assert expr.name == "UserJson"
    assert expr.qualified_name == "crate::models::UserJson"


def test_leading_path_separator():
    expr = parse_type_expr("::std::string::String")
    assert expr.name == "String"


def test_tuple():
    expr = parse_type_expr("(u32, String)")
    assert isinstance(expr, TupleType)
    assert [element.name for element in expr.elements] == ["u32", "String"]


def test_parenthesized_type_is_not_a_tuple():
    expr = parse_type_expr("(u32)")
    assert isinstance(expr, PathType)
    assert expr.name == "u32"


def test_single_element_tuple_with_trailing_comma():
    expr = parse_type_expr("(u32,)")
    assert isinstance(expr, TupleType)
    assert len(expr.elements) == 1


def test_unit_type():
    expr = parse_type_expr("()")
    assert isinstance(expr, TupleType)
    assert expr.elements == []


@pytest.mark.parametrize(
    "text,length",
    [
        ("[u8]", None),
        ("[u8; 4]", "4"),
        ("[String; N]", "N"),
    ],
)
def test_sequences(text, length):
    expr = parse_type_expr(text)
    assert isinstance(expr, SequenceType)
    assert expr.length == length


def test_borrowed_type_with_lifetime():
    expr = parse_type_expr("&'a mut str")
    assert isinstance(expr, BorrowType)
    assert expr.inner.name == "str"


def test_lifetimes_are_dropped_from_generic_arguments():
    expr = parse_type_expr("Cow<'static, str>")
    assert len(expr.args) == 1
    assert expr.args[0].name == "str"


def test_infer_placeholder():
    assert isinstance(parse_type_expr("_"), InferType)


def test_parenthesized_generic_arguments_are_flagged():
    expr = parse_type_expr("Fn(u32) -> String")
    assert isinstance(expr, PathType)
    assert expr.parenthesized


@pytest.mark.parametrize(
    "text",
    [
        "dyn Display",
        "Box<dyn Display + Send + 'static>",
        "impl Iterator<Item = u8>",
        "fn(u32) -> bool",
        "*const u8",
        "!",
    ],
)
def test_opaque_types(text):
    expr = parse_type_expr(text)
    if isinstance(expr, PathType):
        expr = expr.args[0]
    assert isinstance(expr, OpaqueType)
    assert expr.reason


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "Vec<String",
        "Vec<>>",
        "HashMap<String,, u8>",
        "Option<String> extra",
        "[u8; 4",
        "Name@",
    ],
)
def test_malformed_expressions(text):
    with pytest.raises(TypeExprSyntaxError):
        parse_type_expr(text)


if __name__ == "__main__":
    pytest.main([__file__])
