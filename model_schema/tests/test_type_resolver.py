"""
Tests for type resolution into IR field shapes.
"""

from __future__ import annotations

import pytest

from model_schema.pipeline.analyzer.ir_nodes import PrimitiveKind, ShapeKind
from model_schema.pipeline.analyzer.type_resolver import TypeResolver, strip_type_suffix
from model_schema.pipeline.config import CompilerConfig
from model_schema.pipeline.declaration_ast import parse_type_expr
from model_schema.pipeline.errors import UnsupportedShapeError


def resolve(text: str, **config):
    resolver = TypeResolver(CompilerConfig.from_dict(config), "Test")
    return resolver.resolve(parse_type_expr(text), "field")


@pytest.mark.parametrize(
    "text,kind",
    [
        ("bool", PrimitiveKind.BOOLEAN),
        ("String", PrimitiveKind.STRING),
        ("str", PrimitiveKind.STRING),
        ("&'a str", PrimitiveKind.STRING),
        ("u8", PrimitiveKind.U8),
        ("u64", PrimitiveKind.U64),
        ("usize", PrimitiveKind.USIZE),
        ("i32", PrimitiveKind.I32),
        ("isize", PrimitiveKind.ISIZE),
        ("f32", PrimitiveKind.F32),
        ("f64", PrimitiveKind.F64),
        ("std::string::String", PrimitiveKind.STRING),
    ],
)
def test_primitives(text, kind):
    field = resolve(text)
    assert field.shape.kind == ShapeKind.PRIMITIVE
    assert field.shape.primitive == kind
    assert not field.is_array
    assert not field.is_optional


def test_integer_and_float_kinds():
    assert PrimitiveKind.U16.is_integer
    assert PrimitiveKind.ISIZE.is_integer
    assert not PrimitiveKind.F64.is_integer
    assert PrimitiveKind.F32.is_float
    assert not PrimitiveKind.STRING.is_float


def test_option_sets_optional():
    field = resolve("Option<String>")
    assert field.is_optional
    assert not field.is_array
    assert field.shape.is_string


@pytest.mark.parametrize("text", ["Vec<u32>", "VecDeque<u32>", "HashSet<u32>", "BTreeSet<u32>", "[u32]", "[u32; 3]"])
def test_sequences_set_array(text):
    field = resolve(text)
    assert field.is_array
    assert field.shape.primitive == PrimitiveKind.U32


def test_optional_array_and_array_of_optional_agree():
    outer = resolve("Option<Vec<String>>")
    inner = resolve("Vec<Option<String>>")
    for field in (outer, inner):
        assert field.is_array
        assert field.is_optional
        assert field.shape.is_string


def test_nested_option_collapses():
    field = resolve("Option<Option<u8>>")
    assert field.is_optional
    assert field.shape.primitive == PrimitiveKind.U8


def test_map():
    field = resolve("HashMap<String, Vec<u32>>")
    assert field.shape.kind == ShapeKind.MAP
    assert field.shape.key.shape.is_string
    assert field.shape.value.is_array
    assert field.shape.value.shape.primitive == PrimitiveKind.U32


def test_tuple_elements_are_named_by_position():
    field = resolve("(u32, String, Option<bool>)")
    assert field.shape.kind == ShapeKind.TUPLE
    assert [element.name for element in field.shape.elements] == ["element_0", "element_1", "element_2"]
    assert field.shape.elements[2].is_optional


def test_reference_strips_wire_suffix():
    field = resolve("crate::models::UserJson")
    assert field.shape.kind == ShapeKind.REFERENCE
    assert field.shape.name == "User"
    assert field.shape.type_args == []


def test_custom_suffix():
    assert resolve("UserDto", strip_type_suffix="Dto").shape.name == "User"
    assert resolve("UserJson", strip_type_suffix="").shape.name == "UserJson"


def test_strip_type_suffix_keeps_bare_suffix():
    assert strip_type_suffix("Json", "Json") == "Json"
    assert strip_type_suffix("EventJson", "Json") == "Event"


def test_generic_reference_keeps_arguments():
    field = resolve("Page<UserJson>")
    assert field.shape.kind == ShapeKind.REFERENCE
    assert field.shape.name == "Page"
    assert field.shape.is_generic_reference
    assert field.shape.type_args[0].shape.name == "User"


def test_object_id():
    field = resolve("mongodb::bson::oid::ObjectId")
    assert field.shape.kind == ShapeKind.OPAQUE_ID


def test_object_id_can_be_disabled():
    field = resolve("ObjectId", object_id=False)
    assert field.shape.kind == ShapeKind.REFERENCE
    assert field.shape.name == "ObjectId"


@pytest.mark.parametrize("text", ["serde_json::Value", "_"])
def test_unknown(text):
    assert resolve(text).shape.kind == ShapeKind.UNKNOWN


def test_transparent_wrappers():
    assert resolve("Box<String>").shape.is_string
    assert resolve("Arc<Vec<u8>>").is_array


@pytest.mark.parametrize(
    "text",
    [
        "Option<String, u8>",
        "Vec<>",
        "HashMap<String>",
        "Fn(u32) -> String",
        "Box<dyn Display>",
        "fn(u32)",
        "()",
        "Vec<Vec<String>>",
        "Option<Vec<[u8; 4]>>",
    ],
)
def test_unsupported_shapes(text):
    with pytest.raises(UnsupportedShapeError) as excinfo:
        resolve(text)
    assert excinfo.value.declaration == "Test"
    assert excinfo.value.cause


def test_error_names_the_field():
    resolver = TypeResolver(CompilerConfig(), "Order")
    with pytest.raises(UnsupportedShapeError) as excinfo:
        resolver.resolve(parse_type_expr("HashMap<String>"), "items")
    message = str(excinfo.value)
    assert "Order" in message
    assert "items" in message
    assert "HashMap<String>" in message


@pytest.mark.parametrize(
    "text,inner",
    [
        ("HashMap<String, Vec<Vec<u8>>>", "Vec<Vec<u8>>"),
        ("Page<Option<A, B>>", "Option<A, B>"),
        ("(u8, dyn Foo)", "dyn Foo"),
        ("Option<HashMap<u8, fn()>>", "fn()"),
    ],
)
def test_nested_error_names_the_enclosing_field(text, inner):
    resolver = TypeResolver(CompilerConfig(), "Order")
    with pytest.raises(UnsupportedShapeError) as excinfo:
        resolver.resolve(parse_type_expr(text), "payload")
    assert excinfo.value.field == "payload"
    assert excinfo.value.cause == text
    assert inner in excinfo.value.message


if __name__ == "__main__":
    pytest.main([__file__])
