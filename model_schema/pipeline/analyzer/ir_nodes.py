"""
IR (Intermediate Representation) node definitions.

These nodes represent analyzed declarations, ready for emission: every
name is final (renamed) and every field type is resolved into a closed
set of shapes. The three backends read the same IR independently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PrimitiveKind(Enum):
    """Built-in scalar types."""

    BOOLEAN = "bool"
    STRING = "String"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    USIZE = "usize"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    ISIZE = "isize"
    F32 = "f32"
    F64 = "f64"

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_KINDS

    @property
    def is_float(self) -> bool:
        return self in (PrimitiveKind.F32, PrimitiveKind.F64)


_INTEGER_KINDS = frozenset(
    {
        PrimitiveKind.U8,
        PrimitiveKind.U16,
        PrimitiveKind.U32,
        PrimitiveKind.U64,
        PrimitiveKind.USIZE,
        PrimitiveKind.I8,
        PrimitiveKind.I16,
        PrimitiveKind.I32,
        PrimitiveKind.I64,
        PrimitiveKind.ISIZE,
    }
)


class ShapeKind(Enum):
    """Kind of field shape in the IR."""

    UNKNOWN = "unknown"  # Untyped value
    PRIMITIVE = "primitive"  # bool, string, integers, floats
    STRING_LITERAL = "string_literal"  # A fixed string constant
    REFERENCE = "reference"  # Another declared type, by name
    MAP = "map"  # Key/value mapping
    TUPLE = "tuple"  # Positional elements named element_<i>
    OPAQUE_ID = "opaque_id"  # External 24-hex identifier wrapped as {$oid}


@dataclass
class FieldShape:
    """The inner shape of a field, before array/optional modifiers."""

    kind: ShapeKind = ShapeKind.UNKNOWN

    # PRIMITIVE
    primitive: PrimitiveKind | None = None

    # STRING_LITERAL
    literal: str | None = None

    # REFERENCE: type name and ordered generic arguments
    name: str = ""
    type_args: list[FieldDef] = field(default_factory=list)

    # MAP
    key: FieldDef | None = None
    value: FieldDef | None = None

    # TUPLE
    elements: list[FieldDef] = field(default_factory=list)

    @staticmethod
    def unknown() -> FieldShape:
        return FieldShape(kind=ShapeKind.UNKNOWN)

    @staticmethod
    def primitive_of(kind: PrimitiveKind) -> FieldShape:
        return FieldShape(kind=ShapeKind.PRIMITIVE, primitive=kind)

    @staticmethod
    def string_literal(value: str) -> FieldShape:
        return FieldShape(kind=ShapeKind.STRING_LITERAL, literal=value)

    @staticmethod
    def reference(name: str, type_args: list[FieldDef] | None = None) -> FieldShape:
        return FieldShape(kind=ShapeKind.REFERENCE, name=name, type_args=list(type_args or []))

    @staticmethod
    def map_of(key: FieldDef, value: FieldDef) -> FieldShape:
        return FieldShape(kind=ShapeKind.MAP, key=key, value=value)

    @staticmethod
    def tuple_of(elements: list[FieldDef]) -> FieldShape:
        return FieldShape(kind=ShapeKind.TUPLE, elements=list(elements))

    @staticmethod
    def opaque_id() -> FieldShape:
        return FieldShape(kind=ShapeKind.OPAQUE_ID)

    @property
    def is_string(self) -> bool:
        return self.kind == ShapeKind.PRIMITIVE and self.primitive == PrimitiveKind.STRING

    @property
    def is_generic_reference(self) -> bool:
        return self.kind == ShapeKind.REFERENCE and bool(self.type_args)


@dataclass
class ValidationOverride:
    """Per-field overrides taken from field attributes."""

    explicit_type: str | None = None
    literal: str | None = None
    min_length: int | None = None


@dataclass
class FieldDef:
    """A resolved field."""

    name: str = ""  # Final, post-renaming name
    docs: str | None = None
    shape: FieldShape = field(default_factory=FieldShape)
    is_array: bool = False
    is_optional: bool = False
    validation: ValidationOverride = field(default_factory=ValidationOverride)

    def effective_min_length(self) -> int | None:
        """Min length, only when it applies: a plain string shape without literal override."""
        if self.validation.literal is not None or not self.shape.is_string:
            return None
        return self.validation.min_length


class DeclarationKind(Enum):
    """Kind of top-level declaration."""

    RECORD = "record"
    PLAIN_ENUM = "plain_enum"
    TAGGED_UNION = "tagged_union"


@dataclass
class VariantDef:
    """A tagged union variant: a closed record discriminated by its tag value."""

    name: str = ""  # Declared variant name
    tag_value: str = ""  # Final renamed name, used as the tag constant
    docs: str | None = None
    fields: list[FieldDef] = field(default_factory=list)


@dataclass
class TypeDeclaration:
    """A compiled declaration."""

    name: str = ""  # Emitted name (wire suffix stripped)
    kind: DeclarationKind = DeclarationKind.RECORD
    docs: str | None = None
    original_name: str = ""  # Declared name

    # RECORD
    fields: list[FieldDef] = field(default_factory=list)

    # PLAIN_ENUM
    variant_names: list[str] = field(default_factory=list)

    # TAGGED_UNION
    tag_field_name: str = ""
    variants: list[VariantDef] = field(default_factory=list)

    def iter_fields(self):
        """Yield every field of the declaration, across variants."""
        yield from self.fields
        for variant in self.variants:
            yield from variant.fields
