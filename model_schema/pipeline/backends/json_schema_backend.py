"""
JSON Schema backend rendering schema documents as dictionaries.

Unlike the text backends this one resolves references: a named
reference is replaced by the referenced declaration's own schema,
obtained through the schema registry at emission time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...validation_rules import MinLengthRule, apply_json_rules, object_id_rule
from ..analyzer.ir_nodes import (
    DeclarationKind,
    FieldDef,
    PrimitiveKind,
    ShapeKind,
    TypeDeclaration,
)
from ..config import CompilerConfig
from ..errors import ReferenceCycleError, UnknownReferenceError
from .base import EmitterBackend

if TYPE_CHECKING:
    from ..registry import SchemaRegistry


class JsonSchemaBackend(EmitterBackend):
    """Renders declarations as JSON Schema documents."""

    # Type mapping from primitive kinds to JSON Schema types
    TYPE_MAP = {
        PrimitiveKind.BOOLEAN: "boolean",
        PrimitiveKind.STRING: "string",
    }

    def __init__(self, config: CompilerConfig | None = None, registry: SchemaRegistry | None = None):
        """
        Initialize the backend.

        Args:
            config: Compiler configuration
            registry: Registry resolving named references
        """
        super().__init__(config)
        self.registry = registry

    def emit(self, declaration: TypeDeclaration, resolving: frozenset[str] = frozenset()) -> dict[str, Any]:
        """
        Build the JSON Schema of a declaration.

        Args:
            declaration: The declaration IR
            resolving: Declarations whose schema is being built further up
                the reference chain

        Returns:
            A fresh schema dictionary

        Raises:
            UnknownReferenceError: If a referenced name is not registered
            ReferenceCycleError: If inlining references loops back
        """
        resolving = resolving | {declaration.name}

        if declaration.kind == DeclarationKind.PLAIN_ENUM:
            return {"type": "string", "enum": list(declaration.variant_names)}

        if declaration.kind == DeclarationKind.TAGGED_UNION:
            return {
                "type": "object",
                "oneOf": [self.object_schema(variant.fields, resolving) for variant in declaration.variants],
            }

        return self.object_schema(declaration.fields, resolving)

    def object_schema(self, fields: list[FieldDef], resolving: frozenset[str] = frozenset()) -> dict[str, Any]:
        """Closed object schema; non-optional fields are required, in order."""
        return {
            "type": "object",
            "additionalProperties": False,
            "properties": {field.name: self.field_schema(field, resolving) for field in fields},
            "required": [field.name for field in fields if not field.is_optional],
        }

    def translate_field(self, field: FieldDef) -> dict[str, Any]:
        return self.field_schema(field)

    def field_schema(self, field: FieldDef, resolving: frozenset[str] = frozenset()) -> dict[str, Any]:
        """
        Build the schema of one field.

        Optionality does not show in the field schema itself, only in the
        enclosing object's `required` list.

        Args:
            field: The field definition
            resolving: Declarations being built further up the chain

        Returns:
            Schema dictionary
        """
        schema = self.shape_schema(field, resolving)
        min_length = field.effective_min_length()
        if min_length is not None:
            schema = apply_json_rules(schema, [MinLengthRule(min_length)])
        if field.is_array:
            schema = {"type": "array", "items": schema}
        return schema

    def shape_schema(self, field: FieldDef, resolving: frozenset[str] = frozenset()) -> dict[str, Any]:
        """Schema of the inner shape of a field, ignoring its modifiers."""
        shape = field.shape
        if shape.kind == ShapeKind.PRIMITIVE:
            if shape.primitive.is_integer:
                return {"type": "integer"}
            if shape.primitive.is_float:
                return {"type": "number"}
            return {"type": self.TYPE_MAP[shape.primitive]}
        if shape.kind == ShapeKind.STRING_LITERAL:
            return {"type": "string", "const": shape.literal}
        if shape.kind == ShapeKind.REFERENCE:
            if shape.type_args:
                # Generic instantiations are accepted as any value
                return {}
            return self.reference_schema(shape.name, resolving)
        if shape.kind == ShapeKind.MAP:
            return self.map_schema(field, resolving)
        if shape.kind == ShapeKind.TUPLE:
            return self.object_schema(shape.elements, resolving)
        if shape.kind == ShapeKind.OPAQUE_ID:
            return {
                "type": "object",
                "properties": {"$oid": apply_json_rules({"type": "string"}, [object_id_rule()])},
                "required": ["$oid"],
                "additionalProperties": False,
            }
        return {}

    def map_schema(self, field: FieldDef, resolving: frozenset[str]) -> dict[str, Any]:
        """
        Schema of a map field.

        Maps keyed by a plain enum become closed objects with one optional
        property per enum member; other maps constrain their values only.
        """
        key, value = field.shape.key, field.shape.value
        value_schema: dict[str, Any] | bool = True
        if value.shape.kind != ShapeKind.UNKNOWN or value.is_array:
            value_schema = self.field_schema(value, resolving)

        members = self._enum_key_members(key)
        if members is not None:
            return {
                "type": "object",
                "properties": {member: value_schema for member in members},
                "additionalProperties": False,
            }
        return {"type": "object", "additionalProperties": value_schema}

    def _enum_key_members(self, key: FieldDef) -> list[str] | None:
        shape = key.shape
        if shape.kind != ShapeKind.REFERENCE or shape.type_args or key.is_array:
            return None
        registry = self._require_registry(shape.name)
        if shape.name not in registry:
            raise UnknownReferenceError("Map key references an unknown type", cause=shape.name)
        return registry.enum_members(shape.name)

    def reference_schema(self, name: str, resolving: frozenset[str]) -> dict[str, Any]:
        """Inline the schema of a referenced declaration."""
        if name in resolving:
            raise ReferenceCycleError(
                "Recursive reference cannot be inlined",
                cause=" -> ".join(sorted(resolving)) + f" -> {name}",
            )
        return self._require_registry(name).json_schema(name, resolving)

    def _require_registry(self, name: str) -> SchemaRegistry:
        if self.registry is None:
            raise UnknownReferenceError("No schema registry to resolve reference", cause=name)
        return self.registry
