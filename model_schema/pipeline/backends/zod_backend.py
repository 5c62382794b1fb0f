"""
Zod backend rendering runtime validator expressions.
"""

from __future__ import annotations

import json
from typing import Any

from ...utils import ts_property_name
from ...validation_rules import (
    IntegerRule,
    MinLengthRule,
    ValidationRule,
    apply_zod_rules,
    object_id_rule,
)
from ..analyzer.ir_nodes import (
    DeclarationKind,
    FieldDef,
    PrimitiveKind,
    ShapeKind,
    TypeDeclaration,
)
from ..config import CompilerConfig
from .base import EmitterBackend
from .typescript_backend import TypeScriptBackend


class ZodBackend(EmitterBackend):
    """Renders declarations as Zod validator constants."""

    # Type mapping from primitive kinds to Zod builders
    TYPE_MAP = {
        PrimitiveKind.BOOLEAN: "z.boolean()",
        PrimitiveKind.STRING: "z.string()",
    }

    TEMPLATE_LANG = "zod"

    # Suffix of the exported validator constant of a declaration
    SCHEMA_SUFFIX = "$Schema"

    def __init__(self, config: CompilerConfig | None = None):
        super().__init__(config)
        # Generic references are typed with their TypeScript rendering
        self.types = TypeScriptBackend(self.config)

    def translate_field(self, field: FieldDef, deferred: frozenset[str] = frozenset()) -> str:
        """
        Translate a field into a Zod validator expression.

        Pipeline: base shape, refinements, `z.array(...)`, then
        `.or(z.undefined())` for optional fields.

        Args:
            field: The field definition
            deferred: Referenced names whose validator is not defined yet
                where this expression is evaluated

        Returns:
            Zod expression text
        """
        text = apply_zod_rules(self.translate_shape(field, deferred), self.refinements(field))
        if field.is_array:
            text = f"z.array({text})"
        if field.is_optional:
            text = f"{text}.or(z.undefined())"
        return text

    def translate_shape(self, field: FieldDef, deferred: frozenset[str] = frozenset()) -> str:
        """Translate the inner shape of a field, ignoring modifiers and refinements."""
        shape = field.shape
        if shape.kind == ShapeKind.PRIMITIVE:
            return self.TYPE_MAP.get(shape.primitive, "z.number()")
        if shape.kind == ShapeKind.STRING_LITERAL:
            return f"z.literal({json.dumps(shape.literal)})"
        if shape.kind == ShapeKind.REFERENCE:
            if shape.type_args:
                # No named validator: any value, typed as the instantiation
                return f"z.custom<{self.types.translate_shape(field)}>()"
            if shape.name in deferred:
                return f"z.lazy(() => {self.schema_name(shape.name)})"
            return self.schema_name(shape.name)
        if shape.kind == ShapeKind.MAP:
            key = self.translate_field(shape.key, deferred)
            value = self.translate_field(shape.value, deferred)
            return f"z.record({key}, {value})"
        if shape.kind == ShapeKind.TUPLE:
            members = ", ".join(
                f"{ts_property_name(element.name)}: {self.translate_field(element, deferred)}"
                for element in shape.elements
            )
            return f"z.strictObject({{ {members} }})"
        if shape.kind == ShapeKind.OPAQUE_ID:
            return f"z.object({{ $oid: {apply_zod_rules('z.string()', [object_id_rule()])} }})"
        return "z.unknown()"

    def refinements(self, field: FieldDef) -> list[ValidationRule]:
        """Refinements chained onto the base shape of a field."""
        rules: list[ValidationRule] = []
        shape = field.shape
        if shape.kind == ShapeKind.PRIMITIVE and shape.primitive.is_integer:
            rules.append(IntegerRule())
        min_length = field.effective_min_length()
        if min_length is not None:
            rules.append(MinLengthRule(min_length))
        return rules

    def emit(self, declaration: TypeDeclaration, deferred: frozenset[str] = frozenset()) -> str:
        """
        Render the exported validator constant.

        Args:
            declaration: The declaration IR
            deferred: Referenced names whose validator is defined after this
                one (or is this one); they are wrapped in `z.lazy`

        Returns:
            Zod declaration text
        """
        context: dict[str, Any] = {"name": declaration.name}

        if declaration.kind == DeclarationKind.PLAIN_ENUM:
            context["members"] = [json.dumps(name) for name in declaration.variant_names]
            return self.get_template("plain_enum").render(context)

        if declaration.kind == DeclarationKind.TAGGED_UNION:
            context["tag"] = json.dumps(declaration.tag_field_name)
            context["variants"] = [self._fields_context(variant.fields, deferred) for variant in declaration.variants]
            return self.get_template("tagged_union").render(context)

        context["fields"] = self._fields_context(declaration.fields, deferred)
        context["optional_fields"] = self.optional_field_names(declaration.fields)
        return self.get_template("record").render(context)

    def _fields_context(self, fields: list[FieldDef], deferred: frozenset[str]) -> list[dict[str, str]]:
        return [{"name": field.name, "validator": self.translate_field(field, deferred)} for field in fields]

    def schema_name(self, type_name: str) -> str:
        return f"{type_name}{self.SCHEMA_SUFFIX}"
