"""
TypeScript backend rendering static type declarations.
"""

from __future__ import annotations

import json
from typing import Any

from ...utils import ts_property_name
from ..analyzer.ir_nodes import (
    DeclarationKind,
    FieldDef,
    PrimitiveKind,
    ShapeKind,
    TypeDeclaration,
)
from .base import EmitterBackend


class TypeScriptBackend(EmitterBackend):
    """Renders declarations as TypeScript type aliases."""

    # Type mapping from primitive kinds to TypeScript types
    TYPE_MAP = {
        PrimitiveKind.BOOLEAN: "boolean",
        PrimitiveKind.STRING: "string",
    }

    TEMPLATE_LANG = "typescript"

    def translate_field(self, field: FieldDef) -> str:
        """
        Translate a field into a TypeScript type expression.

        The array modifier applies first, then the optional one:
        `Array<T> | undefined`.

        Args:
            field: The field definition

        Returns:
            TypeScript type text
        """
        text = self.translate_shape(field)
        if field.is_array:
            text = f"Array<{text}>"
        if field.is_optional:
            text = f"{text} | undefined"
        return text

    def translate_shape(self, field: FieldDef) -> str:
        """Translate the inner shape of a field, ignoring its modifiers."""
        shape = field.shape
        if shape.kind == ShapeKind.PRIMITIVE:
            # Every integer and float kind is a JavaScript number
            return self.TYPE_MAP.get(shape.primitive, "number")
        if shape.kind == ShapeKind.STRING_LITERAL:
            return json.dumps(shape.literal)
        if shape.kind == ShapeKind.REFERENCE:
            if shape.type_args:
                args = ", ".join(self.translate_field(arg) for arg in shape.type_args)
                return f"{shape.name}<{args}>"
            return shape.name
        if shape.kind == ShapeKind.MAP:
            return f"Partial<Record<{self.translate_field(shape.key)}, {self.translate_field(shape.value)}>>"
        if shape.kind == ShapeKind.TUPLE:
            members = "; ".join(
                f"{ts_property_name(element.name)}: {self.translate_field(element)}" for element in shape.elements
            )
            return f"{{ {members} }}"
        if shape.kind == ShapeKind.OPAQUE_ID:
            return "{ $oid: string }"
        return "unknown"

    def emit(self, declaration: TypeDeclaration, json_schema: dict | None = None) -> str:
        """
        Render the `export type` declaration.

        Args:
            declaration: The declaration IR
            json_schema: Schema appended to the doc comment when
                `json_schema_in_docs` is enabled

        Returns:
            TypeScript declaration text
        """
        docs = self.doc_lines(declaration.docs, declaration.name)
        if json_schema is not None and self.config.json_schema_in_docs:
            docs.append("JSON Schema:")
            docs.extend(json.dumps(json_schema, indent=2).splitlines())

        context: dict[str, Any] = {"name": declaration.name, "docs": self.doc_comment(docs)}

        if declaration.kind == DeclarationKind.PLAIN_ENUM:
            context["members"] = [json.dumps(name) for name in declaration.variant_names]
            return self.get_template("plain_enum").render(context)

        if declaration.kind == DeclarationKind.TAGGED_UNION:
            context["variants"] = [self._fields_context(variant.fields) for variant in declaration.variants]
            return self.get_template("tagged_union").render(context)

        context["fields"] = self._fields_context(declaration.fields)
        return self.get_template("record").render(context)

    def _fields_context(self, fields: list[FieldDef]) -> list[dict[str, Any]]:
        result = []
        for field in fields:
            docs = self.doc_lines(field.docs, field.name)
            min_length = field.effective_min_length()
            if min_length is not None:
                docs.append(f"Minimum length: {min_length}")
            result.append({"name": field.name, "type": self.translate_field(field), "docs": self.doc_comment(docs, "  ")})
        return result

    def doc_lines(self, docs: str | None, default: str) -> list[str]:
        """Split documentation into comment lines, defaulting to a name."""
        text = docs if docs else default
        # A closing marker inside the docs would end the comment early
        return [line.rstrip().replace("*/", "*\\/") for line in text.splitlines()]

    def doc_comment(self, lines: list[str], indent: str = "") -> str:
        """Render a JSDoc block, newline terminated."""
        body = "".join(f"{indent} * {line}\n" if line else f"{indent} *\n" for line in lines)
        return f"{indent}/**\n{body}{indent} */\n"
