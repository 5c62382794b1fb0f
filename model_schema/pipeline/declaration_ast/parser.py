"""
Declaration document parser that builds an AST.

Phase 1 of the pipeline: read declaration dictionaries, parse type
expressions and attribute values, without resolving names or types.
Malformed attributes never abort parsing: the attribute is dropped and a
warning is recorded on the declaration node.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import TypeExprSyntaxError, UnsupportedTargetError
from .nodes import (
    ContainerAttributes,
    DeclarationNode,
    FieldAttributes,
    FieldNode,
    VariantNode,
)
from .type_expr import parse_type_expr

logger = logging.getLogger(__name__)


class DeclarationParser:
    """Parses declaration dictionaries into DeclarationNode trees."""

    # Accepted declaration kinds
    DECLARATION_KINDS = {"struct", "enum"}

    def parse_document(self, document: dict[str, Any]) -> list[DeclarationNode]:
        """
        Parse a whole declaration document.

        Args:
            document: Dictionary with a "declarations" list

        Returns:
            Parsed declarations, in document order

        Raises:
            UnsupportedTargetError: If the document or a declaration is malformed
        """
        declarations = document.get("declarations") if isinstance(document, dict) else None
        if not isinstance(declarations, list):
            raise UnsupportedTargetError("Declaration document must contain a 'declarations' list")
        return [self.parse(declaration) for declaration in declarations]

    def parse(self, declaration: dict[str, Any]) -> DeclarationNode:
        """
        Parse a single struct or enum declaration.

        Args:
            declaration: The declaration dictionary

        Returns:
            DeclarationNode with parsed fields or variants

        Raises:
            UnsupportedTargetError: If the kind is unknown or the name is missing
        """
        if not isinstance(declaration, dict):
            raise UnsupportedTargetError("Declaration must be an object", cause=repr(declaration))

        name = declaration.get("name")
        if not isinstance(name, str) or not name:
            raise UnsupportedTargetError("Declaration is missing a name", cause=repr(declaration.get("name")))

        kind = declaration.get("kind")
        if kind not in self.DECLARATION_KINDS:
            raise UnsupportedTargetError(
                "Only struct and enum declarations are supported",
                declaration=name,
                cause=repr(kind),
            )

        node = DeclarationNode(kind=kind, name=name, docs=self._parse_docs(declaration.get("docs")))
        node.attributes = self._parse_container_attributes(declaration.get("attributes"), node)

        if kind == "struct":
            node.fields = self._parse_fields(declaration.get("fields"), node)
        else:
            for raw_variant in declaration.get("variants") or []:
                node.variants.append(self._parse_variant(raw_variant, node))

        return node

    def _parse_variant(self, raw: Any, node: DeclarationNode) -> VariantNode:
        if isinstance(raw, str):
            # Shorthand for a unit variant
            return VariantNode(name=raw)
        if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
            raise UnsupportedTargetError("Enum variant must have a name", declaration=node.name, cause=repr(raw))
        variant = VariantNode(name=raw["name"], docs=self._parse_docs(raw.get("docs")))
        variant.attributes = self._parse_field_attributes(raw.get("attributes"), node, variant.name)
        variant.fields = self._parse_fields(raw.get("fields"), node)
        return variant

    def _parse_fields(self, raw_fields: Any, node: DeclarationNode) -> list[FieldNode]:
        if raw_fields is None:
            return []
        if not isinstance(raw_fields, list):
            raise UnsupportedTargetError("Fields must be a list", declaration=node.name, cause=repr(raw_fields))

        fields = []
        for index, raw in enumerate(raw_fields):
            if not isinstance(raw, dict) or not isinstance(raw.get("type"), str):
                raise UnsupportedTargetError("Field must declare a type", declaration=node.name, cause=repr(raw))

            field_name = raw.get("name")
            named = isinstance(field_name, str) and bool(field_name)
            if not named:
                field_name = f"element_{index}"

            field = FieldNode(
                name=field_name,
                type_text=raw["type"],
                docs=self._parse_docs(raw.get("docs")),
                named=named,
            )
            try:
                field.type_expr = parse_type_expr(field.type_text)
            except TypeExprSyntaxError as e:
                # Reported as an unsupported shape during type resolution
                field.syntax_error = e.message
            field.attributes = self._parse_field_attributes(raw.get("attributes"), node, field_name)
            fields.append(field)
        return fields

    def _parse_container_attributes(self, raw: Any, node: DeclarationNode) -> ContainerAttributes:
        attributes = ContainerAttributes()
        for key, value in self._attribute_items(raw, node, node.name):
            if key == "rename_all":
                if isinstance(value, str):
                    attributes.rename_all = value
                else:
                    self._warn(node, node.name, f"'rename_all' must be a string, got {value!r}")
            elif key == "tag":
                if isinstance(value, str) and value:
                    attributes.tag = value
                else:
                    self._warn(node, node.name, f"'tag' must be a non-empty string, got {value!r}")
            else:
                logger.debug("Ignoring attribute %r on %s", key, node.name)
        return attributes

    def _parse_field_attributes(self, raw: Any, node: DeclarationNode, owner: str) -> FieldAttributes:
        attributes = FieldAttributes()
        for key, value in self._attribute_items(raw, node, owner):
            if key == "rename":
                if isinstance(value, str) and value:
                    attributes.rename = value
                else:
                    self._warn(node, owner, f"'rename' must be a non-empty string, got {value!r}")
            elif key == "skip":
                if isinstance(value, bool):
                    attributes.skip = value
                else:
                    self._warn(node, owner, f"'skip' must be a boolean, got {value!r}")
            elif key == "as":
                if not isinstance(value, str):
                    self._warn(node, owner, f"'as' must be a type expression string, got {value!r}")
                    continue
                try:
                    attributes.explicit_type = parse_type_expr(value)
                    attributes.explicit_type_text = value
                except TypeExprSyntaxError as e:
                    self._warn(node, owner, f"'as' type {value!r} does not parse: {e.message}")
            elif key == "literal":
                if isinstance(value, str):
                    attributes.literal = value
                else:
                    self._warn(node, owner, f"'literal' must be a string, got {value!r}")
            elif key == "minLength":
                # bool is an int subclass
                if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                    attributes.min_length = value
                else:
                    self._warn(node, owner, f"'minLength' must be a non-negative integer, got {value!r}")
            else:
                logger.debug("Ignoring attribute %r on %s.%s", key, node.name, owner)
        return attributes

    def _attribute_items(self, raw: Any, node: DeclarationNode, owner: str) -> list[tuple[str, Any]]:
        if raw is None:
            return []
        if not isinstance(raw, dict):
            self._warn(node, owner, f"attributes must be an object, got {raw!r}")
            return []
        return list(raw.items())

    def _parse_docs(self, raw: Any) -> str | None:
        if isinstance(raw, list):
            raw = "\n".join(str(line) for line in raw)
        if isinstance(raw, str) and raw.strip():
            return raw.strip()
        return None

    def _warn(self, node: DeclarationNode, owner: str, message: str) -> None:
        text = f"{node.name}: {message}" if owner == node.name else f"{node.name}.{owner}: {message}"
        logger.warning("Ignoring malformed attribute: %s", text)
        node.warnings.append(text)
