"""
Discriminated union compiler.

Turns an enum whose variants carry fields into an ordered list of closed
per-variant records, each starting with a synthesized tag field whose
constant value is the variant's final name.
"""

from __future__ import annotations

from collections.abc import Callable

from ..declaration_ast.nodes import FieldNode, VariantNode
from ..errors import TagCollisionError
from .ir_nodes import FieldDef, FieldShape, VariantDef
from .name_resolver import RenameConvention, RenamePolicy

# Compiles one declared field; returns None for skipped fields
FieldCompiler = Callable[[FieldNode, RenameConvention | None], FieldDef | None]


class DiscriminatedUnionCompiler:
    """Builds tagged union variants from enum variants."""

    def __init__(self, declaration: str, compile_field: FieldCompiler):
        """
        Initialize the compiler.

        Args:
            declaration: Name of the enum being compiled (for error messages)
            compile_field: Callback resolving a declared field into a FieldDef
        """
        self.declaration = declaration
        self.compile_field = compile_field

    def compile(
        self,
        variants: list[VariantNode],
        tag_field_name: str,
        convention: RenameConvention | None,
    ) -> list[VariantDef]:
        """
        Compile enum variants into tagged union variants.

        Args:
            variants: Declared variants, in declaration order
            tag_field_name: Name of the synthesized discriminator field
            convention: Container-wide renaming convention

        Returns:
            Variant definitions in declaration order; skipped variants are dropped

        Raises:
            TagCollisionError: If two tags collide or a field shadows the tag field
        """
        compiled: list[VariantDef] = []
        seen_tags: dict[str, str] = {}

        for variant in variants:
            policy = RenamePolicy(convention, variant.attributes.rename, variant.attributes.skip)
            if policy.skip:
                continue

            tag_value = policy.resolve(variant.name)
            if tag_value in seen_tags:
                raise TagCollisionError(
                    f"Variants '{seen_tags[tag_value]}' and '{variant.name}' share the tag value",
                    declaration=self.declaration,
                    cause=tag_value,
                )
            seen_tags[tag_value] = variant.name

            tag_field = FieldDef(
                name=tag_field_name,
                docs=variant.docs or tag_value,
                shape=FieldShape.string_literal(tag_value),
            )
            fields = [tag_field]
            for field_node in variant.fields:
                field = self.compile_field(field_node, convention)
                if field is None:
                    continue
                if field.name == tag_field_name:
                    raise TagCollisionError(
                        f"Field of variant '{variant.name}' is named like the tag field",
                        declaration=self.declaration,
                        field=field.name,
                    )
                fields.append(field)

            compiled.append(VariantDef(name=variant.name, tag_value=tag_value, docs=variant.docs, fields=fields))

        return compiled
