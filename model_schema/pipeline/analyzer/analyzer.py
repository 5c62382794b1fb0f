"""
Declaration analyzer that converts the declaration AST into IR.

Phase 2 of the pipeline: apply naming rules, resolve every field type,
apply per-field overrides and classify enums as plain enums or tagged
unions. A declaration either analyzes completely or raises.
"""

from __future__ import annotations

import logging

from ..config import CompilerConfig
from ..declaration_ast.nodes import DeclarationNode, FieldNode
from ..errors import UnsupportedShapeError
from .ir_nodes import (
    DeclarationKind,
    FieldDef,
    FieldShape,
    ShapeKind,
    TypeDeclaration,
    ValidationOverride,
)
from .name_resolver import RenameConvention, RenamePolicy, resolve_name
from .type_resolver import TypeResolver, strip_type_suffix
from .union_compiler import DiscriminatedUnionCompiler

logger = logging.getLogger(__name__)


class DeclarationAnalyzer:
    """Analyzes DeclarationNode trees into TypeDeclaration IR."""

    def __init__(self, config: CompilerConfig):
        """
        Initialize the analyzer.

        Args:
            config: Compiler configuration
        """
        self.config = config
        self.warnings: list[str] = []

    def analyze(self, node: DeclarationNode) -> TypeDeclaration:
        """
        Analyze one declaration.

        Non-fatal problems are collected in `self.warnings`, starting with the
        attribute warnings recorded by the parser.

        Args:
            node: The parsed declaration

        Returns:
            The declaration IR

        Raises:
            UnsupportedShapeError: If a field type cannot be represented
            TagCollisionError: If a tagged union has ambiguous tags
        """
        self.warnings = list(node.warnings)
        self._resolver = TypeResolver(self.config, node.name)

        name = strip_type_suffix(node.name, self.config.strip_type_suffix)
        convention = self._container_convention(node)
        declaration = TypeDeclaration(name=name, docs=node.docs, original_name=node.name)

        if node.kind == "struct":
            declaration.kind = DeclarationKind.RECORD
            declaration.fields = self._compile_fields(node.fields, convention)
        elif all(not variant.fields for variant in node.variants if not variant.attributes.skip):
            declaration.kind = DeclarationKind.PLAIN_ENUM
            declaration.variant_names = [
                resolve_name(variant.name, variant.attributes.rename, convention)
                for variant in node.variants
                if not variant.attributes.skip
            ]
        else:
            declaration.kind = DeclarationKind.TAGGED_UNION
            declaration.tag_field_name = node.attributes.tag or self.config.default_tag_field
            union_compiler = DiscriminatedUnionCompiler(node.name, self.compile_field)
            declaration.variants = union_compiler.compile(node.variants, declaration.tag_field_name, convention)

        self._warn_generic_references(declaration)
        return declaration

    def compile_field(self, node: FieldNode, convention: RenameConvention | None) -> FieldDef | None:
        """
        Resolve one declared field, applying renaming and overrides.

        Args:
            node: The declared field
            convention: Container-wide renaming convention

        Returns:
            The resolved field, or None when the field is skipped
        """
        attributes = node.attributes
        # Positional names are synthesized, conventions do not apply to them
        policy = RenamePolicy(convention if node.named else None, attributes.rename, attributes.skip)
        if policy.skip:
            return None
        name = policy.resolve(node.name)

        if node.type_expr is None:
            raise UnsupportedShapeError(
                f"Type does not parse ({node.syntax_error})",
                declaration=self._resolver.declaration,
                field=name,
                cause=node.type_text,
            )

        field = self._resolver.resolve(node.type_expr, name, node.docs)
        field.validation = ValidationOverride(
            explicit_type=attributes.explicit_type_text,
            literal=attributes.literal,
            min_length=attributes.min_length,
        )

        if attributes.explicit_type is not None:
            try:
                explicit = self._resolver.resolve(attributes.explicit_type, name)
            except UnsupportedShapeError as e:
                self._warn(f"{self._resolver.declaration}.{name}: ignoring 'as' override: {e}")
            else:
                field.shape = explicit.shape
                field.is_array = field.is_array or explicit.is_array
                field.is_optional = field.is_optional or explicit.is_optional

        if attributes.literal is not None:
            field.shape = FieldShape.string_literal(attributes.literal)

        if attributes.min_length is not None and field.effective_min_length() is None:
            logger.debug("Ignoring minLength on non-string field %s.%s", self._resolver.declaration, name)

        return field

    def _compile_fields(self, nodes: list[FieldNode], convention: RenameConvention | None) -> list[FieldDef]:
        fields = []
        for node in nodes:
            field = self.compile_field(node, convention)
            if field is not None:
                fields.append(field)
        return fields

    def _container_convention(self, node: DeclarationNode) -> RenameConvention | None:
        keyword = node.attributes.rename_all
        if keyword is None:
            return None
        convention = RenameConvention.parse(keyword)
        if convention is None:
            self._warn(f"{node.name}: unknown rename_all convention {keyword!r}")
        return convention

    def _warn_generic_references(self, declaration: TypeDeclaration) -> None:
        for field in declaration.iter_fields():
            for shape in _walk_shapes(field.shape):
                if shape.is_generic_reference:
                    self._warn(
                        f"{declaration.name}.{field.name}: generic reference '{shape.name}' has no named "
                        "validator, rendered permissively in the validator and JSON Schema"
                    )

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)


def _walk_shapes(shape: FieldShape):
    """Yield a shape and every shape nested inside it."""
    yield shape
    nested: list[FieldDef] = []
    if shape.kind == ShapeKind.MAP:
        nested = [shape.key, shape.value]
    elif shape.kind == ShapeKind.TUPLE:
        nested = shape.elements
    elif shape.kind == ShapeKind.REFERENCE:
        nested = shape.type_args
    for field in nested:
        yield from _walk_shapes(field.shape)
