"""
Analyzer module for declaration resolution and IR generation.
"""

from .analyzer import DeclarationAnalyzer
from .ir_nodes import (
    DeclarationKind,
    FieldDef,
    FieldShape,
    PrimitiveKind,
    ShapeKind,
    TypeDeclaration,
    ValidationOverride,
    VariantDef,
)
from .name_resolver import RenameConvention, RenamePolicy, resolve_name
from .reference_resolver import ReferenceChecker, UnresolvedReference
from .type_resolver import TypeResolver
from .union_compiler import DiscriminatedUnionCompiler

__all__ = [
    "DeclarationAnalyzer",
    "DeclarationKind",
    "DiscriminatedUnionCompiler",
    "FieldDef",
    "FieldShape",
    "PrimitiveKind",
    "ReferenceChecker",
    "RenameConvention",
    "RenamePolicy",
    "ShapeKind",
    "TypeDeclaration",
    "TypeResolver",
    "UnresolvedReference",
    "ValidationOverride",
    "VariantDef",
    "resolve_name",
]
