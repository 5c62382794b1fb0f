"""
Declaration AST: parsed declaration documents and type expressions.
"""

from .nodes import (
    BorrowType,
    ContainerAttributes,
    DeclarationNode,
    FieldAttributes,
    FieldNode,
    InferType,
    OpaqueType,
    PathType,
    SequenceType,
    TupleType,
    TypeExpr,
    VariantNode,
)
from .parser import DeclarationParser
from .type_expr import TypeExprParser, parse_type_expr

__all__ = [
    "BorrowType",
    "ContainerAttributes",
    "DeclarationNode",
    "DeclarationParser",
    "FieldAttributes",
    "FieldNode",
    "InferType",
    "OpaqueType",
    "PathType",
    "SequenceType",
    "TupleType",
    "TypeExpr",
    "TypeExprParser",
    "VariantNode",
    "parse_type_expr",
]
