"""
AST node definitions for declaration documents.

These nodes represent a parsed declaration document before any type
resolution or renaming: raw names, raw attribute values and type
expressions parsed into trees.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TypeExpr:
    """Base class for parsed type expressions."""

    # Source text of the expression (for error messages)
    text: str = ""


@dataclass
class PathType(TypeExpr):
    """A named type, optionally qualified and generic: `a::b::Name<A, B>`."""

    segments: list[str] = field(default_factory=list)
    args: list[TypeExpr] = field(default_factory=list)

    # True for `Name(A, B) -> C` style arguments (function traits)
    parenthesized: bool = False

    @property
    def name(self) -> str:
        """Last path segment."""
        return self.segments[-1] if self.segments else ""

    @property
    def qualified_name(self) -> str:
        return "::".join(self.segments)


@dataclass
class BorrowType(TypeExpr):
    """A borrowed type: `&T`, `&'a mut T`."""

    inner: TypeExpr | None = None


@dataclass
class SequenceType(TypeExpr):
    """A slice `[T]` or fixed size array `[T; N]`."""

    element: TypeExpr | None = None
    length: str | None = None


@dataclass
class TupleType(TypeExpr):
    """A tuple `(A, B, ...)`; the unit type has no elements."""

    elements: list[TypeExpr] = field(default_factory=list)


@dataclass
class InferType(TypeExpr):
    """The placeholder type `_`."""

    pass


@dataclass
class OpaqueType(TypeExpr):
    """A type the compiler never represents (`dyn T`, `impl T`, `fn()`, `*const T`, `!`)."""

    reason: str = ""


@dataclass
class FieldAttributes:
    """Parsed field or variant level attributes."""

    rename: str | None = None
    skip: bool = False

    # Explicit type override (`as`), parsed
    explicit_type: TypeExpr | None = None
    explicit_type_text: str | None = None

    literal: str | None = None
    min_length: int | None = None


@dataclass
class ContainerAttributes:
    """Parsed declaration level attributes."""

    rename_all: str | None = None
    tag: str | None = None


@dataclass
class FieldNode:
    """A declared field."""

    name: str = ""
    type_text: str = ""
    docs: str | None = None
    attributes: FieldAttributes = field(default_factory=FieldAttributes)

    # Parsed type, None when the type text failed to parse
    type_expr: TypeExpr | None = None
    syntax_error: str | None = None

    # False for positional fields, named `element_<i>`
    named: bool = True


@dataclass
class VariantNode:
    """An enum variant."""

    name: str = ""
    docs: str | None = None
    fields: list[FieldNode] = field(default_factory=list)
    attributes: FieldAttributes = field(default_factory=FieldAttributes)


@dataclass
class DeclarationNode:
    """A struct or enum declaration."""

    kind: str = ""  # "struct" or "enum"
    name: str = ""
    docs: str | None = None
    attributes: ContainerAttributes = field(default_factory=ContainerAttributes)
    fields: list[FieldNode] = field(default_factory=list)
    variants: list[VariantNode] = field(default_factory=list)

    # Non-fatal attribute parse failures
    warnings: list[str] = field(default_factory=list)
