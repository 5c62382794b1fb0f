"""
Error types raised by the model_schema pipeline.

Every fatal failure derives from ModelSchemaError and carries the
declaration and field being compiled when it happened, so that callers
can report the offending construct directly.
"""

from __future__ import annotations


class ModelSchemaError(Exception):
    """Base class for all compilation errors.

    Attributes:
        message: Human readable description of the failure
        declaration: Name of the declaration being compiled, if known
        field: Name of the field being compiled, if known
        cause: Raw input that triggered the failure (type text, attribute value...)
    """

    def __init__(
        self,
        message: str,
        declaration: str | None = None,
        field: str | None = None,
        cause: str | None = None,
    ):
        self.message = message
        self.declaration = declaration
        self.field = field
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        location = []
        if self.declaration:
            location.append(f"declaration '{self.declaration}'")
        if self.field:
            location.append(f"field '{self.field}'")
        text = self.message
        if location:
            text = f"{text} (in {', '.join(location)})"
        if self.cause:
            text = f"{text}: {self.cause}"
        return text


class UnsupportedShapeError(ModelSchemaError):
    """Raised when a field type has a shape the compiler cannot represent.

    This happens for:
    - Known wrappers used with the wrong number of type arguments
    - Parenthesized generic arguments (function traits)
    - Trait objects, impl types, pointers and function pointers
    - Nested collections without a named wrapper type
    - Type expressions that do not parse
    """

    pass


class UnsupportedTargetError(ModelSchemaError):
    """Raised when a declaration is neither a struct nor an enum."""

    pass


class TagCollisionError(ModelSchemaError):
    """Raised when discriminated union tags are ambiguous.

    Two variants renaming to the same tag value, or a variant field
    named like the tag field itself, both make the union undecidable.
    """

    pass


class UnknownReferenceError(ModelSchemaError):
    """Raised when a referenced type is not present in the schema registry."""

    pass


class ReferenceCycleError(ModelSchemaError):
    """Raised when inlining JSON Schema references loops back on itself."""

    pass


class TypeExprSyntaxError(ModelSchemaError):
    """Raised by the type expression parser on malformed input."""

    pass


class OutputError(ModelSchemaError):
    """Raised when generated output fails validation before being written."""

    pass
