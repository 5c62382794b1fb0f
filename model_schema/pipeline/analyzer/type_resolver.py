"""
Type resolver mapping parsed type expressions onto IR field shapes.

Resolution is recursive and applies, in priority order: optional
unwrapping, sequence unwrapping, map construction, tuple construction
and finally named type lookup. Anything outside that closed set is an
UnsupportedShapeError, never a silent fallback.
"""

from __future__ import annotations

import logging

from ..config import CompilerConfig
from ..declaration_ast.nodes import (
    BorrowType,
    InferType,
    OpaqueType,
    PathType,
    SequenceType,
    TupleType,
    TypeExpr,
)
from ..errors import UnsupportedShapeError
from .ir_nodes import FieldDef, FieldShape, PrimitiveKind

logger = logging.getLogger(__name__)

# Wrappers producing an optional value
OPTIONAL_WRAPPERS = {"Option"}

# Wrappers producing an array of their single argument
SEQUENCE_WRAPPERS = {"Vec", "VecDeque", "HashSet", "BTreeSet", "LinkedList"}

# Wrappers producing a key/value map
MAP_WRAPPERS = {"HashMap", "BTreeMap", "IndexMap"}

# Transparent single-argument wrappers resolved as their argument
TRANSPARENT_WRAPPERS = {"Box", "Rc", "Arc", "Cow"}

PRIMITIVE_NAMES: dict[str, PrimitiveKind] = {
    "bool": PrimitiveKind.BOOLEAN,
    "String": PrimitiveKind.STRING,
    "str": PrimitiveKind.STRING,
    "u8": PrimitiveKind.U8,
    "u16": PrimitiveKind.U16,
    "u32": PrimitiveKind.U32,
    "u64": PrimitiveKind.U64,
    "usize": PrimitiveKind.USIZE,
    "i8": PrimitiveKind.I8,
    "i16": PrimitiveKind.I16,
    "i32": PrimitiveKind.I32,
    "i64": PrimitiveKind.I64,
    "isize": PrimitiveKind.ISIZE,
    "f32": PrimitiveKind.F32,
    "f64": PrimitiveKind.F64,
}

# Qualified names resolved to an untyped value
UNKNOWN_PATHS = {"serde_json::Value"}

OBJECT_ID_NAME = "ObjectId"


def strip_type_suffix(name: str, suffix: str) -> str:
    """Strip a wire-type suffix: `UserJson` -> `User`. A bare suffix is kept."""
    if suffix and name.endswith(suffix) and len(name) > len(suffix):
        return name[: -len(suffix)]
    return name


class TypeResolver:
    """Resolves TypeExpr trees into FieldDef values."""

    def __init__(self, config: CompilerConfig, declaration: str | None = None):
        """
        Initialize the resolver.

        Args:
            config: Compiler configuration
            declaration: Name of the declaration being resolved (for error messages)
        """
        self.config = config
        self.declaration = declaration
        # Field and declared type text being resolved, for error reporting
        self._field = ""
        self._type_text = ""

    def resolve(self, expr: TypeExpr, name: str = "", docs: str | None = None) -> FieldDef:
        """
        Resolve a type expression into a field definition.

        Args:
            expr: The parsed type expression
            name: Final name of the field
            docs: Field documentation

        Returns:
            FieldDef with shape and array/optional modifiers set

        Raises:
            UnsupportedShapeError: If the expression has no IR representation
        """
        self._field = name
        self._type_text = expr.text
        field = self._resolve(expr, name)
        field.docs = docs
        if self.config.verbose:
            logger.debug(
                "Resolved %s.%s: %s -> %s%s%s",
                self.declaration,
                name,
                expr.text,
                field.shape.kind.value,
                " array" if field.is_array else "",
                " optional" if field.is_optional else "",
            )
        return field

    def _resolve(self, expr: TypeExpr, name: str) -> FieldDef:
        if isinstance(expr, BorrowType):
            return self._resolve(expr.inner, name)

        if isinstance(expr, SequenceType):
            return self._as_array(self._resolve(expr.element, name), expr, name)

        if isinstance(expr, TupleType):
            if not expr.elements:
                raise self._unsupported("Unit type carries no data", expr, name)
            elements = [self._resolve(element, f"element_{index}") for index, element in enumerate(expr.elements)]
            return FieldDef(name=name, shape=FieldShape.tuple_of(elements))

        if isinstance(expr, InferType):
            return FieldDef(name=name, shape=FieldShape.unknown())

        if isinstance(expr, OpaqueType):
            raise self._unsupported(f"Unsupported type ({expr.reason})", expr, name)

        if isinstance(expr, PathType):
            return self._resolve_path(expr, name)

        raise self._unsupported("Unsupported type expression", expr, name)

    def _resolve_path(self, path: PathType, name: str) -> FieldDef:
        type_name = path.name
        if path.parenthesized:
            raise self._unsupported("Parenthesized generic arguments are not supported", path, name)

        if type_name in OPTIONAL_WRAPPERS:
            inner = self._resolve(self._single_arg(path, name), name)
            # Option<Option<T>> collapses to one optional level
            inner.is_optional = True
            return inner

        if type_name in SEQUENCE_WRAPPERS:
            return self._as_array(self._resolve(self._single_arg(path, name), name), path, name)

        if type_name in MAP_WRAPPERS:
            if len(path.args) != 2:
                raise self._unsupported(f"{type_name} expects 2 type arguments, got {len(path.args)}", path, name)
            key = self._resolve(path.args[0], "")
            value = self._resolve(path.args[1], "")
            return FieldDef(name=name, shape=FieldShape.map_of(key, value))

        if type_name in TRANSPARENT_WRAPPERS:
            return self._resolve(self._single_arg(path, name), name)

        if not path.args:
            return FieldDef(name=name, shape=self._resolve_named(path))

        type_args = [self._resolve(arg, "") for arg in path.args]
        return FieldDef(name=name, shape=FieldShape.reference(self._reference_name(type_name), type_args))

    def _resolve_named(self, path: PathType) -> FieldShape:
        type_name = path.name
        if path.qualified_name in UNKNOWN_PATHS:
            return FieldShape.unknown()
        if type_name in PRIMITIVE_NAMES:
            return FieldShape.primitive_of(PRIMITIVE_NAMES[type_name])
        if type_name == OBJECT_ID_NAME and self.config.object_id:
            return FieldShape.opaque_id()
        return FieldShape.reference(self._reference_name(type_name))

    def _reference_name(self, type_name: str) -> str:
        return strip_type_suffix(type_name, self.config.strip_type_suffix)

    def _as_array(self, inner: FieldDef, expr: TypeExpr, name: str) -> FieldDef:
        if inner.is_array:
            raise self._unsupported("Nested collections need a named wrapper type", expr, name)
        inner.is_array = True
        return inner

    def _single_arg(self, path: PathType, name: str) -> TypeExpr:
        if len(path.args) != 1:
            raise self._unsupported(f"{path.name} expects 1 type argument, got {len(path.args)}", path, name)
        return path.args[0]

    def _unsupported(self, message: str, expr: TypeExpr, name: str) -> UnsupportedShapeError:
        """Error naming the enclosing field and the whole declared type."""
        type_text = self._type_text or expr.text
        if expr.text != type_text:
            message = f"{message} ('{expr.text}')"
        return UnsupportedShapeError(
            message,
            declaration=self.declaration,
            field=self._field or name or None,
            cause=type_text,
        )
