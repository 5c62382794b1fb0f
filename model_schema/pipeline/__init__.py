"""
Pipeline - declaration documents to TypeScript types, Zod validators and JSON Schema.

This module provides a multi-phase architecture:

1. Phase 1 (Parser): Parse declaration documents and type expressions into an AST
2. Phase 2 (Analyzer): Apply naming rules, resolve types and build the IR
3. Phase 3 (Backends): Render the IR as TypeScript, Zod and JSON Schema
4. Phase 4 (Output): Assemble modules and write them atomically
"""

from __future__ import annotations

from .compiler import CompiledType, ModelSchemaCompiler
from .config import CompilerConfig, OutputConfig, OutputMode
from .errors import (
    ModelSchemaError,
    OutputError,
    ReferenceCycleError,
    TagCollisionError,
    TypeExprSyntaxError,
    UnknownReferenceError,
    UnsupportedShapeError,
    UnsupportedTargetError,
)
from .generator import PipelineGenerator
from .output import AtomicWriter
from .registry import SchemaRegistry

__all__ = [
    "AtomicWriter",
    "CompiledType",
    "CompilerConfig",
    "ModelSchemaCompiler",
    "ModelSchemaError",
    "OutputConfig",
    "OutputError",
    "OutputMode",
    "PipelineGenerator",
    "ReferenceCycleError",
    "SchemaRegistry",
    "TagCollisionError",
    "TypeExprSyntaxError",
    "UnknownReferenceError",
    "UnsupportedShapeError",
    "UnsupportedTargetError",
]
