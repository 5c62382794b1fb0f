"""model_schema

A Python package compiling data type declarations into TypeScript types,
Zod runtime validators and JSON Schema documents that stay in sync.
"""

__version__ = "1.0.0"
__author__ = "François Lagunas"

from .pipeline import (
    AtomicWriter,
    CompiledType,
    CompilerConfig,
    ModelSchemaCompiler,
    ModelSchemaError,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
    SchemaRegistry,
)

__all__ = [
    "AtomicWriter",
    "CompiledType",
    "CompilerConfig",
    "ModelSchemaCompiler",
    "ModelSchemaError",
    "OutputConfig",
    "OutputMode",
    "PipelineGenerator",
    "SchemaRegistry",
]
