"""
Emitter backends.
"""

from .base import EmitterBackend
from .json_schema_backend import JsonSchemaBackend
from .typescript_backend import TypeScriptBackend
from .zod_backend import ZodBackend

__all__ = [
    "EmitterBackend",
    "JsonSchemaBackend",
    "TypeScriptBackend",
    "ZodBackend",
]
