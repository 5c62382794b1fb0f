"""
Schema registry mapping declaration names to compiled types.

The registry is the capability through which emitters reach other
declarations: JSON Schema references are inlined by asking the registry
for the referenced schema, and enum keyed maps ask it for enum members.
Lookups are lazy, so declarations can be registered in any order.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from .errors import UnknownReferenceError

if TYPE_CHECKING:
    from .compiler import CompiledType


class SchemaRegistry:
    """Name to CompiledType registry."""

    def __init__(self):
        self._types: dict[str, CompiledType] = {}

    def register(self, compiled: CompiledType) -> None:
        """
        Register a compiled type under its emitted name.

        Re-registering a name replaces the previous entry.

        Args:
            compiled: The compiled type
        """
        self._types[compiled.name] = compiled

    def get(self, name: str) -> CompiledType | None:
        return self._types.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[CompiledType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def names(self) -> list[str]:
        """Registered names, in registration order."""
        return list(self._types)

    def json_schema(self, name: str, resolving: frozenset[str] = frozenset()) -> dict[str, Any]:
        """
        Build the JSON Schema of a registered type.

        Args:
            name: Emitted type name
            resolving: Types whose schema is being built further up the chain

        Returns:
            A fresh schema dictionary

        Raises:
            UnknownReferenceError: If the name is not registered
        """
        compiled = self._types.get(name)
        if compiled is None:
            raise UnknownReferenceError("Referenced type is not registered", cause=name)
        return compiled.json_schema(resolving)

    def enum_members(self, name: str) -> list[str] | None:
        """Members of a registered plain enum, None for any other type."""
        compiled = self._types.get(name)
        if compiled is None:
            return None
        return compiled.enum_members()
