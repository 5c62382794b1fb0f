"""
Name resolver applying serialization renaming rules.

Computes the final wire name of fields and variants from their declared
name, an optional explicit override and the container-wide convention.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ...utils import snake_to_camel_case, snake_to_kebab_case, snake_to_pascal_case


class RenameConvention(str, Enum):
    """Container-wide renaming conventions."""

    CAMEL_CASE = "camelCase"
    PASCAL_CASE = "PascalCase"
    SNAKE_CASE = "snake_case"
    SCREAMING_SNAKE_CASE = "SCREAMING_SNAKE_CASE"
    KEBAB_CASE = "kebab-case"
    LOWERCASE = "lowercase"
    UPPERCASE = "UPPERCASE"

    @staticmethod
    def parse(keyword: str | None) -> RenameConvention | None:
        """Return the convention for a keyword, or None when it is unknown."""
        for convention in RenameConvention:
            if convention.value == keyword:
                return convention
        return None

    def apply(self, name: str) -> str:
        return _CONVERTERS[self](name)


_CONVERTERS: dict[RenameConvention, Callable[[str], str]] = {
    RenameConvention.CAMEL_CASE: snake_to_camel_case,
    RenameConvention.PASCAL_CASE: snake_to_pascal_case,
    RenameConvention.SNAKE_CASE: lambda name: name,
    RenameConvention.SCREAMING_SNAKE_CASE: str.upper,
    RenameConvention.KEBAB_CASE: snake_to_kebab_case,
    RenameConvention.LOWERCASE: str.lower,
    RenameConvention.UPPERCASE: str.upper,
}


@dataclass
class RenamePolicy:
    """Renaming inputs for one field or variant."""

    container_convention: RenameConvention | None = None
    per_field_override: str | None = None
    skip: bool = False

    def resolve(self, raw: str) -> str:
        return resolve_name(raw, self.per_field_override, self.container_convention)


def resolve_name(
    raw: str,
    field_override: str | None = None,
    container_convention: RenameConvention | None = None,
) -> str:
    """
    Compute the final serialized name of a field or variant.

    An explicit override always wins and is returned unchanged. Otherwise
    the container convention, if any, is applied to the raw name.

    Args:
        raw: Declared name
        field_override: Explicit per-field name
        container_convention: Container-wide convention

    Returns:
        The final name
    """
    if field_override is not None:
        return field_override
    if container_convention is None:
        return raw
    return container_convention.apply(raw)
