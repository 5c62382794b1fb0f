"""
Utility functions for case conversion and identifier handling.
"""

import re

# Identifiers that TypeScript accepts as bare property names
_TS_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def snake_to_camel_case(text: str) -> str:
    """Convert snake_case to camelCase.

    The first character is lower-cased and every character that follows an
    underscore is upper-cased; underscores are dropped. Characters that are
    already upper-case elsewhere are kept as they are.

    Examples:
        "user_id" -> "userId"
        "UserCreated" -> "userCreated"
        "http_url_v2" -> "httpUrlV2"

    Args:
        text: The text to convert

    Returns:
        camelCase string
    """
    result = []
    capitalize_next = False
    for index, char in enumerate(text):
        if char == "_":
            capitalize_next = True
        elif capitalize_next:
            result.append(char.upper())
            capitalize_next = False
        elif index == 0:
            result.append(char.lower())
        else:
            result.append(char)
    return "".join(result)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "user" -> "User"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    camel = snake_to_camel_case(text)
    return camel[:1].upper() + camel[1:]


def snake_to_kebab_case(text: str) -> str:
    """Convert snake_case to kebab-case."""
    return text.replace("_", "-")


def is_ts_identifier(name: str) -> bool:
    """Whether a name can be used as a bare TypeScript property name."""
    return bool(_TS_IDENTIFIER_PATTERN.match(name))


def ts_property_name(name: str) -> str:
    """Quote a property name when it is not a valid identifier.

    Examples:
        "userId" -> "userId"
        "user-id" -> '"user-id"'
    """
    if is_ts_identifier(name):
        return name
    return '"' + name.replace("\\", "\\\\").replace('"', '\\"') + '"'


def ts_property_access(target: str, name: str) -> str:
    """Render `target.name`, falling back to bracket access for non-identifiers."""
    if is_ts_identifier(name):
        return f"{target}.{name}"
    return f"{target}[{ts_property_name(name)}]"
