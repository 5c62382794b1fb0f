"""
Atomic file writer for generated artifacts.

Ensures that file writes are atomic so that an interrupted run never
leaves a half-written module or schema behind.
"""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..errors import OutputError


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(
        self,
        validate_typescript: Callable[[str], None] | None = None,
        validate_json: Callable[[str], None] | None = None,
    ):
        """Initialize the atomic writer.

        Args:
            validate_typescript: Optional validation function for TypeScript modules
            validate_json: Optional validation function for JSON documents
        """
        self._validators = {
            "ts": validate_typescript or self._default_validate_typescript,
            "json": validate_json or self._default_validate_json,
        }

    def write(self, path: Path, content: str, language: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation ("ts" or "json")
            validate: Whether to validate before finalizing

        Raises:
            OutputError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self.validate(content, language)

            temp_path.replace(path)
        except Exception:
            # Clean up temp file on any error
            temp_path.unlink(missing_ok=True)
            raise

    def validate(self, content: str, language: str) -> None:
        """Run the validator registered for `language`, if any."""
        validator = self._validators.get(language)
        if validator is not None:
            validator(content)

    def _default_validate_typescript(self, content: str) -> None:
        """Default TypeScript validation.

        Raises:
            OutputError: If the module has no declarations or unbalanced brackets
        """
        if "export " not in content:
            raise OutputError("Generated TypeScript module has no exported declarations")

        depth = _bracket_depths(content)
        unbalanced = {opening: count for opening, count in depth.items() if count}
        if unbalanced:
            raise OutputError(f"Generated TypeScript module has unbalanced brackets: {unbalanced}")

    def _default_validate_json(self, content: str) -> None:
        """Default JSON validation.

        Raises:
            OutputError: If the content is not valid JSON
        """
        try:
            json.loads(content)
        except json.JSONDecodeError as e:
            raise OutputError(f"Generated JSON is not valid: {e}") from e


def _bracket_depths(content: str) -> dict[str, int]:
    """Net bracket counts of TypeScript source, skipping comments and string literals."""
    depth = {"{": 0, "(": 0, "[": 0}
    closing = {"}": "{", ")": "(", "]": "["}
    index = 0
    while index < len(content):
        char = content[index]
        if content.startswith("/*", index):
            end = content.find("*/", index + 2)
            index = len(content) if end == -1 else end + 2
            continue
        if content.startswith("//", index):
            end = content.find("\n", index)
            index = len(content) if end == -1 else end + 1
            continue
        if char == '"':
            index += 1
            while index < len(content) and content[index] != '"':
                index += 2 if content[index] == "\\" else 1
        elif char in depth:
            depth[char] += 1
        elif char in closing:
            depth[closing[char]] -= 1
        index += 1
    return depth
