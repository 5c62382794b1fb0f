"""
Configuration for the model_schema compiler pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite the existing file


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to validate generated text before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class CompilerConfig:
    """Configuration options for schema compilation."""

    # Name of the synthesized discriminator field for tagged unions
    default_tag_field: str = "type"

    # Recognize ObjectId as the opaque external identifier type
    object_id: bool = True

    # Wire-type suffix stripped from declaration and reference names
    strip_type_suffix: str = "Json"

    # Raise on references to names never compiled instead of warning
    strict_references: bool = False

    # Log type resolution traces at debug level
    verbose: bool = False

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Append the pretty-printed JSON Schema to each declaration's doc comment
    json_schema_in_docs: bool = False

    # Import line emitted at the top of generated TypeScript modules
    zod_import: str = 'import { z } from "zod";'

    # Output file handling
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> CompilerConfig:
        """Create a config from a dictionary."""
        config = CompilerConfig()
        for k, v in d.items():
            if k == "output" and isinstance(v, dict):
                config.output = OutputConfig(
                    mode=OutputMode(v.get("mode", OutputMode.ERROR_IF_EXISTS.value)),
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "default_tag_field": self.default_tag_field,
            "object_id": self.object_id,
            "strip_type_suffix": self.strip_type_suffix,
            "strict_references": self.strict_references,
            "verbose": self.verbose,
            "add_generation_comment": self.add_generation_comment,
            "json_schema_in_docs": self.json_schema_in_docs,
            "zod_import": self.zod_import,
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
