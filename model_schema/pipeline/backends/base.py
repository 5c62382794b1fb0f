"""
Base class for emitter backends.

Defines the interface that all target backends implement. Each backend
reads the same declaration IR and renders one artifact from it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import jinja2

from ...utils import ts_property_access, ts_property_name
from ..analyzer.ir_nodes import FieldDef, TypeDeclaration
from ..config import CompilerConfig


class EmitterBackend(ABC):
    """Abstract base class for emitter backends."""

    # Template directory name (empty when the backend renders no text)
    TEMPLATE_LANG: str = ""

    # Template file extension
    FILE_EXTENSION: str = "ts"

    def __init__(self, config: CompilerConfig | None = None):
        """
        Initialize the backend.

        Args:
            config: Compiler configuration
        """
        self.config = config or CompilerConfig()
        if self.TEMPLATE_LANG:
            self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=False,
        )
        # Add custom filters
        self.jinja_env.filters["property_name"] = ts_property_name
        self.jinja_env.filters["property_access"] = ts_property_access

    def get_template(self, name: str) -> jinja2.Template:
        return self.jinja_env.get_template(f"{name}.{self.FILE_EXTENSION}.jinja2")

    @abstractmethod
    def translate_field(self, field: FieldDef) -> Any:
        """
        Translate a resolved field into the target representation.

        Args:
            field: The field definition, modifiers included

        Returns:
            Target specific rendering of the field type
        """

    @abstractmethod
    def emit(self, declaration: TypeDeclaration) -> Any:
        """
        Render a whole declaration.

        Args:
            declaration: The declaration IR

        Returns:
            Target specific rendering of the declaration
        """

    def optional_field_names(self, fields: list[FieldDef]) -> list[str]:
        """Names of the optional fields, in declaration order."""
        return [field.name for field in fields if field.is_optional]
