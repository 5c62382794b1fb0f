"""
Pipeline generator producing whole output files from a declaration document.

Phases:
1. Parse declarations into the declaration AST
2. Analyze into IR and register every compiled type
3. Render the TypeScript module (types and validators) and the JSON Schema bundle
4. Write outputs atomically

Every artifact is rendered before anything is written, so a failing
declaration never leaves partial output behind.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .. import __version__
from ..cli_utils import reconstruct_command_line
from .analyzer.reference_resolver import ReferenceChecker
from .backends import TypeScriptBackend
from .compiler import CompiledType, ModelSchemaCompiler
from .config import CompilerConfig, OutputMode
from .output import AtomicWriter

logger = logging.getLogger(__name__)


class PipelineGenerator:
    """Generates a TypeScript module and JSON Schemas for a declaration document."""

    def __init__(self, document: dict[str, Any], config: CompilerConfig | None = None):
        """
        Initialize the generator.

        Args:
            document: Declaration document with a "declarations" list
            config: Compiler configuration
        """
        self.document = document
        self.config = config or CompilerConfig()
        self.compiler = ModelSchemaCompiler(self.config)
        self._compiled: list[CompiledType] | None = None

    def compile(self) -> list[CompiledType]:
        """Compile the document once; later calls return the same types."""
        if self._compiled is None:
            self._compiled = self.compiler.compile_document(self.document)
            for compiled in self._compiled:
                for warning in compiled.warnings:
                    logger.debug("%s: %s", compiled.name, warning)
        return self._compiled

    @property
    def warnings(self) -> list[str]:
        return [warning for compiled in self.compile() for warning in compiled.warnings]

    def generate(self) -> str:
        """
        Generate the TypeScript module.

        Returns:
            Module text: header, validator import, then each declaration's
            type followed by its validator, in dependency order
        """
        definitions = [compiled.ts_definition(deferred) for compiled, deferred in self.emission_order()]
        prefix = (
            TypeScriptBackend(self.config)
            .get_template("prefix")
            .render(
                generation_comment=self._generate_command_comment(),
                zod_import=self.config.zod_import,
            )
        )
        parts = [prefix] if prefix else []
        parts.extend(definitions)
        return "\n\n".join(parts) + "\n"

    def emission_order(self) -> list[tuple[CompiledType, frozenset[str]]]:
        """
        Order compiled types so that each validator follows the validators it references.

        Document order is kept wherever references allow it. A reference
        closing a cycle, a self reference included, cannot be satisfied by
        any order and is deferred instead.

        Returns:
            Pairs of compiled type and the names it must reference lazily
        """
        compiled_types = self.compile()
        by_name = {compiled.name: compiled for compiled in compiled_types}
        checker = ReferenceChecker(by_name)
        ordered: list[tuple[CompiledType, frozenset[str]]] = []
        done: set[str] = set()
        visiting: set[str] = set()

        def visit(compiled: CompiledType) -> None:
            visiting.add(compiled.name)
            deferred = set()
            for target in checker.referenced_names(compiled.declaration):
                if target in visiting:
                    deferred.add(target)
                elif target in by_name and target not in done:
                    visit(by_name[target])
            visiting.discard(compiled.name)
            done.add(compiled.name)
            ordered.append((compiled, frozenset(deferred)))

        for compiled in compiled_types:
            if compiled.name not in done:
                visit(compiled)
        return ordered

    def generate_json_schemas(self) -> dict[str, dict[str, Any]]:
        """
        Generate the JSON Schema of every declaration.

        Returns:
            Mapping of declaration name to schema, in document order
        """
        return {compiled.name: compiled.json_schema() for compiled in self.compile()}

    def write(self, output: Path, json_schema_output: Path | None = None) -> list[Path]:
        """
        Render all artifacts, then write them according to the output config.

        Args:
            output: Path of the TypeScript module
            json_schema_output: Optional path of the JSON Schema bundle

        Returns:
            Paths written

        Raises:
            FileExistsError: If a target exists and the mode is ERROR_IF_EXISTS
            OutputError: If generated content fails validation
        """
        outputs: list[tuple[Path, str, str]] = [(output, self.generate(), "ts")]
        if json_schema_output is not None:
            bundle = json.dumps(self.generate_json_schemas(), indent=2) + "\n"
            outputs.append((json_schema_output, bundle, "json"))

        output_config = self.config.output
        if output_config.mode == OutputMode.ERROR_IF_EXISTS:
            for path, _, _ in outputs:
                if path.exists():
                    raise FileExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")

        writer = AtomicWriter()
        if output_config.validate_before_write:
            for _, content, language in outputs:
                writer.validate(content, language)

        for path, content, language in outputs:
            if output_config.atomic_write:
                writer.write(path, content, language, validate=False)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8")
            logger.info("Wrote %s", path)
        return [path for path, _, _ in outputs]

    def _generate_command_comment(self) -> str:
        """Generate a simplified command line comment for the generated file"""
        if not self.config.add_generation_comment:
            return ""

        # Reconstruct command line using CLI utilities
        try:
            from ..model_schema import model_schema as click_command  # noqa

            command_line = reconstruct_command_line(click_command)
        except (ImportError, AttributeError):
            command_line = "model_schema"

        return f"Generated by model_schema v{__version__} : {command_line}"
