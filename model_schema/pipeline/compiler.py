"""
Compiler facade: declaration dictionaries in, compiled types out.

A CompiledType bundles the declaration IR with the three emitters, so
that callers can ask for the static type, the validator or the JSON
Schema of a declaration at any time and in any order.
"""

from __future__ import annotations

import logging
from typing import Any

from .analyzer.analyzer import DeclarationAnalyzer
from .analyzer.ir_nodes import DeclarationKind, TypeDeclaration
from .analyzer.reference_resolver import ReferenceChecker, UnresolvedReference
from .backends import JsonSchemaBackend, TypeScriptBackend, ZodBackend
from .config import CompilerConfig
from .declaration_ast.parser import DeclarationParser
from .errors import UnknownReferenceError
from .registry import SchemaRegistry

logger = logging.getLogger(__name__)


class CompiledType:
    """A compiled declaration and its three artifacts."""

    def __init__(
        self,
        declaration: TypeDeclaration,
        config: CompilerConfig,
        registry: SchemaRegistry,
        warnings: list[str] | None = None,
    ):
        self.declaration = declaration
        self.config = config
        self.registry = registry
        self.warnings = list(warnings or [])
        self._typescript = TypeScriptBackend(config)
        self._zod = ZodBackend(config)
        self._json_schema = JsonSchemaBackend(config, registry)

    @property
    def name(self) -> str:
        return self.declaration.name

    def typescript_type(self) -> str:
        """The `export type` declaration."""
        json_schema = self.json_schema() if self.config.json_schema_in_docs else None
        return self._typescript.emit(self.declaration, json_schema)

    def zod_schema(self, deferred: frozenset[str] = frozenset()) -> str:
        """The exported `<Name>$Schema` validator constant; `deferred` references render through `z.lazy`."""
        return self._zod.emit(self.declaration, deferred)

    def json_schema(self, resolving: frozenset[str] = frozenset()) -> dict[str, Any]:
        """A fresh JSON Schema dictionary; references are inlined through the registry."""
        return self._json_schema.emit(self.declaration, resolving)

    def ts_definition(self, deferred: frozenset[str] = frozenset()) -> str:
        """The static type followed by its validator."""
        return f"{self.typescript_type()}\n\n{self.zod_schema(deferred)}"

    def optional_field_names(self) -> list[str]:
        """Names of the optional fields of a record, in declaration order."""
        if self.declaration.kind != DeclarationKind.RECORD:
            return []
        return self._zod.optional_field_names(self.declaration.fields)

    def enum_members(self) -> list[str] | None:
        """Final member names of a plain enum, None for any other declaration."""
        if self.declaration.kind != DeclarationKind.PLAIN_ENUM:
            return None
        return list(self.declaration.variant_names)

    def __repr__(self) -> str:
        return f"CompiledType({self.name!r}, {self.declaration.kind.value})"


class ModelSchemaCompiler:
    """Compiles declaration dictionaries into registered CompiledType objects."""

    def __init__(self, config: CompilerConfig | None = None, registry: SchemaRegistry | None = None):
        """
        Initialize the compiler.

        Args:
            config: Compiler configuration
            registry: Registry receiving compiled types; a new one by default
        """
        self.config = config or CompilerConfig()
        self.registry = registry if registry is not None else SchemaRegistry()
        self.parser = DeclarationParser()

    def compile(self, declaration: dict[str, Any]) -> CompiledType:
        """
        Compile and register one declaration.

        Compilation is all-or-nothing: on error nothing is registered.

        Args:
            declaration: The declaration dictionary

        Returns:
            The compiled type

        Raises:
            ModelSchemaError: If the declaration cannot be compiled
        """
        node = self.parser.parse(declaration)
        analyzer = DeclarationAnalyzer(self.config)
        type_declaration = analyzer.analyze(node)
        compiled = CompiledType(type_declaration, self.config, self.registry, analyzer.warnings)
        self.registry.register(compiled)
        logger.debug("Compiled %s as %s", compiled.name, type_declaration.kind.value)
        return compiled

    def compile_document(self, document: dict[str, Any]) -> list[CompiledType]:
        """
        Compile every declaration of a document, then check references.

        Args:
            document: Dictionary with a "declarations" list

        Returns:
            Compiled types, in document order

        Raises:
            ModelSchemaError: If any declaration cannot be compiled
            UnknownReferenceError: If `strict_references` is set and a
                reference has no declaration
        """
        nodes = self.parser.parse_document(document)
        # Analyze everything before registering anything
        analyzed = []
        for node in nodes:
            analyzer = DeclarationAnalyzer(self.config)
            analyzed.append((analyzer.analyze(node), analyzer.warnings))

        compiled = [CompiledType(declaration, self.config, self.registry, warnings) for declaration, warnings in analyzed]
        for compiled_type in compiled:
            self.registry.register(compiled_type)

        self.check_references()
        return compiled

    def check_references(self) -> list[UnresolvedReference]:
        """
        Validate every reference of the registered types against the registry.

        Returns:
            The unresolved references (warned about when not strict)

        Raises:
            UnknownReferenceError: If `strict_references` is set and a
                reference is unresolved
        """
        checker = ReferenceChecker(self.registry.names())
        unresolved = []
        for compiled in self.registry:
            unresolved.extend(checker.check(compiled.declaration))

        if unresolved and self.config.strict_references:
            raise UnknownReferenceError(
                "Unresolved type references",
                cause=", ".join(str(reference) for reference in unresolved),
            )
        for reference in unresolved:
            logger.warning("Unresolved type reference %s", reference)
        return unresolved
