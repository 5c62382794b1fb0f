"""
Reference checker for name-based type references.

References between declarations are kept by name so that declarations
can refer to each other in any order. Once a set of declarations is
compiled, this pass validates every referenced name against the set of
known declarations.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass

from .ir_nodes import FieldDef, ShapeKind, TypeDeclaration


@dataclass
class UnresolvedReference:
    """A reference to a name with no compiled declaration."""

    declaration: str = ""  # Declaration holding the reference
    field: str = ""  # Field holding the reference
    target_name: str = ""  # Referenced type name

    def __str__(self) -> str:
        return f"{self.declaration}.{self.field} -> {self.target_name}"


class ReferenceChecker:
    """Finds references to unknown type names."""

    def __init__(self, known_names: Collection[str]):
        """
        Initialize the checker.

        Args:
            known_names: Names of every compiled declaration
        """
        self.known_names = known_names

    def check(self, declaration: TypeDeclaration) -> list[UnresolvedReference]:
        """
        Collect the unresolved references of one declaration.

        Generic references have no named counterpart and are rendered
        permissively, so only their type arguments are checked.

        Args:
            declaration: The compiled declaration

        Returns:
            Unresolved references, in field order
        """
        unresolved = []
        for field in declaration.iter_fields():
            for target in self._referenced_names(field):
                if target not in self.known_names:
                    unresolved.append(UnresolvedReference(declaration.name, field.name, target))
        return unresolved

    def referenced_names(self, declaration: TypeDeclaration) -> list[str]:
        """Every name a declaration references, known or not, in field order without repeats."""
        names: list[str] = []
        for field in declaration.iter_fields():
            for target in self._referenced_names(field):
                if target not in names:
                    names.append(target)
        return names

    def _referenced_names(self, field: FieldDef) -> list[str]:
        shape = field.shape
        if shape.kind == ShapeKind.REFERENCE:
            names = [] if shape.type_args else [shape.name]
            for arg in shape.type_args:
                names.extend(self._referenced_names(arg))
            return names
        if shape.kind == ShapeKind.MAP:
            return self._referenced_names(shape.key) + self._referenced_names(shape.value)
        if shape.kind == ShapeKind.TUPLE:
            names = []
            for element in shape.elements:
                names.extend(self._referenced_names(element))
            return names
        return []
