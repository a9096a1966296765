"""
Core Schema Model Objects

Defines the root data structures of the typewriter intermediate
representation.

These are pure data classes representing:
    - Declarations (package-level named types)
    - Packages (root container)

Type shapes themselves live in typewriter.types.

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about Go, Flow or TypeScript syntax
        - Are fully serializable
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .types import TypeRef, Struct


@dataclass
class Declaration:
    """
    A package-level named type.

    Properties:
        name:
            Declared identifier (e.g. "Person", "MyNumber")

        type:
            TypeRef describing the shape
            Struct for records, Basic/Array/Map for aliases

        comment:
            Doc comment above the declaration, one source line per line,
            comment markers removed. Directives like "@strict" are kept.

        tag:
            Reserved for declaration-level annotations (usually empty)

    Example:
        // Names is a list of names
        type Names []string

        Declaration(
            name="Names",
            type=Array(Basic("string")),
            comment="Names is a list of names",
        )
    """

    name: str
    type: Optional[TypeRef]
    comment: str = ""
    tag: str = ""

    @property
    def comment_lines(self) -> List[str]:
        """Doc comment split into lines (empty list when there is none)."""
        if not self.comment:
            return []
        return self.comment.split("\n")

    @property
    def is_struct(self) -> bool:
        return isinstance(self.type, Struct)


@dataclass
class Package:
    """
    Root container for everything read from one or more source files.

    Everything a backend emits MUST be derivable from this object alone.

    Properties:
        name:
            Source package name (e.g. "models")

        declarations:
            All package-level types, in the order they were read

        metadata:
            Arbitrary key-value pairs (use sparingly)
            Example: {"source": "models/person.go"}

    INVARIANTS:
        - Declaration names are unique
    """

    name: str
    declarations: List[Declaration] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def get_declaration(self, name: str) -> Optional[Declaration]:
        """
        Retrieve a declaration by name.

        Args:
            name: Declared identifier

        Returns:
            Declaration object or None if not found
        """
        for decl in self.declarations:
            if decl.name == name:
                return decl
        return None

    def sorted_declarations(self) -> List[Declaration]:
        """Declarations ordered by name, as backends emit them."""
        return sorted(self.declarations, key=lambda d: d.name)
