"""
Type Reference System for typewriter

Every field type and every package-level type is represented as a small
tree of TypeRef nodes, never as a string of source or target syntax.

This ensures:
    - Readers and backends stay independent
    - The same tree can be emitted in any target language
    - Trees can be serialized and analyzed

ARCHITECTURAL RULE:
    Basic names are whatever the reader saw (e.g. "int64", "time.Time").
    Translating them to target names belongs in typewriter.mapper.
"""

from abc import ABC
from dataclasses import dataclass, field
from typing import List, Optional


class TypeRef(ABC):
    """
    Base class for all type nodes.

    This class is structure only.

    DO NOT:
        - Add rendering logic here (belongs in backends)
        - Add name mapping here (belongs in mapper)
    """
    pass


@dataclass(frozen=True)
class Basic(TypeRef):
    """
    A scalar or a reference to a named type.

    Examples:
        - string
        - int64
        - time.Time
        - Person          (reference to another declaration)
        - *Person         -> Basic("Person", pointer=True)

    Properties:
        name: Type name as written in the source schema
        pointer: True when the value may be absent (nullable)
    """

    name: str
    pointer: bool = False


@dataclass(frozen=True)
class Array(TypeRef):
    """
    An ordered sequence.

    Example:
        []string   -> Array(Basic("string"))
        [4]int     -> Array(Basic("int"), length=4)
    """

    element: TypeRef
    length: Optional[int] = None


@dataclass(frozen=True)
class Map(TypeRef):
    """
    A keyed mapping.

    Example:
        map[string][]int  -> Map(Basic("string"), Array(Basic("int")))
    """

    key: TypeRef
    value: TypeRef


@dataclass(frozen=True)
class Field:
    """
    A single struct member.

    Properties:
        name: Source identifier (e.g. "MapStringToInt")
        type: TypeRef of the member
        comment: Trailing or doc comment, single line, may be empty
        tag: Raw struct tag (e.g. 'json:"map_string_to_int"'), may be empty

    IMPORTANT:
        The emitted member name is decided by the mapper from the tag.
        The reader stores the source identifier unchanged.
    """

    name: str
    type: TypeRef
    comment: str = ""
    tag: str = ""


@dataclass(frozen=True)
class Struct(TypeRef):
    """
    An object shape.

    Properties:
        fields: Members in source order
        strict: Exact object requested (no extra members allowed)
        embedded: Names of embedded types whose members are spread in
    """

    fields: List[Field] = field(default_factory=list)
    strict: bool = False
    embedded: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Object(TypeRef):
    """
    An opaque object whose shape is not described.

    Produced by the mapper for inline anonymous structs.
    """
    pass
