"""
Type Mapper (Layer 2: Go schema names → frontend type names).

Translates the names a reader stored in the model into the vocabulary of
a frontend type-checker, and applies struct tag rules to fields.

Struct tags understood:
    json:"name,opts"   rename the member; "-" drops it; ",string" makes
                       a scalar encode as a string (as encoding/json does)
    tw:"type"          override the member type
    tw:"type,bool"     override the member type and its nullability

The result is still a language-neutral model: "number", "boolean" and
"any" are rendered the same way by every backend.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Tuple

from typewriter.errors import EmitError
from typewriter.model import Declaration, Package
from typewriter.types import TypeRef, Basic, Array, Map, Struct, Field, Object

logger = logging.getLogger(__name__)

_NUMBER_TYPES = (
    "int", "int8", "int16", "int32", "int64",
    "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
    "float32", "float64", "complex64", "complex128",
    "byte", "rune",
)

SCALAR_NAMES: Dict[str, str] = {
    "string": "string",
    "bool": "boolean",
    "error": "string",
    **{name: "number" for name in _NUMBER_TYPES},
}

QUALIFIED_NAMES: Dict[str, str] = {
    "time.Time": "string",
    "time.Duration": "number",
    "json.RawMessage": "any",
    "json.Number": "number",
}

ANY_NAMES = ("interface{}", "any")

_BOOL_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_BOOL_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def get_tag(key: str, tags: str) -> str:
    """
    Extract the value of one key from a Go struct tag.

    Args:
        key: Tag key (e.g. "json")
        tags: Raw tag string (e.g. 'json:"name,omitempty" tw:"string"')

    Returns:
        The quoted value, or "" when the key is absent or unterminated
    """
    if not tags:
        return ""
    match = re.search(r'(?:^|\s)' + re.escape(key) + r':"([^"]*)"', tags)
    if match is None:
        return ""
    return match.group(1)


def _parse_bool(value: str) -> bool:
    """Parse a boolean the way Go's strconv.ParseBool does."""
    if value in _BOOL_TRUE:
        return True
    if value in _BOOL_FALSE:
        return False
    raise ValueError(f"invalid boolean {value!r}")


def _json_tag(tags: str) -> Tuple[str, List[str]]:
    parts = get_tag("json", tags).split(",")
    return parts[0], [p for p in parts[1:] if p]


def _override_type(field: Field) -> Optional[Basic]:
    """Type forced by a tw tag, or None."""
    override = get_tag("tw", field.tag).split(",")
    if not override[0]:
        return None
    if len(override) >= 2:
        try:
            pointer = _parse_bool(override[1])
        except ValueError:
            logger.error("error parsing bool for type %s: %r", field.name, override[1])
            pointer = False
        return Basic(override[0], pointer=pointer)
    return Basic(override[0])


def _is_scalar(ref: TypeRef) -> bool:
    return isinstance(ref, Basic) and ref.name in SCALAR_NAMES


def map_type(ref: TypeRef) -> TypeRef:
    """
    Map a reader type tree onto frontend type names.

    Args:
        ref: Type as stored by a reader

    Returns:
        Equivalent tree using frontend names
    """
    if isinstance(ref, Basic):
        if ref.name in ANY_NAMES:
            # nil is the zero value of an interface
            return Basic("any", pointer=True)
        if ref.name in SCALAR_NAMES:
            return Basic(SCALAR_NAMES[ref.name], pointer=ref.pointer)
        if ref.name in QUALIFIED_NAMES:
            return Basic(QUALIFIED_NAMES[ref.name], pointer=ref.pointer)
        if "." in ref.name:
            return Basic(ref.name.rsplit(".", 1)[1], pointer=ref.pointer)
        return ref

    if isinstance(ref, Array):
        element = ref.element
        if isinstance(element, Basic) and element.name in ("byte", "uint8") and not element.pointer:
            # encoding/json writes []byte as a base64 string
            return Basic("string")
        return Array(map_type(element), length=ref.length)

    if isinstance(ref, Map):
        return Map(map_type(ref.key), map_type(ref.value))

    if isinstance(ref, Struct):
        # Inline anonymous structs are not expanded
        return Object()

    if isinstance(ref, Object):
        return ref

    raise EmitError(f"Unsupported type node: {type(ref).__name__}")


def resolve_field(field: Field) -> Optional[Field]:
    """
    Apply struct tag rules to a field and map its type.

    Returns:
        The field as it should be emitted, or None if the tag drops it
    """
    if get_tag("json", field.tag) == "-":
        return None
    json_name, options = _json_tag(field.tag)
    name = json_name or field.name

    override = _override_type(field)
    if override is not None:
        type_ref: TypeRef = override
    elif "string" in options and _is_scalar(field.type):
        type_ref = Basic("string", pointer=field.type.pointer)
    else:
        type_ref = map_type(field.type)

    return Field(name=name, type=type_ref, comment=field.comment, tag=field.tag)


def map_struct(struct: Struct) -> Struct:
    fields = []
    for f in struct.fields:
        resolved = resolve_field(f)
        if resolved is None:
            logger.debug("Dropping field %s (json:\"-\")", f.name)
            continue
        fields.append(resolved)
    return Struct(fields=fields, strict=struct.strict, embedded=list(struct.embedded))


def map_declaration(decl: Declaration) -> Declaration:
    """Map one package-level declaration."""
    if decl.type is None:
        raise EmitError(f"type not stored in package level type declaration: {decl.name}")
    if isinstance(decl.type, Struct):
        mapped: TypeRef = map_struct(decl.type)
    else:
        mapped = map_type(decl.type)
    return Declaration(name=decl.name, type=mapped, comment=decl.comment, tag=decl.tag)


def map_package(package: Package) -> Package:
    """Return a new Package with every declaration mapped."""
    return Package(
        name=package.name,
        declarations=[map_declaration(d) for d in package.declarations],
        metadata=dict(package.metadata),
    )


__all__ = [
    "get_tag",
    "map_type",
    "resolve_field",
    "map_struct",
    "map_declaration",
    "map_package",
    "SCALAR_NAMES",
    "QUALIFIED_NAMES",
]
