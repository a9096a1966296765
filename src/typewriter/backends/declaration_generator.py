"""
Type declaration generator for typewriter packages.

Converts a Package into a file of exported type aliases for a frontend
type-checker.

Supports multiple languages:
    - FLOW: Flow annotations (exact objects, ?T nullables, spreads)
    - TYPESCRIPT: TypeScript (T | null nullables, intersections)

Layout (shared by both languages):
    header comment
    declarations sorted by name, one blank line apart
    each declaration preceded by its doc comment
"""

import json
import logging
import re
from enum import Enum
from typing import List

from typewriter.errors import EmitError
from typewriter.mapper import map_package
from typewriter.model import Declaration, Package
from typewriter.types import TypeRef, Basic, Array, Map, Struct, Field, Object

logger = logging.getLogger(__name__)

HEADER_LINES = [
    "// Automatically generated by typewriter. Do not edit.",
    "// http://www.github.com/natdm/typewriter",
]

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class Language(Enum):
    """Target languages for declaration output."""
    FLOW = "flow"
    TYPESCRIPT = "ts"

    @classmethod
    def from_name(cls, name: str) -> "Language":
        """Look up a language by value or alias ("typescript")."""
        normalized = name.strip().lower()
        if normalized == "typescript":
            normalized = "ts"
        for lang in cls:
            if lang.value == normalized:
                return lang
        raise ValueError(f"Unknown language: {name!r} (expected one of: flow, ts)")


def _member_name(name: str) -> str:
    """Quote member names that are not valid identifiers."""
    if _IDENTIFIER_RE.match(name):
        return name
    return json.dumps(name)


def _comment_suffix(comment: str) -> str:
    # A commented member is followed by a blank line
    if comment:
        return f"// {comment}\n\n"
    return "\n"


def render_type(ref: TypeRef, lang: Language) -> str:
    """Render a mapped type tree as target-language syntax."""
    if isinstance(ref, Basic):
        if not ref.pointer:
            return ref.name
        if lang == Language.FLOW:
            return f"?{ref.name}"
        return f"{ref.name} | null"

    if isinstance(ref, Array):
        return f"Array<{render_type(ref.element, lang)}>"

    if isinstance(ref, Map):
        key = render_type(ref.key, lang)
        value = render_type(ref.value, lang)
        if lang == Language.TYPESCRIPT and key not in ("string", "number"):
            return f"Record<{key}, {value}>"
        return f"{{ [key: {key}]: {value} }}"

    if isinstance(ref, Object):
        return "Object" if lang == Language.FLOW else "object"

    if isinstance(ref, Struct):
        return _render_struct(ref, lang)

    raise EmitError(f"Unsupported type node: {type(ref).__name__}")


def _render_struct(struct: Struct, lang: Language) -> str:
    strict = struct.strict and lang == Language.FLOW
    members: List[tuple] = []

    if lang == Language.FLOW:
        members.extend((f"...{name}", "") for name in struct.embedded)
    for f in struct.fields:
        members.append((f"{_member_name(f.name)}: {render_type(f.type, lang)}", f.comment))

    parts = ["{| \n" if strict else "{ \n"]
    for i, (text, comment) in enumerate(members):
        parts.append(f"\t{text}")
        if i < len(members) - 1:
            parts.append(", ")
        parts.append(_comment_suffix(comment))
    parts.append("|}" if strict else "}")
    body = "".join(parts)

    if lang == Language.TYPESCRIPT and struct.embedded:
        if not struct.fields:
            return " & ".join(struct.embedded)
        return " & ".join(list(struct.embedded) + [body])
    return body


def render_declaration(decl: Declaration, lang: Language) -> str:
    """Render one mapped declaration with its doc comment."""
    if decl.type is None:
        raise EmitError(f"type not stored in package level type declaration: {decl.name}")
    lines = [f"// {line}".rstrip() for line in decl.comment_lines]
    lines.append(f"export type {decl.name} = {render_type(decl.type, lang)}")
    return "\n".join(lines)


def generate_declarations(package: Package, language: Language = Language.FLOW) -> str:
    """
    Generate a declaration file for a package.

    Args:
        package: Package as produced by a reader (unmapped)
        language: Target language

    Returns:
        String containing the complete file
    """
    mapped = map_package(package)

    header = list(HEADER_LINES)
    if language == Language.FLOW:
        header.insert(0, "// @flow")

    blocks = [render_declaration(decl, language) for decl in mapped.sorted_declarations()]
    logger.debug("Rendered %d %s declarations for %s", len(blocks), language.value, package.name or "<package>")

    if not blocks:
        return "\n".join(header) + "\n"
    return "\n".join(header) + "\n\n\n" + "\n\n".join(blocks) + "\n"


def save_declarations(package: Package, filename: str, language: Language = Language.FLOW) -> None:
    """
    Generate declarations and save to file.

    Args:
        package: Package to render
        filename: Output file path (.js for Flow, .ts for TypeScript)
        language: Target language
    """
    output = generate_declarations(package, language=language)
    with open(filename, "w", encoding="utf-8") as f:
        f.write(output)
    logger.info("Wrote %s", filename)


__all__ = [
    "Language",
    "HEADER_LINES",
    "render_type",
    "render_declaration",
    "generate_declarations",
    "save_declarations",
]
