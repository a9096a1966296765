"""
Serialization helpers for typewriter objects (Package, Declaration, TypeRef).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
This module intentionally keeps serialization structure stable and explicit.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from typewriter.model import Package, Declaration
from typewriter.types import (
    TypeRef,
    Basic,
    Array,
    Map,
    Struct,
    Field,
    Object,
)


def type_to_dict(ref: TypeRef | None) -> Any:
    if ref is None:
        return None
    if isinstance(ref, Basic):
        return {"kind": "basic", "name": ref.name, "pointer": ref.pointer}
    if isinstance(ref, Array):
        return {"kind": "array", "element": type_to_dict(ref.element), "length": ref.length}
    if isinstance(ref, Map):
        return {"kind": "map", "key": type_to_dict(ref.key), "value": type_to_dict(ref.value)}
    if isinstance(ref, Struct):
        return {
            "kind": "struct",
            "fields": [field_to_dict(f) for f in ref.fields],
            "strict": ref.strict,
            "embedded": list(ref.embedded),
        }
    if isinstance(ref, Object):
        return {"kind": "object"}
    raise TypeError(f"Unsupported TypeRef type: {type(ref)}")


def type_from_dict(d: Any) -> TypeRef | None:
    if d is None:
        return None
    k = d.get("kind")
    if k == "basic":
        return Basic(d["name"], pointer=d.get("pointer", False))
    if k == "array":
        return Array(type_from_dict(d["element"]), length=d.get("length"))
    if k == "map":
        return Map(type_from_dict(d["key"]), type_from_dict(d["value"]))
    if k == "struct":
        return Struct(
            fields=[field_from_dict(f) for f in d.get("fields", [])],
            strict=d.get("strict", False),
            embedded=list(d.get("embedded", [])),
        )
    if k == "object":
        return Object()
    raise TypeError(f"Unsupported type dict kind: {k}")


def field_to_dict(f: Field) -> Dict[str, Any]:
    return {"name": f.name, "type": type_to_dict(f.type), "comment": f.comment, "tag": f.tag}


def field_from_dict(d: Dict[str, Any]) -> Field:
    return Field(
        name=d["name"],
        type=type_from_dict(d["type"]),
        comment=d.get("comment", ""),
        tag=d.get("tag", ""),
    )


def declaration_to_dict(decl: Declaration) -> Dict[str, Any]:
    return {
        "name": decl.name,
        "type": type_to_dict(decl.type),
        "comment": decl.comment,
        "tag": decl.tag,
    }


def declaration_from_dict(d: Dict[str, Any]) -> Declaration:
    return Declaration(
        name=d["name"],
        type=type_from_dict(d.get("type")),
        comment=d.get("comment", ""),
        tag=d.get("tag", ""),
    )


def package_to_dict(p: Package) -> Dict[str, Any]:
    return {
        "name": p.name,
        "declarations": [declaration_to_dict(d) for d in p.declarations],
        "metadata": p.metadata,
    }


def package_from_dict(d: Dict[str, Any]) -> Package:
    p = Package(name=d.get("name", ""))
    p.declarations = [declaration_from_dict(decl) for decl in d.get("declarations", [])]
    p.metadata = d.get("metadata", {})
    return p


def package_to_json(p: Package) -> str:
    return json.dumps(package_to_dict(p), sort_keys=True)


def package_from_json(s: str) -> Package:
    d = json.loads(s)
    return package_from_dict(d)


def package_to_yaml(p: Package) -> str:
    return yaml.safe_dump(package_to_dict(p), sort_keys=False)


def package_from_yaml(s: str) -> Package:
    d = yaml.safe_load(s)
    return package_from_dict(d)
