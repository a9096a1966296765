"""
Tests for serialization and deserialization of typewriter objects.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `typewriter.serialization`.
"""

import pytest
from typewriter.examples import build_example_package
from typewriter.model import Package, Declaration
from typewriter.types import Basic, Array, Object
from typewriter.serialization import (
    package_to_dict,
    package_from_dict,
    package_to_json,
    package_from_json,
    package_to_yaml,
    package_from_yaml,
    type_to_dict,
    type_from_dict,
)


def build_sample_package() -> Package:
    package = build_example_package()
    package.declarations.append(Declaration(name="Grid", type=Array(Array(Basic("int")), length=3)))
    package.declarations.append(Declaration(name="Blob", type=Object()))
    package.metadata = {"source": "models.go"}
    return package


def test_json_roundtrip():
    package = build_sample_package()
    before = package_to_dict(package)
    restored = package_from_json(package_to_json(package))
    assert package_to_dict(restored) == before


def test_yaml_roundtrip():
    package = build_sample_package()
    before = package_to_dict(package)
    restored = package_from_yaml(package_to_yaml(package))
    assert package_to_dict(restored) == before


def test_restored_objects_compare_equal():
    package = build_sample_package()
    restored = package_from_dict(package_to_dict(package))
    assert restored.declarations == package.declarations


def test_yaml_keeps_declaration_order():
    text = package_to_yaml(build_sample_package())
    assert text.index("name: Embedded") < text.index("name: Thing")


def test_unknown_kind_rejected():
    with pytest.raises(TypeError):
        type_from_dict({"kind": "chan"})


def test_unknown_node_rejected():
    with pytest.raises(TypeError):
        type_to_dict("int")
