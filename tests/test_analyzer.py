"""
Tests for the Package Analyzer.

Tests verify that the analyzer correctly:
    - Inventories declarations, structs and fields
    - Detects references to undeclared types
    - Finds recursive references
    - Measures nesting depth
"""

from typewriter.analyzer import analyze_package
from typewriter.examples import build_example_package
from typewriter.go_parser import parse_go_string
from typewriter.model import Package, Declaration
from typewriter.types import Basic, Array, Map, Struct, Field


def test_example_package_inventory():
    """The sample models are self-contained."""
    report = analyze_package(build_example_package())

    assert report.total_declarations == 10
    assert report.total_structs == 7
    assert report.strict_structs == 1
    assert report.total_fields == 13
    assert report.commented_declarations == 2
    assert report.undefined_references == set()
    assert not report.has_cycles
    assert report.warnings == []


def test_reference_counts():
    report = analyze_package(build_example_package())
    assert report.reference_counts == {"Person": 1, "Embedded": 1}
    assert "Thing" in report.unreferenced_declarations
    assert "Person" not in report.unreferenced_declarations


def test_undefined_references():
    """Should detect types referenced but not declared."""
    package = Package(name="Undefined", declarations=[
        Declaration(name="Team", type=Struct(fields=[
            Field(name="Members", type=Array(Basic("Member"))),
        ], embedded=["Base"])),
    ])

    report = analyze_package(package)

    assert report.undefined_references == {"Member", "Base"}
    assert any("Undefined type references: Base, Member" in w for w in report.warnings)


def test_scalars_are_not_references():
    package = Package(name="Scalars", declarations=[
        Declaration(name="S", type=Struct(fields=[
            Field(name="A", type=Basic("int64")),
            Field(name="B", type=Basic("interface{}")),
            Field(name="C", type=Basic("time.Time")),
            Field(name="D", type=Struct()),
        ])),
    ])
    assert analyze_package(package).reference_counts == {}


def test_recursive_reference():
    package = parse_go_string("""package tree

type Node struct {
	Children []*Node
}
""")
    report = analyze_package(package)

    assert report.has_cycles
    assert report.cycle_example == ["Node", "Node"]
    assert any("Recursive type reference" in w for w in report.warnings)


def test_mutual_recursion():
    package = Package(name="Mutual", declarations=[
        Declaration(name="A", type=Struct(fields=[Field(name="B", type=Basic("B"))])),
        Declaration(name="B", type=Struct(fields=[Field(name="A", type=Basic("A", pointer=True))])),
    ])
    report = analyze_package(package)
    assert report.cycle_example == ["A", "B", "A"]


def test_deep_nesting_warning():
    nested = Basic("int")
    for _ in range(6):
        nested = Map(Basic("string"), nested)
    package = Package(name="Deep", declarations=[Declaration(name="D", type=nested)])

    report = analyze_package(package)

    assert report.max_type_depth == 7
    assert any("Deeply nested" in w for w in report.warnings)


def test_empty_package():
    report = analyze_package(Package(name="Empty"))
    assert report.total_declarations == 0
    assert report.warnings == []
