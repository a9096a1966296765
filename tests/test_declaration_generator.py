"""
Tests for the declaration generator.

These tests verify that packages are correctly converted to Flow and
TypeScript declaration files. The Flow output for the sample models is
compared byte for byte against a known-good file, because whitespace in
generated files shows up in every consumer's diff.

Tests cover:
    - File header and declaration layout
    - Struct members, separators and comments
    - Exact objects, nullables, maps and arrays
    - Embedded types
    - TypeScript differences
"""

import os

import pytest
from typewriter.backends import Language, generate_declarations, save_declarations
from typewriter.backends.declaration_generator import render_type
from typewriter.errors import EmitError
from typewriter.examples import build_example_package
from typewriter.go_parser import parse_go_file, parse_go_string
from typewriter.model import Declaration, Package
from typewriter.types import Basic, Array, Map, Struct, Field, Object

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def _golden() -> str:
    with open(os.path.join(FIXTURES, "models.js"), encoding="utf-8") as f:
        return f.read()


def _single(decl: Declaration, language: Language = Language.FLOW) -> str:
    """Declaration text without the file header."""
    output = generate_declarations(Package(name="p", declarations=[decl]), language=language)
    return output.split("\n\n\n", 1)[1]


class TestGoldenOutput:
    """The sample models must render exactly as the known-good file."""

    def test_example_package_matches_golden(self):
        assert generate_declarations(build_example_package()) == _golden()

    def test_parsed_fixture_matches_golden(self):
        package = parse_go_file(os.path.join(FIXTURES, "models.go"))
        assert generate_declarations(package, language=Language.FLOW) == _golden()


class TestLayout:
    """Test file structure."""

    def test_flow_header(self):
        output = generate_declarations(Package(name="p"))
        assert output.startswith("// @flow\n// Automatically generated by typewriter. Do not edit.\n")

    def test_typescript_header_has_no_flow_pragma(self):
        output = generate_declarations(Package(name="p"), language=Language.TYPESCRIPT)
        assert "@flow" not in output
        assert output.startswith("// Automatically generated by typewriter. Do not edit.\n")

    def test_empty_package_is_header_only(self):
        output = generate_declarations(Package(name="p"))
        assert output.endswith("typewriter\n")
        assert "export" not in output

    def test_declarations_sorted_by_name(self):
        package = Package(name="p", declarations=[
            Declaration(name="Zebra", type=Basic("int")),
            Declaration(name="Apple", type=Basic("int")),
        ])
        output = generate_declarations(package)
        assert output.index("export type Apple") < output.index("export type Zebra")

    def test_declarations_separated_by_blank_line(self):
        package = Package(name="p", declarations=[
            Declaration(name="A", type=Basic("int")),
            Declaration(name="B", type=Basic("string")),
        ])
        output = generate_declarations(package)
        assert output.endswith("export type A = number\n\nexport type B = string\n")

    def test_doc_comment_lines(self):
        decl = Declaration(name="A", type=Basic("int"), comment="First line\n\nThird line")
        assert _single(decl) == "// First line\n//\n// Third line\nexport type A = number\n"

    def test_missing_type_rejected(self):
        with pytest.raises(EmitError):
            generate_declarations(Package(name="p", declarations=[Declaration(name="A", type=None)]))


class TestStructs:
    """Test struct member rendering."""

    def test_members_and_separators(self):
        decl = Declaration(name="P", type=Struct(fields=[
            Field(name="Name", type=Basic("string"), tag='json:"name"'),
            Field(name="Age", type=Basic("int"), tag='json:"age"'),
        ]))
        assert _single(decl) == "export type P = { \n\tname: string, \n\tage: number\n}\n"

    def test_commented_members(self):
        decl = Declaration(name="M", type=Struct(fields=[
            Field(name="A", type=Basic("string"), comment="first"),
            Field(name="B", type=Basic("string"), comment="last"),
        ]))
        assert _single(decl) == "export type M = { \n\tA: string, // first\n\n\tB: string// last\n\n}\n"

    def test_strict_flow_struct(self):
        decl = Declaration(name="S", type=Struct(fields=[Field(name="A", type=Basic("int"))], strict=True))
        assert _single(decl) == "export type S = {| \n\tA: number\n|}\n"

    def test_strict_ignored_by_typescript(self):
        decl = Declaration(name="S", type=Struct(fields=[Field(name="A", type=Basic("int"))], strict=True))
        assert _single(decl, Language.TYPESCRIPT) == "export type S = { \n\tA: number\n}\n"

    def test_empty_struct(self):
        assert _single(Declaration(name="E", type=Struct())) == "export type E = { \n}\n"

    def test_dropped_member_not_rendered(self):
        decl = Declaration(name="S", type=Struct(fields=[
            Field(name="A", type=Basic("int")),
            Field(name="Secret", type=Basic("string"), tag='json:"-"'),
        ]))
        assert _single(decl) == "export type S = { \n\tA: number\n}\n"

    def test_member_names_quoted_when_needed(self):
        decl = Declaration(name="S", type=Struct(fields=[
            Field(name="First", type=Basic("string"), tag='json:"first-name"'),
        ]))
        assert '\t"first-name": string' in _single(decl)

    def test_flow_embedded_spread(self):
        decl = Declaration(name="S", type=Struct(fields=[Field(name="A", type=Basic("int"))], embedded=["Base"]))
        assert _single(decl) == "export type S = { \n\t...Base, \n\tA: number\n}\n"

    def test_typescript_embedded_intersection(self):
        decl = Declaration(name="S", type=Struct(fields=[Field(name="A", type=Basic("int"))], embedded=["Base"]))
        assert _single(decl, Language.TYPESCRIPT) == "export type S = Base & { \n\tA: number\n}\n"

    def test_typescript_embedded_only(self):
        decl = Declaration(name="S", type=Struct(embedded=["Base", "Audit"]))
        assert _single(decl, Language.TYPESCRIPT) == "export type S = Base & Audit\n"


class TestRenderType:
    """Test rendering of individual type nodes."""

    def test_flow_nullable(self):
        assert render_type(Basic("any", pointer=True), Language.FLOW) == "?any"

    def test_typescript_nullable(self):
        assert render_type(Basic("Person", pointer=True), Language.TYPESCRIPT) == "Person | null"

    def test_array(self):
        assert render_type(Array(Basic("string")), Language.FLOW) == "Array<string>"

    def test_map(self):
        rendered = render_type(Map(Basic("string"), Array(Basic("Embedded"))), Language.FLOW)
        assert rendered == "{ [key: string]: Array<Embedded> }"

    def test_typescript_map_with_named_key(self):
        rendered = render_type(Map(Basic("UserID"), Basic("number")), Language.TYPESCRIPT)
        assert rendered == "Record<UserID, number>"

    def test_object(self):
        assert render_type(Object(), Language.FLOW) == "Object"
        assert render_type(Object(), Language.TYPESCRIPT) == "object"

    def test_unknown_node_rejected(self):
        with pytest.raises(EmitError):
            render_type(Field(name="A", type=Basic("int")), Language.FLOW)


class TestTypeScriptOutput:
    """Test TypeScript output on the sample models."""

    def test_sample_models(self):
        output = generate_declarations(build_example_package(), language=Language.TYPESCRIPT)
        assert "export type Maps = { \n" in output
        assert "\tpayload: any | null, // action payload\n" in output
        assert "\tperson: object\n" in output
        assert "export type People = { [key: string]: Person }" in output


class TestEndToEnd:
    """Go source straight to declarations."""

    def test_pointer_and_time_fields(self):
        source = """package api

// User is a user.
type User struct {
	ID        int64      `json:"id,string"`
	Manager   *User      `json:"manager"`
	CreatedAt time.Time  `json:"created_at"`
	Tags      []string   `json:"tags"`
	Password  string     `json:"-"`
}
"""
        output = generate_declarations(parse_go_string(source))
        assert output.endswith(
            "// User is a user.\n"
            "export type User = { \n"
            "\tid: string, \n"
            "\tmanager: ?User, \n"
            "\tcreated_at: string, \n"
            "\ttags: Array<string>\n"
            "}\n"
        )

    def test_save_declarations(self, tmp_path):
        target = tmp_path / "models.js"
        save_declarations(build_example_package(), str(target))
        assert target.read_text(encoding="utf-8") == _golden()


class TestLanguage:
    """Test language lookup."""

    @pytest.mark.parametrize("name,expected", [
        ("flow", Language.FLOW),
        ("ts", Language.TYPESCRIPT),
        ("TypeScript", Language.TYPESCRIPT),
    ])
    def test_from_name(self, name, expected):
        assert Language.from_name(name) == expected

    def test_unknown_language(self):
        with pytest.raises(ValueError):
            Language.from_name("elm")
