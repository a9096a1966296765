"""
Example package builder for the sample models.

Builds, by hand, the same Package the Go reader produces for the sample
models file: records, maps, slices, an alias, an exact struct and an
inline anonymous struct.
"""
from typewriter.model import Package, Declaration
from typewriter.types import Basic, Array, Map, Struct, Field


def _json(name: str) -> str:
    return f'json:"{name}"'


def build_example_package() -> Package:
    package = Package(name="models")

    name_and_age = [
        Field(name="Name", type=Basic("string"), tag=_json("name")),
        Field(name="Age", type=Basic("int"), tag=_json("age")),
    ]

    maps = Struct(
        fields=[
            Field(
                name="MapStringToInt",
                type=Map(Basic("string"), Basic("int")),
                comment="I am a map of strings and ints",
                tag=_json("map_string_to_int"),
            ),
            Field(
                name="MapStringToInts",
                type=Map(Basic("string"), Array(Basic("int"))),
                comment="I am a map of strings to a slice of ints",
                tag=_json("map_string_to_ints"),
            ),
            Field(
                name="MapStringToMaps",
                type=Map(Basic("string"), Map(Basic("string"), Basic("int"))),
                comment="I am a map of strings to maps",
                tag=_json("map_string_to_maps"),
            ),
        ],
        strict=True,
    )

    message = Struct(fields=[
        Field(name="Type", type=Basic("string"), comment="action type", tag=_json("type")),
        Field(name="Payload", type=Basic("interface{}"), comment="action payload", tag=_json("payload")),
        Field(name="Key", type=Basic("string"), comment="event key", tag=_json("key")),
    ])

    package.declarations = [
        Declaration(name="Embedded", type=Struct(fields=list(name_and_age))),
        Declaration(
            name="Maps",
            type=maps,
            comment="Maps should all parse right.\nIt's hard to get them to do that.\n@strict",
        ),
        Declaration(name="MyNumber", type=Basic("int")),
        Declaration(name="Names", type=Array(Basic("string"))),
        Declaration(name="Nested", type=Struct(fields=[
            Field(
                name="Person",
                type=Struct(fields=[Field(name="Name", type=Basic("string"), tag=_json("name"))]),
                tag=_json("person"),
            ),
        ])),
        Declaration(
            name="OutgoingSocketMessage",
            type=message,
            comment=(
                "OutgoingSocketMessage sends an action to the client that is easy\n"
                "for a redux store to parse"
            ),
        ),
        Declaration(name="People", type=Map(Basic("string"), Basic("Person"))),
        Declaration(name="Person", type=Struct(fields=list(name_and_age))),
        Declaration(name="Something", type=Struct(fields=[
            Field(name="SomeMap", type=Map(Basic("string"), Array(Basic("Embedded"))), tag=_json("some_map")),
        ])),
        Declaration(name="Thing", type=Struct(fields=[
            Field(name="Name", type=Basic("float64"), tag=_json("name")),
        ])),
    ]

    return package
