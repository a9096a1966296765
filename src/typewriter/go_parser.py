"""
Go Parser for typewriter (Layer 1: Go source → schema model).

Converts Go type declarations into a typewriter Package.

Understood:
    package clause
    type X T, type ( ... ) groups
    struct, map, slice, array, pointer, interface{} and named types
    doc comments, trailing field comments, struct tags

Skipped (balanced scanning, no interpretation):
    import, func, var, const

Syntax Notes:
    - A doc comment is the comment group ending on the line directly
      above the declaration or field
    - "@strict" in a struct's doc comment requests an exact object
    - Unexported fields are dropped, as encoding/json drops them
"""

import logging
import os
import re
import warnings
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from typewriter.errors import GoParseError, UnsupportedTypeError
from typewriter.mapper import get_tag
from typewriter.model import Declaration, Package
from typewriter.types import TypeRef, Basic, Array, Map, Struct, Field

logger = logging.getLogger(__name__)

STRICT_DIRECTIVE = "@strict"

_TOKEN_RE = re.compile(
    r"""
    (?P<comment>//[^\n]*|/\*.*?\*/)
    |(?P<raw>`[^`]*`)
    |(?P<string>"(?:\\.|[^"\\\n])*")
    |(?P<char>'(?:\\.|[^'\\\n])+')
    |(?P<newline>\n)
    |(?P<ws>[ \t\r\f]+)
    |(?P<ident>[^\W\d]\w*)
    |(?P<number>\.?\d[\w.]*)
    |(?P<punct>\.\.\.|<-|:=|&&|\|\||[{}\[\]()*,.;=:+\-/&|!<>^%~?@#$])
    """,
    re.VERBOSE | re.DOTALL,
)

# Tokens after which a newline ends a statement (Go's semicolon rule)
_LINE_ENDERS = ("ident", "number", "string", "raw", "char")
_CLOSERS = (")", "]", "}")


@dataclass
class Token:
    """A lexical token with the line it starts on."""
    kind: str
    value: str
    line: int

    @property
    def end_line(self) -> int:
        return self.line + self.value.count("\n")


def _tokenize(source: str, source_name: Optional[str] = None) -> List[Token]:
    """Tokenize Go source. Whitespace is dropped; newlines and comments are kept."""
    tokens: List[Token] = []
    line = 1
    pos = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            raise GoParseError(f"unexpected character {source[pos]!r}", line=line, source=source_name)
        kind = match.lastgroup
        text = match.group(kind)
        if kind != "ws":
            tokens.append(Token(kind, text, line))
        line += text.count("\n")
        pos = match.end()
    tokens.append(Token("eof", "", line))
    return tokens


def _comment_text(group: List[Token]) -> str:
    """
    Text of a comment group, markers removed.

    Mirrors go/ast CommentGroup.Text: strips "//", "/*", "*/", the first
    space of a line comment, compiler directives, and leading and
    trailing blank lines.
    """
    lines: List[str] = []
    for tok in group:
        if tok.value.startswith("//"):
            body = tok.value[2:]
            if body.startswith("go:") or body.startswith("line "):
                continue
            if body.startswith(" "):
                body = body[1:]
            lines.append(body.rstrip())
        else:
            lines.extend(part.strip() for part in tok.value[2:-2].split("\n"))
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def _decode_tag(tok: Token) -> str:
    if tok.kind == "raw":
        return tok.value[1:-1]
    return tok.value[1:-1].replace('\\"', '"').replace("\\\\", "\\")


def _is_exported(name: str) -> bool:
    return name[:1].isupper()


class _GoParser:
    """Recursive-descent reader over a token list."""

    def __init__(self, source: str, source_name: Optional[str] = None, include_unexported: bool = False):
        self.source_name = source_name
        self.tokens = _tokenize(source, source_name)
        self.pos = 0
        self.include_unexported = include_unexported
        self.package_name: Optional[str] = None
        self.declarations: List[Declaration] = []

    # =========================================================================
    # TOKEN HELPERS
    # =========================================================================

    def _peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _next(self) -> Token:
        tok = self._peek()
        if tok.kind != "eof":
            self.pos += 1
        return tok

    def _at(self, kind: str, value: Optional[str] = None, offset: int = 0) -> bool:
        tok = self._peek(offset)
        return tok.kind == kind and (value is None or tok.value == value)

    def _at_punct(self, value: str, offset: int = 0) -> bool:
        return self._at("punct", value, offset)

    def _error(self, message: str, tok: Optional[Token] = None) -> GoParseError:
        tok = tok or self._peek()
        return GoParseError(message, line=tok.line, source=self.source_name)

    def _expect(self, kind: str, value: Optional[str] = None) -> Token:
        tok = self._peek()
        if not self._at(kind, value):
            wanted = value if value is not None else kind
            found = tok.value if tok.kind != "eof" else "end of file"
            raise self._error(f"expected {wanted!r}, found {found!r}", tok)
        return self._next()

    def _last_line(self) -> int:
        return self.tokens[self.pos - 1].end_line if self.pos else 1

    def _skip_blank(self) -> List[Token]:
        """
        Consume newlines, semicolons and comments.

        Returns:
            The comment group ending on the line directly above the next
            token (empty if there is none)
        """
        group: List[Token] = []
        group_end = 0
        while True:
            tok = self._peek()
            if tok.kind == "comment":
                if group and tok.line > group_end + 1:
                    group = []
                group.append(tok)
                group_end = tok.end_line
            elif tok.kind != "newline" and not (tok.kind == "punct" and tok.value == ";"):
                break
            self.pos += 1
        if group and self._peek().line > group_end + 1:
            return []
        return group

    def _trailing_comment(self) -> str:
        """Consume a comment on the same line as the previous token."""
        tok = self._peek()
        if tok.kind == "comment" and tok.line == self._last_line():
            self.pos += 1
            return _comment_text([tok]).replace("\n", " ")
        return ""

    def _skip_balanced(self, open_: str, close: str) -> None:
        """Skip from an opening bracket to its matching close."""
        start = self._expect("punct", open_)
        depth = 1
        while depth:
            tok = self._next()
            if tok.kind == "eof":
                raise self._error(f"unbalanced {open_!r}", start)
            if tok.kind == "punct":
                if tok.value == open_:
                    depth += 1
                elif tok.value == close:
                    depth -= 1

    def _skip_statement(self) -> None:
        """
        Skip to the end of the current statement.

        Stops before a newline that ends the statement, a ";" or a
        closing bracket that belongs to an enclosing construct.
        """
        depth = 0
        prev: Optional[Token] = None
        while True:
            tok = self._peek()
            if tok.kind == "eof":
                return
            if depth == 0:
                if tok.kind == "punct" and (tok.value == ";" or tok.value in (")", "}")):
                    return
                if tok.kind == "newline" and (prev is None or prev.kind in _LINE_ENDERS or prev.value in _CLOSERS):
                    return
            self.pos += 1
            if tok.kind == "punct":
                if tok.value in ("(", "[", "{"):
                    depth += 1
                elif tok.value in _CLOSERS:
                    depth -= 1
            if tok.kind not in ("newline", "comment"):
                prev = tok

    def _skip_spec_or_group(self) -> None:
        if self._at_punct("("):
            self._skip_balanced("(", ")")
        else:
            self._skip_statement()

    def _skip_func(self) -> None:
        """Skip a function or method declaration including its body."""
        depth = 0
        while True:
            tok = self._peek()
            if tok.kind == "eof":
                return
            if tok.kind == "punct":
                if tok.value in ("(", "["):
                    depth += 1
                elif tok.value in (")", "]"):
                    depth -= 1
                elif tok.value == "{" and depth == 0:
                    self._skip_balanced("{", "}")
                    return
            elif tok.kind == "ident" and tok.value in ("struct", "interface") and depth == 0 \
                    and self._at_punct("{", offset=1):
                self.pos += 1
                self._skip_balanced("{", "}")
                continue
            elif tok.kind == "newline" and depth == 0:
                return
            self.pos += 1

    def _end_of_spec(self, closers: Tuple[str, ...]) -> None:
        tok = self._peek()
        if tok.kind in ("newline", "eof"):
            return
        if tok.kind == "punct" and (tok.value == ";" or tok.value in closers):
            return
        raise self._error(f"unexpected {tok.value!r} after type", tok)

    # =========================================================================
    # TOP LEVEL
    # =========================================================================

    def parse(self) -> None:
        while True:
            doc = self._skip_blank()
            tok = self._peek()
            if tok.kind == "eof":
                return
            if tok.kind == "ident":
                if tok.value == "package":
                    self._next()
                    self.package_name = self._expect("ident").value
                    continue
                if tok.value == "type":
                    self._next()
                    self._parse_type_decl(doc)
                    continue
                if tok.value == "func":
                    self._next()
                    self._skip_func()
                    continue
                if tok.value in ("import", "var", "const"):
                    self._next()
                    self._skip_spec_or_group()
                    continue
            raise self._error(f"unexpected {tok.value!r} at top level", tok)

    def _parse_type_decl(self, doc: List[Token]) -> None:
        if not self._at_punct("("):
            self._parse_type_spec(doc, closers=())
            return
        self._next()
        while True:
            spec_doc = self._skip_blank()
            if self._at_punct(")"):
                self._next()
                return
            if self._at("eof"):
                raise self._error("unterminated type group")
            self._parse_type_spec(spec_doc, closers=(")",))

    def _looks_like_type_params(self) -> bool:
        # type List[T any] ... versus type Buf [N]byte
        return (
            self._at_punct("[")
            and self._at("ident", offset=1)
            and (self._at("ident", offset=2) or self._at_punct(",", offset=2) or self._at_punct("~", offset=2))
        )

    def _parse_type_spec(self, doc: List[Token], closers: Tuple[str, ...]) -> None:
        name_tok = self._expect("ident")
        name = name_tok.value

        generic = False
        if self._looks_like_type_params():
            self._skip_balanced("[", "]")
            generic = True
        if self._at_punct("="):
            self._next()

        try:
            type_ref = self._parse_type()
        except UnsupportedTypeError as exc:
            warnings.warn(f"Skipping type {name}: {exc.reason}", UserWarning)
            self._skip_statement()
            self._trailing_comment()
            return

        self._trailing_comment()
        self._end_of_spec(closers)

        if generic:
            warnings.warn(f"Skipping generic type {name}: type parameters are not supported", UserWarning)
            return
        if not self.include_unexported and not _is_exported(name):
            logger.debug("Skipping unexported type %s", name)
            return
        if any(d.name == name for d in self.declarations):
            raise self._error(f"duplicate type declaration {name}", name_tok)

        comment = _comment_text(doc)
        if isinstance(type_ref, Struct) and STRICT_DIRECTIVE in comment:
            type_ref = replace(type_ref, strict=True)

        self.declarations.append(Declaration(name=name, type=type_ref, comment=comment))

    # =========================================================================
    # TYPE EXPRESSIONS
    # =========================================================================

    def _parse_type(self) -> TypeRef:
        tok = self._peek()

        if tok.kind == "punct":
            if tok.value == "*":
                self._next()
                inner = self._parse_type()
                if isinstance(inner, Basic):
                    return Basic(inner.name, pointer=True)
                return inner
            if tok.value == "[":
                return self._parse_array()
            if tok.value == "(":
                self._next()
                inner = self._parse_type()
                self._expect("punct", ")")
                return inner
            if tok.value == "<-":
                raise UnsupportedTypeError("chan types are not supported", line=tok.line, source=self.source_name)

        if tok.kind == "ident":
            if tok.value == "map":
                self._next()
                self._expect("punct", "[")
                key = self._parse_type()
                self._expect("punct", "]")
                return Map(key, self._parse_type())
            if tok.value == "struct":
                self._next()
                return self._parse_struct_body()
            if tok.value == "interface":
                self._next()
                self._skip_balanced("{", "}")
                return Basic("interface{}")
            if tok.value in ("chan", "func"):
                raise UnsupportedTypeError(f"{tok.value} types are not supported",
                                           line=tok.line, source=self.source_name)

            self._next()
            name = tok.value
            if self._at_punct(".") and self._at("ident", offset=1):
                self._next()
                name = f"{name}.{self._next().value}"
            if self._at_punct("[") and self._peek().line == tok.line:
                # Type arguments of a generic instantiation are dropped
                self._skip_balanced("[", "]")
            return Basic(name)

        found = tok.value if tok.kind != "eof" else "end of file"
        raise self._error(f"expected a type, found {found!r}", tok)

    def _parse_array(self) -> Array:
        self._expect("punct", "[")
        if self._at_punct("]"):
            self._next()
            return Array(self._parse_type())

        length: Optional[int] = None
        if self._at("number") and self._at_punct("]", offset=1):
            try:
                length = int(self._next().value, 0)
            except ValueError:
                length = None
        else:
            # [...]T or a constant expression
            depth = 0
            while not (depth == 0 and self._at_punct("]")):
                tok = self._next()
                if tok.kind == "eof":
                    raise self._error("unterminated array length", tok)
                if tok.kind == "punct" and tok.value in ("(", "["):
                    depth += 1
                elif tok.kind == "punct" and tok.value in (")", "]"):
                    depth -= 1
        self._expect("punct", "]")
        return Array(self._parse_type(), length=length)

    def _parse_struct_body(self) -> Struct:
        self._expect("punct", "{")
        fields: List[Field] = []
        embedded: List[str] = []
        while True:
            doc = self._skip_blank()
            if self._at_punct("}"):
                self._next()
                break
            if self._at("eof"):
                raise self._error("unterminated struct")
            self._parse_field(doc, fields, embedded)
        return Struct(fields=fields, embedded=embedded)

    def _is_embedded_field(self) -> bool:
        if self._at_punct("*"):
            return True
        if not self._at("ident"):
            raise self._error(f"expected a field, found {self._peek().value!r}")
        after = self._peek(1)
        if after.kind == "punct":
            return after.value in (".", ";", "}")
        return after.kind in ("newline", "string", "raw", "comment", "eof")

    def _parse_tag(self) -> str:
        if self._at("raw") or self._at("string"):
            return _decode_tag(self._next())
        return ""

    def _field_comment(self, doc: List[Token]) -> str:
        trailing = self._trailing_comment()
        if trailing:
            return trailing
        return _comment_text(doc).replace("\n", " ")

    def _parse_field(self, doc: List[Token], fields: List[Field], embedded: List[str]) -> None:
        if self._is_embedded_field():
            self._parse_embedded(doc, fields, embedded)
            return

        names = [self._expect("ident").value]
        while self._at_punct(","):
            self._next()
            names.append(self._expect("ident").value)

        try:
            type_ref = self._parse_type()
        except UnsupportedTypeError as exc:
            warnings.warn(f"Skipping field {', '.join(names)}: {exc.reason}", UserWarning)
            self._skip_statement()
            return

        tag = self._parse_tag()
        comment = self._field_comment(doc)
        self._end_of_spec(closers=("}",))

        for name in names:
            if not _is_exported(name):
                logger.debug("Skipping unexported field %s", name)
                continue
            fields.append(Field(name=name, type=type_ref, comment=comment, tag=tag))

    def _parse_embedded(self, doc: List[Token], fields: List[Field], embedded: List[str]) -> None:
        pointer = False
        if self._at_punct("*"):
            self._next()
            pointer = True
        type_name = self._expect("ident").value
        if self._at_punct("."):
            self._next()
            type_name = f"{type_name}.{self._expect('ident').value}"

        tag = self._parse_tag()
        comment = self._field_comment(doc)
        self._end_of_spec(closers=("}",))

        short_name = type_name.rsplit(".", 1)[-1]
        json_name = get_tag("json", tag).split(",")[0]
        if json_name:
            # A tagged embedded struct is encoded as a named member
            fields.append(Field(name=short_name, type=Basic(type_name, pointer=pointer), comment=comment, tag=tag))
        else:
            embedded.append(short_name)


def parse_type_expression(text: str) -> TypeRef:
    """
    Parse a single Go type expression.

    Example:
        parse_type_expression("map[string][]int")
        -> Map(Basic("string"), Array(Basic("int")))

    Raises:
        GoParseError: If text is not exactly one type
    """
    parser = _GoParser(text)
    parser._skip_blank()
    type_ref = parser._parse_type()
    parser._skip_blank()
    if not parser._at("eof"):
        raise parser._error(f"unexpected {parser._peek().value!r} after type")
    return type_ref


def parse_go_string(
    source: str,
    package_name: Optional[str] = None,
    include_unexported: bool = False,
    source_name: Optional[str] = None,
) -> Package:
    """
    Parse Go source into a Package.

    Args:
        source: Go source text
        package_name: Name for the package (defaults to the package clause)
        include_unexported: Keep lower-case type declarations
        source_name: File name used in error messages

    Returns:
        Package with one Declaration per supported type declaration

    Raises:
        GoParseError: If parsing fails
    """
    parser = _GoParser(source, source_name=source_name, include_unexported=include_unexported)
    parser.parse()

    package = Package(
        name=package_name or parser.package_name or "",
        declarations=parser.declarations,
    )
    if source_name:
        package.metadata["source"] = source_name
    logger.debug("Parsed %d declarations from %s", len(package.declarations), source_name or "<string>")
    return package


def parse_go_file(filepath: str, include_unexported: bool = False) -> Package:
    """
    Parse a Go file into a Package.

    Raises:
        FileNotFoundError: If file doesn't exist
        GoParseError: If parsing fails or the file is not UTF-8
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Go file not found: {filepath}")
    except UnicodeDecodeError as exc:
        raise GoParseError(f"not valid UTF-8 at byte {exc.start}", source=filepath) from exc

    return parse_go_string(content, include_unexported=include_unexported, source_name=filepath)


def _go_files(dirpath: str, recursive: bool) -> List[str]:
    paths = []
    for root, dirs, files in os.walk(dirpath):
        dirs[:] = sorted(d for d in dirs if not d.startswith((".", "_")) and d not in ("vendor", "testdata"))
        for name in files:
            if name.endswith(".go") and not name.endswith("_test.go"):
                paths.append(os.path.join(root, name))
        if not recursive:
            break
    return sorted(paths)


def merge_packages(packages: List[Package], name: Optional[str] = None) -> Package:
    """
    Merge packages into one, keeping declaration order.

    Raises:
        GoParseError: If two packages declare the same type name
    """
    merged = Package(name=name or (packages[0].name if packages else ""))
    origin = {}
    sources = []
    for package in packages:
        source = package.metadata.get("source", package.name)
        sources.append(source)
        for decl in package.declarations:
            if decl.name in origin:
                raise GoParseError(
                    f"duplicate type declaration {decl.name} (also declared in {origin[decl.name]})",
                    source=source,
                )
            origin[decl.name] = source
            merged.declarations.append(decl)
    if sources:
        merged.metadata["source"] = ", ".join(sources)
    return merged


def parse_go_directory(dirpath: str, recursive: bool = False, include_unexported: bool = False) -> Package:
    """
    Parse every non-test .go file in a directory into one Package.

    Args:
        dirpath: Directory to read
        recursive: Descend into subdirectories (vendor, testdata and
            hidden directories are never read)
        include_unexported: Keep lower-case type declarations

    Raises:
        FileNotFoundError: If the directory doesn't exist
        GoParseError: If any file fails to parse or a type is declared twice
    """
    if not os.path.isdir(dirpath):
        raise FileNotFoundError(f"Directory not found: {dirpath}")

    paths = _go_files(dirpath, recursive)
    if not paths:
        logger.warning("No Go files found in %s", dirpath)

    packages = [parse_go_file(path, include_unexported=include_unexported) for path in paths]
    merged = merge_packages(packages)
    logger.info("Read %d declarations from %d files in %s", len(merged.declarations), len(paths), dirpath)
    return merged


__all__ = [
    "parse_go_string",
    "parse_go_file",
    "parse_go_directory",
    "parse_type_expression",
    "merge_packages",
    "GoParseError",
    "STRICT_DIRECTIVE",
]
