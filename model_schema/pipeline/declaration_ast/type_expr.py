"""
Parser for type expressions written in generic angle-bracket syntax.

Turns strings such as `Option<Vec<String>>`, `HashMap<String, ObjectId>`,
`(u32, String)`, `[u8; 4]` or `&'a crate::models::UserJson` into
TypeExpr trees. The parser only understands syntax; deciding what a
name means is the job of the type resolver.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import NoReturn

from ..errors import TypeExprSyntaxError
from .nodes import (
    BorrowType,
    InferType,
    OpaqueType,
    PathType,
    SequenceType,
    TupleType,
    TypeExpr,
)

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>\s+)
    | (?P<lifetime>'[A-Za-z_][A-Za-z0-9_]*)
    | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<number>[0-9][A-Za-z0-9_]*)
    | (?P<punct>::|->|[<>,()\[\];&*!+=])
    """,
    re.VERBOSE,
)


@dataclass
class Token:
    """A lexical token with its position in the source text."""

    kind: str  # "lifetime", "ident", "number", "punct", "end"
    value: str
    start: int
    end: int


def tokenize(text: str) -> list[Token]:
    """
    Split a type expression into tokens.

    Args:
        text: The type expression source

    Returns:
        List of tokens terminated by an "end" token

    Raises:
        TypeExprSyntaxError: On characters that cannot start a token
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_PATTERN.match(text, pos)
        if match is None:
            raise TypeExprSyntaxError(f"Unexpected character {text[pos]!r} at offset {pos}", cause=text)
        kind = match.lastgroup
        if kind != "ws":
            tokens.append(Token(kind, match.group(), match.start(), match.end()))
        pos = match.end()
    tokens.append(Token("end", "", len(text), len(text)))
    return tokens


class TypeExprParser:
    """Recursive descent parser for type expressions."""

    def parse(self, text: str) -> TypeExpr:
        """
        Parse a complete type expression.

        Args:
            text: The type expression source

        Returns:
            The parsed expression tree

        Raises:
            TypeExprSyntaxError: If the text is empty or malformed
        """
        if not text or not text.strip():
            raise TypeExprSyntaxError("Empty type expression", cause=text)
        self._text = text
        self._tokens = tokenize(text)
        self._pos = 0
        expr = self._parse_type()
        if self._peek().kind != "end":
            self._fail(f"Unexpected {self._peek().value!r} after type")
        return expr

    # Token helpers

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.kind != "end":
            self._pos += 1
        return token

    def _at(self, value: str) -> bool:
        token = self._peek()
        return token.kind in ("punct", "ident") and token.value == value

    def _accept(self, value: str) -> bool:
        if self._at(value):
            self._advance()
            return True
        return False

    def _expect(self, value: str) -> Token:
        if not self._at(value):
            found = self._peek().value or "end of input"
            self._fail(f"Expected {value!r}, found {found!r}")
        return self._advance()

    def _fail(self, message: str) -> NoReturn:
        raise TypeExprSyntaxError(message, cause=self._text)

    def _span(self, start: int) -> str:
        """Source text from token index `start` up to the current position."""
        begin = self._tokens[start].start
        end = self._tokens[self._pos - 1].end if self._pos > start else begin
        return self._text[begin:end]

    # Grammar

    def _parse_type(self) -> TypeExpr:
        start = self._pos
        token = self._peek()

        if self._accept("&"):
            if self._peek().kind == "lifetime":
                self._advance()
            self._accept("mut")
            inner = self._parse_type()
            return BorrowType(text=self._span(start), inner=inner)

        if self._accept("*"):
            if not (self._accept("const") or self._accept("mut")):
                self._fail("Expected 'const' or 'mut' after '*'")
            self._parse_type()
            return OpaqueType(text=self._span(start), reason="raw pointer")

        if self._accept("!"):
            return OpaqueType(text=self._span(start), reason="never type")

        if self._accept("["):
            element = self._parse_type()
            length = None
            if self._accept(";"):
                length = self._parse_length()
            self._expect("]")
            return SequenceType(text=self._span(start), element=element, length=length)

        if self._at("("):
            elements, trailing_comma = self._parse_parenthesized()
            if len(elements) == 1 and not trailing_comma:
                return elements[0]
            return TupleType(text=self._span(start), elements=elements)

        if token.kind == "ident":
            if token.value in ("dyn", "impl"):
                self._advance()
                self._parse_bounds()
                return OpaqueType(text=self._span(start), reason=f"'{token.value}' trait type")
            if token.value == "fn":
                self._advance()
                self._parse_parenthesized()
                if self._accept("->"):
                    self._parse_type()
                return OpaqueType(text=self._span(start), reason="function pointer")
            if token.value == "_":
                self._advance()
                return InferType(text="_")
            return self._parse_path()

        if self._at("::"):
            return self._parse_path()

        found = token.value or "end of input"
        self._fail(f"Expected a type, found {found!r}")

    def _parse_path(self) -> PathType:
        start = self._pos
        path = PathType()
        self._accept("::")
        while True:
            token = self._peek()
            if token.kind != "ident":
                self._fail(f"Expected a path segment, found {token.value or 'end of input'!r}")
            path.segments.append(self._advance().value)
            if self._at("<"):
                # Generic arguments only count on the last segment
                path.args = self._parse_generic_args()
            elif self._at("("):
                path.args, _ = self._parse_parenthesized()
                path.parenthesized = True
                if self._accept("->"):
                    path.args.append(self._parse_type())
            if not self._accept("::"):
                break
        path.text = self._span(start)
        return path

    def _parse_generic_args(self) -> list[TypeExpr]:
        self._expect("<")
        args: list[TypeExpr] = []
        while not self._at(">"):
            token = self._peek()
            if token.kind == "lifetime" or token.kind == "number":
                # Lifetimes and const generics carry no data shape
                self._advance()
            elif token.kind == "ident" and self._tokens[self._pos + 1].value == "=":
                # Associated type binding: `Item = T`
                self._advance()
                self._advance()
                args.append(self._parse_type())
            else:
                args.append(self._parse_type())
            if not self._accept(","):
                break
        self._expect(">")
        return args

    def _parse_parenthesized(self) -> tuple[list[TypeExpr], bool]:
        self._expect("(")
        elements: list[TypeExpr] = []
        trailing_comma = False
        while not self._at(")"):
            elements.append(self._parse_type())
            trailing_comma = self._accept(",")
            if not trailing_comma:
                break
        self._expect(")")
        return elements, trailing_comma

    def _parse_length(self) -> str:
        start = self._pos
        depth = 0
        while True:
            token = self._peek()
            if token.kind == "end":
                self._fail("Unterminated array length")
            if token.value == "]" and depth == 0:
                break
            if token.value in ("(", "["):
                depth += 1
            elif token.value in (")", "]"):
                depth -= 1
            self._advance()
        if self._pos == start:
            self._fail("Missing array length")
        return self._span(start)

    def _parse_bounds(self) -> None:
        while True:
            if self._peek().kind == "lifetime":
                self._advance()
            else:
                self._parse_path()
            if not self._accept("+"):
                break


def parse_type_expr(text: str) -> TypeExpr:
    """Parse a type expression; see TypeExprParser.parse."""
    return TypeExprParser().parse(text)
