"""S-expression parsing and generation for Specctra DSN/SES files.

Specctra design (.dsn) and session (.ses) files are Lisp-like trees:
- Atoms: unquoted tokens (keywords, identifiers, numbers)
- Quoted strings: "text with spaces or parentheses"
- Lists: (keyword child1 child2 ...)

This module turns nested Python lists into formatted text and back. The
document model in :mod:`circuit_dsn.dsn.model` builds these lists; nothing
here knows about DSN semantics beyond which keywords print inline.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, Decimal
from typing import TYPE_CHECKING, Union

from ..errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class Symbol(str):
    """Atom written verbatim, never quoted (e.g. the `"` in `string_quote`)."""

    __slots__ = ()


# S-expression atom types
SExprAtom = Union[str, int, float, Decimal]
SExprNode = Union[SExprAtom, "SExprList"]
SExprList = list["SExprNode"]

# Pattern for tokens requiring quoting
_NEEDS_QUOTE_RE = re.compile(r"[\s()]")

# Characters a `(string_quote ")` quoted token cannot hold; there are no escapes.
_UNQUOTABLE_RE = re.compile(r'["\n\r]')

# One decimal place matches the `(resolution um 10)` header.
DEFAULT_NUMBER_PLACES = 1


@dataclass
class SExprParseError(Exception):
    """Error during S-expression parsing."""

    message: str
    position: int = 0
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"{self.message} at line {self.line}, column {self.column} (position {self.position})"


@dataclass
class SExprToken:
    """Token from S-expression tokenizer."""

    type: str  # 'LPAREN', 'RPAREN', 'STRING', 'ATOM'
    value: str
    position: int
    line: int
    column: int


@dataclass
class SExprWriter:
    """Configurable S-expression writer with pretty-printing.

    A list is written on one line when none of its children are lists, or
    when its keyword is in ``inline_keywords``. Otherwise the keyword and any
    leading atoms share the first line and each child list gets its own
    indented line.

    Attributes:
        indent: Number of spaces per indentation level.
        number_places: Decimal places kept when writing floats.
        inline_keywords: Keywords whose lists always print on one line.
    """

    indent: int = 2
    number_places: int = DEFAULT_NUMBER_PLACES
    inline_keywords: frozenset[str] = field(
        default_factory=lambda: frozenset(
            {
                "clearance",
                "pins",
                "place",
                "pin",
                "circle",
                "rect",
                "polygon",
                "path",
                "wire",
            }
        )
    )

    def write(self, node: SExprNode) -> str:
        """Write S-expression node to string.

        Args:
            node: S-expression node (atom or list).

        Returns:
            Formatted S-expression string.
        """
        lines: list[str] = []
        self._write_node(node, 0, lines)
        return "\n".join(lines)

    def _atom(self, value: SExprNode) -> str:
        return format_atom(value, places=self.number_places)  # type: ignore[arg-type]

    def _write_node(self, node: SExprNode, depth: int, lines: list[str]) -> None:
        if isinstance(node, list):
            self._write_list(node, depth, lines)
        else:
            lines.append(" " * (depth * self.indent) + self._atom(node))

    def _write_list(self, items: SExprList, depth: int, lines: list[str]) -> None:
        prefix = " " * (depth * self.indent)
        if not items:
            lines.append(prefix + "()")
            return

        first = items[0]
        keyword = first if isinstance(first, str) else ""
        has_children = any(isinstance(item, list) for item in items[1:])

        if not has_children or keyword in self.inline_keywords:
            lines.append(prefix + self._format_inline(items))
            return

        # Leading atoms stay on the keyword line; child lists are indented.
        head: list[str] = []
        rest_index = len(items)
        for index, item in enumerate(items):
            if isinstance(item, list):
                rest_index = index
                break
            head.append(self._atom(item))
        lines.append(prefix + "(" + " ".join(head))
        for item in items[rest_index:]:
            self._write_node(item, depth + 1, lines)
        lines.append(prefix + ")")

    def _format_inline(self, node: SExprNode) -> str:
        if isinstance(node, list):
            return "(" + " ".join(self._format_inline(item) for item in node) + ")"
        return self._atom(node)


def format_atom(value: SExprAtom, *, places: int = DEFAULT_NUMBER_PLACES) -> str:
    """Format an atom value for S-expression output.

    Args:
        value: Atom value (string, int, float, or Decimal).
        places: Decimal places kept for floats and Decimals.

    Returns:
        Formatted string representation.
    """
    if isinstance(value, Symbol):
        return str(value)
    if isinstance(value, str):
        return format_string(value)
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        # Use Decimal for consistent formatting
        return format_decimal(Decimal(repr(value)), places=places)
    if isinstance(value, Decimal):
        return format_decimal(value, places=places)
    return str(value)


def format_string(value: str) -> str:
    """Format a string value, quoting if necessary.

    Quoted tokens are written verbatim between double quotes, as the
    ``(string_quote ")`` header declares; there is no escape syntax.

    Args:
        value: String value.

    Returns:
        Quoted string if needed, otherwise raw string.

    Raises:
        ConfigurationError: If the value contains a double quote or a line break.
    """
    if _UNQUOTABLE_RE.search(value):
        raise ConfigurationError(f"Cannot write {value!r}: double quotes and line breaks are not allowed in names")
    if not value:
        return '""'
    if _NEEDS_QUOTE_RE.search(value):
        return f'"{value}"'
    return value


def format_decimal(value: Decimal, *, places: int | None = None) -> str:
    """Format a Decimal value, removing trailing zeros.

    Args:
        value: Decimal value.
        places: Round to this many decimal places first (half-even), if given.

    Returns:
        Formatted string without unnecessary trailing zeros or a negative zero.
    """
    if places is not None:
        value = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_EVEN)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in {"", "-0"}:
        return "0"
    return text


class SExprTokenizer:
    """Tokenizer for S-expression parsing."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def tokenize(self) -> Iterator[SExprToken]:
        """Generate tokens from input text."""
        while self.pos < len(self.text):
            self._skip_whitespace()
            if self.pos >= len(self.text):
                break

            char = self.text[self.pos]
            start_pos = self.pos
            start_line = self.line
            start_column = self.column

            if char == "(":
                self._advance()
                yield SExprToken("LPAREN", "(", start_pos, start_line, start_column)
            elif char == ")":
                self._advance()
                yield SExprToken("RPAREN", ")", start_pos, start_line, start_column)
            elif char == '"' and not self._is_string_quote_declaration():
                value = self._read_quoted_string()
                yield SExprToken("STRING", value, start_pos, start_line, start_column)
            else:
                value = self._read_atom()
                yield SExprToken("ATOM", value, start_pos, start_line, start_column)

    def _is_string_quote_declaration(self) -> bool:
        """True for the bare quote in `(string_quote ")`."""
        if not self.text.startswith('")', self.pos):
            return False
        window = self.text[max(0, self.pos - 64) : self.pos]
        return window.rstrip().endswith("string_quote")

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in " \t\n\r":
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance(self) -> str:
        char = self.text[self.pos]
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _read_quoted_string(self) -> str:
        self._advance()  # Skip opening quote
        chars: list[str] = []

        while self.pos < len(self.text):
            char = self._advance()
            if char == '"':
                return "".join(chars)
            chars.append(char)

        raise SExprParseError("Unterminated string", self.pos, self.line, self.column)

    def _read_atom(self) -> str:
        chars: list[str] = [self._advance()]
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char in ' \t\n\r()"':
                break
            chars.append(self._advance())
        return "".join(chars)


def parse(text: str) -> SExprNode:
    """Parse S-expression text into nested Python structure.

    Args:
        text: S-expression text to parse.

    Returns:
        Parsed S-expression (atom or nested lists).

    Raises:
        SExprParseError: If parsing fails.
    """
    tokenizer = SExprTokenizer(text)
    tokens = list(tokenizer.tokenize())
    if not tokens:
        raise SExprParseError("Empty input", 0, 1, 1)

    result, pos = _parse_node(tokens, 0)
    if pos < len(tokens):
        tok = tokens[pos]
        raise SExprParseError(
            f"Unexpected token after expression: {tok.value}",
            tok.position,
            tok.line,
            tok.column,
        )
    return result


def _parse_node(tokens: Sequence[SExprToken], pos: int) -> tuple[SExprNode, int]:
    if pos >= len(tokens):
        raise SExprParseError("Unexpected end of input", 0, 1, 1)

    token = tokens[pos]

    if token.type == "LPAREN":
        return _parse_list(tokens, pos)
    if token.type == "RPAREN":
        raise SExprParseError(
            "Unexpected closing parenthesis",
            token.position,
            token.line,
            token.column,
        )
    if token.type == "STRING":
        return token.value, pos + 1
    # ATOM - try to parse as number
    return _parse_atom(token.value), pos + 1


def _parse_list(tokens: Sequence[SExprToken], pos: int) -> tuple[SExprList, int]:
    opening = tokens[pos]
    pos += 1  # Skip LPAREN
    items: SExprList = []

    while pos < len(tokens):
        if tokens[pos].type == "RPAREN":
            return items, pos + 1
        node, pos = _parse_node(tokens, pos)
        items.append(node)

    raise SExprParseError("Unclosed list", opening.position, opening.line, opening.column)


def _parse_atom(value: str) -> SExprAtom:
    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def dump(node: SExprNode, *, indent: int = 2, number_places: int = DEFAULT_NUMBER_PLACES) -> str:
    """Dump S-expression node to formatted string.

    Args:
        node: S-expression node to dump.
        indent: Spaces per indentation level.
        number_places: Decimal places kept for floats.

    Returns:
        Formatted S-expression string.
    """
    writer = SExprWriter(indent=indent, number_places=number_places)
    return writer.write(node)


def dump_compact(node: SExprNode) -> str:
    """Dump S-expression node to compact (single-line) string."""
    if isinstance(node, list):
        inner = " ".join(dump_compact(item) for item in node)
        return f"({inner})"
    return format_atom(node)


def find_children(node: SExprNode, keyword: str) -> list[SExprList]:
    """Return the direct child lists of ``node`` whose first atom is ``keyword``."""
    if not isinstance(node, list):
        return []
    return [child for child in node if isinstance(child, list) and child and child[0] == keyword]


def find_first(node: SExprNode, keyword: str) -> SExprList | None:
    """Return the first direct child list headed by ``keyword``, or None."""
    children = find_children(node, keyword)
    return children[0] if children else None
