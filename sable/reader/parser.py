"""
  Sable Reader, Lexer and Parser

- Regex lexer, recursive reader over the token list
- Emits Python primitives instead of AST node classes:

    - lists         -> Python list
    - identifiers   -> Symbol (with `annotation` for `name:Type`)
    - `:Type`       -> Annotation
    - strings       -> str
    - integers      -> int
    - true / false  -> bool
    - 'x            -> [Symbol("quote"), x]
"""

from __future__ import annotations

import re
from typing import Iterator

from sable import SExpression
from sable.errors import SableSyntaxError
from sable.types.symbol import Annotation, Symbol

TOKEN_RE = re.compile(
    r"\s*("
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<quote>')"  # '
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r'|(?P<string>"(?:\\.|[^\\"])*")'  # double-quoted strings
    r'|(?P<symbol>[^\s()\'";][^\s()";]*)'  # fallback: identifiers, numbers, annotations
    r")",
    re.DOTALL,
)

INT_RE = re.compile(r"-?\d+\Z")

ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}

QUOTE = Symbol("quote")

Token = tuple[str, str, int]


def _tokens(source: str) -> Iterator[Token]:
    """Yield (kind, text, line) for every token, skipping comments."""
    pos, line = 0, 1
    while pos < len(source):
        m = TOKEN_RE.match(source, pos)
        if not m:
            rest = source[pos:]
            if not rest.strip():
                return
            line += rest[: len(rest) - len(rest.lstrip())].count("\n")
            raise SableSyntaxError(f"line {line}: unexpected character {rest.strip()[0]!r}")
        kind = next(nm for nm in TOKEN_RE.groupindex if m.group(nm) is not None)
        line += source.count("\n", pos, m.start(kind))
        if kind != "comment":
            yield kind, m.group(kind), line
        line += m.group(kind).count("\n")
        pos = m.end()


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_value) tuples."""
    for kind, text, _ in _tokens(source):
        yield kind, text


def _unescape(body: str) -> str:
    def replace(match: re.Match) -> str:
        ch = match.group(1)
        if ch not in ESCAPES:
            raise SableSyntaxError(f"Unknown escape sequence \\{ch}")
        return ESCAPES[ch]

    return re.sub(r"\\(.)", replace, body, flags=re.DOTALL)


def read_atom(token: str) -> SExpression:
    if INT_RE.match(token):
        return int(token)
    if token == "true":
        return True
    if token == "false":
        return False
    if token.startswith(":"):
        if len(token) == 1:
            raise SableSyntaxError("Empty type annotation ':'")
        return Annotation(token[1:])
    if ":" in token:
        name, annotation = token.split(":", 1)
        if not annotation:
            raise SableSyntaxError(f"Empty type annotation in {token!r}")
        return Symbol(name, annotation)
    return Symbol(token)


class Reader:
    """Builds forms from a token list; `pos` is the next unread token."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def next_token(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def read(self) -> SExpression:
        kind, text, line = self.next_token()
        if kind == "symbol":
            return read_atom(text)
        if kind == "string":
            return _unescape(text[1:-1])
        if kind == "quote":
            if self.at_end():
                raise SableSyntaxError(f"line {line}: unexpected end of input after quote")
            return [QUOTE, self.read()]
        if kind == "lparen":
            items = []
            while not self.at_end() and self.tokens[self.pos][0] != "rparen":
                items.append(self.read())
            if self.at_end():
                raise SableSyntaxError(f"line {line}: unmatched '('")
            self.pos += 1
            return items
        if kind == "rparen":
            raise SableSyntaxError(f"line {line}: unexpected ')'")
        raise SableSyntaxError(f"line {line}: unknown token {text}")

    def read_all(self) -> Iterator[SExpression]:
        while not self.at_end():
            yield self.read()


def parse(source: str) -> Iterator[SExpression]:
    """Parse every top-level form in `source`."""
    return Reader(list(_tokens(source))).read_all()
