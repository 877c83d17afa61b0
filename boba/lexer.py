"""Tokenizer for Boba source text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable, NamedTuple, Optional, Union

from .errors import LexerError


class TokenKind(Enum):
    """Kinds of token; each value is the kind's display name."""

    FUN = "Fun"
    IF = "If"
    ELSE_IF = "ElseIf"
    ELSE = "Else"
    LOOP = "Loop"
    TILL = "Till"
    CONTINUE = "Continue"
    BREAK = "Break"
    RETURN = "Return"
    IS = "Is"
    NOT_KEYWORD = "NotKeyword"
    TRUE = "True"
    FALSE = "False"
    NULL = "Null"
    OUTPUT = "Output"
    OUTPUT_F = "OutputF"
    OUTPUT_ADDR = "OutputAddr"
    INPUT = "Input"
    INPUT_F = "InputF"
    INT_TYPE = "IntType"
    FLOAT_TYPE = "FloatType"
    STRING_TYPE = "StringType"
    BOOL_TYPE = "BoolType"
    INT_LITERAL = "IntLiteral"
    FLOAT_LITERAL = "FloatLiteral"
    STRING_LITERAL = "StringLiteral"
    IDENTIFIER = "Identifier"
    PLUS = "Plus"
    MINUS = "Minus"
    STAR = "Star"
    SLASH = "Slash"
    PERCENT = "Percent"
    EQUALS = "Equals"
    DOUBLE_EQUALS = "DoubleEquals"
    NOT_EQUALS = "NotEquals"
    LESS_THAN = "LessThan"
    LESS_THAN_EQUALS = "LessThanEquals"
    GREATER_THAN = "GreaterThan"
    GREATER_THAN_EQUALS = "GreaterThanEquals"
    AND = "And"
    OR = "Or"
    NOT = "Not"
    DOT = "Dot"
    ELLIPSIS = "Ellipsis"
    LPAREN = "LParen"
    RPAREN = "RParen"
    LBRACE = "LBrace"
    RBRACE = "RBrace"
    LBRACKET = "LBracket"
    RBRACKET = "RBracket"
    COLON = "Colon"
    COMMA = "Comma"
    SEMICOLON = "Semicolon"


def _format_float(value: float) -> str:
    """Render a float in plain decimal notation without a trailing '.0'."""
    if value != value:
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass(frozen=True)
class Token:
    """A token with its literal value, if any, and its span in the source."""

    kind: TokenKind
    value: Union[int, float, str, None] = None
    span: tuple[int, int] = (0, 0)

    def __str__(self) -> str:
        if self.kind in (TokenKind.INT_LITERAL, TokenKind.IDENTIFIER):
            return str(self.value)
        if self.kind is TokenKind.FLOAT_LITERAL:
            return _format_float(self.value)
        if self.kind is TokenKind.STRING_LITERAL:
            return f'"{self.value}"'
        return self.kind.value


class LineInfo(NamedTuple):
    line: int
    column: int


def line_info(source: str, pos: int) -> LineInfo:
    """Return the 1-based line and column of position ``pos`` in ``source``."""
    line, column = 1, 1
    for char in source[:pos]:
        if char == "\n":
            line += 1
            column = 1
        else:
            column += 1
    return LineInfo(line, column)


_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


def _parse_int(text: str) -> int:
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range: {text}")
    return value


class _Rule(NamedTuple):
    pattern: re.Pattern
    kind: Optional[TokenKind]
    convert: Optional[Callable[[str], Union[int, float, str]]] = None


_FIXED = [
    ("fun", TokenKind.FUN),
    ("if", TokenKind.IF),
    ("elseif", TokenKind.ELSE_IF),
    ("else", TokenKind.ELSE),
    ("loop", TokenKind.LOOP),
    ("till", TokenKind.TILL),
    ("continue", TokenKind.CONTINUE),
    ("break", TokenKind.BREAK),
    ("return", TokenKind.RETURN),
    ("is", TokenKind.IS),
    ("not", TokenKind.NOT_KEYWORD),
    ("true", TokenKind.TRUE),
    ("false", TokenKind.FALSE),
    ("null", TokenKind.NULL),
    ("output", TokenKind.OUTPUT),
    ("outputf", TokenKind.OUTPUT_F),
    ("output&", TokenKind.OUTPUT_ADDR),
    ("input", TokenKind.INPUT),
    ("inputf", TokenKind.INPUT_F),
    ("int", TokenKind.INT_TYPE),
    ("float", TokenKind.FLOAT_TYPE),
    ("string", TokenKind.STRING_TYPE),
    ("bool", TokenKind.BOOL_TYPE),
    ("+", TokenKind.PLUS),
    ("-", TokenKind.MINUS),
    ("*", TokenKind.STAR),
    ("/", TokenKind.SLASH),
    ("%", TokenKind.PERCENT),
    ("=", TokenKind.EQUALS),
    ("==", TokenKind.DOUBLE_EQUALS),
    ("!=", TokenKind.NOT_EQUALS),
    ("<", TokenKind.LESS_THAN),
    ("<=", TokenKind.LESS_THAN_EQUALS),
    (">", TokenKind.GREATER_THAN),
    (">=", TokenKind.GREATER_THAN_EQUALS),
    ("&&", TokenKind.AND),
    ("||", TokenKind.OR),
    ("!", TokenKind.NOT),
    (".", TokenKind.DOT),
    ("...", TokenKind.ELLIPSIS),
    ("(", TokenKind.LPAREN),
    (")", TokenKind.RPAREN),
    ("{", TokenKind.LBRACE),
    ("}", TokenKind.RBRACE),
    ("[", TokenKind.LBRACKET),
    ("]", TokenKind.RBRACKET),
    (":", TokenKind.COLON),
    (",", TokenKind.COMMA),
    (";", TokenKind.SEMICOLON),
]

# Fixed tokens come first so that they win a tie against a pattern of the
# same length (a keyword over an identifier).
_RULES = [_Rule(re.compile(re.escape(text)), kind) for text, kind in _FIXED] + [
    _Rule(re.compile(r"-?[0-9]+"), TokenKind.INT_LITERAL, _parse_int),
    _Rule(re.compile(r"-?[0-9]+\.[0-9]+"), TokenKind.FLOAT_LITERAL, float),
    _Rule(
        re.compile(r'"(?:[^"\\]|\\.)*"'),
        TokenKind.STRING_LITERAL,
        lambda text: text[1:-1],
    ),
    _Rule(re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*"), TokenKind.IDENTIFIER, str),
    _Rule(re.compile(r"#[^\n]*"), None),
    _Rule(re.compile(r"###[^#]*###"), None),
    _Rule(re.compile(r"[ \t\n\r]+"), None),
]


def _lexical_error(source: str, pos: int, text: str) -> LexerError:
    info = line_info(source, pos)
    return LexerError(
        f"Lexical error at line {info.line}, column {info.column}: "
        f"invalid token '{text}'"
    )


def tokenize(source: str) -> list[Token]:
    """Split ``source`` into tokens, skipping whitespace and comments.

    Raises LexerError at the first text that forms no token.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(source):
        best: Optional[tuple[re.Match, _Rule]] = None
        for rule in _RULES:
            match = rule.pattern.match(source, pos)
            if match and match.end() > pos and (best is None or match.end() > best[0].end()):
                best = (match, rule)
        if best is None:
            raise _lexical_error(source, pos, source[pos])
        match, rule = best
        text = match.group()
        if rule.kind is not None:
            value = None
            if rule.convert is not None:
                try:
                    value = rule.convert(text)
                except ValueError:
                    raise _lexical_error(source, pos, text) from None
            tokens.append(Token(rule.kind, value, (pos, match.end())))
        pos = match.end()
    return tokens