"""Recursive-descent parser turning Boba tokens into a program tree."""

from __future__ import annotations

from typing import Iterable, Optional

from .ast import (
    BoolLiteral,
    Expr,
    FloatLiteral,
    FunctionCall,
    FunctionDef,
    Identifier,
    IntLiteral,
    NullLiteral,
    Output,
    OutputFormatted,
    Program,
    Return,
    StringLiteral,
    TypeConversion,
    VarDeclaration,
)
from .errors import ParserError
from .lexer import Token, TokenKind, _format_float
from .types import ListType, MapType, Primitive, Type

_PRIMITIVE_TYPES = {
    TokenKind.INT_TYPE: Primitive.INT,
    TokenKind.FLOAT_TYPE: Primitive.FLOAT,
    TokenKind.STRING_TYPE: Primitive.STRING,
    TokenKind.BOOL_TYPE: Primitive.BOOL,
}

_TYPE_NAMES = {**_PRIMITIVE_TYPES, TokenKind.NULL: Primitive.NULL}


def _escape(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def _describe(token: Optional[Token]) -> str:
    """Describe an optional token the way diagnostics show it."""
    if token is None:
        return "None"
    kind = token.kind
    if kind is TokenKind.INT_LITERAL:
        inner = f"{kind.value}({token.value})"
    elif kind is TokenKind.FLOAT_LITERAL:
        text = _format_float(token.value)
        if text.lstrip("-").isdigit():
            text += ".0"
        inner = f"{kind.value}({text})"
    elif kind in (TokenKind.STRING_LITERAL, TokenKind.IDENTIFIER):
        inner = f'{kind.value}("{_escape(token.value)}")'
    else:
        inner = kind.value
    return f"Some({inner})"


class Parser:
    """Consumes a token sequence and builds syntax-tree nodes."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens: list[Token] = list(tokens)
        self.current = 0

    def parse_program(self) -> Program:
        """Parse the whole token stream into functions and a main block."""
        program = Program()
        while not self._at_end():
            if self._match(TokenKind.FUN):
                func = self.parse_function_declaration()
                program.functions[func.name] = func
            else:
                program.main_block.append(self.parse_expression())
        return program

    def parse_function_declaration(self) -> FunctionDef:
        """Parse a function after its 'fun' keyword."""
        name = self._identifier("Expected function name after 'fun' keyword")
        self._consume(TokenKind.LPAREN, "Expected '(' after function name")

        params: list[tuple[str, Type]] = []
        if not self._check(TokenKind.RPAREN):
            while True:
                param_name = self._identifier("Expected parameter name")
                self._consume(TokenKind.COLON, "Expected ':' after parameter name")
                params.append((param_name, self.parse_type()))
                if not self._match(TokenKind.COMMA):
                    break
        self._consume(TokenKind.RPAREN, "Expected ')' after parameters")

        return_types: list[Type] = []
        if self._match(TokenKind.COLON):
            while True:
                return_types.append(self.parse_type())
                if not self._match(TokenKind.COMMA):
                    break

        self._consume(TokenKind.LBRACE, "Expected '{' before function body")
        body: list[Expr] = []
        while not self._check(TokenKind.RBRACE) and not self._at_end():
            body.append(self.parse_expression())
        self._consume(TokenKind.RBRACE, "Expected '}' after function body")

        return FunctionDef(name, params, return_types, body)

    def parse_type(self) -> Type:
        """Parse a type: a primitive, null, [T] or [K:V]."""
        token = self._peek()
        if token is not None and token.kind in _TYPE_NAMES:
            self._advance()
            return _TYPE_NAMES[token.kind]
        if token is not None and token.kind is TokenKind.LBRACKET:
            self._advance()
            element = self.parse_type()
            if self._match(TokenKind.COLON):
                value = self.parse_type()
                self._consume(TokenKind.RBRACKET, "Expected ']' after map type")
                return MapType(element, value)
            self._consume(TokenKind.RBRACKET, "Expected ']' after list element type")
            return ListType(element)
        raise ParserError(f"Expected type, got {_describe(token)}")

    def parse_expression(self) -> Expr:
        """Parse one expression or statement."""
        token = self._peek()
        kind = token.kind if token is not None else None

        if kind is TokenKind.INT_LITERAL:
            self._advance()
            return IntLiteral(token.value)
        if kind is TokenKind.FLOAT_LITERAL:
            self._advance()
            return FloatLiteral(token.value)
        if kind is TokenKind.STRING_LITERAL:
            self._advance()
            return StringLiteral(token.value)
        if kind is TokenKind.TRUE:
            self._advance()
            return BoolLiteral(True)
        if kind is TokenKind.FALSE:
            self._advance()
            return BoolLiteral(False)
        if kind is TokenKind.NULL:
            self._advance()
            return NullLiteral()
        if kind in _PRIMITIVE_TYPES:
            self._advance()
            self._consume(TokenKind.LPAREN, "Expected '(' after type name")
            inner = self.parse_expression()
            self._consume(TokenKind.RPAREN, "Expected ')' after expression")
            return TypeConversion(inner, _PRIMITIVE_TYPES[kind])
        if kind is TokenKind.IDENTIFIER:
            self._advance()
            name = token.value
            if self._match(TokenKind.EQUALS):
                return VarDeclaration(name, self.parse_expression())
            if self._match(TokenKind.LPAREN):
                args = self._arguments()
                self._consume(TokenKind.RPAREN, "Expected ')' after function arguments")
                return FunctionCall(name, args)
            return Identifier(name)
        if kind is TokenKind.OUTPUT:
            self._advance()
            self._consume(TokenKind.LPAREN, "Expected '(' after 'output'")
            args = self._arguments()
            self._consume(TokenKind.RPAREN, "Expected ')' after output arguments")
            return Output(args)
        if kind is TokenKind.OUTPUT_F:
            self._advance()
            self._consume(TokenKind.LPAREN, "Expected '(' after 'outputf'")
            fmt = self.parse_expression()
            self._consume(TokenKind.RPAREN, "Expected ')' after outputf argument")
            return OutputFormatted(fmt)
        if kind is TokenKind.RETURN:
            self._advance()
            values: list[Expr] = []
            if not self._check(TokenKind.RBRACE) and not self._at_end():
                values = self._comma_separated()
            return Return(values)
        raise ParserError(f"Unexpected token: {_describe(token)}")

    def _arguments(self) -> list[Expr]:
        if self._check(TokenKind.RPAREN):
            return []
        return self._comma_separated()

    def _comma_separated(self) -> list[Expr]:
        items = [self.parse_expression()]
        while self._match(TokenKind.COMMA):
            items.append(self.parse_expression())
        return items

    def _identifier(self, message: str) -> str:
        token = self._peek()
        if token is None or token.kind is not TokenKind.IDENTIFIER:
            raise ParserError(message)
        self._advance()
        return token.value

    def _at_end(self) -> bool:
        return self.current >= len(self.tokens)

    def _peek(self) -> Optional[Token]:
        return None if self._at_end() else self.tokens[self.current]

    def _advance(self) -> Optional[Token]:
        if not self._at_end():
            self.current += 1
        return self.tokens[self.current - 1] if self.current > 0 else None

    def _check(self, kind: TokenKind) -> bool:
        token = self._peek()
        return token is not None and token.kind is kind

    def _match(self, kind: TokenKind) -> bool:
        if self._check(kind):
            self._advance()
            return True
        return False

    def _consume(self, kind: TokenKind, message: str) -> Token:
        if self._check(kind):
            return self._advance()
        raise ParserError(
            f"{message}: expected {kind.value}, got {_describe(self._peek())}"
        )


def parse(tokens: Iterable[Token]) -> Program:
    """Parse a token sequence into a Program."""
    return Parser(tokens).parse_program()