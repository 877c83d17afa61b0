"""Syntax tree of the Boba language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .types import Type


class BinaryOperator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    AND = "&&"
    OR = "||"


class UnaryOperator(Enum):
    NEGATE = "-"
    NOT = "!"
    ADDRESS_OF = "&"


@dataclass
class IntLiteral:
    value: int


@dataclass
class FloatLiteral:
    value: float


@dataclass
class StringLiteral:
    value: str


@dataclass
class BoolLiteral:
    value: bool


@dataclass
class NullLiteral:
    pass


@dataclass
class ListExpr:
    items: list[Expr] = field(default_factory=list)


@dataclass
class MapExpr:
    entries: list[tuple[Expr, Expr]] = field(default_factory=list)


@dataclass
class Identifier:
    name: str


@dataclass
class VarDeclaration:
    name: str
    value: Expr


@dataclass
class BinaryOp:
    left: Expr
    operator: BinaryOperator
    right: Expr


@dataclass
class UnaryOp:
    operator: UnaryOperator
    expr: Expr


@dataclass
class If:
    condition: Expr
    then_branch: list[Expr]
    else_if_branches: list[tuple[Expr, list[Expr]]] = field(default_factory=list)
    else_branch: Optional[list[Expr]] = None


@dataclass
class Loop:
    init: Optional[Expr] = None
    condition: Optional[Expr] = None
    update: Optional[Expr] = None
    body: list[Expr] = field(default_factory=list)


@dataclass
class Continue:
    pass


@dataclass
class Break:
    pass


@dataclass
class Return:
    values: list[Expr] = field(default_factory=list)


@dataclass
class FunctionDeclaration:
    name: str
    params: list[tuple[str, Type]] = field(default_factory=list)
    return_types: list[Type] = field(default_factory=list)
    body: list[Expr] = field(default_factory=list)


@dataclass
class FunctionCall:
    name: str
    args: list[Expr] = field(default_factory=list)


@dataclass
class Output:
    args: list[Expr] = field(default_factory=list)


@dataclass
class OutputFormatted:
    expr: Expr


@dataclass
class OutputAddress:
    expr: Expr


@dataclass
class Input:
    expr: Expr


@dataclass
class InputFormatted:
    expr: Expr


@dataclass
class TypeConversion:
    expr: Expr
    target_type: Type


@dataclass
class TypeCheck:
    expr: Expr
    check_type: Type
    is_negated: bool = False


Expr = Union[
    IntLiteral,
    FloatLiteral,
    StringLiteral,
    BoolLiteral,
    NullLiteral,
    ListExpr,
    MapExpr,
    Identifier,
    VarDeclaration,
    BinaryOp,
    UnaryOp,
    If,
    Loop,
    Continue,
    Break,
    Return,
    FunctionDeclaration,
    FunctionCall,
    Output,
    OutputFormatted,
    OutputAddress,
    Input,
    InputFormatted,
    TypeConversion,
    TypeCheck,
]


@dataclass
class FunctionDef:
    """A named function with its signature and body."""

    name: str
    params: list[tuple[str, Type]] = field(default_factory=list)
    return_types: list[Type] = field(default_factory=list)
    body: list[Expr] = field(default_factory=list)


@dataclass
class Program:
    """A parsed program: its functions by name and its top-level block."""

    functions: dict[str, FunctionDef] = field(default_factory=dict)
    main_block: list[Expr] = field(default_factory=list)