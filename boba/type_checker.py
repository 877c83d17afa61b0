"""Static type checking of parsed Boba programs."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .ast import (
    BinaryOp,
    BinaryOperator,
    BoolLiteral,
    Break,
    Continue,
    Expr,
    FloatLiteral,
    FunctionCall,
    Identifier,
    If,
    Input,
    InputFormatted,
    IntLiteral,
    ListExpr,
    Loop,
    MapExpr,
    NullLiteral,
    Output,
    OutputAddress,
    OutputFormatted,
    Program,
    Return,
    StringLiteral,
    TypeCheck,
    TypeConversion,
    UnaryOp,
    UnaryOperator,
    VarDeclaration,
)
from .errors import TypeCheckError
from .lexer import _format_float
from .types import FunctionType, ListType, MapType, Primitive, Type

_NUMERIC = (Primitive.INT, Primitive.FLOAT)

_RENAMED = {"ListExpr": "List", "MapExpr": "Map"}
_UNIT_VARIANTS = {"NullLiteral", "Continue", "Break"}
_TUPLE_VARIANTS = {
    "IntLiteral",
    "FloatLiteral",
    "StringLiteral",
    "BoolLiteral",
    "ListExpr",
    "MapExpr",
    "Identifier",
    "VarDeclaration",
    "Return",
    "Output",
    "OutputFormatted",
    "OutputAddress",
    "Input",
    "InputFormatted",
}
_OPTIONAL_FIELDS = {
    ("If", "else_branch"),
    ("Loop", "init"),
    ("Loop", "condition"),
    ("Loop", "update"),
}

_CONVERSIONS = {
    (Primitive.INT, Primitive.FLOAT): Primitive.FLOAT,
    (Primitive.FLOAT, Primitive.INT): Primitive.INT,
    (Primitive.INT, Primitive.STRING): Primitive.STRING,
    (Primitive.FLOAT, Primitive.STRING): Primitive.STRING,
    (Primitive.BOOL, Primitive.STRING): Primitive.STRING,
    (Primitive.STRING, Primitive.INT): Primitive.INT,
    (Primitive.STRING, Primitive.FLOAT): Primitive.FLOAT,
    (Primitive.STRING, Primitive.BOOL): Primitive.BOOL,
}


def _escape(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def _debug(obj: object) -> str:
    """Render a type, expression or plain value for diagnostics."""
    if obj is None:
        return "None"
    if isinstance(obj, bool):
        return "true" if obj else "false"
    if isinstance(obj, int):
        return str(obj)
    if isinstance(obj, float):
        text = _format_float(obj)
        return text + ".0" if text.lstrip("-").isdigit() else text
    if isinstance(obj, str):
        return f'"{_escape(obj)}"'
    if isinstance(obj, list):
        return "[" + ", ".join(_debug(item) for item in obj) + "]"
    if isinstance(obj, tuple):
        return "(" + ", ".join(_debug(item) for item in obj) + ")"
    if isinstance(obj, Enum):
        return "".join(part.capitalize() for part in obj.name.split("_"))
    if isinstance(obj, ListType):
        return f"List({_debug(obj.element)})"
    if isinstance(obj, MapType):
        return f"Map({_debug(obj.key)}, {_debug(obj.value)})"
    if isinstance(obj, FunctionType):
        return (
            f"Function {{ params: {_debug(list(obj.params))}, "
            f"returns: {_debug(list(obj.returns))} }}"
        )
    if dataclasses.is_dataclass(obj):
        cls_name = type(obj).__name__
        name = _RENAMED.get(cls_name, cls_name)
        if cls_name in _UNIT_VARIANTS:
            return name
        values = [(f.name, getattr(obj, f.name)) for f in dataclasses.fields(obj)]
        if cls_name in _TUPLE_VARIANTS:
            return f"{name}(" + ", ".join(_debug(v) for _, v in values) + ")"
        parts = []
        for field_name, value in values:
            rendered = _debug(value)
            if (cls_name, field_name) in _OPTIONAL_FIELDS and value is not None:
                rendered = f"Some({rendered})"
            parts.append(f"{field_name}: {rendered}")
        return f"{name} {{ " + ", ".join(parts) + " }"
    return repr(obj)


def types_compatible(actual: Type, expected: Type) -> bool:
    """Whether a value of type ``actual`` may stand where ``expected`` is wanted."""
    if actual == expected or expected is Primitive.ANY:
        return True
    return actual in _NUMERIC and expected in _NUMERIC


@dataclass
class FunctionSignature:
    """Parameter names and types of a function, and its return types."""

    param_types: list[tuple[str, Type]] = field(default_factory=list)
    return_types: list[Type] = field(default_factory=list)


class TypeChecker:
    """Checks expressions against known variable and function types."""

    def __init__(
        self,
        functions: Optional[dict[str, FunctionSignature]] = None,
        variables: Optional[dict[str, Type]] = None,
    ) -> None:
        self.functions: dict[str, FunctionSignature] = dict(functions or {})
        self.variables: dict[str, Type] = dict(variables or {})

    def _lookup(self, name: str) -> Type:
        try:
            return self.variables[name]
        except KeyError:
            raise TypeCheckError(f"Undefined variable: {name}") from None

    def _require_bool(self, expr: Expr, what: str) -> None:
        cond_type = self.infer_type(expr)
        if cond_type is not Primitive.BOOL:
            raise TypeCheckError(f"{what} must be boolean, got {_debug(cond_type)}")

    def _check_block(self, block: list[Expr]) -> None:
        for expr in block:
            self.check_expr(expr)

    def check_expr(self, expr: Expr) -> Type:
        """Check ``expr`` and return its type; raise TypeCheckError if ill-typed."""
        match expr:
            case IntLiteral():
                return Primitive.INT
            case FloatLiteral():
                return Primitive.FLOAT
            case StringLiteral():
                return Primitive.STRING
            case BoolLiteral():
                return Primitive.BOOL
            case NullLiteral():
                return Primitive.NULL
            case ListExpr(items=items):
                return self._check_list(items)
            case MapExpr(entries=entries):
                return self._check_map(entries)
            case Identifier(name=name):
                return self._lookup(name)
            case VarDeclaration(name=name, value=value):
                value_type = self.infer_type(value)
                self.variables[name] = value_type
                return value_type
            case BinaryOp(left=left, operator=operator, right=right):
                return self._check_binary(left, operator, right)
            case UnaryOp(operator=operator, expr=inner):
                return self._check_unary(operator, inner)
            case If():
                self._require_bool(expr.condition, "If condition")
                self._check_block(expr.then_branch)
                for cond, branch in expr.else_if_branches:
                    self._require_bool(cond, "Else-if condition")
                    self._check_block(branch)
                if expr.else_branch is not None:
                    self._check_block(expr.else_branch)
                return Primitive.NULL
            case Loop():
                if expr.init is not None:
                    self.check_expr(expr.init)
                if expr.condition is not None:
                    self._require_bool(expr.condition, "Loop condition")
                if expr.update is not None:
                    self.check_expr(expr.update)
                self._check_block(expr.body)
                return Primitive.NULL
            case Continue() | Break():
                return Primitive.NULL
            case Return(values=values):
                self._check_block(values)
                return Primitive.NULL
            case FunctionCall(name=name, args=args):
                return self._check_call(name, args)
            case Output(args=args):
                self._check_block(args)
                return Primitive.NULL
            case OutputFormatted(expr=inner):
                self._require_string(inner, "outputf requires a string argument")
                return Primitive.NULL
            case OutputAddress(expr=inner):
                self.check_expr(inner)
                return Primitive.NULL
            case Input(expr=inner):
                self._require_string(inner, "input requires a string prompt")
                return Primitive.STRING
            case InputFormatted(expr=inner):
                self._require_string(inner, "inputf requires a string argument")
                return Primitive.STRING
            case TypeConversion(expr=inner, target_type=target):
                source_type = self.infer_type(inner)
                result = _CONVERSIONS.get((source_type, target))
                if result is None:
                    raise TypeCheckError(
                        f"Cannot convert from {_debug(source_type)} to {_debug(target)}"
                    )
                return result
            case TypeCheck(expr=inner):
                self.check_expr(inner)
                return Primitive.BOOL
        raise TypeCheckError(f"Type checking not implemented for {_debug(expr)}")

    def _require_string(self, expr: Expr, message: str) -> None:
        expr_type = self.check_expr(expr)
        if expr_type is not Primitive.STRING:
            raise TypeCheckError(f"{message}, got {_debug(expr_type)}")

    def _check_list(self, items: list[Expr]) -> Type:
        if not items:
            return ListType(Primitive.ANY)
        first_type = self.infer_type(items[0])
        for index, item in enumerate(items[1:], start=1):
            item_type = self.infer_type(item)
            if not types_compatible(item_type, first_type):
                raise TypeCheckError(
                    f"List contains mixed types: item {index} has type "
                    f"{_debug(item_type)}, expected {_debug(first_type)}"
                )
        return ListType(first_type)

    def _check_map(self, entries: list[tuple[Expr, Expr]]) -> Type:
        if not entries:
            return MapType(Primitive.ANY, Primitive.ANY)
        first_key, first_val = entries[0]
        key_type0 = self.infer_type(first_key)
        val_type0 = self.infer_type(first_val)
        for index, (key, val) in enumerate(entries[1:], start=1):
            key_type = self.infer_type(key)
            if not types_compatible(key_type, key_type0):
                raise TypeCheckError(
                    f"Map contains mixed key types: entry {index} has key type "
                    f"{_debug(key_type)}, expected {_debug(key_type0)}"
                )
            val_type = self.infer_type(val)
            if not types_compatible(val_type, val_type0):
                raise TypeCheckError(
                    f"Map contains mixed value types: entry {index} has value type "
                    f"{_debug(val_type)}, expected {_debug(val_type0)}"
                )
        return MapType(key_type0, val_type0)

    def _check_binary(self, left: Expr, operator: BinaryOperator, right: Expr) -> Type:
        lt = self.infer_type(left)
        rt = self.infer_type(right)
        pair = f"{_debug(lt)} and {_debug(rt)}"
        both_numeric = lt in _NUMERIC and rt in _NUMERIC
        arithmetic_result = (
            lt if lt == rt else Primitive.FLOAT
        ) if both_numeric else None

        if operator is BinaryOperator.ADD:
            if arithmetic_result is not None:
                return arithmetic_result
            if lt is Primitive.STRING and rt is Primitive.STRING:
                return Primitive.STRING
            raise TypeCheckError(f"Cannot add values of types {pair}")
        if operator in (
            BinaryOperator.SUBTRACT,
            BinaryOperator.MULTIPLY,
            BinaryOperator.DIVIDE,
            BinaryOperator.MODULO,
        ):
            if arithmetic_result is not None:
                return arithmetic_result
            raise TypeCheckError(f"Cannot perform arithmetic on types {pair}")
        if operator in (BinaryOperator.EQUAL, BinaryOperator.NOT_EQUAL):
            if types_compatible(lt, rt):
                return Primitive.BOOL
            raise TypeCheckError(
                f"Cannot compare values of incompatible types {pair}"
            )
        if operator in (BinaryOperator.AND, BinaryOperator.OR):
            if lt is Primitive.BOOL and rt is Primitive.BOOL:
                return Primitive.BOOL
            raise TypeCheckError(
                f"Logical operators require boolean operands, got {pair}"
            )
        if both_numeric or (lt is Primitive.STRING and rt is Primitive.STRING):
            return Primitive.BOOL
        raise TypeCheckError(f"Cannot compare values of types {pair}")

    def _check_unary(self, operator: UnaryOperator, inner: Expr) -> Type:
        expr_type = self.infer_type(inner)
        if operator is UnaryOperator.NEGATE:
            if expr_type in _NUMERIC:
                return expr_type
            raise TypeCheckError(f"Cannot negate value of type {_debug(expr_type)}")
        if operator is UnaryOperator.NOT:
            if expr_type is Primitive.BOOL:
                return Primitive.BOOL
            raise TypeCheckError(
                f"Cannot apply logical NOT to type {_debug(expr_type)}"
            )
        return Primitive.STRING

    def _check_call(self, name: str, args: list[Expr]) -> Type:
        signature = self.functions.get(name)
        if signature is None:
            raise TypeCheckError(f"Undefined function: {name}")
        if len(args) != len(signature.param_types):
            raise TypeCheckError(
                f"Function '{name}' expects {len(signature.param_types)} "
                f"arguments, got {len(args)}"
            )
        for index, (arg, (_, expected)) in enumerate(zip(args, signature.param_types)):
            arg_type = self.infer_type(arg)
            if not types_compatible(arg_type, expected):
                raise TypeCheckError(
                    f"Function '{name}' argument {index} has type "
                    f"{_debug(arg_type)}, expected {_debug(expected)}"
                )
        if not signature.return_types:
            return Primitive.NULL
        # Several return values have no tuple type; the first stands for them.
        return signature.return_types[0]

    def infer_type(self, expr: Expr) -> Type:
        """Infer the type of a simple expression without checking it fully."""
        match expr:
            case IntLiteral():
                return Primitive.INT
            case FloatLiteral():
                return Primitive.FLOAT
            case StringLiteral():
                return Primitive.STRING
            case BoolLiteral():
                return Primitive.BOOL
            case NullLiteral():
                return Primitive.NULL
            case Identifier(name=name):
                return self._lookup(name)
            case TypeConversion(target_type=target):
                return target
        raise TypeCheckError(
            f"Cannot infer type of complex expression: {_debug(expr)}"
        )


def check_types(program: Program) -> list[str]:
    """Check a whole program and return the messages of all type errors found."""
    signatures = {
        name: FunctionSignature(list(func.params), list(func.return_types))
        for name, func in program.functions.items()
    }
    checker = TypeChecker(signatures)
    errors: list[str] = []

    for name, func in program.functions.items():
        local = TypeChecker(signatures, dict(func.params))
        for expr in func.body:
            try:
                local.check_expr(expr)
            except TypeCheckError as error:
                errors.append(f"In function '{name}': {error.message}")

        if not func.body:
            continue
        last = func.body[-1]
        if isinstance(last, Return):
            values = last.values
            if len(values) != len(func.return_types):
                errors.append(
                    f"Function '{name}' returns {len(values)} values, but declared "
                    f"to return {len(func.return_types)} values"
                )
                continue
            for index, (value, expected) in enumerate(zip(values, func.return_types)):
                try:
                    actual = local.infer_type(value)
                except TypeCheckError:
                    continue
                if not types_compatible(actual, expected):
                    errors.append(
                        f"Function '{name}' return value {index} has type "
                        f"{_debug(actual)}, expected {_debug(expected)}"
                    )
        elif func.return_types and func.return_types != [Primitive.NULL]:
            errors.append(f"Function '{name}' is missing return statement")

    for expr in program.main_block:
        try:
            checker.check_expr(expr)
        except TypeCheckError as error:
            errors.append(error.message)

    return errors