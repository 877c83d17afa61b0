"""Tree-walking evaluator for parsed Boba programs."""

from __future__ import annotations

import math
import re
import sys
from typing import Optional, TextIO

from .ast import (
    BoolLiteral,
    Expr,
    FloatLiteral,
    FunctionCall,
    Identifier,
    IntLiteral,
    ListExpr,
    MapExpr,
    NullLiteral,
    Output,
    OutputFormatted,
    Program,
    Return,
    StringLiteral,
    TypeConversion,
    VarDeclaration,
)
from .errors import BobaRuntimeError
from .lexer import _format_float
from .type_checker import _debug
from .types import FunctionValue, MapValue, Primitive, Type, Value

_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

_INT_TEXT = re.compile(r"[+-]?[0-9]+")
_FLOAT_TEXT = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.IGNORECASE,
)


class Environment:
    """Variables and functions visible while a block runs."""

    def __init__(self) -> None:
        self.variables: dict[str, Value] = {}
        self.functions: dict[str, Value] = {}

    def define(self, name: str, value: Value) -> None:
        """Bind ``name`` to ``value``, replacing any earlier binding."""
        self.variables[name] = value

    def get(self, name: str) -> Value:
        """Return the value bound to ``name``; raise KeyError if there is none."""
        return self.variables[name]

    def define_function(self, name: str, value: Value) -> None:
        """Register a function value under ``name``."""
        self.functions[name] = value

    def get_function(self, name: str) -> Value:
        """Return the function registered as ``name``; raise KeyError if none."""
        return self.functions[name]


def format_value(value: Value) -> str:
    """Render a runtime value the way ``output`` prints it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "[" + ", ".join(format_value(item) for item in value) + "]"
    if isinstance(value, MapValue):
        return (
            "["
            + ", ".join(f"{format_value(k)}:{format_value(v)}" for k, v in value)
            + "]"
        )
    if isinstance(value, FunctionValue):
        return f"<function {value.name}>"
    raise TypeError(f"not a Boba value: {value!r}")


def _debug_value(value: Value) -> str:
    """Render a runtime value for diagnostics."""
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return f"Bool({'true' if value else 'false'})"
    if isinstance(value, int):
        return f"Int({value})"
    if isinstance(value, float):
        return f"Float({_debug(value)})"
    if isinstance(value, str):
        return f"String({_debug(value)})"
    if isinstance(value, list):
        return "List([" + ", ".join(_debug_value(item) for item in value) + "])"
    if isinstance(value, MapValue):
        pairs = ", ".join(f"({_debug_value(k)}, {_debug_value(v)})" for k, v in value)
        return f"Map([{pairs}])"
    if isinstance(value, FunctionValue):
        return (
            f"Function {{ name: {_debug(value.name)}, "
            f"params: {_debug(list(value.params))}, "
            f"return_types: {_debug(list(value.return_types))}, "
            f"body: {_debug(list(value.body))} }}"
        )
    return repr(value)


def _float_to_int(value: float) -> int:
    if math.isnan(value):
        return 0
    if value >= 2**63:
        return _INT_MAX
    if value <= _INT_MIN:
        return _INT_MIN
    return int(value)


def _parse_int(text: str) -> int:
    if _INT_TEXT.fullmatch(text):
        number = int(text)
        if _INT_MIN <= number <= _INT_MAX:
            return number
    raise BobaRuntimeError(f"Cannot convert '{text}' to int")


def _parse_float(text: str) -> float:
    if _FLOAT_TEXT.fullmatch(text):
        return float(text)
    raise BobaRuntimeError(f"Cannot convert '{text}' to float")


def _convert(value: Value, target: Type) -> Value:
    if isinstance(value, bool):
        if target is Primitive.STRING:
            return "true" if value else "false"
    elif isinstance(value, int):
        if target is Primitive.FLOAT:
            return float(value)
        if target is Primitive.STRING:
            return str(value)
    elif isinstance(value, float):
        if target is Primitive.INT:
            return _float_to_int(value)
        if target is Primitive.STRING:
            return _format_float(value)
    elif isinstance(value, str):
        if target is Primitive.INT:
            return _parse_int(value)
        if target is Primitive.FLOAT:
            return _parse_float(value)
        if target is Primitive.BOOL:
            lowered = value.lower()
            if lowered == "true":
                return True
            if lowered == "false":
                return False
            raise BobaRuntimeError(f"Cannot convert '{value}' to bool")
    raise BobaRuntimeError(
        f"Cannot convert {_debug_value(value)} to {_debug(target)}"
    )


class _Evaluator:
    def __init__(self, out: TextIO) -> None:
        self.out = out

    def _write_line(self, text: str) -> None:
        try:
            self.out.write(text + "\n")
            self.out.flush()
        except OSError as error:
            raise BobaRuntimeError(str(error)) from error

    def run_block(self, body: list[Expr], env: Environment) -> None:
        for expr in body:
            self.evaluate(expr, env)

    def evaluate(self, expr: Expr, env: Environment) -> Value:
        match expr:
            case IntLiteral(value=v) | FloatLiteral(value=v) | StringLiteral(
                value=v
            ) | BoolLiteral(value=v):
                return v
            case NullLiteral():
                return None
            case ListExpr(items=items):
                return [self.evaluate(item, env) for item in items]
            case MapExpr(entries=entries):
                pairs = []
                for key, val in entries:
                    key_value = self.evaluate(key, env)
                    pairs.append((key_value, self.evaluate(val, env)))
                return MapValue(pairs)
            case VarDeclaration(name=name, value=value_expr):
                value = self.evaluate(value_expr, env)
                env.define(name, value)
                return value
            case Identifier(name=name):
                try:
                    return env.get(name)
                except KeyError:
                    raise BobaRuntimeError(f"Undefined variable: {name}") from None
            case Output(args=args):
                values = [self.evaluate(arg, env) for arg in args]
                self._write_line(" ".join(format_value(v) for v in values))
                return None
            case OutputFormatted(expr=inner):
                text = self.evaluate(inner, env)
                if not isinstance(text, str):
                    raise BobaRuntimeError("outputf requires a string argument")
                self._write_line(text.replace("{", "").replace("}", ""))
                return None
            case Return(values=values):
                # Several return values have no tuple type; the first stands for them.
                return self.evaluate(values[0], env) if values else None
            case FunctionCall(name=name, args=args):
                return self._call(name, args, env)
            case TypeConversion(expr=inner, target_type=target):
                return _convert(self.evaluate(inner, env), target)
        raise BobaRuntimeError(f"Unsupported expression: {_debug(expr)}")

    def _call(self, name: str, args: list[Expr], env: Environment) -> Value:
        func = env.functions.get(name)
        if not isinstance(func, FunctionValue):
            raise BobaRuntimeError(f"Undefined function: {name}")
        local = Environment()
        local.functions.update(env.functions)
        if len(args) != len(func.params):
            raise BobaRuntimeError(
                f"Function '{name}' expects {len(func.params)} arguments, "
                f"got {len(args)}"
            )
        for (param_name, _), arg in zip(func.params, args):
            local.define(param_name, self.evaluate(arg, env))
        result: Value = None
        for stmt in func.body:
            result = self.evaluate(stmt, local)
            if isinstance(stmt, Return):
                break
        return result


def interpret(program: Program, out: Optional[TextIO] = None) -> None:
    """Run ``program``, writing its output to ``out`` (standard output by default).

    A function named ``main`` runs in place of the top-level block.
    Raises BobaRuntimeError when evaluation fails.
    """
    evaluator = _Evaluator(sys.stdout if out is None else out)
    env = Environment()
    for name, func in program.functions.items():
        env.define_function(
            name,
            FunctionValue(
                name=name,
                params=list(func.params),
                return_types=list(func.return_types),
                body=list(func.body),
            ),
        )
    main_func = env.functions.get("main")
    if isinstance(main_func, FunctionValue):
        evaluator.run_block(list(main_func.body), env)
    else:
        evaluator.run_block(program.main_block, env)