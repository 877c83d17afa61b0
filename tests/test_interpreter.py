import io

import pytest

from boba.ast import Break, Program
from boba.errors import BobaRuntimeError
from boba.interpreter import Environment, format_value, interpret
from boba.lexer import tokenize
from boba.parser import parse
from boba.types import FunctionValue, MapValue


def run(source: str) -> str:
    out = io.StringIO()
    interpret(parse(tokenize(source)), out)
    return out.getvalue()


def test_format_scalars():
    assert format_value(None) == "null"
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value("plain") == "plain"
    assert format_value(2.5) == "2.5"


def test_format_function():
    assert format_value(FunctionValue("f")) == "<function f>"


def test_format_collections():
    assert format_value([1, 2]) == "[1, 2]"
    assert format_value(MapValue([("a", 1)])) == "[a:1]"


def test_format_large_float_has_no_exponent():
    text = format_value(1e20)
    assert "e" not in text
    assert float(text) == 1e20


def test_environment_variables():
    env = Environment()
    env.define("x", 5)
    assert env.get("x") == 5
    env.define("x", None)
    assert env.get("x") is None
    with pytest.raises(KeyError):
        env.get("missing")


def test_environment_functions():
    env = Environment()
    func = FunctionValue("f")
    env.define_function("f", func)
    assert env.get_function("f") is func
    with pytest.raises(KeyError):
        env.get_function("g")
    with pytest.raises(KeyError):
        env.get("f")


def test_output_joins_with_spaces():
    text = run('output("hi", "there")')
    assert text.endswith("\n")
    assert text.split() == ["hi", "there"]


def test_main_function_replaces_main_block():
    text = run('fun main() { output("in main") } output("top")')
    assert "in main" in text
    assert "top" not in text


def test_function_call_returns_value():
    text = run("fun same(a: int): int { return a } x = same(5) output(x)")
    assert text == "5\n"


def test_return_stops_function_body():
    text = run('fun f(): int { return 1 output("after") } f()')
    assert "after" not in text


def test_chained_declaration():
    assert run("x = y = 3 output(x, y)").split() == ["3", "3"]


def test_arity_mismatch():
    with pytest.raises(BobaRuntimeError, match="expects"):
        run("fun f(a: int) { output(a) } f()")


def test_undefined_variable():
    with pytest.raises(BobaRuntimeError, match="Undefined variable: y"):
        run("output(y)")


def test_undefined_function():
    with pytest.raises(BobaRuntimeError, match="Undefined function: nothing"):
        run("nothing()")


def test_function_cannot_see_caller_variables():
    with pytest.raises(BobaRuntimeError, match="Undefined variable: x"):
        run("x = 1 fun f() { output(x) } f()")


def test_string_to_int_conversion():
    assert run('output(int("42"))') == "42\n"


def test_string_to_bool_ignores_case():
    assert run('output(bool("TRUE"))') == "true\n"


def test_float_to_int_truncates():
    assert run("output(int(2.9))") == "2\n"


def test_string_float_round_trip():
    assert run('output(string(float("2.5")))') == "2.5\n"


def test_bad_int_text():
    with pytest.raises(BobaRuntimeError, match="Cannot convert 'abc' to int"):
        run('output(int("abc"))')


def test_int_text_with_space_is_rejected():
    with pytest.raises(BobaRuntimeError, match="Cannot convert"):
        run('output(int(" 5"))')


def test_float_text_with_underscore_is_rejected():
    with pytest.raises(BobaRuntimeError, match="to float"):
        run('output(float("1_0"))')


def test_unsupported_conversion():
    with pytest.raises(BobaRuntimeError, match="Cannot convert Null to String"):
        run("output(string(null))")


def test_outputf_strips_braces():
    text = run('outputf("a{b}c")')
    assert "{" not in text
    assert "}" not in text
    assert text.startswith("a")


def test_outputf_requires_string():
    with pytest.raises(BobaRuntimeError, match="outputf requires a string argument"):
        run("outputf(5)")


def test_unsupported_expression():
    with pytest.raises(BobaRuntimeError, match="Unsupported expression"):
        interpret(Program(main_block=[Break()]), io.StringIO())