import pytest

from boba.ast import (
    BinaryOp,
    BinaryOperator,
    BoolLiteral,
    Break,
    FloatLiteral,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    If,
    IntLiteral,
    ListExpr,
    MapExpr,
    NullLiteral,
    OutputFormatted,
    Program,
    StringLiteral,
    TypeCheck,
    TypeConversion,
    UnaryOp,
    UnaryOperator,
    VarDeclaration,
)
from boba.errors import TypeCheckError
from boba.lexer import tokenize
from boba.parser import parse
from boba.type_checker import (
    FunctionSignature,
    TypeChecker,
    check_types,
    types_compatible,
)
from boba.types import ListType, MapType, Primitive


def _check(source):
    return check_types(parse(tokenize(source)))


@pytest.mark.parametrize(
    "actual, expected, result",
    [
        (Primitive.INT, Primitive.INT, True),
        (Primitive.INT, Primitive.FLOAT, True),
        (Primitive.FLOAT, Primitive.INT, True),
        (Primitive.STRING, Primitive.ANY, True),
        (Primitive.STRING, Primitive.INT, False),
        (Primitive.ANY, Primitive.INT, False),
        (ListType(Primitive.INT), ListType(Primitive.INT), True),
        (ListType(Primitive.INT), ListType(Primitive.STRING), False),
    ],
)
def test_types_compatible(actual, expected, result):
    assert types_compatible(actual, expected) is result


@pytest.mark.parametrize(
    "expr, expected",
    [
        (IntLiteral(1), Primitive.INT),
        (FloatLiteral(1.5), Primitive.FLOAT),
        (StringLiteral("a"), Primitive.STRING),
        (BoolLiteral(True), Primitive.BOOL),
        (NullLiteral(), Primitive.NULL),
        (Break(), Primitive.NULL),
    ],
)
def test_literal_types(expr, expected):
    assert TypeChecker().check_expr(expr) is expected


def test_empty_collections_have_any_types():
    checker = TypeChecker()
    assert checker.check_expr(ListExpr([])) == ListType(Primitive.ANY)
    assert checker.check_expr(MapExpr([])) == MapType(Primitive.ANY, Primitive.ANY)


def test_list_takes_first_element_type():
    checker = TypeChecker()
    assert checker.check_expr(ListExpr([IntLiteral(1), FloatLiteral(2.0)])) == ListType(
        Primitive.INT
    )


def test_mixed_list_is_rejected():
    with pytest.raises(TypeCheckError) as info:
        TypeChecker().check_expr(ListExpr([IntLiteral(1), StringLiteral("a")]))
    assert info.value.message == (
        "List contains mixed types: item 1 has type String, expected Int"
    )


def test_map_types_and_mixed_values():
    checker = TypeChecker()
    entries = [(StringLiteral("a"), IntLiteral(1))]
    assert checker.check_expr(MapExpr(entries)) == MapType(Primitive.STRING, Primitive.INT)
    with pytest.raises(TypeCheckError, match="mixed value types"):
        checker.check_expr(MapExpr(entries + [(StringLiteral("b"), BoolLiteral(True))]))
    with pytest.raises(TypeCheckError, match="mixed key types"):
        checker.check_expr(MapExpr(entries + [(IntLiteral(2), IntLiteral(3))]))


def test_declaration_records_variable():
    checker = TypeChecker()
    assert checker.check_expr(VarDeclaration("x", StringLiteral("s"))) is Primitive.STRING
    assert checker.check_expr(Identifier("x")) is Primitive.STRING


def test_undefined_variable():
    with pytest.raises(TypeCheckError) as info:
        TypeChecker().check_expr(Identifier("y"))
    assert info.value.message == "Undefined variable: y"


def test_arithmetic_widens_to_float():
    checker = TypeChecker()
    expr = BinaryOp(IntLiteral(1), BinaryOperator.MULTIPLY, FloatLiteral(2.0))
    assert checker.check_expr(expr) is Primitive.FLOAT
    same = BinaryOp(IntLiteral(1), BinaryOperator.SUBTRACT, IntLiteral(2))
    assert checker.check_expr(same) is Primitive.INT


def test_string_concatenation_and_bad_add():
    checker = TypeChecker()
    ok = BinaryOp(StringLiteral("a"), BinaryOperator.ADD, StringLiteral("b"))
    assert checker.check_expr(ok) is Primitive.STRING
    with pytest.raises(TypeCheckError) as info:
        checker.check_expr(BinaryOp(IntLiteral(1), BinaryOperator.ADD, StringLiteral("b")))
    assert info.value.message == "Cannot add values of types Int and String"


def test_comparisons_and_logic():
    checker = TypeChecker()
    less = BinaryOp(StringLiteral("a"), BinaryOperator.LESS_THAN, StringLiteral("b"))
    assert checker.check_expr(less) is Primitive.BOOL
    both = BinaryOp(BoolLiteral(True), BinaryOperator.AND, BoolLiteral(False))
    assert checker.check_expr(both) is Primitive.BOOL
    with pytest.raises(TypeCheckError, match="Logical operators require boolean"):
        checker.check_expr(BinaryOp(IntLiteral(1), BinaryOperator.OR, BoolLiteral(True)))
    with pytest.raises(TypeCheckError, match="incompatible types"):
        checker.check_expr(
            BinaryOp(IntLiteral(1), BinaryOperator.EQUAL, StringLiteral("1"))
        )


def test_unary_operators():
    checker = TypeChecker()
    assert checker.check_expr(UnaryOp(UnaryOperator.NEGATE, FloatLiteral(1.0))) is Primitive.FLOAT
    assert checker.check_expr(UnaryOp(UnaryOperator.NOT, BoolLiteral(True))) is Primitive.BOOL
    with pytest.raises(TypeCheckError, match="Cannot negate"):
        checker.check_expr(UnaryOp(UnaryOperator.NEGATE, StringLiteral("a")))


def test_if_condition_must_be_boolean():
    with pytest.raises(TypeCheckError) as info:
        TypeChecker().check_expr(If(IntLiteral(1), []))
    assert info.value.message == "If condition must be boolean, got Int"


def test_conversions():
    checker = TypeChecker()
    assert checker.check_expr(TypeConversion(StringLiteral("3"), Primitive.INT)) is Primitive.INT
    with pytest.raises(TypeCheckError) as info:
        checker.check_expr(TypeConversion(BoolLiteral(True), Primitive.INT))
    assert info.value.message == "Cannot convert from Bool to Int"


def test_type_check_is_boolean():
    expr = TypeCheck(IntLiteral(1), Primitive.INT)
    assert TypeChecker().check_expr(expr) is Primitive.BOOL


def test_outputf_requires_string():
    with pytest.raises(TypeCheckError) as info:
        TypeChecker().check_expr(OutputFormatted(IntLiteral(1)))
    assert info.value.message == "outputf requires a string argument, got Int"


def test_function_call_checks_arguments():
    signature = FunctionSignature([("a", Primitive.INT)], [Primitive.STRING])
    checker = TypeChecker({"f": signature})
    assert checker.check_expr(FunctionCall("f", [IntLiteral(1)])) is Primitive.STRING
    with pytest.raises(TypeCheckError) as info:
        checker.check_expr(FunctionCall("f", []))
    assert info.value.message == "Function 'f' expects 1 arguments, got 0"
    with pytest.raises(TypeCheckError, match="argument 0 has type String"):
        checker.check_expr(FunctionCall("f", [StringLiteral("x")]))
    with pytest.raises(TypeCheckError, match="Undefined function: g"):
        checker.check_expr(FunctionCall("g", []))


def test_infer_type_rejects_complex_expression():
    with pytest.raises(TypeCheckError) as info:
        TypeChecker().infer_type(FunctionCall("f", []))
    assert info.value.message == (
        'Cannot infer type of complex expression: FunctionCall { name: "f", args: [] }'
    )


def test_declaration_is_not_checkable():
    with pytest.raises(TypeCheckError, match="Type checking not implemented for"):
        TypeChecker().check_expr(FunctionDeclaration("f"))


def test_well_typed_program_has_no_errors():
    assert _check("fun add(a: int, b: int): int { return a } output(add(1, 2))") == []


def test_return_count_mismatch():
    errors = _check("fun f(): int, int { return 1 }")
    assert errors == ["Function 'f' returns 1 values, but declared to return 2 values"]


def test_return_type_mismatch():
    errors = _check('fun f(): int { return "x" }')
    assert errors == ["Function 'f' return value 0 has type String, expected Int"]


def test_missing_return():
    assert _check("fun f(): int { output(1) }") == [
        "Function 'f' is missing return statement"
    ]
    assert _check("fun f(): null { output(1) }") == []


def test_errors_in_function_are_prefixed():
    errors = _check("fun f() { output(y) }")
    assert errors == ["In function 'f': Undefined variable: y"]


def test_main_block_variables_persist():
    assert _check("x = 1 output(x)") == []
    assert _check("output(z)") == ["Undefined variable: z"]


def test_program_built_directly():
    program = Program(main_block=[VarDeclaration("n", IntLiteral(4)), Identifier("m")])
    assert check_types(program) == ["Undefined variable: m"]