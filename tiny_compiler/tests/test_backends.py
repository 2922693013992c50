import pytest

from tiny_ast import (
    CompileError,
    CompileUnknownOperator,
    DivisionByZero,
    EvalError,
    EvalUnknownOperator,
    InvalidArity,
    LiteralTooLarge,
    Num,
    Operation,
    OperatorKind,
    UnknownOperatorError,
    ValueTooLarge,
)
from tiny_backends import (
    Compiler,
    Evaluator,
    compile_to_infix,
    evaluate,
    format_value,
)


def nested_sums(depth):
    node = Num(1)
    for _ in range(depth):
        node = Operation(OperatorKind.SUM, (node,))
    return node


class TestEvaluate:
    @pytest.mark.parametrize(
        "expected, source",
        [
            (6, "sum 1 2 3"),
            (-6, "sub 2 sum 1 3 4"),
            (24, "mul 2 3 4"),
            (2, "div 8 2 2"),
            (5, "sub 5"),
            (7, "sum 7"),
            (0, "sub 10 4 6"),
            (42, "42"),
        ],
    )
    def test_scenarios(self, build, expected, source):
        assert evaluate(build(source)) == expected

    def test_division_is_true_division(self, build):
        assert evaluate(build("div 7 2")) == 3.5

    def test_sum_of_nothing_is_zero(self, build):
        assert evaluate(build("sum")) == 0

    def test_product_of_nothing_is_one(self, build):
        assert evaluate(build("mul")) == 1

    def test_division_by_zero(self, build):
        with pytest.raises(DivisionByZero) as excinfo:
            evaluate(build("div 4 0"))
        assert excinfo.value.position == 1
        assert isinstance(excinfo.value, ZeroDivisionError)

    def test_zero_numerator_is_fine(self, build):
        assert evaluate(build("div 0 4")) == 0

    def test_nested_division_by_zero(self, build):
        with pytest.raises(DivisionByZero):
            evaluate(build("sum 1 div 5 sub 2 2"))

    @pytest.mark.parametrize("source", ["sub", "div"])
    def test_unseeded_folds_need_operands(self, build, source):
        with pytest.raises(InvalidArity) as excinfo:
            evaluate(build(source))
        assert excinfo.value.operator is OperatorKind(source)

    def test_unknown_operator(self, build):
        with pytest.raises(EvalUnknownOperator) as excinfo:
            evaluate(build("pow 2 3"))
        assert excinfo.value.operator == "pow"
        assert isinstance(excinfo.value, EvalError)
        assert isinstance(excinfo.value, UnknownOperatorError)

    def test_unknown_nested_operator(self, build):
        with pytest.raises(EvalUnknownOperator):
            evaluate(build("sum 1 mod 4 2"))

    def test_unknown_operator_reported_before_operands(self, build):
        with pytest.raises(EvalUnknownOperator) as excinfo:
            evaluate(build("pow div 1 0"))
        assert excinfo.value.operator == "pow"

    def test_huge_true_division_is_a_typed_error(self, build):
        with pytest.raises(ValueTooLarge) as excinfo:
            evaluate(build("div 1" + "0" * 400 + " 3"))
        assert isinstance(excinfo.value, EvalError)

    def test_huge_int_mixed_with_float(self, build):
        with pytest.raises(ValueTooLarge):
            evaluate(build("sum div 1 2 1" + "0" * 400))

    def test_huge_integer_arithmetic_stays_exact(self, build):
        big = "1" + "0" * 400
        assert evaluate(build(f"sub {big} 1")) == 10**400 - 1

    def test_deep_hand_built_tree(self):
        with pytest.raises(EvalError):
            evaluate(nested_sums(5000))

    def test_format_value(self):
        assert format_value(-6) == "-6"
        assert format_value(3.5) == "3.5"

    def test_format_value_past_digit_limit(self, int_digit_limit):
        with pytest.raises(ValueTooLarge):
            format_value(10 ** (int_digit_limit + 10))

    def test_unvisitable_node(self):
        with pytest.raises(TypeError):
            Evaluator().visit(object())


class TestCompile:
    @pytest.mark.parametrize(
        "expected, source",
        [
            ("(1 + 2 + 3)", "sum 1 2 3"),
            ("(2 - (1 + 3 + 4))", "sub 2 sum 1 3 4"),
            ("(2 * 3 * 4)", "mul 2 3 4"),
            ("(4 / 0)", "div 4 0"),
            ("(5)", "sub 5"),
            ("()", "sub"),
            ("42", "42"),
        ],
    )
    def test_scenarios(self, build, expected, source):
        assert compile_to_infix(build(source)) == expected

    def test_unknown_operator(self, build):
        with pytest.raises(CompileUnknownOperator) as excinfo:
            compile_to_infix(build("pow 2 3"))
        assert excinfo.value.operator == "pow"
        assert isinstance(excinfo.value, CompileError)
        assert isinstance(excinfo.value, UnknownOperatorError)

    def test_compiler_works_on_hand_built_tree(self):
        node = Operation(
            OperatorKind.MUL,
            (Num(3), Operation(OperatorKind.DIV, (Num(8), Num(4)))),
        )
        assert Compiler().visit(node) == "(3 * (8 / 4))"

    def test_literal_past_digit_limit(self, int_digit_limit):
        node = Operation(OperatorKind.SUM, (Num(10 ** (int_digit_limit + 10)),))
        with pytest.raises(LiteralTooLarge) as excinfo:
            compile_to_infix(node)
        assert isinstance(excinfo.value, CompileError)

    def test_deep_hand_built_tree(self):
        with pytest.raises(CompileError):
            compile_to_infix(nested_sums(5000))

    def test_unknown_operator_reported_before_operands(self, build):
        with pytest.raises(CompileUnknownOperator) as excinfo:
            compile_to_infix(build("pow sum 1 mod 2"))
        assert excinfo.value.operator == "pow"


class TestStructuralAgreement:
    @pytest.mark.parametrize(
        "source",
        ["sum 1 2 3", "sub 2 sum 1 3 4", "mul 2 3 4", "div 9 3", "sum 5"],
    )
    def test_compiled_parts_match_folded_values(self, build, source):
        node = build(source)
        code = compile_to_infix(node)
        symbol = node.operator.symbol
        inner = code[1:-1]
        depth = 0
        separators = 0
        for position, char in enumerate(inner):
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
            elif depth == 0 and inner[position : position + 3] == f" {symbol} ":
                separators += 1
        assert separators + 1 == len(node.operands)

    def test_compiled_code_evaluates_to_same_value(self, build):
        node = build("sub 20 mul 2 3 div 8 4")
        code = compile_to_infix(node)
        assert eval(code, {"__builtins__": {}}) == evaluate(node)
