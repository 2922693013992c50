#! /usr/bin/env python

from typing import List, Union

from tiny_ast import (
    ASTNode,
    CompileError,
    CompileUnknownOperator,
    DivisionByZero,
    EvalError,
    EvalUnknownOperator,
    InvalidArity,
    LiteralTooLarge,
    Num,
    NodeVisitor,
    Operation,
    OperatorKind,
    ValueTooLarge,
)

Number = Union[int, float]


class Evaluator(NodeVisitor):
    def visit_Num(self, node: Num) -> Number:
        return node.value

    def visit_Operation(self, node: Operation) -> Number:
        operator = node.operator
        if not isinstance(operator, OperatorKind):
            raise EvalUnknownOperator(operator)
        values = [self.visit(operand) for operand in node]
        try:
            return self._fold(operator, values)
        except OverflowError as exc:
            # int -> float conversion in true division or mixed arithmetic
            raise ValueTooLarge(f"'{operator.value}' result too large: {exc}") from exc

    def _fold(self, operator: OperatorKind, values: List[Number]) -> Number:
        if operator is OperatorKind.SUM:
            result: Number = 0
            for value in values:
                result += value
            return result

        if operator is OperatorKind.MUL:
            result = 1
            for value in values:
                result *= value
            return result

        if not values:
            raise InvalidArity(operator)

        if operator is OperatorKind.SUB:
            result = values[0]
            for value in values[1:]:
                result -= value
            return result

        assert operator is OperatorKind.DIV
        result = values[0]
        for position, value in enumerate(values[1:], start=1):
            if value == 0:
                raise DivisionByZero(position)
            result /= value
        return result


class Compiler(NodeVisitor):
    def visit_Num(self, node: Num) -> str:
        try:
            return str(node.value)
        except ValueError as exc:
            raise LiteralTooLarge(f"Literal too large to print: {exc}") from exc

    def visit_Operation(self, node: Operation) -> str:
        if not isinstance(node.operator, OperatorKind):
            raise CompileUnknownOperator(node.operator)
        parts: List[str] = [self.visit(operand) for operand in node]
        return "(" + f" {node.operator.symbol} ".join(parts) + ")"


def evaluate(node: ASTNode) -> Number:
    try:
        return Evaluator().visit(node)
    except RecursionError as exc:
        raise EvalError("Expression nested too deeply to evaluate") from exc


def compile_to_infix(node: ASTNode) -> str:
    try:
        return Compiler().visit(node)
    except RecursionError as exc:
        raise CompileError("Expression nested too deeply to compile") from exc


def format_value(value: Number) -> str:
    """Decimal text of an evaluated value; huge ints exceed the str() digit limit."""
    try:
        return str(value)
    except ValueError as exc:
        raise ValueTooLarge(f"Value too large to print: {exc}") from exc
