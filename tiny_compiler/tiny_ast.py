#! /usr/bin/env python

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, NamedTuple, Tuple, Union


class TinyCompilerError(Exception):
    pass


class ParseError(TinyCompilerError):
    pass


class UnexpectedEndOfInput(ParseError):
    def __init__(self, position: int):
        super().__init__(f"Unexpected end of input at token {position}")
        self.position = position


class NumberTooLong(ParseError):
    def __init__(self, position: int, digits: int):
        super().__init__(f"Number at token {position} is too long ({digits} digits)")
        self.position = position
        self.digits = digits


class NestingTooDeep(ParseError):
    def __init__(self, position: int, limit: int):
        super().__init__(f"Nesting deeper than {limit} levels at token {position}")
        self.position = position
        self.limit = limit


class UnknownOperatorError(TinyCompilerError):
    def __init__(self, operator: str):
        super().__init__(f"Unknown operator: {operator!r}")
        self.operator = operator


class EvalError(TinyCompilerError):
    pass


class EvalUnknownOperator(EvalError, UnknownOperatorError):
    pass


class InvalidArity(EvalError):
    def __init__(self, operator: "OperatorKind"):
        super().__init__(f"'{operator.value}' needs at least one operand")
        self.operator = operator


class DivisionByZero(EvalError, ZeroDivisionError):
    def __init__(self, position: int):
        super().__init__(f"Division by zero (operand {position})")
        self.position = position


class ValueTooLarge(EvalError, OverflowError):
    pass


class CompileError(TinyCompilerError):
    pass


class CompileUnknownOperator(CompileError, UnknownOperatorError):
    pass


class LiteralTooLarge(CompileError):
    pass


class OperatorKind(Enum):
    SUM = "sum"
    SUB = "sub"
    DIV = "div"
    MUL = "mul"

    @property
    def symbol(self) -> str:
        if self is OperatorKind.SUM:
            return "+"
        if self is OperatorKind.SUB:
            return "-"
        if self is OperatorKind.DIV:
            return "/"
        if self is OperatorKind.MUL:
            return "*"
        raise AssertionError(f"No symbol for {self!r}")

    @classmethod
    def from_keyword(cls, keyword: str) -> Union["OperatorKind", str]:
        """Unrecognized keywords come back unchanged, failing later in a backend."""
        try:
            return cls(keyword)
        except ValueError:
            return keyword


class ASTNode(Iterable):
    pass


@dataclass(frozen=True)
class Num(ASTNode):
    value: int

    def __iter__(self):
        return iter(())


@dataclass(frozen=True)
class Operation(ASTNode):
    operator: Union[OperatorKind, str]
    operands: Tuple[ASTNode, ...] = ()

    def __iter__(self):
        return iter(self.operands)

    @property
    def keyword(self) -> str:
        if isinstance(self.operator, OperatorKind):
            return self.operator.value
        return self.operator


class NodeVisitor:
    def visit(self, node: ASTNode) -> Any:
        method = f"visit_{type(node).__name__}"
        visitor = getattr(self, method, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> Any:
        raise TypeError(f"{type(self).__name__} cannot visit {type(node).__name__}")


class NodeCount(NamedTuple):
    numbers: int
    operations: int


class NodeCounter(NodeVisitor):
    def __init__(self):
        self.numbers = 0
        self.operations = 0

    def visit_Num(self, node: Num) -> None:
        self.numbers += 1

    def visit_Operation(self, node: Operation) -> None:
        self.operations += 1
        for child in node:
            self.visit(child)


def count_nodes(node: ASTNode) -> NodeCount:
    counter = NodeCounter()
    counter.visit(node)
    return NodeCount(counter.numbers, counter.operations)


class TreeFormatter(NodeVisitor):
    """Render the AST as an indented outline, one node per line.

    sub 2 sum 1 3 4 becomes::

        sub
          2
          sum
            1
            3
            4
    """

    def __init__(self, indent: str = "  "):
        self.indent = indent
        self.depth = 0
        self.lines: List[str] = []

    def visit_Num(self, node: Num) -> None:
        self.lines.append(f"{self.indent * self.depth}{node.value}")

    def visit_Operation(self, node: Operation) -> None:
        self.lines.append(f"{self.indent * self.depth}{node.keyword}")
        self.depth += 1
        for child in node:
            self.visit(child)
        self.depth -= 1


def format_tree(node: ASTNode, indent: str = "  ") -> str:
    formatter = TreeFormatter(indent)
    formatter.visit(node)
    return "\n".join(formatter.lines)
