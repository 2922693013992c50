#! /usr/bin/env python

import logging
import re
from typing import List, Optional, Sequence

from tiny_ast import (
    ASTNode,
    NestingTooDeep,
    Num,
    NumberTooLong,
    Operation,
    OperatorKind,
    UnexpectedEndOfInput,
)

logger = logging.getLogger(__name__)

NUMBER_RE = re.compile(r"[0-9]+")

# keeps every parsed tree shallow enough for the recursive visitors and repr
MAX_DEPTH = 200


def lex(text: str) -> List[str]:
    return text.split()


class PrefixParser:
    """Recursive descent over a token list.

    expression := number | operation
    number     := [0-9]+
    operation  := keyword expression+

    An operation keeps taking operands for as long as tokens remain, so a
    nested operation swallows everything after it.
    """

    def __init__(self, tokens: Sequence[str], max_depth: int = MAX_DEPTH):
        self.tokens = tokens
        self.max_depth = max_depth
        self.i = 0
        self.depth = 0

    def peek(self) -> Optional[str]:
        return self.tokens[self.i] if self.i < len(self.tokens) else None

    def consume(self) -> str:
        token = self.peek()
        if token is None:
            raise UnexpectedEndOfInput(self.i)
        self.i += 1
        return token

    def parse(self) -> ASTNode:
        root = self.parse_expression()
        if self.peek() is not None:
            logger.debug(f"Ignoring trailing tokens: {list(self.tokens[self.i :])}")
        return root

    def parse_expression(self) -> ASTNode:
        token = self.peek()
        if token is not None and NUMBER_RE.fullmatch(token):
            return self.parse_number()
        return self.parse_operation()

    def parse_number(self) -> Num:
        position = self.i
        token = self.consume()
        try:
            value = int(token)
        except ValueError as exc:
            # int() refuses very long digit strings (sys.set_int_max_str_digits)
            raise NumberTooLong(position, len(token)) from exc
        logger.debug(f"Number {token} at {position}")
        return Num(value)

    def parse_operation(self) -> Operation:
        if self.depth >= self.max_depth:
            raise NestingTooDeep(self.i, self.max_depth)
        keyword = self.consume()
        operator = OperatorKind.from_keyword(keyword)
        if not isinstance(operator, OperatorKind):
            logger.debug(f"Unrecognized operator {keyword!r} kept for later stages")
        self.depth += 1
        operands = []
        while self.peek() is not None:
            operands.append(self.parse_expression())
        self.depth -= 1
        return Operation(operator, tuple(operands))


def parse(tokens: Sequence[str], max_depth: int = MAX_DEPTH) -> ASTNode:
    return PrefixParser(tokens, max_depth=max_depth).parse()
