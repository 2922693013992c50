#! /usr/bin/env python
"""Prefix arithmetic in, value and infix code out.

    $ python tiny_compiler.py "sub 2 sum 1 3 4"
    tokens: ['sub', '2', 'sum', '1', '3', '4']
    ast:    Operation(operator=<OperatorKind.SUB: 'sub'>, ...)
    value:  -6
    code:   (2 - (1 + 3 + 4))
"""

import atexit
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from tiny_ast import ASTNode, TinyCompilerError, format_tree
from tiny_backends import Number, compile_to_infix, evaluate, format_value
from tiny_parser import lex, parse

try:
    import readline
except ImportError:  # pragma: no cover
    readline = None

LOG_LEVEL = logging.ERROR
logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s:%(name)s:%(message)s")
logger = logging.getLogger()

HISTORY_PATH = os.path.expanduser("~/.tiny_compiler_history")

EXAMPLE_PROGRAMS = (
    "sub 2 sum 1 3 4",
    "sum 1 2 3",
    "mul 2 3 4",
    "div 4 0",
    "sub",
)


@dataclass
class PipelineResult:
    source: str
    tokens: List[str] = field(default_factory=list)
    ast: Optional[ASTNode] = None
    value: Optional[Number] = None
    value_text: Optional[str] = None
    code: Optional[str] = None
    errors: Dict[str, TinyCompilerError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def run_pipeline(text: str) -> PipelineResult:
    result = PipelineResult(source=text, tokens=lex(text))
    try:
        result.ast = parse(result.tokens)
    except TinyCompilerError as exc:
        logger.debug(f"parse failed: {exc!r}")
        result.errors["parse"] = exc
        return result

    # evaluation and compilation fail independently of each other
    try:
        result.value = evaluate(result.ast)
        result.value_text = format_value(result.value)
    except TinyCompilerError as exc:
        logger.debug(f"evaluate failed: {exc!r}")
        result.errors["evaluate"] = exc
    try:
        result.code = compile_to_infix(result.ast)
    except TinyCompilerError as exc:
        logger.debug(f"compile failed: {exc!r}")
        result.errors["compile"] = exc
    return result


def describe_error(exc: Exception) -> str:
    return f"error: {type(exc).__name__}: {exc}"


def render_report(result: PipelineResult, show_tree: bool = False) -> List[str]:
    lines = [f"tokens: {result.tokens}"]
    if "parse" in result.errors:
        lines.append(f"ast:    {describe_error(result.errors['parse'])}")
        lines.append("value:  skipped")
        lines.append("code:   skipped")
        return lines

    lines.append(f"ast:    {result.ast!r}")
    if show_tree and result.ast is not None:
        lines.append("tree:")
        lines.extend(f"  {line}" for line in format_tree(result.ast).splitlines())
    if "evaluate" in result.errors:
        lines.append(f"value:  {describe_error(result.errors['evaluate'])}")
    else:
        lines.append(f"value:  {result.value_text}")
    if "compile" in result.errors:
        lines.append(f"code:   {describe_error(result.errors['compile'])}")
    else:
        lines.append(f"code:   {result.code}")
    return lines


def process(text: str, show_tree: bool = False) -> PipelineResult:
    result = run_pipeline(text)
    for line in render_report(result, show_tree=show_tree):
        print(line)
    return result


def _load_history() -> None:
    if readline is None:
        return
    readline.parse_and_bind("tab: complete")
    try:
        readline.read_history_file(HISTORY_PATH)
    except FileNotFoundError:
        pass
    except (OSError, ValueError):
        try:
            os.replace(HISTORY_PATH, f"{HISTORY_PATH}.corrupt")
        except OSError:
            logger.warning(f"Could not move aside corrupt history {HISTORY_PATH}")

    def _persist_history():
        try:
            readline.write_history_file(HISTORY_PATH)
        except OSError:
            logger.warning(f"Could not write history to {HISTORY_PATH}")

    atexit.register(_persist_history)


def run_repl(show_tree: bool = False) -> None:
    _load_history()
    while True:
        try:
            expression = input(">>> ")
        except EOFError:
            break
        if expression.strip().lower() in {"exit", "quit"}:
            break
        if not expression.strip():
            continue
        process(expression, show_tree=show_tree)


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        description="Evaluate a prefix arithmetic expression and compile it to infix."
    )
    parser.add_argument(
        "expression",
        nargs="?",
        help="Prefix expression, e.g. 'sub 2 sum 1 3 4'.",
    )
    parser.add_argument(
        "--examples",
        action="store_true",
        help="Run the bundled sample programs, including the failing ones.",
    )
    parser.add_argument(
        "--repl", action="store_true", help="Read expressions interactively."
    )
    parser.add_argument(
        "--tui", action="store_true", help="Open the terminal user interface."
    )
    parser.add_argument(
        "--tree", action="store_true", help="Also print the AST as an outline."
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default=None,
        help="Override the default log level.",
    )
    args = parser.parse_args(argv)

    if args.log_level:
        logging.getLogger().setLevel(args.log_level)

    if args.tui:
        from tiny_tui import PipelineApp

        PipelineApp(initial=args.expression).run()
        return 0

    if args.repl:
        run_repl(show_tree=args.tree)
        return 0

    if not args.examples and args.expression is None:
        parser.print_help()
        return 0

    status = 0
    if args.expression is not None:
        if not process(args.expression, show_tree=args.tree).ok:
            status = 1

    if args.examples:
        for sample in EXAMPLE_PROGRAMS:
            print(f"$ {sample}")
            process(sample, show_tree=args.tree)
            print()

    return status


if __name__ == "__main__":
    import sys

    sys.exit(main())
