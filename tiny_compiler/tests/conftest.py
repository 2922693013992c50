import sys
from pathlib import Path

import pytest

# Ensure the project root is importable when pytest starts from any directory
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tiny_parser import lex, parse  # noqa: E402


@pytest.fixture
def build():
    """Lex and parse a source string in one step."""

    def _build(source):
        return parse(lex(source))

    return _build


@pytest.fixture
def int_digit_limit():
    """Pin the interpreter's int/str conversion limit (Python 3.11+)."""
    if not hasattr(sys, "set_int_max_str_digits"):
        pytest.skip("interpreter has no int/str digit limit")
    previous = sys.get_int_max_str_digits()
    sys.set_int_max_str_digits(4300)
    yield 4300
    sys.set_int_max_str_digits(previous)
