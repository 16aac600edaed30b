"""Numeric expression evaluation for assignments and conditions.

Expressions use the usual calculator syntax::

    1 + 2 * 3        (7)
    -2 ^ 2           (4, unary minus binds tighter than ^)
    2 ^ 3 ^ 2        (64, ^ is left-associative)
    sqrt(16) + pi
    atan2(1, 1)

Any text that is not a well-formed expression (``"hello"``, ``"3 apples"``,
an empty string) fails to evaluate; callers treat that as a plain string.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Optional

from lark import Lark, Transformer, v_args
from lark.exceptions import LarkError

GRAMMAR = r"""
?start: sum

?sum: product
    | sum "+" product   -> add
    | sum "-" product   -> sub

?product: power
    | product "*" power -> mul
    | product "/" power -> div
    | product "%" power -> mod

?power: unary
    | power "^" unary   -> pow

?unary: atom
    | "-" unary         -> neg
    | "+" unary         -> pos

?atom: NUMBER                      -> number
     | NAME "(" [arguments] ")"    -> call
     | NAME                        -> constant
     | "(" sum ")"

arguments: sum ("," sum)*

NUMBER: /(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?/
NAME: /[A-Za-z_][A-Za-z0-9_]*/

%import common.WS
%ignore WS
"""


class EvaluationError(Exception):
    """Raised when text is not a numeric expression."""


def _guarded(func: Callable[..., float], *args: float) -> float:
    try:
        return float(func(*args))
    except OverflowError:
        return math.inf
    except ValueError:
        return math.nan


def _divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _factorial(value: float) -> float:
    if math.isnan(value) or value < 0:
        return math.nan
    if math.isinf(value):
        return math.inf
    return _guarded(math.factorial, int(value))


def _combinations(n: float, r: float) -> float:
    if n < 0 or r < 0 or r > n:
        return math.nan
    return _guarded(math.comb, int(n), int(r))


def _permutations(n: float, r: float) -> float:
    if n < 0 or r < 0 or r > n:
        return math.nan
    return _guarded(math.perm, int(n), int(r))


CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}

FUNCTIONS: Dict[str, Callable[..., float]] = {
    "abs": abs,
    "acos": math.acos,
    "asin": math.asin,
    "atan": math.atan,
    "atan2": math.atan2,
    "ceil": math.ceil,
    "cos": math.cos,
    "cosh": math.cosh,
    "exp": math.exp,
    "fac": _factorial,
    "floor": math.floor,
    "ln": math.log,
    "log": math.log10,
    "log10": math.log10,
    "ncr": _combinations,
    "npr": _permutations,
    "pow": math.pow,
    "sin": math.sin,
    "sinh": math.sinh,
    "sqrt": math.sqrt,
    "tan": math.tan,
    "tanh": math.tanh,
}


@v_args(inline=True)
class _Calculator(Transformer):
    def number(self, token):
        return float(token)

    def constant(self, name):
        try:
            return CONSTANTS[str(name).lower()]
        except KeyError:
            raise EvaluationError(f"Unknown name '{name}'.") from None

    def arguments(self, *values):
        return list(values)

    def call(self, name, arguments=None):
        func = FUNCTIONS.get(str(name).lower())
        if func is None:
            raise EvaluationError(f"Unknown function '{name}'.")
        args = arguments or []
        try:
            return _guarded(func, *args)
        except TypeError:
            raise EvaluationError(
                f"Wrong number of arguments for '{name}'."
            ) from None

    def add(self, a, b): return a + b
    def sub(self, a, b): return a - b
    def mul(self, a, b): return a * b
    def div(self, a, b): return _divide(a, b)
    def mod(self, a, b): return _guarded(math.fmod, a, b)
    def pow(self, a, b): return _guarded(math.pow, a, b)
    def neg(self, x): return -x
    def pos(self, x): return x


class ExpressionEvaluator:
    """Evaluate calculator-style expressions to floats."""

    def __init__(self) -> None:
        self._parser = Lark(GRAMMAR, parser="lalr")
        self._calculator = _Calculator()

    def evaluate(self, text: str) -> float:
        try:
            tree = self._parser.parse(text)
            return float(self._calculator.transform(tree))
        except LarkError as exc:
            raise EvaluationError(f"Cannot evaluate {text!r}: {exc}") from exc

    def try_evaluate(self, text: str) -> Optional[float]:
        try:
            return self.evaluate(text)
        except EvaluationError:
            return None


def format_number(value: float) -> str:
    """Render a result the way it is stored in a variable (``2.0`` -> ``"2"``)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)
