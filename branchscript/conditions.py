"""Comparison conditions used by ``!`` lines."""

from __future__ import annotations

import re
from typing import Tuple

from .errors import MalformedDirective, NonNumericComparison
from .expression import ExpressionEvaluator

# Alternation order decides ties at the same position ("<=" before "<").
COMPARISON_PATTERN = re.compile(r"!=|==|<=|>=|<|>")
ORDERING_OPERATORS = {"<", ">", "<=", ">="}


def split_comparison(text: str) -> Tuple[str, str, str]:
    match = COMPARISON_PATTERN.search(text)
    if match is None:
        raise MalformedDirective(
            f"Condition '{text}' has no comparison operator (!=, ==, <=, >=, <, >)."
        )
    operator = match.group(0)
    parts = text.split(operator)
    if len(parts) != 2:
        raise MalformedDirective(
            f"Condition '{text}' must have a left side, one '{operator}' and a right side."
        )
    return parts[0], operator, parts[1]


def compare_numbers(left: float, operator: str, right: float) -> bool:
    if operator == "==":
        return left == right
    if operator == "!=":
        return left != right
    if operator == "<=":
        return left <= right
    if operator == ">=":
        return left >= right
    if operator == "<":
        return left < right
    return left > right


def evaluate_condition(text: str, evaluator: ExpressionEvaluator) -> bool:
    """Decide an already-substituted condition such as ``"3 >= 2"``."""
    left, operator, right = split_comparison(text)
    left_value = evaluator.try_evaluate(left)
    right_value = evaluator.try_evaluate(right)

    if left_value is None or right_value is None:
        if operator in ORDERING_OPERATORS:
            raise NonNumericComparison(
                f"Strings can't be compared with {operator} ('{left}' {operator} '{right}')."
            )
        return (left == right) if operator == "==" else (left != right)

    return compare_numbers(left_value, operator, right_value)
