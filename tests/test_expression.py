import math

import pytest

from branchscript.conditions import evaluate_condition, split_comparison
from branchscript.errors import MalformedDirective, NonNumericComparison
from branchscript.expression import EvaluationError, ExpressionEvaluator, format_number


@pytest.fixture(scope="module")
def evaluator() -> ExpressionEvaluator:
    return ExpressionEvaluator()


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("7", 7),
        (" 7 ", 7),
        ("1+2*3", 7),
        ("(1+2)*3", 9),
        ("10 - 4 - 3", 3),
        ("-2^2", 4),
        ("2^3^2", 64),
        ("2^-1", 0.5),
        ("10 % 4", 2),
        ("1e3", 1000),
        (".5", 0.5),
        ("sqrt(16)", 4),
        ("abs(-3)", 3),
        ("pow(2, 10)", 1024),
        ("atan2(0, 1)", 0),
        ("fac(5)", 120),
        ("ncr(5, 2)", 10),
        ("npr(5, 2)", 20),
        ("log(100)", 2),
        ("ln(e)", 1),
        ("floor(2.7) + ceil(2.1)", 5),
        ("2*pi", 2 * math.pi),
    ],
)
def test_evaluate_numeric_expressions(evaluator: ExpressionEvaluator, text: str, expected: float) -> None:
    assert evaluator.evaluate(text) == pytest.approx(expected)


@pytest.mark.parametrize(
    "text",
    ["", "abc", "Hello world", "3 apples", "1 +", "foo(1)", "sqrt(1, 2)", "2 3"],
)
def test_non_expressions_fail(evaluator: ExpressionEvaluator, text: str) -> None:
    with pytest.raises(EvaluationError):
        evaluator.evaluate(text)
    assert evaluator.try_evaluate(text) is None


def test_division_by_zero_follows_ieee(evaluator: ExpressionEvaluator) -> None:
    assert evaluator.evaluate("1/0") == math.inf
    assert evaluator.evaluate("-1/0") == -math.inf
    assert math.isnan(evaluator.evaluate("0/0"))
    assert math.isnan(evaluator.evaluate("sqrt(-1)"))


@pytest.mark.parametrize(
    ("value", "text"),
    [
        (2.0, "2"),
        (-3.0, "-3"),
        (0.25, "0.25"),
        (0.1 + 0.2, "0.30000000000000004"),
        (math.inf, "inf"),
        (-math.inf, "-inf"),
        (math.nan, "NaN"),
    ],
)
def test_format_number(value: float, text: str) -> None:
    assert format_number(value) == text


@pytest.mark.parametrize(
    ("text", "parts"),
    [
        ("a<=b", ("a", "<=", "b")),
        ("1!=2", ("1", "!=", "2")),
        ("x == y", ("x ", "==", " y")),
        ("a<b>c", ("a", "<", "b>c")),
    ],
)
def test_split_comparison_uses_first_operator(text: str, parts: tuple) -> None:
    assert split_comparison(text) == parts


@pytest.mark.parametrize("text", ["abc", "1==2==3", "x = 1"])
def test_split_comparison_rejects_bad_conditions(text: str) -> None:
    with pytest.raises(MalformedDirective):
        split_comparison(text)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("3>=2", True),
        ("2 == 2.0", True),
        ("1+1 != 2", False),
        ("abc==abc", True),
        ("abc == abc", False),
        ("abc!=xyz", True),
        ("5<10", True),
    ],
)
def test_evaluate_condition(evaluator: ExpressionEvaluator, text: str, expected: bool) -> None:
    assert evaluate_condition(text, evaluator) is expected


@pytest.mark.parametrize("text", ["abc<3", "3>=abc", "a<=b"])
def test_ordering_on_text_is_rejected(evaluator: ExpressionEvaluator, text: str) -> None:
    with pytest.raises(NonNumericComparison):
        evaluate_condition(text, evaluator)
