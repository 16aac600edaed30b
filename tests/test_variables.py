import pytest

from branchscript.errors import UndeclaredVariable
from branchscript.variables import VariableStore, find_references


def test_substitute_replaces_every_occurrence() -> None:
    store = VariableStore(["a"])
    store["a"] = "1"
    assert store.substitute("@a+@a") == "1+1"


def test_substitute_without_references_is_unchanged() -> None:
    store = VariableStore(["a"])
    text = "Plain text, no variables: 50% off!"
    assert store.substitute(text) == text
    assert store.substitute(store.substitute(text)) == text


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("@gold.", "7."),
        ("(@gold)", "(7)"),
        ("@gold:@gold", "7:7"),
        ("@gold/@gold", "7/7"),
        ("@ alone", "@ alone"),
        ("mail@", "mail@"),
    ],
)
def test_substitute_stops_names_at_delimiters(text: str, expected: str) -> None:
    store = VariableStore(["gold"])
    store["gold"] = "7"
    assert store.substitute(text) == expected


def test_substitute_keeps_names_that_share_a_prefix_apart() -> None:
    store = VariableStore(["a", "ab"])
    store["a"] = "Y"
    store["ab"] = "X"
    assert store.substitute("@a @ab") == "Y X"


def test_substitute_does_not_expand_values() -> None:
    store = VariableStore(["a", "b"])
    store["a"] = "@b"
    store["b"] = "2"
    assert store.substitute("@a") == "@b"


def test_undeclared_reference_is_fatal() -> None:
    store = VariableStore(["known"])
    with pytest.raises(UndeclaredVariable) as excinfo:
        store.substitute("@known and @unknown", line=4)
    assert excinfo.value.name == "unknown"
    assert excinfo.value.line == 4


def test_assigning_undeclared_variable_is_fatal() -> None:
    store = VariableStore()
    with pytest.raises(UndeclaredVariable):
        store["ghost"] = "1"
    with pytest.raises(UndeclaredVariable):
        store["ghost"]


def test_find_references_in_discovery_order() -> None:
    assert find_references("@b then @a then @b") == ["b", "a"]
