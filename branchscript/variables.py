"""Variable storage and ``@name`` substitution."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

from .errors import UndeclaredVariable

# Names stop at whitespace, NUL, operators and punctuation used by directives.
VARIABLE_PATTERN = re.compile(r"@([^ \0+\-<>=().!#:;^/\\@]+)")
INITIAL_VALUE = "0"


def find_references(text: str) -> List[str]:
    """Distinct variable names referenced in ``text``, in order of appearance."""
    return list(dict.fromkeys(VARIABLE_PATTERN.findall(text)))


class VariableStore:
    """Current value of every declared variable, as text."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._values: Dict[str, str] = {}
        for name in names:
            self.declare(name)

    def declare(self, name: str, value: str = INITIAL_VALUE) -> None:
        self._values[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, name: str) -> str:
        try:
            return self._values[name]
        except KeyError:
            raise UndeclaredVariable(name) from None

    def __setitem__(self, name: str, value: str) -> None:
        if name not in self._values:
            raise UndeclaredVariable(name)
        self._values[name] = value

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def substitute(self, text: str, *, line: Optional[int] = None) -> str:
        """Replace every ``@name`` in ``text`` with its current value.

        All names are checked before anything is replaced, so an undeclared
        reference fails without producing partial output.
        """
        for name in find_references(text):
            if name not in self._values:
                raise UndeclaredVariable(name, line=line)
        if "@" not in text:
            return text
        return VARIABLE_PATTERN.sub(lambda match: self._values[match.group(1)], text)
