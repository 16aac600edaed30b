"""Fatal script errors for branchscript."""

from __future__ import annotations

from typing import Optional


class ScriptError(Exception):
    """Base class for failures that abort a script run."""

    def __init__(self, message: str, *, line: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line + 1}: {self.message}"


class ScriptLoadError(ScriptError):
    """Raised when the script file cannot be read."""


class MalformedDirective(ScriptError):
    """Raised when a directive does not split into the expected parts."""


class UndeclaredVariable(ScriptError):
    """Raised when a variable is used without a top-level declaration."""

    def __init__(self, name: str, *, line: Optional[int] = None) -> None:
        super().__init__(
            f"Variable '{name}' is not declared. "
            f"Add a '@{name}=...' line before the block using it.",
            line=line,
        )
        self.name = name


class MissingLabel(ScriptError):
    """Raised when a jump targets a label that does not exist."""

    def __init__(self, label: str, *, line: Optional[int] = None) -> None:
        super().__init__(f"Goto target '{label}' is missing.", line=line)
        self.label = label


class NonNumericComparison(ScriptError):
    """Raised when an ordering operator is applied to non-numeric operands."""


class DuplicateLabel(ScriptError):
    """Raised in strict mode when a label is declared more than once."""


class InputClosed(ScriptError):
    """Raised when standard input ends while a prompt is waiting."""
