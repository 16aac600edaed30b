"""Line classification for branchscript.

Every script line is parsed exactly once, at load time, into one of the
directive dataclasses below. The leading character selects the kind:

==========  ============  ==============================================
Sigil       Kind          Example
==========  ============  ==============================================
(empty)     BLANK
``:``       LABEL         ``:crossroads``
``*``       COMMENT       ``* authoring note``
``|``       SPACER        ``|``
``#``       GOTO          ``#crossroads``
``!``       CONDITIONAL   ``!@gold>=2:#shop:Too poor.``
``@``       ASSIGNMENT    ``@gold=@gold-2``
``@``       TEXT          ``@name waves.`` (no single ``=``)
``?``       CHOICE        ``?Go left:#left``
``^``       INPUT         ``^iHow many?:@count``
other       TEXT          ``Hello, @name.``
==========  ============  ==============================================

Lines that do not split into the parts their kind requires become
``Malformed`` directives. They only fail when the engine reaches them (or at
load time in strict mode).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Sequence, Tuple, Union


class Kind(Enum):
    BLANK = "blank"
    LABEL = "label"
    COMMENT = "comment"
    SPACER = "spacer"
    GOTO = "goto"
    CONDITIONAL = "conditional"
    ASSIGNMENT = "assignment"
    TEXT = "text"
    CHOICE = "choice"
    INPUT = "input"
    MALFORMED = "malformed"


INPUT_MODES = {"i": "number", "s": "text"}


@dataclass(frozen=True)
class Blank:
    kind: ClassVar[Kind] = Kind.BLANK


@dataclass(frozen=True)
class Label:
    name: str
    kind: ClassVar[Kind] = Kind.LABEL


@dataclass(frozen=True)
class Comment:
    text: str
    kind: ClassVar[Kind] = Kind.COMMENT


@dataclass(frozen=True)
class Spacer:
    kind: ClassVar[Kind] = Kind.SPACER


@dataclass(frozen=True)
class Goto:
    target: str
    kind: ClassVar[Kind] = Kind.GOTO


@dataclass(frozen=True)
class Assignment:
    name: str
    expression: str
    kind: ClassVar[Kind] = Kind.ASSIGNMENT


@dataclass(frozen=True)
class Text:
    """A line to print. ``substitute`` is False for verbatim branch text."""

    text: str
    substitute: bool = True
    kind: ClassVar[Kind] = Kind.TEXT


@dataclass(frozen=True)
class Malformed:
    text: str
    reason: str
    kind: ClassVar[Kind] = Kind.MALFORMED


Branch = Union[Goto, Assignment, Text, Malformed]


@dataclass(frozen=True)
class Conditional:
    condition: str
    then_branch: Branch
    else_branch: Optional[Branch] = None
    kind: ClassVar[Kind] = Kind.CONDITIONAL


@dataclass(frozen=True)
class Choice:
    prompt: str
    target: str
    kind: ClassVar[Kind] = Kind.CHOICE


@dataclass(frozen=True)
class Input:
    mode: str
    prompt: str
    variable: str
    kind: ClassVar[Kind] = Kind.INPUT


Directive = Union[
    Blank, Label, Comment, Spacer, Goto, Conditional, Assignment, Text, Choice, Input, Malformed
]


def split_exact(text: str, separator: str, count: int) -> Optional[Tuple[str, ...]]:
    """Split ``text`` on every ``separator``; ``None`` unless there are ``count`` parts."""
    parts = text.split(separator)
    if len(parts) != count:
        return None
    return tuple(parts)


def parse_assignment(text: str) -> Optional[Assignment]:
    parts = split_exact(text, "=", 2)
    if parts is None:
        return None
    left, right = parts
    return Assignment(name=left[1:], expression=right)


def parse_branch(text: str) -> Branch:
    text = text.strip()
    if text.startswith("#"):
        return Goto(target=text.lstrip("#"))
    if text.startswith("@"):
        assignment = parse_assignment(text)
        if assignment is None:
            return Malformed(text, f"Branch assignment '{text}' must contain exactly one '='.")
        return assignment
    return Text(text, substitute=False)


def _parse_conditional(line: str) -> Directive:
    parts = line.split(":")
    if len(parts) not in (2, 3):
        return Malformed(
            line,
            f"Conditional has {len(parts)} ':'-separated parts; expected 2 or 3 "
            "(!<condition>:<then>[:<else>]).",
        )
    else_branch = parse_branch(parts[2]) if len(parts) == 3 else None
    return Conditional(
        condition=parts[0][1:],
        then_branch=parse_branch(parts[1]),
        else_branch=else_branch,
    )


def _parse_choice(line: str) -> Directive:
    parts = split_exact(line, ":", 2)
    if parts is None:
        return Malformed(line, "Menu option must look like '?<prompt>:<label>'.")
    prompt, target = parts
    return Choice(prompt=prompt[1:], target=target.lstrip("#"))


def _parse_input(line: str) -> Directive:
    parts = split_exact(line, ":", 2)
    if parts is None:
        return Malformed(line, "Input request must look like '^<mode><prompt>:@<variable>'.")
    left, right = parts
    if not right.startswith("@"):
        return Malformed(line, f"Input target '{right}' must be a variable like '@name'.")
    return Input(mode=left[1:2], prompt=left[2:], variable=right[1:])


def parse_line(line: str) -> Directive:
    if not line:
        return Blank()
    sigil = line[0]
    if sigil in "\r\n":
        return Blank()
    if sigil == ":":
        return Label(line[1:])
    if sigil == "*":
        return Comment(line[1:])
    if sigil == "|":
        return Spacer()
    if sigil == "#":
        return Goto(line[1:])
    if sigil == "!":
        return _parse_conditional(line)
    if sigil == "@":
        return parse_assignment(line) or Text(line)
    if sigil == "?":
        return _parse_choice(line)
    if sigil == "^":
        return _parse_input(line)
    return Text(line)


def parse_lines(lines: Sequence[str]) -> Tuple[Directive, ...]:
    return tuple(parse_line(line) for line in lines)


def branch_targets(directive: Directive) -> Tuple[str, ...]:
    """Labels a directive can jump to directly."""
    if isinstance(directive, Goto):
        return (directive.target,)
    if isinstance(directive, Choice):
        return (directive.target,)
    if isinstance(directive, Conditional):
        targets = []
        for branch in (directive.then_branch, directive.else_branch):
            if isinstance(branch, Goto):
                targets.append(branch.target)
        return tuple(targets)
    return ()
