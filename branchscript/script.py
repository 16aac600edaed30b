"""Script loading and the label/variable pre-scan."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from .directives import Assignment, Directive, Label, Malformed, parse_lines
from .errors import DuplicateLabel, MalformedDirective, ScriptLoadError
from .settings import DEFAULT_ENCODING


@dataclass(frozen=True)
class Script:
    """Immutable script: raw lines, their directives and the pre-scan tables."""

    lines: Tuple[str, ...]
    directives: Tuple[Directive, ...]
    labels: Dict[str, int] = field(default_factory=dict)
    declarations: Tuple[str, ...] = ()
    duplicate_labels: Tuple[Tuple[str, int], ...] = ()

    def __len__(self) -> int:
        return len(self.lines)

    def malformed(self) -> List[Tuple[int, Malformed]]:
        return [
            (index, directive)
            for index, directive in enumerate(self.directives)
            if isinstance(directive, Malformed)
        ]


def parse_script(lines: Iterable[str], *, strict: bool = False) -> Script:
    """Build a :class:`Script` from lines and run the pre-scan.

    Labels map to the index of the line declaring them; a label declared
    twice keeps the last index. Every ``@name=value`` line declares ``name``.
    ``@`` lines without exactly one ``=`` are text, not declarations.
    """
    raw = tuple(line.rstrip("\r\n") for line in lines)
    directives = parse_lines(raw)

    labels: Dict[str, int] = {}
    declarations: Dict[str, None] = {}
    duplicates: List[Tuple[str, int]] = []
    for index, directive in enumerate(directives):
        if isinstance(directive, Label):
            if directive.name in labels:
                duplicates.append((directive.name, index))
            labels[directive.name] = index
        elif isinstance(directive, Assignment):
            declarations.setdefault(directive.name, None)

    script = Script(
        lines=raw,
        directives=directives,
        labels=labels,
        declarations=tuple(declarations),
        duplicate_labels=tuple(duplicates),
    )
    if strict:
        _check_strict(script)
    return script


def _check_strict(script: Script) -> None:
    if script.duplicate_labels:
        name, index = script.duplicate_labels[0]
        raise DuplicateLabel(f"Label '{name}' is declared more than once.", line=index)
    malformed = script.malformed()
    if malformed:
        index, directive = malformed[0]
        raise MalformedDirective(directive.reason, line=index)


def load_script(
    path: Path | str, *, encoding: str = DEFAULT_ENCODING, strict: bool = False
) -> Script:
    path = Path(path)
    try:
        with path.open("r", encoding=encoding) as handle:
            text = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ScriptLoadError(f"Couldn't open {path}: {exc}") from exc
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return parse_script(lines, strict=strict)
