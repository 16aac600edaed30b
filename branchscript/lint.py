"""Static validation for branchscript files.

Finds the mistakes the engine would only hit at run time: malformed
directives, jumps to unknown labels, references to undeclared variables and
invalid input modes. Flow analysis reports labels no path from line 1 reaches.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Set, Tuple

from .directives import (
    INPUT_MODES,
    Assignment,
    Choice,
    Conditional,
    Directive,
    Goto,
    Input,
    Malformed,
    Text,
    branch_targets,
)
from .script import Script
from .variables import find_references


def format_validation_message(line: int, context: str, message: str) -> str:
    if context:
        return f"line {line + 1}: {context}: {message}"
    return f"line {line + 1}: {message}"


class ValidationContext:
    """Utility container for accumulating validation errors."""

    def __init__(self) -> None:
        self.errors: List[str] = []

    def add(self, line: int, context: str, message: str) -> None:
        self.errors.append(format_validation_message(line, context, message))

    def ok(self) -> bool:
        return not self.errors


def _check_target(script: Script, line: int, context: str, target: str, ctx: ValidationContext) -> None:
    if target not in script.labels:
        ctx.add(line, context, f"targets unknown label '{target}'.")


def _check_references(
    script: Script, line: int, context: str, text: str, ctx: ValidationContext
) -> None:
    declared = set(script.declarations)
    for name in find_references(text):
        if name not in declared:
            ctx.add(line, context, f"uses undeclared variable '@{name}'.")


def _check_branch(script: Script, line: int, branch, ctx: ValidationContext) -> None:
    if isinstance(branch, Goto):
        _check_target(script, line, "Conditional", branch.target, ctx)
    elif isinstance(branch, Assignment):
        if branch.name not in script.declarations:
            ctx.add(line, "Conditional", f"assigns undeclared variable '@{branch.name}'.")
        _check_references(script, line, "Conditional", branch.expression, ctx)
    elif isinstance(branch, Malformed):
        ctx.add(line, "Conditional", branch.reason)


def validate_directive(script: Script, line: int, directive: Directive, ctx: ValidationContext) -> None:
    if isinstance(directive, Malformed):
        ctx.add(line, "", directive.reason)
    elif isinstance(directive, Goto):
        _check_target(script, line, "Goto", directive.target, ctx)
    elif isinstance(directive, Choice):
        _check_target(script, line, "Menu option", directive.target, ctx)
    elif isinstance(directive, Conditional):
        _check_references(script, line, "Conditional", directive.condition, ctx)
        _check_branch(script, line, directive.then_branch, ctx)
        if directive.else_branch is not None:
            _check_branch(script, line, directive.else_branch, ctx)
    elif isinstance(directive, Assignment):
        _check_references(script, line, "Assignment", directive.expression, ctx)
    elif isinstance(directive, Text) and directive.substitute:
        _check_references(script, line, "Text", directive.text, ctx)
    elif isinstance(directive, Input):
        if directive.mode not in INPUT_MODES:
            ctx.add(line, "Input", f"unknown input mode {directive.mode!r}; use 'i' or 's'.")
        if directive.variable not in script.declarations:
            ctx.add(line, "Input", f"stores into undeclared variable '@{directive.variable}'.")


def validate_script(script: Script) -> List[str]:
    ctx = ValidationContext()
    for name, line in script.duplicate_labels:
        ctx.add(line, "Label", f"'{name}' is declared more than once; the last one wins.")
    for line, directive in enumerate(script.directives):
        validate_directive(script, line, directive, ctx)
    return ctx.errors


def _menu_run(script: Script, line: int) -> Sequence[Choice]:
    start = line
    while start > 0 and script.lines[start - 1].startswith("?"):
        start -= 1
    end = line
    while end < len(script) and script.lines[end].startswith("?"):
        end += 1
    return [
        directive
        for directive in script.directives[start:end]
        if isinstance(directive, Choice)
    ]


def _falls_through(directive: Directive) -> bool:
    if isinstance(directive, (Goto, Choice, Malformed)):
        return False
    if isinstance(directive, Conditional):
        # A false condition without an else branch, or a non-goto branch.
        branches = [directive.then_branch, directive.else_branch]
        return any(not isinstance(branch, Goto) for branch in branches)
    return True


def build_graph(script: Script) -> Tuple[Dict[int, List[int]], List[str]]:
    """Successor lines for every line, plus messages for missing targets."""
    graph: Dict[int, List[int]] = {}
    missing_targets: List[str] = []
    for line, directive in enumerate(script.directives):
        successors: List[int] = []
        if isinstance(directive, Choice):
            targets = [choice.target for choice in _menu_run(script, line)]
        else:
            targets = list(branch_targets(directive))
        for target in targets:
            index = script.labels.get(target)
            if index is None:
                missing_targets.append(
                    f"line {line + 1} jumps to missing label {target}"
                )
                continue
            if index not in successors:
                successors.append(index)
        if _falls_through(directive) and line + 1 < len(script):
            successors.append(line + 1)
        graph[line] = successors
    return graph, missing_targets


def traverse_from(start_line: int, graph: Dict[int, List[int]]) -> Set[int]:
    if start_line not in graph:
        return set()
    visited: Set[int] = set()
    stack = [start_line]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        stack.extend(graph.get(current, []))
    return visited


def find_unreachable_labels(script: Script) -> List[str]:
    graph, _ = build_graph(script)
    reached = traverse_from(0, graph)
    return sorted(name for name, line in script.labels.items() if line not in reached)


def analyze_flow(script: Script) -> List[str]:
    warnings = []
    for name in find_unreachable_labels(script):
        line = script.labels[name]
        warnings.append(format_validation_message(line, "Label", f"'{name}' is never reached."))
    return warnings
