#!/usr/bin/env python3
"""
Branching story script interpreter.
- One directive per line, selected by its leading sigil.
- Labels, gotos, conditionals, text variables, menus and input prompts.
- Any script error aborts the run with a diagnostic and exit status 1.
Usage: python3 engine.py story.txt [--debug] [--settings settings.json]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
    from branchscript.conditions import evaluate_condition
    from branchscript.console import Console
    from branchscript.directives import (
        Assignment,
        Branch,
        Choice,
        Conditional,
        Goto,
        Input,
        Kind,
        Text,
    )
    from branchscript.errors import MalformedDirective, MissingLabel, ScriptError, UndeclaredVariable
    from branchscript.expression import ExpressionEvaluator, format_number
    from branchscript.script import Script, load_script
    from branchscript.settings import SETTINGS_PATH, load_settings
    from branchscript.variables import VariableStore
else:
    from .conditions import evaluate_condition
    from .console import Console
    from .directives import (
        Assignment,
        Branch,
        Choice,
        Conditional,
        Goto,
        Input,
        Kind,
        Text,
    )
    from .errors import MalformedDirective, MissingLabel, ScriptError, UndeclaredVariable
    from .expression import ExpressionEvaluator, format_number
    from .script import Script, load_script
    from .settings import SETTINGS_PATH, load_settings
    from .variables import VariableStore

PASSIVE_KINDS = {Kind.BLANK, Kind.LABEL, Kind.COMMENT}


def emit_print(*args, **kwargs) -> None:
    print(*args, **kwargs)


class ExecutionState:
    """Everything one run owns: script, variables, program counter, history."""

    def __init__(self, script: Script, evaluator: Optional[ExpressionEvaluator] = None):
        self.script = script
        self.variables = VariableStore(script.declarations)
        self.evaluator = evaluator or ExpressionEvaluator()
        self.pc = 0
        self.history: List[Dict[str, object]] = []

    @property
    def finished(self) -> bool:
        return self.pc >= len(self.script)

    def advance(self) -> None:
        self.pc += 1

    def jump(self, label: str, via: str) -> None:
        target = self.script.labels.get(label)
        if target is None:
            raise MissingLabel(label, line=self.pc)
        self.record_transition(self.pc, label, via)
        self.pc = target

    def record_transition(self, origin: int, label: str, via: str) -> None:
        self.history.append({"from": origin, "to": label, "via": via})


def assign(state: ExecutionState, name: str, expression: str, console: Console) -> None:
    if name not in state.variables:
        raise UndeclaredVariable(name, line=state.pc)
    text = state.variables.substitute(expression, line=state.pc)
    value = state.evaluator.try_evaluate(text)
    state.variables[name] = text if value is None else format_number(value)
    console.debug(f"line {state.pc + 1}: {name} = {state.variables[name]!r}")


def run_branch(state: ExecutionState, branch: Branch, console: Console) -> None:
    if isinstance(branch, Goto):
        state.jump(branch.target, "conditional")
        console.debug(f"conditional jump to '{branch.target}' (line {state.pc + 1})")
        return
    if isinstance(branch, Assignment):
        assign(state, branch.name, branch.expression, console)
    elif isinstance(branch, Text):
        console.emit(branch.text)
    else:
        raise MalformedDirective(branch.reason, line=state.pc)
    state.advance()


def run_conditional(state: ExecutionState, directive: Conditional, console: Console) -> None:
    condition = state.variables.substitute(directive.condition, line=state.pc)
    if evaluate_condition(condition, state.evaluator):
        run_branch(state, directive.then_branch, console)
    elif directive.else_branch is not None:
        run_branch(state, directive.else_branch, console)
    else:
        state.advance()


def collect_choices(state: ExecutionState) -> List[Choice]:
    """The contiguous run of ``?`` lines starting at the program counter.

    Every line of the run must be a well-formed option; a broken one aborts
    before the menu is shown.
    """
    choices = []
    index = state.pc
    script = state.script
    while index < len(script) and script.lines[index].startswith("?"):
        directive = script.directives[index]
        if directive.kind is Kind.MALFORMED:
            raise MalformedDirective(directive.reason, line=index)
        choices.append(directive)
        index += 1
    return choices


def run_menu(state: ExecutionState, console: Console) -> None:
    choices = collect_choices(state)
    picked = console.choose([choice.prompt for choice in choices])
    target = choices[picked - 1].target
    state.jump(target, "menu")
    console.debug(f"menu option {picked} -> '{target}' (line {state.pc + 1})")


def run_input(state: ExecutionState, directive: Input, console: Console) -> None:
    if directive.variable not in state.variables:
        raise UndeclaredVariable(directive.variable, line=state.pc)
    if directive.mode == "i":
        answer = console.ask_number(directive.prompt)
    elif directive.mode == "s":
        answer = console.ask_text(directive.prompt)
    else:
        raise MalformedDirective(
            f"Missing 'i' or 's' input type, found {directive.mode!r}. Example: ^iHow many?:@count",
            line=state.pc,
        )
    state.variables[directive.variable] = answer
    state.advance()


def step(state: ExecutionState, console: Console) -> None:
    """Execute the directive under the program counter."""
    directive = state.script.directives[state.pc]
    kind = directive.kind
    try:
        if kind in PASSIVE_KINDS:
            state.advance()
        elif kind is Kind.SPACER:
            console.emit("")
            state.advance()
        elif kind is Kind.GOTO:
            state.jump(directive.target, "goto")
            console.debug(f"goto '{directive.target}' (line {state.pc + 1})")
        elif kind is Kind.CONDITIONAL:
            run_conditional(state, directive, console)
        elif kind is Kind.ASSIGNMENT:
            assign(state, directive.name, directive.expression, console)
            state.advance()
        elif kind is Kind.TEXT:
            console.emit(state.variables.substitute(directive.text, line=state.pc))
            state.advance()
        elif kind is Kind.CHOICE:
            run_menu(state, console)
        elif kind is Kind.INPUT:
            run_input(state, directive, console)
        else:
            raise MalformedDirective(directive.reason)
    except ScriptError as exc:
        if exc.line is None:
            exc.line = state.pc
        raise


def run_script(state: ExecutionState, console: Console) -> ExecutionState:
    while not state.finished:
        step(state, console)
    return state


def parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a branching story script.")
    parser.add_argument("script", help="Path to the story script.")
    parser.add_argument("--debug", action="store_true", help="Trace jumps and assignments.")
    parser.add_argument(
        "--settings",
        default=str(SETTINGS_PATH),
        help="Settings JSON file (default: ./settings.json).",
    )
    return parser.parse_args(argv)


def format_history(history: Sequence[Dict[str, object]]) -> str:
    if not history:
        return "no jumps taken"
    return ", ".join(
        f"line {int(entry['from']) + 1} -{entry['via']}-> {entry['to']}" for entry in history
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = load_settings(args.settings)
    console = Console(settings, debug=args.debug)
    state = None
    try:
        script = load_script(args.script, encoding=settings.encoding, strict=settings.strict)
        state = ExecutionState(script)
        run_script(state, console)
    except ScriptError as exc:
        emit_print(f"[!] {exc}", file=sys.stderr)
        if state is not None:
            console.debug(f"last jumps: {format_history(state.history[-5:])}")
        return 1
    except KeyboardInterrupt:
        emit_print("\n[Interrupted] Bye.")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
