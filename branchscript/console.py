"""Blocking console interaction: story output, menus and input requests."""

from __future__ import annotations

import sys
import time
from typing import Callable, Optional, Sequence

from .errors import InputClosed
from .settings import Settings

InputFunc = Callable[[str], str]
PrintFunc = Callable[..., None]

BASE_TEXT_DELAY = 0.02


def _print_stderr(*args, **kwargs) -> None:
    print(*args, file=sys.stderr, **kwargs)


def compute_text_delay(settings: Settings) -> float:
    try:
        speed = float(getattr(settings, "text_speed", 0.0))
    except (TypeError, ValueError):
        speed = 0.0
    if speed <= 0:
        return 0.0
    return BASE_TEXT_DELAY / max(speed, 0.1)


def has_letters(text: str) -> bool:
    return any(char.isalpha() for char in text)


class Console:
    """Terminal collaborator for the engine.

    ``input_func`` and ``print_func`` default to the builtins; tests pass
    scripted replacements. Diagnostics go to ``log_func`` (stderr).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        input_func: InputFunc = input,
        print_func: PrintFunc = print,
        log_func: PrintFunc = _print_stderr,
        debug: bool = False,
    ) -> None:
        self.settings = settings or Settings()
        self.input_func = input_func
        self.print = print_func
        self.log = log_func
        self.debug_enabled = debug
        self.delay = compute_text_delay(self.settings)

    def emit(self, text: str = "") -> None:
        if self.delay <= 0 or not text:
            self.print(text)
            return
        for char in text:
            self.print(char, end="", flush=True)
            time.sleep(self.delay)
        self.print("")

    def debug(self, message: str) -> None:
        if self.debug_enabled:
            self.log(f"[#] Debug: {message}")

    def read_line(self, prompt: str = "") -> str:
        try:
            raw = self.input_func(prompt)
        except EOFError:
            raise InputClosed("Input ended while waiting for an answer.") from None
        return raw.rstrip("\r\n")

    def choose(self, prompts: Sequence[str]) -> int:
        """Show numbered options and block until a valid 1-based pick."""
        count = len(prompts)
        for index, prompt in enumerate(prompts, start=1):
            self.emit(f"{index}. {prompt}")

        while True:
            selection = self.read_line().strip()
            if has_letters(selection):
                self.emit(f"You must enter a NUMBER between 1 and {count}")
                continue
            if selection.isdecimal():
                picked = int(selection)
                if 1 <= picked <= count:
                    return picked
            self.emit(f"You must enter a number between 1 and {count}")

    def ask_number(self, prompt: str) -> str:
        while True:
            self.emit("")
            self.emit(prompt)
            answer = self.read_line()
            if not has_letters(answer):
                return answer
            self.emit("You may only enter in a Number. Please try again.")

    def ask_text(self, prompt: str) -> str:
        self.emit("")
        self.emit(prompt)
        return self.read_line()
