#!/usr/bin/env python3
"""Validate a story script for common authoring mistakes."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_SCRIPT = REPO_ROOT / "stories" / "lantern_road.story"

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from branchscript.errors import ScriptError
from branchscript.lint import analyze_flow, validate_script
from branchscript.script import load_script


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate a branchscript story file.")
    parser.add_argument(
        "script_path",
        nargs="?",
        default=str(DEFAULT_SCRIPT),
        help="Path to the story script.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str]) -> None:
    args = parse_args(argv[1:])
    script_path = Path(args.script_path).resolve()
    try:
        script = load_script(script_path)
    except ScriptError as exc:
        print(f"Failed to load {script_path}: {exc}")
        sys.exit(1)

    errors = validate_script(script)
    if errors:
        print("Validation failed (line: message):")
        for err in errors:
            print(f" - {err}")
        sys.exit(1)

    warnings = analyze_flow(script)
    if warnings:
        print("Flow warnings (line: message):")
        for warning in warnings:
            print(f" - {warning}")

    print(f"Validation passed for {script_path}.")


if __name__ == "__main__":
    main(sys.argv)
