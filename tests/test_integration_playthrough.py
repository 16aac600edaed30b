from pathlib import Path
from typing import List, Sequence, Tuple

import pytest

from branchscript.console import Console
from branchscript.engine import ExecutionState, main, run_script
from branchscript.script import load_script


REPO_ROOT = Path(__file__).resolve().parents[1]
DEMO_STORY = REPO_ROOT / "stories" / "lantern_road.story"


def play_story(answers: Sequence[str]) -> Tuple[ExecutionState, List[str]]:
    pending = list(answers)
    output: List[str] = []

    def scripted_input(prompt: str = "") -> str:
        assert pending, "Story asked for more input than the test provided."
        return pending.pop(0)

    console = Console(input_func=scripted_input, print_func=output.append)
    state = ExecutionState(load_script(DEMO_STORY))
    run_script(state, console)
    assert not pending, f"Unused answers: {pending}"
    return state, output


def test_playthrough_to_empty_purse() -> None:
    state, output = play_story(["Ada", "1", "3", "2", "1"])

    assert "Welcome, Ada. You carry 3 gold coins." in output
    assert "You stand at a crossroads (visit 1)." in output
    assert "You count 1 coins. Your mood is bright." in output
    assert "Your purse is empty. The road fades behind you." in output
    assert output[-1] == "THE END"
    assert state.variables.as_dict() == {
        "name": "Ada",
        "gold": "0",
        "visits": "3",
        "toss": "1",
        "mood": "bright",
    }
    assert [entry["to"] for entry in state.history] == [
        "left",
        "crossroads",
        "count",
        "crossroads",
        "right",
        "broke",
        "end",
    ]


def test_playthrough_until_weary() -> None:
    state, output = play_story(["Ada", "3", "3", "3"])

    assert output.count("You count 3 coins. Your mood is calm.") == 3
    assert "After 4 visits, Ada is too weary to continue." in output
    assert output[-2:] == ["", "THE END"]
    assert state.finished


def test_cli_runs_script(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    script = tmp_path / "story.txt"
    script.write_text("@n=6*7\n#answer\nskipped\n:answer\nThe answer is @n.\n", encoding="utf-8")
    code = main([str(script), "--settings", str(tmp_path / "settings.json")])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == "The answer is 42.\n"


def test_cli_reports_fatal_errors(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    script = tmp_path / "story.txt"
    script.write_text("Intro\n#nowhere\n", encoding="utf-8")
    code = main([str(script), "--settings", str(tmp_path / "settings.json"), "--debug"])
    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == "Intro\n"
    assert "[!] line 2: Goto target 'nowhere' is missing." in captured.err
    assert "[#] Debug: last jumps: no jumps taken" in captured.err


def test_cli_reports_missing_script(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    code = main([str(tmp_path / "missing.txt"), "--settings", str(tmp_path / "settings.json")])
    assert code == 1
    assert "Couldn't open" in capsys.readouterr().err


def test_cli_strict_settings_reject_duplicate_labels(
    tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    script = tmp_path / "story.txt"
    script.write_text(":a\n:a\n", encoding="utf-8")
    settings = tmp_path / "settings.json"
    settings.write_text('{"strict": true}', encoding="utf-8")
    assert main([str(script), "--settings", str(settings)]) == 1
    assert "declared more than once" in capsys.readouterr().err
