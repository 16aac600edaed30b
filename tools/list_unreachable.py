import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from branchscript.lint import build_graph, traverse_from
from branchscript.script import load_script

DEFAULT_SCRIPT_PATH = REPO_ROOT / "stories" / "lantern_road.story"


def main() -> None:
    script_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_SCRIPT_PATH
    script = load_script(script_path)
    graph, missing_targets = build_graph(script)
    reached = traverse_from(0, graph)

    unreachable = sorted(
        (line, name) for name, line in script.labels.items() if line not in reached
    )

    print(f"Script file: {script_path}")
    print(f"Total labels: {len(script.labels)}")
    print(f"Reachable lines: {len(reached)} of {len(script)}")
    if unreachable:
        print("Unreachable labels:")
        for line, name in unreachable:
            print(f"  - {name} (line {line + 1})")
    else:
        print("All labels reachable from the first line.")
    for message in missing_targets:
        print(f"  ! {message}")


if __name__ == "__main__":
    main()
