"""Dev tasks. `uv run check` runs lint, format check, type check and tests in order."""

import subprocess
import sys

CHECK_STEPS: list[tuple[str, list[str]]] = [
    ("lint", ["ruff", "check", "tablestack", "tests"]),
    ("format", ["ruff", "format", "--check", "tablestack", "tests"]),
    ("types", ["pyright", "tablestack"]),
    ("tests", ["pytest", "tests/", "--cov=tablestack", "--cov-report=term-missing"]),
]


def run_steps(steps: list[tuple[str, list[str]]]) -> int:
    """Run each step as `python -m <tool>`; stop at the first failure and return its exit code."""
    for name, args in steps:
        print(f"==> {name}")
        code = subprocess.run([sys.executable, "-m", *args]).returncode
        if code != 0:
            print(f"{name} failed (exit code {code})", file=sys.stderr)
            return code
    return 0


def check() -> None:
    sys.exit(run_steps(CHECK_STEPS))
