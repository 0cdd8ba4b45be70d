"""Run style linting and formatting checks for zscli.

Default (no flags):
    - Run style guide lint checks (non-modifying)
    - Run black in check mode over zscli/, tests/ and scripts/

With --fix:
    - Run style guide lint checks
    - Run black to reformat zscli/, tests/ and scripts/

Equivalent commands:
    Check: ni-python-styleguide lint && black --check zscli tests scripts
    Fix:   ni-python-styleguide lint && black zscli tests scripts
"""

from __future__ import annotations

import subprocess
import sys
from typing import List

TARGETS = ["zscli", "tests", "scripts"]


def _run(cmd: List[str]) -> int:
    """Run a subprocess command and return its exit code."""
    proc = subprocess.run(cmd, stdout=sys.stdout, stderr=sys.stderr)  # noqa: S603,S607
    return proc.returncode


def main() -> None:
    """Execute lint steps; reformat when --fix is given."""
    fix = "--fix" in sys.argv[1:]

    code = 0
    if _run([sys.executable, "-m", "ni_python_styleguide", "lint", *TARGETS]) != 0:
        code = 1

    black_cmd = [sys.executable, "-m", "black"]
    if not fix:
        black_cmd.append("--check")
    black_cmd.extend(TARGETS)

    if _run(black_cmd) != 0:
        code = 1

    sys.exit(code)


if __name__ == "__main__":  # pragma: no cover
    main()
