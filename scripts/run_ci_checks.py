#!/usr/bin/env python3
# =============================================================================
# KBVERIFY -- CI CHECKS RUNNER
# File:   scripts/run_ci_checks.py
# =============================================================================
#
# PURPOSE
# -------
# Runs the full CI gate in two sequential stages:
#   Stage 1: pytest (unit and contract tests)
#   Stage 2: mulhs soundness gate (kbverify.verification.ci_gate)
#
# Exit codes:
#   0 -- All stages passed.
#   1 -- Stage 1 (pytest) failed.
#   2 -- Stage 2 (soundness gate) failed.
#
# Usage:
#   python scripts/run_ci_checks.py
# =============================================================================

from __future__ import annotations

import subprocess
import sys
import pathlib

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
_REPO_ROOT = pathlib.Path(__file__).parent.parent
_PYTHON    = sys.executable


def _separator(char: str = "=", width: int = 72) -> str:
    return char * width


def _run(cmd: list[str], label: str) -> int:
    """
    Run a subprocess command, stream stdout/stderr live, return exit code.
    """
    print(_separator())
    print(f"CI STAGE: {label}")
    print(f"CMD:      {' '.join(cmd)}")
    print(_separator("-"))
    sys.stdout.flush()

    proc = subprocess.run(cmd, cwd=str(_REPO_ROOT))
    return proc.returncode


def _blocked(stage: str, rc: int) -> None:
    print(_separator())
    print(f"CI RESULT: FAIL  [stage={stage}  exit_code={rc}]")
    print(f"Merge BLOCKED: {stage} stage did not pass.")
    print(_separator())
    sys.stdout.flush()


def main() -> int:
    print(_separator())
    print("KBVERIFY CI GATE -- starting")
    print(_separator())
    sys.stdout.flush()

    # ------------------------------------------------------------------
    # Stage 1: pytest, including tests marked slow.
    # ------------------------------------------------------------------
    pytest_rc = _run([_PYTHON, "-m", "pytest"], "pytest")
    if pytest_rc != 0:
        _blocked("pytest", pytest_rc)
        return 1

    print(_separator("-"))
    print("CI STAGE pytest: PASS")
    sys.stdout.flush()

    # ------------------------------------------------------------------
    # Stage 2: exhaustive soundness check of the candidate over the CI
    # widths. Any unsound pair or truncated run fails the stage.
    # ------------------------------------------------------------------
    gate_rc = _run(
        [_PYTHON, "-m", "kbverify.verification.ci_gate"],
        "mulhs soundness gate",
    )
    if gate_rc != 0:
        _blocked("soundness", gate_rc)
        return 2

    print(_separator("-"))
    print("CI STAGE soundness: PASS")

    print(_separator())
    print("CI RESULT: PASS  [stages=pytest,soundness]")
    print("Merge permitted.")
    print(_separator())
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
