#!/usr/bin/env python
"""
Test runner for feedback-core.

Splits the suite by time source:
    - deterministic: everything driven by ManualClock; must always pass
    - realtime: tests marked ``realtime`` that wait on the real event loop;
      rerun a few times because a loaded machine can delay loop timers
    - coverage: the deterministic suite with a coverage report

Usage:
    python run_tests.py                  # deterministic + realtime
    python run_tests.py --suite realtime --reruns 5
    python run_tests.py --suite coverage
"""

import argparse
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent

SUITES = {
    "deterministic": ["-m", "not realtime"],
    "realtime": ["-m", "realtime"],
    "coverage": ["-m", "not realtime", "--cov=feedback_core", "--cov-report=term-missing"],
}


def run_pytest(suite: str, extra_args: list[str]) -> int:
    """Run one suite in a fresh interpreter and return pytest's exit code."""
    cmd = [sys.executable, "-m", "pytest", *SUITES[suite], "--tb=short", *extra_args]
    print(f"\n[{suite}] {' '.join(cmd[1:])}")
    return subprocess.run(cmd, cwd=PROJECT_ROOT).returncode


def run_realtime(reruns: int, extra_args: list[str]) -> int:
    """Run the real-loop suite until it passes or the reruns are used up."""
    code = 1
    for attempt in range(1, reruns + 1):
        code = run_pytest("realtime", extra_args)
        if code == 0:
            break
        print(f"[realtime] attempt {attempt}/{reruns} failed")
    return code


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the feedback-core test suites")
    parser.add_argument(
        "--suite",
        choices=["all", *SUITES],
        default="all",
        help="Suite to run (default: deterministic followed by realtime)",
    )
    parser.add_argument(
        "--reruns",
        type=int,
        default=3,
        help="Attempts allowed for the realtime suite (default: 3)",
    )
    parser.add_argument("pytest_args", nargs="*", help="Extra arguments passed to pytest")
    return parser.parse_args(argv)


def main(argv: list[str]) -> int:
    args = parse_args(argv)

    if args.suite == "realtime":
        return run_realtime(args.reruns, args.pytest_args)
    if args.suite != "all":
        return run_pytest(args.suite, args.pytest_args)

    results = {
        "deterministic": run_pytest("deterministic", args.pytest_args),
        "realtime": run_realtime(args.reruns, args.pytest_args),
    }

    print()
    for suite, code in results.items():
        print(f"{suite:14} {'passed' if code == 0 else f'failed (exit {code})'}")

    return max(results.values())


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
