from __future__ import annotations

import argparse
import os
import signal
import sys
from pathlib import Path

from .run import run


def _non_negative_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if n < 0:
        raise argparse.ArgumentTypeError(f"expected a value >= 0, got {n}")
    return n


def _positive_int(value: str) -> int:
    n = _non_negative_int(value)
    if n == 0:
        raise argparse.ArgumentTypeError("expected a value >= 1, got 0")
    return n


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="git-work", description="Show your recent commits across many git repos.")
    parser.add_argument("path", type=Path, help="Directory to scan.")
    parser.add_argument("-L", "--depth", type=_non_negative_int, default=3, help="Max depth to search for repos.")
    window = parser.add_mutually_exclusive_group()
    window.add_argument("--days", type=_non_negative_int, default=None, help="How many days back to look (default: 7).")
    window.add_argument("--today", action="store_true", help='Shortcut for "commits since local midnight".')
    window.add_argument("--month", action="store_true", help="Commits since the first day of the current month.")
    window.add_argument("--last-month", action="store_true", help="Commits from the previous calendar month only.")
    parser.add_argument("-l", "--limit", type=_non_negative_int, default=50, help="Max number of commits to print (across all repos).")
    parser.add_argument("--remote", action="store_true", help="Fetch from remotes before scanning (slower).")
    parser.add_argument("--all", action="store_true", help="Don't filter to your author identity.")
    parser.add_argument("--merges", action="store_true", help="Include merge commits.")
    parser.add_argument("-r", "--raw", action="store_true", help="Raw output for piping (tab-separated).")
    parser.add_argument("-j", "--jobs", type=_positive_int, default=max(1, min(8, (os.cpu_count() or 4))), help="Parallel git jobs.")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors (also honored: NO_COLOR).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Report repos that could not be read on stderr.")
    return parser


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = _build_parser()
    args = parser.parse_args(argv)
    return run(args=args)


def console() -> int:
    # Exit quietly when the reader of stdout goes away (e.g. `| head`).
    if hasattr(signal, "SIGPIPE"):
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)
    return main()


if __name__ == "__main__":
    raise SystemExit(console())
