from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .aggregate import EmptyFeedError, collect_feed
from .git import discover_git_roots
from .identity import resolve_identity
from .periods import DEFAULT_DAYS, MODE_DAYS, MODE_LAST_MONTH, MODE_MONTH, MODE_TODAY, WindowError, compute_window
from .render import render_pretty, render_raw


def window_mode_from_args(args: argparse.Namespace) -> str:
    if getattr(args, "today", False):
        return MODE_TODAY
    if getattr(args, "month", False):
        return MODE_MONTH
    if getattr(args, "last_month", False):
        return MODE_LAST_MONTH
    return MODE_DAYS


def use_color(args: argparse.Namespace) -> bool:
    if getattr(args, "no_color", False):
        return False
    return not os.environ.get("NO_COLOR")


def _print_errors(errors: dict[str, list[str]]) -> None:
    for repo in sorted(errors):
        for err in errors[repo]:
            print(f"warning: {repo}: {err}", file=sys.stderr)


def run(*, args: argparse.Namespace) -> int:
    path = Path(args.path)
    try:
        base = path.resolve(strict=True)
    except (OSError, RuntimeError):
        base = None
    if base is None or not base.is_dir() or not os.access(base, os.R_OK | os.X_OK):
        print(f"git-work: cannot access '{path}'", file=sys.stderr)
        return 1

    repos = discover_git_roots(base, int(args.depth))
    if not repos:
        print(f"No git repos found in {base}", file=sys.stderr)
        return 1

    identity = resolve_identity()
    try:
        window = compute_window(window_mode_from_args(args), days=DEFAULT_DAYS if args.days is None else int(args.days))
    except WindowError as e:
        print(f"git-work: {e}", file=sys.stderr)
        return 1

    if not args.all and not identity.is_configured:
        print("Warning: no user.name/user.email in global git config; showing commits from all authors.", file=sys.stderr)

    try:
        feed = collect_feed(
            repos,
            window,
            identity,
            include_merges=bool(args.merges),
            all_authors=bool(args.all),
            fetch=bool(args.remote),
            limit=int(args.limit),
            jobs=int(args.jobs),
        )
    except EmptyFeedError as e:
        if args.verbose:
            _print_errors(e.errors)
        print(str(e), file=sys.stderr)
        return 1

    if args.raw:
        out = render_raw(feed, base)
    else:
        out = render_pretty(feed, base, window, color=use_color(args))
    if out:
        print(out)

    if args.verbose:
        _print_errors(feed.errors)
    return 0
