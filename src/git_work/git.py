from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Optional


def run_git(args: list[str], cwd: Path, timeout_s: int = 300) -> tuple[int, str, str]:
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def is_git_root(path: Path) -> bool:
    # `.git` is a file for worktrees and submodules.
    return os.path.lexists(path / ".git")


def discover_git_roots(root: Path, max_depth: int) -> list[Path]:
    """
    Return the repository roots under `root`, at most `max_depth` levels down
    (0 = only `root` itself). Repository roots are not descended into and
    symlinked directories are never followed. Unreadable directories are skipped.
    """
    roots: set[Path] = set()

    def onerror(err: OSError) -> None:
        _ = err

    for dirpath, dirnames, _filenames in os.walk(root, onerror=onerror, followlinks=False):
        here = Path(dirpath)
        if is_git_root(here):
            roots.add(here.resolve())
            dirnames[:] = []
            continue
        depth = len(here.relative_to(root).parts)
        if depth >= max_depth:
            dirnames[:] = []
            continue
        dirnames[:] = sorted(d for d in dirnames if d != ".git" and not os.path.islink(os.path.join(dirpath, d)))
    return sorted(roots, key=lambda p: p.as_posix())


def resolve_head(repo: Path) -> Optional[str]:
    try:
        code, out, _ = run_git(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"], cwd=repo)
    except (OSError, subprocess.SubprocessError):
        return None
    if code != 0:
        return None
    sha = out.strip()
    return sha or None


def fetch_remote(repo: Path, timeout_s: int = 300) -> None:
    """Best effort `git fetch --prune`; whatever happens, the scan goes on with local history."""
    try:
        run_git(["fetch", "--quiet", "--prune"], cwd=repo, timeout_s=timeout_s)
    except (OSError, subprocess.SubprocessError):
        pass


def get_global_config(key: str) -> Optional[str]:
    try:
        code, out, _ = run_git(["config", "--global", "--get", key], cwd=Path.cwd())
    except (OSError, subprocess.SubprocessError):
        return None
    if code == 0 and out.strip():
        return out.strip()
    return None
