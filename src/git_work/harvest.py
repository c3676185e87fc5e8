from __future__ import annotations

import dataclasses
import subprocess
import threading
from pathlib import Path

from .git import fetch_remote, resolve_head, run_git
from .identity import Identity
from .models import NO_MESSAGE, CommitRecord, RepoHarvest
from .periods import TimeWindow

LOG_FORMAT = "%H%x09%P%x09%at%x09%ct%x09%an%x09%ae%x09%s"


@dataclasses.dataclass(frozen=True)
class LogEntry:
    sha: str
    parents: tuple[str, ...]
    time: int  # author time
    commit_time: int  # committer time, the key git log walks by
    author_name: str
    author_email: str
    subject: str


def parse_log_line(line: str) -> LogEntry | None:
    parts = line.split("\t", 6)
    if len(parts) < 6:
        return None
    sha = parts[0].strip()
    if not sha:
        return None
    try:
        ts = int(parts[2].strip())
        commit_ts = int(parts[3].strip())
    except ValueError:
        return None
    return LogEntry(
        sha=sha,
        parents=tuple(parts[1].split()),
        time=ts,
        commit_time=commit_ts,
        author_name=parts[4],
        author_email=parts[5],
        subject=parts[6] if len(parts) > 6 else "",
    )


def parse_numstat(out: str) -> tuple[int, int]:
    insertions = 0
    deletions = 0
    for line in out.splitlines():
        parts = line.split("\t", 2)
        if len(parts) < 3:
            continue
        added_s, deleted_s = parts[0], parts[1]
        if added_s == "-" or deleted_s == "-":
            # binary
            continue
        try:
            insertions += int(added_s)
            deletions += int(deleted_s)
        except ValueError:
            continue
    return insertions, deletions


def diff_stats(repo: Path, sha: str, first_parent: str | None) -> tuple[int, int]:
    """Inserted/deleted lines of `sha` against its first parent, or the empty tree for a root commit."""
    if first_parent:
        args = ["diff-tree", "-r", "--numstat", "--no-renames", "--no-commit-id", first_parent, sha]
    else:
        args = ["diff-tree", "-r", "--root", "--numstat", "--no-renames", "--no-commit-id", sha]
    try:
        code, out, _ = run_git(args, cwd=repo)
    except (OSError, subprocess.SubprocessError):
        return 0, 0
    if code != 0:
        return 0, 0
    return parse_numstat(out)


def walk_log(repo: Path, tip: str, window: TimeWindow, errors: list[str]) -> list[LogEntry]:
    """
    Stream `git log` from `tip` (newest first) and return the entries whose author
    time is inside `window`. The walk stops at the first commit whose committer
    time is older than `window.since`.
    """
    cmd = ["git", "log", "--no-color", f"--format={LOG_FORMAT}", tip]
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(repo),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        errors.append(f"failed to start git log: {e}")
        return []

    stderr_chunks: list[str] = []
    stderr_chars = 0
    max_stderr_chars = 50_000

    def drain_stderr() -> None:
        nonlocal stderr_chars
        if proc.stderr is None:
            return
        while True:
            chunk = proc.stderr.read(8192)
            if not chunk:
                return
            if stderr_chars >= max_stderr_chars:
                continue
            take = chunk[: max_stderr_chars - stderr_chars]
            stderr_chunks.append(take)
            stderr_chars += len(take)

    stderr_thread: threading.Thread | None = None
    if proc.stderr is not None:
        stderr_thread = threading.Thread(target=drain_stderr, daemon=True)
        stderr_thread.start()

    entries: list[LogEntry] = []
    stopped_early = False
    assert proc.stdout is not None
    try:
        for raw_line in proc.stdout:
            line = raw_line.rstrip("\n")
            if not line:
                continue
            entry = parse_log_line(line)
            if entry is None:
                continue
            if entry.commit_time < window.since:
                # git log walks by committer date, newest first; nothing after this can qualify.
                stopped_early = True
                break
            if not window.contains(entry.time):
                continue
            entries.append(entry)
    finally:
        if proc.poll() is None:
            proc.kill()
        proc.stdout.close()
        code = proc.wait()
        if stderr_thread is not None:
            stderr_thread.join()

    if code != 0 and not stopped_early:
        stderr = "".join(stderr_chunks)
        errors.append(f"git log exited {code}: {stderr.strip()[:500]}")
    return entries


def harvest_repo(
    repo: Path,
    window: TimeWindow,
    identity: Identity,
    *,
    include_merges: bool = False,
    all_authors: bool = False,
    fetch: bool = False,
) -> RepoHarvest:
    errors: list[str] = []
    if fetch:
        fetch_remote(repo)

    tip = resolve_head(repo)
    if tip is None:
        errors.append("no resolvable HEAD commit")
        return RepoHarvest(repo=repo, commits=[], errors=errors)

    commits: list[CommitRecord] = []
    for entry in walk_log(repo, tip, window, errors):
        if not include_merges and len(entry.parents) > 1:
            continue
        if not all_authors and not identity.matches(entry.author_name, entry.author_email):
            continue
        insertions, deletions = diff_stats(repo, entry.sha, entry.parents[0] if entry.parents else None)
        commits.append(
            CommitRecord(
                repo=repo,
                time=entry.time,
                sha=entry.sha,
                summary=entry.subject.strip() or NO_MESSAGE,
                insertions=insertions,
                deletions=deletions,
            )
        )
    return RepoHarvest(repo=repo, commits=commits, errors=errors)
