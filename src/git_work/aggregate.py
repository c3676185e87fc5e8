from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .harvest import harvest_repo
from .identity import Identity
from .models import CommitRecord, Feed, RepoHarvest
from .periods import TimeWindow


class EmptyFeedError(RuntimeError):
    def __init__(self, message: str, errors: dict[str, list[str]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or {}


def no_commits_message(window: TimeWindow, *, all_authors: bool) -> str:
    if all_authors:
        return f"No commits found in {window.phrase}"
    return f"No commits found for your identity in {window.phrase} (try --all)"


def merge_harvests(harvests: list[RepoHarvest], *, limit: int) -> Feed:
    commits: list[CommitRecord] = []
    errors: dict[str, list[str]] = {}
    for h in sorted(harvests, key=lambda h: h.repo.as_posix()):
        commits.extend(h.commits)
        if h.errors:
            errors[str(h.repo)] = list(h.errors)
    commits.sort(key=lambda c: -c.time)
    return Feed(commits=commits[: max(0, limit)], matched=len(commits), errors=errors)


def collect_feed(
    repos: list[Path],
    window: TimeWindow,
    identity: Identity,
    *,
    include_merges: bool = False,
    all_authors: bool = False,
    fetch: bool = False,
    limit: int = 50,
    jobs: int = 4,
) -> Feed:
    harvests: list[RepoHarvest] = []
    with ThreadPoolExecutor(max_workers=max(1, jobs)) as ex:
        futs = [
            ex.submit(
                harvest_repo,
                repo,
                window,
                identity,
                include_merges=include_merges,
                all_authors=all_authors,
                fetch=fetch,
            )
            for repo in repos
        ]
        for fut in as_completed(futs):
            harvests.append(fut.result())

    feed = merge_harvests(harvests, limit=limit)
    if feed.matched == 0:
        raise EmptyFeedError(no_commits_message(window, all_authors=all_authors), feed.errors)
    return feed
