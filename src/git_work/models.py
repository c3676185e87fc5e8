from __future__ import annotations

import dataclasses
from pathlib import Path

NO_MESSAGE = "(no message)"
SHORT_ID_LEN = 7


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    repo: Path
    time: int  # author time, epoch seconds
    sha: str
    summary: str
    insertions: int = 0
    deletions: int = 0

    @property
    def short_id(self) -> str:
        return self.sha[:SHORT_ID_LEN]


@dataclasses.dataclass
class RepoHarvest:
    repo: Path
    commits: list[CommitRecord]
    errors: list[str]


@dataclasses.dataclass
class Feed:
    commits: list[CommitRecord]  # time-descending, truncated to the display limit
    matched: int  # before truncation
    errors: dict[str, list[str]]  # repo path -> soft failures

    @property
    def insertions(self) -> int:
        return sum(c.insertions for c in self.commits)

    @property
    def deletions(self) -> int:
        return sum(c.deletions for c in self.commits)
