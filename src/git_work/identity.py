from __future__ import annotations

import dataclasses
from typing import Optional

from .git import get_global_config


def normalize_email(email: str) -> str:
    return email.lower()


@dataclasses.dataclass(frozen=True)
class Identity:
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.name) or bool(self.email)

    def matches(self, author_name: str, author_email: str) -> bool:
        if not self.is_configured:
            # Nothing to compare against; filtering everything out would be worse.
            return True
        if self.email and author_email and normalize_email(author_email) == normalize_email(self.email):
            return True
        if self.name and author_name and author_name == self.name:
            return True
        return False


def resolve_identity() -> Identity:
    """Read `user.name` / `user.email` from the global git config. Missing values stay None."""
    return Identity(name=get_global_config("user.name"), email=get_global_config("user.email"))
