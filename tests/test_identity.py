from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from git_work.identity import Identity, resolve_identity
from gitrepo import set_global_identity


def test_email_match_is_case_insensitive() -> None:
    me = Identity(name="Ada Lovelace", email="Ada@Example.com")
    assert me.matches("someone else", "ada@example.COM")


def test_name_match_is_case_sensitive() -> None:
    me = Identity(name="Ada Lovelace", email=None)
    assert me.matches("Ada Lovelace", "")
    assert not me.matches("ada lovelace", "")


def test_email_checked_before_name() -> None:
    me = Identity(name="Ada Lovelace", email="ada@example.com")
    assert me.matches("Another Name", "ADA@example.com")
    assert me.matches("Ada Lovelace", "other@example.com")
    assert not me.matches("Charles Babbage", "charles@example.com")


def test_unconfigured_identity_matches_everything() -> None:
    me = Identity()
    assert not me.is_configured
    assert me.matches("anyone", "anyone@example.com")
    assert me.matches("", "")
    assert Identity(name="", email="").matches("x", "y")


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_resolve_identity_reads_global_config(git_home: Path) -> None:
    set_global_identity(name="Test User", email="test@example.com")
    assert resolve_identity() == Identity(name="Test User", email="test@example.com")


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_resolve_identity_missing_values(git_home: Path) -> None:
    assert resolve_identity() == Identity(name=None, email=None)
    set_global_identity(email="only@example.com")
    assert resolve_identity() == Identity(name=None, email="only@example.com")


def test_resolve_identity_without_git(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PATH", str(tmp_path))
    assert resolve_identity() == Identity()


def test_email_match_is_exact_apart_from_case() -> None:
    me = Identity(email="ada@example.com")
    assert not me.matches("", " ada@example.com")
    assert not me.matches("", "ada@example.com.au")
