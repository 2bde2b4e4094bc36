"""Pytest configuration and fixtures for template-init tests."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any

import pytest

from template_init.github_client import GitHubError, RemoteFile, RepoInfo

SYNC_DOCUMENT = """\
name: Repo file sync

on:
  workflow_dispatch:
  schedule:
    - cron: "0 4 * * 1"

jobs:
  sync:
    runs-on: ubuntu-latest
    steps:
      - name: Dependabot automation
        uses: domdomegg/repo-file-sync-action@v1
        with:
          FILE_PATTERNS: |
            ^.github/workflows/dependabot.yaml$
        env:
          REPOSITORIES: |
            domdomegg/typescript-library-template
            domdomegg/airtable-ts
      # Node projects only
      - name: Node.js general template
        uses: domdomegg/repo-file-sync-action@v1
        env:
          REPOSITORIES: |
            domdomegg/some-other-lib
            domdomegg/typescript-library-template
      - name: Python template
        uses: domdomegg/repo-file-sync-action@v1
        env:
          REPOSITORIES: |
            domdomegg/typescript-library-template
"""


class FakeGitHubClient:
    """In-memory stand-in for GitHubClient that records every call."""

    def __init__(self, files: dict[str, str] | None = None, fail: tuple[str, ...] = ()) -> None:
        self.files = {key: (text, "sha-0") for key, text in (files or {}).items()}
        self.fail = set(fail)
        self.calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []

    def _record(self, name: str, *args: Any, **kwargs: Any) -> None:
        self.calls.append((name, args, kwargs))
        if name in self.fail:
            raise GitHubError(f"{name} failed", 403)

    def names(self) -> list[str]:
        return [name for name, _args, _kwargs in self.calls]

    def call(self, name: str) -> tuple[tuple[Any, ...], dict[str, Any]]:
        for recorded, args, kwargs in self.calls:
            if recorded == name:
                return args, kwargs
        raise AssertionError(f"{name} was not called")

    def get_user(self) -> dict[str, Any]:
        self._record("get_user")
        return {"login": "alice"}

    def get_repo(self, owner: str, name: str) -> RepoInfo | None:
        self._record("get_repo", owner, name)
        return RepoInfo(
            owner=owner,
            name=name,
            default_branch="master",
        )

    def update_repo(self, owner: str, name: str, **settings: Any) -> None:
        self._record("update_repo", owner, name, **settings)

    def set_fork_pr_approval(self, owner: str, name: str, policy: str) -> None:
        self._record("set_fork_pr_approval", owner, name, policy)

    def set_workflow_permissions(self, owner: str, name: str, *, can_approve_pull_request_reviews: bool) -> None:
        self._record("set_workflow_permissions", owner, name, can_approve_pull_request_reviews=can_approve_pull_request_reviews)

    def set_branch_protection(self, owner: str, name: str, branch: str, payload: dict[str, Any]) -> None:
        self._record("set_branch_protection", owner, name, branch, payload)

    def get_file(self, owner: str, name: str, path: str) -> RemoteFile:
        self._record("get_file", owner, name, path)
        text, sha = self.files[f"{owner}/{name}/{path}"]
        return RemoteFile(path=path, text=text, sha=sha)

    def put_file(self, owner: str, name: str, path: str, *, text: str, message: str, sha: str) -> None:
        self._record("put_file", owner, name, path, text=text, message=message, sha=sha)
        self.files[f"{owner}/{name}/{path}"] = (text, f"{sha}-next")

    def set_secret(self, owner: str, name: str, secret_name: str, value: str) -> None:
        self._record("set_secret", owner, name, secret_name, value)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """setup_logging() detaches the package logger from the root; undo that for caplog."""
    yield
    logger = logging.getLogger("template_init")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sync_document() -> str:
    return SYNC_DOCUMENT


@pytest.fixture
def fake_client_cls() -> type[FakeGitHubClient]:
    return FakeGitHubClient


@pytest.fixture
def isolated_git(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Give git a throwaway identity and ignore the user's global config."""
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.invalid")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.invalid")


@pytest.fixture
def make_git_repo(isolated_git: None):
    """Factory creating a git repository with an `origin` remote."""

    def _make(path: Path, remote_url: str) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        subprocess.run(["git", "init"], cwd=path, check=True, capture_output=True)
        subprocess.run(["git", "remote", "add", "origin", remote_url], cwd=path, check=True)
        return path

    return _make
