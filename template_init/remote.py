"""
remote.py

Responsibility: derive the new repository's identity from its `origin` remote.

Both extractions fail loudly: a remote that does not end in `<name>.git`, or
that does not contain `<host>/<owner>/<repo>`, raises `RemoteURLError`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from template_init.commands import run

_PACKAGE_NAME_RE = re.compile(r"([^/:]+)\.git$")


class RemoteURLError(ValueError):
    pass


@dataclass(frozen=True)
class RepoIdentity:
    url: str
    package_name: str
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def origin_url(cwd: str | Path) -> str:
    return run(["git", "remote", "get-url", "origin"], cwd=cwd).strip()


def parse_package_name(url: str) -> str:
    """
    Return the last path segment of `url` without its `.git` suffix.

    git@github.com:alice/my-lib.git -> my-lib
    """
    match = _PACKAGE_NAME_RE.search(url.strip())
    if not match:
        raise RemoteURLError(f"Could not extract package name from git remote: {url!r}")
    return match.group(1)


def parse_owner_repo(url: str, host: str = "github.com") -> tuple[str, str]:
    """
    Return (owner, repo) from an HTTPS or SSH remote on `host`.

    https://github.com/alice/my-lib.git -> ("alice", "my-lib")
    """
    pattern = re.compile(rf"{re.escape(host)}[/:]([\w.-]+)/([\w.-]+?)(?:\.git)?/?$")
    match = pattern.search(url.strip())
    if not match:
        raise RemoteURLError(f"Could not extract owner/repo for {host} from git remote: {url!r}")
    return match.group(1), match.group(2)


def read_identity(cwd: str | Path, host: str = "github.com") -> RepoIdentity:
    url = origin_url(cwd)
    owner, repo = parse_owner_repo(url, host)
    return RepoIdentity(url=url, package_name=parse_package_name(url), owner=owner, repo=repo)
