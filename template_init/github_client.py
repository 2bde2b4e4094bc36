"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

This module must be the only place that:
- Constructs GitHub REST endpoints
- Sends HTTP requests to the GitHub API
- Interprets GitHub API responses / error payloads
- Encodes file contents and encrypts Actions secrets for the API

Everything else (manifest/readme rewriting, git commands, CLI behavior) should use this client.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any

import requests
from nacl import encoding, public


class GitHubError(RuntimeError):
    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


@dataclass(frozen=True)
class RepoInfo:
    owner: str
    name: str
    default_branch: str


@dataclass(frozen=True)
class RemoteFile:
    """A text file read through the contents API, with its blob sha."""

    path: str
    text: str
    sha: str


def encrypt_secret(public_key: str, secret_value: str) -> str:
    """
    Seal `secret_value` for the repository public key (base64 in, base64 out),
    as required by the Actions secrets API.
    """
    key = public.PublicKey(public_key.encode("utf-8"), encoding.Base64Encoder)
    sealed_box = public.SealedBox(key)
    return encoding.Base64Encoder().encode(sealed_box.encrypt(secret_value.encode("utf-8"))).decode("utf-8")


class GitHubClient:
    def __init__(self, token: str, api_base: str = "https://api.github.com") -> None:
        if not token.strip():
            raise GitHubError("GitHub token is required.")
        self._token = token
        self._api_base = api_base.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "template-init",
        }

    def _request(self, method: str, path: str, *, json_body: dict[str, Any] | None = None) -> Any:
        url = f"{self._api_base}{path}"
        try:
            r = requests.request(method, url, headers=self._headers(), json=json_body, timeout=30)
        except requests.RequestException as e:
            raise GitHubError(f"GitHub API request failed {method} {path}: {e}") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"message": r.text}
            message = payload.get("message", payload) if isinstance(payload, dict) else payload
            raise GitHubError(f"GitHub API error {r.status_code} {method} {path}: {message}", r.status_code)
        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    def get_user(self) -> dict[str, Any]:
        """Return the authenticated user; fails when the token is not accepted."""
        return self._request("GET", "/user")

    def get_repo(self, owner: str, name: str) -> RepoInfo | None:
        """
        Return RepoInfo if the repo exists and is accessible; otherwise None.
        """
        try:
            data = self._request("GET", f"/repos/{owner}/{name}")
        except GitHubError as e:
            if e.status == 404:
                return None
            raise
        return RepoInfo(
            owner=owner,
            name=name,
            default_branch=data.get("default_branch") or "main",
        )

    def update_repo(self, owner: str, name: str, **settings: Any) -> None:
        self._request("PATCH", f"/repos/{owner}/{name}", json_body=dict(settings))

    def set_fork_pr_approval(self, owner: str, name: str, policy: str) -> None:
        self._request(
            "PUT",
            f"/repos/{owner}/{name}/actions/permissions/fork-pr-contributor-approval",
            json_body={"approval_policy": policy},
        )

    def set_workflow_permissions(self, owner: str, name: str, *, can_approve_pull_request_reviews: bool) -> None:
        self._request(
            "PUT",
            f"/repos/{owner}/{name}/actions/permissions/workflow",
            json_body={"can_approve_pull_request_reviews": can_approve_pull_request_reviews},
        )

    def set_branch_protection(self, owner: str, name: str, branch: str, payload: dict[str, Any]) -> None:
        self._request("PUT", f"/repos/{owner}/{name}/branches/{branch}/protection", json_body=payload)

    def get_file(self, owner: str, name: str, path: str) -> RemoteFile:
        """
        Read a UTF-8 file through the contents API.

        The returned sha must be sent back with `put_file` so GitHub rejects the
        update if the file changed in between.
        """
        data = self._request("GET", f"/repos/{owner}/{name}/contents/{path}")
        if not isinstance(data, dict) or "content" not in data:
            raise GitHubError(f"Not a file: {owner}/{name}/{path}")
        text = base64.b64decode(data["content"]).decode("utf-8")
        return RemoteFile(path=path, text=text, sha=data["sha"])

    def put_file(self, owner: str, name: str, path: str, *, text: str, message: str, sha: str) -> None:
        body = {
            "message": message,
            "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
            "sha": sha,
        }
        self._request("PUT", f"/repos/{owner}/{name}/contents/{path}", json_body=body)

    def set_secret(self, owner: str, name: str, secret_name: str, value: str) -> None:
        key = self._request("GET", f"/repos/{owner}/{name}/actions/secrets/public-key")
        if not key:
            raise GitHubError(f"Unable to fetch public key for secrets of {owner}/{name}")
        body = {"encrypted_value": encrypt_secret(key["key"], value), "key_id": key["key_id"]}
        self._request("PUT", f"/repos/{owner}/{name}/actions/secrets/{secret_name}", json_body=body)
