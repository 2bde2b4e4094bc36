"""
settings.py

Responsibility: GitHub repository settings applied to a freshly created repository.

The settings calls are independent and best-effort: each one is attempted
even if an earlier one failed. The publish-token step is the exception; it
is fatal because a public package without it cannot be released.
"""

from __future__ import annotations

import logging
from typing import Any

from template_init.commands import best_effort
from template_init.config import BranchProtectionConfig, SetupConfig, split_repo
from template_init.github_client import GitHubClient
from template_init.logs import DONE, PENDING
from template_init.remote import RepoIdentity

logger = logging.getLogger(__name__)

FORK_PR_APPROVAL_POLICY = "first_time_contributors_new_to_github"


def branch_protection_payload(config: BranchProtectionConfig) -> dict[str, Any]:
    return {
        "required_status_checks": {
            "strict": False,
            "contexts": list(config.contexts),
        },
        "enforce_admins": False,
        "required_pull_request_reviews": {
            "required_approving_review_count": config.required_reviews,
        },
        "restrictions": None,
        "allow_force_pushes": config.allow_force_pushes,
    }


def _protect_branch(client: GitHubClient, identity: RepoIdentity, config: BranchProtectionConfig) -> None:
    branch = config.branch
    if branch is None:
        info = client.get_repo(identity.owner, identity.repo)
        branch = info.default_branch if info is not None else "main"
    client.set_branch_protection(identity.owner, identity.repo, branch, branch_protection_payload(config))


def configure_repository(client: GitHubClient, identity: RepoIdentity, config: SetupConfig) -> dict[str, bool]:
    """
    Apply feature toggles, Actions permissions and branch protection.

    Returns the outcome of each step keyed by its description.
    """
    owner, repo = identity.owner, identity.repo
    steps: list[tuple[str, Any, tuple[Any, ...], dict[str, Any]]] = [
        (
            "Configuring repository settings",
            client.update_repo,
            (owner, repo),
            {"has_issues": True, "has_wiki": False, "has_projects": False},
        ),
        (
            "Enabling first-time contributors to trigger GitHub Actions",
            client.set_fork_pr_approval,
            (owner, repo, FORK_PR_APPROVAL_POLICY),
            {},
        ),
        (
            "Allowing GitHub Actions to create and approve pull requests",
            client.set_workflow_permissions,
            (owner, repo),
            {"can_approve_pull_request_reviews": True},
        ),
        (
            "Setting up branch protection",
            _protect_branch,
            (client, identity, config.branch_protection),
            {},
        ),
    ]
    return {description: best_effort(description, func, *args, **kwargs) for description, func, args, kwargs in steps}


def configure_publish_token(client: GitHubClient, identity: RepoIdentity, config: SetupConfig, *, private: bool) -> bool:
    """
    Copy the registry publish token into the new repository's Actions secrets.

    Private repositories are never published, so nothing happens for them.
    Returns True when the secret was set.
    """
    if private:
        return False

    secret = config.publish_secret
    logger.info("Fetching %s from %s...", secret.name, secret.source_repo, extra=PENDING)
    source_owner, source_repo = split_repo(secret.source_repo, "publish_secret.source_repo")
    token = client.get_file(source_owner, source_repo, secret.source_path).text.strip()
    client.set_secret(identity.owner, identity.repo, secret.name, token)
    logger.info("%s secret configured", secret.name, extra=DONE)
    return True
