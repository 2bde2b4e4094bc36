"""
sync_config.py

Responsibility: register a repository in the cross-repository file-sync workflow.

The workflow document lists participating repositories in `REPOSITORIES: |`
blocks, one block per sync step. A new repository is inserted directly after
a sentinel entry (the template repository itself) in each configured step.
The document is treated as text so its comments and layout survive; PyYAML
is only used to check the result still parses.

Two ways of writing the change back are supported:
- `api`: read the file and its blob sha through the contents API and update
  it with that sha, so a concurrent change makes the update fail instead of
  being overwritten.
- `clone`: clone the sync repository into a temporary directory, commit and
  push to its default branch.
"""

from __future__ import annotations

import logging
import re
import tempfile
from pathlib import Path

import yaml

from template_init.commands import run
from template_init.config import SetupConfig, split_repo
from template_init.github_client import GitHubClient
from template_init.logs import DONE, PENDING
from template_init.remote import RepoIdentity

logger = logging.getLogger(__name__)


class SyncConfigError(RuntimeError):
    pass


def contains_entry(text: str, entry: str) -> bool:
    """True if some line of `text` is exactly `entry` (ignoring indentation)."""
    return any(line.strip() == entry for line in text.splitlines())


def _section_pattern(section: str, sentinel: str) -> re.Pattern[str]:
    # Matches from the step header to the sentinel line inside that step's
    # REPOSITORIES block, never crossing into the next `- name:` step.
    # Lines may end in \r\n; the sentinel's line ending is reused for the entry.
    within_step = r"(?:(?!^[ \t]*- name:).)*?"
    return re.compile(
        rf"^[ \t]*- name:[ \t]*{re.escape(section)}[ \t]*\r?$"
        rf"{within_step}REPOSITORIES:[ \t]*\|[^\n]*\n"
        rf"{within_step}^(?P<indent>[ \t]*){re.escape(sentinel)}[ \t]*(?P<eol>\r?)$",
        re.MULTILINE | re.DOTALL,
    )


def patch_sync_config(text: str, entry: str, *, sections: tuple[str, ...], sentinel: str) -> str:
    """
    Insert `entry` after the sentinel line of every named section.

    Returns `text` unchanged when the entry is already listed. Raises
    SyncConfigError when a section or its sentinel cannot be found, or when
    the patched document is no longer valid YAML.
    """
    if contains_entry(text, entry):
        return text

    patched = text
    for section in sections:
        patched, count = _section_pattern(section, sentinel).subn(
            lambda m: f"{m.group(0)}\n{m.group('indent')}{entry}{m.group('eol')}",
            patched,
            count=1,
        )
        if count == 0:
            raise SyncConfigError(f"Could not find `{sentinel}` in the REPOSITORIES of step `{section}`")

    try:
        yaml.safe_load(patched)
    except yaml.YAMLError as e:
        raise SyncConfigError("Patched sync config is not valid YAML") from e
    return patched


def _commit_message(identity: RepoIdentity) -> str:
    return f"Add {identity.full_name} to file sync automation"


def register_via_api(client: GitHubClient, identity: RepoIdentity, config: SetupConfig) -> bool:
    """Returns False when the repository was already registered."""
    owner, name = split_repo(config.sync.repo, "sync.repo")
    remote = client.get_file(owner, name, config.sync.path)
    if contains_entry(remote.text, identity.full_name):
        return False

    patched = patch_sync_config(
        remote.text,
        identity.full_name,
        sections=config.sync.sections,
        sentinel=config.sync.sentinel,
    )
    client.put_file(owner, name, config.sync.path, text=patched, message=_commit_message(identity), sha=remote.sha)
    return True


def register_via_clone(identity: RepoIdentity, config: SetupConfig, *, clone_url: str, display_url: str | None = None) -> bool:
    """
    Returns False when the repository was already registered.

    The temporary clone is removed whether or not the push succeeds.
    """
    with tempfile.TemporaryDirectory(prefix="template-init-sync-") as tmp:
        workdir = Path(tmp) / "sync"
        run(
            ["git", "clone", "--depth", "1", clone_url, str(workdir)],
            display=f"git clone --depth 1 {display_url or clone_url}",
        )

        target = workdir / config.sync.path
        if not target.is_file():
            raise SyncConfigError(f"{config.sync.path} not found in {config.sync.repo}")
        text = target.read_bytes().decode("utf-8")
        if contains_entry(text, identity.full_name):
            return False

        patched = patch_sync_config(
            text,
            identity.full_name,
            sections=config.sync.sections,
            sentinel=config.sync.sentinel,
        )
        target.write_bytes(patched.encode("utf-8"))
        run(["git", "add", config.sync.path], cwd=workdir)
        run(["git", "commit", "-m", _commit_message(identity)], cwd=workdir)
        run(["git", "push", "origin", "HEAD"], cwd=workdir)
    return True


def _tokenized_https_remote(clone_url: str, token: str) -> str:
    """
    Convert https://github.com/owner/name.git into an HTTPS URL containing a token.

    The clone is temporary, so the token never outlives the run.
    """
    # GitHub supports x-access-token in the username position.
    return clone_url.replace("https://", f"https://x-access-token:{token}@", 1)


def register(client: GitHubClient, identity: RepoIdentity, config: SetupConfig, *, token: str) -> bool:
    logger.info("Adding %s to file sync automation...", identity.full_name, extra=PENDING)
    if config.sync.mode == "clone":
        owner, name = split_repo(config.sync.repo, "sync.repo")
        public_url = f"https://{config.host}/{owner}/{name}.git"
        added = register_via_clone(
            identity,
            config,
            clone_url=_tokenized_https_remote(public_url, token),
            display_url=public_url,
        )
    else:
        added = register_via_api(client, identity, config)

    if added:
        logger.info("Added to file sync automation", extra=DONE)
    else:
        logger.info("Repository already in file sync automation")
    return added
