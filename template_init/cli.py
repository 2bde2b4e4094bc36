"""
cli.py

Responsibility: CLI entrypoint for template-init.

High-level flow (single forward pass, run once after creating a repo from the template):
1) Preflight: `git` available, `gh` authenticated, token accepted by the API
2) Identity: package name and owner/repo from the `origin` remote
3) Publish token secret (public repositories only)
4) Manifest rewrite
5) Best-effort repository settings
6) File-sync registration
7) README regeneration
8) Delete the launcher script

This module should orchestrate behavior but keep concerns isolated:
- Command tiers (fatal / best-effort): `commands.py`
- GitHub API: `github_client.py`
- Sync workflow patching: `sync_config.py`
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from pathlib import Path

from template_init.commands import CommandError, run
from template_init.config import SYNC_MODES, ConfigError, SetupConfig, load_config, with_sync_mode
from template_init.github_client import GitHubClient, GitHubError
from template_init.logs import DONE, setup_logging
from template_init.manifest import ManifestError, update_manifest
from template_init.readme import write_readme
from template_init.remote import RemoteURLError, RepoIdentity, read_identity
from template_init.settings import configure_publish_token, configure_repository
from template_init.sync_config import SyncConfigError, register

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    pass


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

FATAL_ERRORS = (
    CLIError,
    CommandError,
    ConfigError,
    GitHubError,
    ManifestError,
    RemoteURLError,
    SyncConfigError,
)


def preflight(api_base: str) -> tuple[GitHubClient, str]:
    """
    Check that git is installed and the GitHub CLI holds a working token.

    Returns the API client and the raw token.
    """
    run(["git", "--version"])
    token = run(["gh", "auth", "token"]).strip()
    if not token:
        raise CLIError("`gh auth token` returned no token; run `gh auth login` first")
    client = GitHubClient(token, api_base=api_base)
    user = client.get_user()
    logger.info("Authenticated to GitHub as %s", user.get("login", "unknown"))
    return client, token


def delete_script(path: Path) -> bool:
    """Remove the launcher; a missing launcher only warrants a warning since setup is done."""
    if not path.is_file():
        logger.warning("Launcher script not found, nothing to delete: %s", path)
        return False
    path.unlink()
    logger.info("Deleted %s", path.name, extra=DONE)
    return True


def setup_repository(
    *,
    project_dir: Path,
    config: SetupConfig,
    private: bool,
    keep_script: bool = False,
    connect: Callable[[str], tuple[GitHubClient, str]] | None = None,
) -> RepoIdentity:
    """
    Run every setup step against `project_dir`.

    `connect` replaces the preflight (default: `preflight`) so the orchestration can
    be exercised without the network.
    """
    client, token = (connect or preflight)(config.api_base)
    identity = read_identity(project_dir, config.host)
    logger.info("Setting up %s (%s)", identity.package_name, identity.full_name)

    configure_publish_token(client, identity, config, private=private)
    update_manifest(
        project_dir / config.manifest,
        package_name=identity.package_name,
        repo_url=identity.url,
        description=config.description,
        private=private,
    )
    configure_repository(client, identity, config)
    register(client, identity, config, token=token)
    write_readme(
        project_dir / config.readme,
        package_name=identity.package_name,
        description=config.description,
        private=private,
    )

    if not keep_script:
        delete_script(project_dir / config.script)
    return identity


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="template-init",
        description="One-shot setup for a repository created from the library template",
    )
    p.add_argument("--private", action="store_true", help="Mark the package private; skip publish token and release docs")
    p.add_argument("--project-dir", default=".", help="Repository to set up (default: current directory)")
    p.add_argument("--config", default=None, help="YAML file overriding the built-in defaults")
    p.add_argument("--sync-mode", choices=SYNC_MODES, default=None, help="How to update the file-sync config (default: api)")
    p.add_argument("--keep-script", action="store_true", help="Do not delete the launcher script afterwards")
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging level (default: INFO)",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    logger.info("Setting up your TypeScript library...")
    try:
        config = with_sync_mode(load_config(args.config), args.sync_mode)
        setup_repository(
            project_dir=Path(args.project_dir).resolve(),
            config=config,
            private=bool(args.private),
            keep_script=bool(args.keep_script),
        )
    except FATAL_ERRORS as e:
        logger.error("%s", e)
        return 1
    logger.info("Setup complete", extra=DONE)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
