"""
commands.py

Responsibility: the two execution tiers used by every setup step.

- `run`: fatal tier. A failing external command raises `CommandError` and
  aborts the run.
- `best_effort`: recoverable tier. A failing step is logged as a warning and
  reported as False so the run continues.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

from template_init.github_client import GitHubError
from template_init.logs import DONE, PENDING

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


def _display(cmd: list[str]) -> str:
    return " ".join(cmd)


def run(
    cmd: list[str],
    *,
    cwd: str | Path | None = None,
    env: dict[str, str] | None = None,
    display: str | None = None,
) -> str:
    """
    Run a subprocess command and return its stdout as text.

    stderr is passed through to the terminal. `display` replaces the command
    line in error messages (use it when arguments carry credentials).
    """
    shown = display or _display(cmd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            check=True,
            stdout=subprocess.PIPE,
            stderr=None,
            text=True,
        )
    except FileNotFoundError as e:
        logger.error("Failed to run: %s (%s not found)", shown, cmd[0])
        raise CommandError(f"Command not found: {cmd[0]}") from e
    except subprocess.CalledProcessError as e:
        logger.error("Failed to run: %s", shown)
        raise CommandError(f"Command failed with exit code {e.returncode}: {shown}", e.returncode) from e
    return proc.stdout


def best_effort(description: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
    """
    Run one non-critical step, returning True on success and False on failure.

    Only command and GitHub API failures are absorbed; anything else is a bug
    and propagates.
    """
    logger.info("%s...", description, extra=PENDING)
    try:
        func(*args, **kwargs)
    except (CommandError, GitHubError) as e:
        logger.warning("%s failed - you may need to do this manually (%s)", description, e)
        return False
    logger.info("%s complete", description, extra=DONE)
    return True
