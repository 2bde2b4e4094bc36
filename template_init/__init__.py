"""
template_init package

One-shot initialization for a repository created from the library template.

Key responsibilities are split across modules:
- `config.py`: optional YAML configuration with built-in defaults
- `logs.py`: symbol-prefixed console logging
- `commands.py`: fatal and best-effort execution tiers
- `remote.py`: package name and owner/repo from the `origin` remote
- `github_client.py`: isolated GitHub REST API interactions
- `manifest.py`: `package.json` rewrite
- `settings.py`: repository settings, Actions permissions, branch protection, publish secret
- `sync_config.py`: registration in the file-sync workflow
- `readme.py`: README regeneration
- `cli.py`: CLI entrypoint and orchestration
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
