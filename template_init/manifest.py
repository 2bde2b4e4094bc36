"""
manifest.py

Responsibility: rewrite the package manifest (`package.json`) for the new repository.

Only `name`, `description`, `repository.url` and (for private repositories)
`private` change. Key order and every other value are kept as loaded.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from template_init.logs import DONE

logger = logging.getLogger(__name__)


class ManifestError(RuntimeError):
    pass


def apply_manifest_fields(
    manifest: dict[str, Any],
    *,
    package_name: str,
    repo_url: str,
    description: str,
    private: bool,
) -> dict[str, Any]:
    """Mutate `manifest` in place and return it."""
    manifest["name"] = package_name
    manifest["description"] = description

    repository = manifest.get("repository")
    if isinstance(repository, dict):
        repository["url"] = repo_url
    else:
        # npm also accepts a bare "owner/repo" string here; replace it with the full form.
        manifest["repository"] = {"type": "git", "url": repo_url}

    if private:
        manifest["private"] = True
    return manifest


def dump_manifest(manifest: dict[str, Any]) -> str:
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def update_manifest(
    path: str | Path,
    *,
    package_name: str,
    repo_url: str,
    description: str,
    private: bool,
) -> dict[str, Any]:
    manifest_path = Path(path)
    if not manifest_path.exists():
        raise ManifestError(f"Manifest file does not exist: {manifest_path}")
    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestError(f"Manifest is not valid JSON: {manifest_path}") from e
    if not isinstance(manifest, dict):
        raise ManifestError(f"Manifest must be a JSON object: {manifest_path}")

    apply_manifest_fields(
        manifest,
        package_name=package_name,
        repo_url=repo_url,
        description=description,
        private=private,
    )
    manifest_path.write_text(dump_manifest(manifest), encoding="utf-8")
    logger.info("Updated %s", manifest_path.name, extra=DONE)
    return manifest
