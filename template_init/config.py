"""
config.py

Responsibility: Load the optional YAML configuration file into a typed, frozen model.

Every value has a default, so running without a config file reproduces the
stock template setup. A config file only needs the keys it changes:

    description: "A tiny library"
    branch_protection:
      contexts: ["ci"]
    sync:
      mode: clone
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

SYNC_MODES = ("api", "clone")

DEFAULT_DESCRIPTION = "TODO: A short description of what the library does and why people might want to use it."


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class PublishSecretConfig:
    """Where the registry publish token is read from, and the secret it becomes."""

    name: str = "NPM_TOKEN"
    source_repo: str = "domdomegg/secrets"
    source_path: str = "npm.txt"


@dataclass(frozen=True)
class BranchProtectionConfig:
    # None: protect the repository's default branch.
    branch: str | None = None
    contexts: tuple[str, ...] = ("ci lts/*", "ci (current)")
    required_reviews: int = 1
    allow_force_pushes: bool = True


@dataclass(frozen=True)
class SyncConfig:
    """The file-sync workflow document a new repository is registered in."""

    repo: str = "domdomegg/domdomegg"
    path: str = ".github/workflows/repo-file-sync.yaml"
    sentinel: str = "domdomegg/typescript-library-template"
    sections: tuple[str, ...] = ("Dependabot automation", "Node.js general template")
    mode: str = "api"


@dataclass(frozen=True)
class SetupConfig:
    host: str = "github.com"
    api_base: str = "https://api.github.com"
    description: str = DEFAULT_DESCRIPTION
    manifest: str = "package.json"
    readme: str = "README.md"
    script: str = "setup_template.py"
    publish_secret: PublishSecretConfig = field(default_factory=PublishSecretConfig)
    branch_protection: BranchProtectionConfig = field(default_factory=BranchProtectionConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)


def split_repo(full_name: str, key: str = "repo") -> tuple[str, str]:
    """Split `owner/repo` into its two parts."""
    owner, sep, name = full_name.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ConfigError(f"`{key}` must look like `owner/repo`, got {full_name!r}.")
    return owner, name


def _build_section(cls: type, raw: Any, key: str) -> Any:
    """
    Build one nested dataclass from a mapping, converting YAML lists into tuples
    and rejecting unknown keys.
    """
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"`{key}` must be an object/mapping when provided.")

    known = {f.name: f for f in fields(cls)}
    unknown = sorted(set(raw) - set(known))
    if unknown:
        raise ConfigError(f"Unknown keys in `{key}`: {', '.join(map(str, unknown))}")

    values: dict[str, Any] = {}
    for name, value in raw.items():
        default = getattr(cls(), name)
        if isinstance(default, tuple):
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"`{key}.{name}` must be a list of strings.")
            value = tuple(value)
        elif isinstance(default, bool):
            if not isinstance(value, bool):
                raise ConfigError(f"`{key}.{name}` must be true or false.")
        elif isinstance(default, int):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"`{key}.{name}` must be an integer.")
        elif value is not None:
            value = str(value).strip()
        values[name] = value
    return cls(**values)


def _validate(config: SetupConfig) -> SetupConfig:
    if config.sync.mode not in SYNC_MODES:
        raise ConfigError(f"`sync.mode` must be one of {', '.join(SYNC_MODES)}, got {config.sync.mode!r}.")
    if not config.sync.sections:
        raise ConfigError("`sync.sections` must name at least one section.")
    if config.branch_protection.required_reviews < 0:
        raise ConfigError("`branch_protection.required_reviews` must not be negative.")
    split_repo(config.sync.repo, "sync.repo")
    split_repo(config.publish_secret.source_repo, "publish_secret.source_repo")
    return config


def parse_config(data: dict[str, Any]) -> SetupConfig:
    """Build a `SetupConfig` from an already-parsed mapping."""
    nested = {
        "publish_secret": PublishSecretConfig,
        "branch_protection": BranchProtectionConfig,
        "sync": SyncConfig,
    }
    known = {f.name for f in fields(SetupConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(map(str, unknown))}")

    values: dict[str, Any] = {}
    for name, value in data.items():
        if name in nested:
            values[name] = _build_section(nested[name], value, name)
        elif value is None:
            continue
        elif not isinstance(value, (str, int, float)) or isinstance(value, bool):
            raise ConfigError(f"`{name}` must be a string.")
        else:
            values[name] = str(value).strip()
    return _validate(SetupConfig(**values))


def load_config(config_path: str | Path | None = None) -> SetupConfig:
    """
    Load a YAML config file, or return the defaults when no path is given.
    """
    if config_path is None:
        return SetupConfig()

    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping/object at the top level.")
    return parse_config(data)


def with_sync_mode(config: SetupConfig, mode: str | None) -> SetupConfig:
    """Apply the `--sync-mode` CLI override."""
    if mode is None:
        return config
    return _validate(replace(config, sync=replace(config.sync, mode=mode)))
