from __future__ import annotations

from pathlib import Path

import pytest

from template_init.config import ConfigError, SetupConfig, load_config, split_repo, with_sync_mode


def test_defaults_without_file() -> None:
    config = load_config(None)

    assert config == SetupConfig()
    assert config.sync.sections == ("Dependabot automation", "Node.js general template")
    assert config.publish_secret.name == "NPM_TOKEN"


def test_partial_override(tmp_path: Path) -> None:
    path = tmp_path / "template-init.yaml"
    path.write_text(
        """\
description: A tiny library
branch_protection:
  branch: main
  contexts: ["ci"]
  required_reviews: 2
sync:
  mode: clone
""",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.description == "A tiny library"
    assert config.branch_protection.branch == "main"
    assert config.branch_protection.contexts == ("ci",)
    assert config.branch_protection.required_reviews == 2
    assert config.branch_protection.allow_force_pushes is True
    assert config.sync.mode == "clone"
    assert config.sync.repo == "domdomegg/domdomegg"


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == SetupConfig()


@pytest.mark.parametrize(
    "content, message",
    [
        ("- a\n- b\n", "mapping"),
        ("colour: blue\n", "Unknown config keys"),
        ("sync:\n  mode: rsync\n", "sync.mode"),
        ("sync:\n  sections: Dependabot automation\n", "list of strings"),
        ("sync:\n  repo: just-a-name\n", "owner/repo"),
        ("branch_protection:\n  required_reviews: lots\n", "integer"),
        ("branch_protection:\n  allow_force_pushes: 'yes'\n", "true or false"),
        ("publish_secret: [NPM_TOKEN]\n", "mapping"),
        ("sync: {mode: api, extra: 1}\n", "Unknown keys in `sync`"),
        ("description: [a, b]\n", "string"),
        ("sync: [\n", "not valid YAML"),
    ],
)
def test_invalid_config(tmp_path: Path, content: str, message: str) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_config(path)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        load_config(tmp_path / "nope.yaml")


def test_sync_mode_override() -> None:
    assert with_sync_mode(SetupConfig(), None).sync.mode == "api"
    assert with_sync_mode(SetupConfig(), "clone").sync.mode == "clone"
    with pytest.raises(ConfigError):
        with_sync_mode(SetupConfig(), "ftp")


def test_split_repo() -> None:
    assert split_repo("domdomegg/secrets") == ("domdomegg", "secrets")
    with pytest.raises(ConfigError):
        split_repo("a/b/c")
