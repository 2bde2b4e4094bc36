from __future__ import annotations

from pathlib import Path

from template_init.readme import render_readme, write_readme


def test_public_readme_has_release_instructions() -> None:
    out = render_readme(package_name="my-lib", description="Does things.", private=False)

    assert out.startswith("# my-lib\n\nDoes things.\n\n## Usage\n")
    assert "5. Build with `npm run build`\n\n## Releases\n" in out
    assert "npm version <major | minor | patch>" in out
    assert out.endswith("3. Wait for GitHub Actions to publish to the NPM registry.\n")


def test_private_readme_omits_release_instructions() -> None:
    out = render_readme(package_name="my-lib", description="Does things.", private=True)

    assert "## Releases" not in out
    assert "## Contributing" in out
    assert out.endswith("5. Build with `npm run build`")


def test_description_is_not_escaped() -> None:
    out = render_readme(package_name="my-lib", description="Parses <html> & more", private=True)

    assert "Parses <html> & more" in out


def test_write_readme_overwrites(tmp_path: Path) -> None:
    path = tmp_path / "README.md"
    path.write_text("# typescript-library-template\n\nold content\n", encoding="utf-8")

    write_readme(path, package_name="my-lib", description="d", private=False)

    text = path.read_text(encoding="utf-8")
    assert text.startswith("# my-lib\n")
    assert "old content" not in text
