"""
readme.py

Responsibility: regenerate the repository README from a Jinja2 template.

Private repositories are not published, so their README has no Releases section.
"""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, StrictUndefined

from template_init.logs import DONE

logger = logging.getLogger(__name__)

README_TEMPLATE = """\
# {{ package_name }}

{{ description }}

## Usage

TODO: Add usage instructions

## Contributing

Pull requests are welcomed on GitHub! To get started:

1. Install Git and Node.js
2. Clone the repository
3. Install dependencies with `npm install`
4. Run `npm run test` to run tests
5. Build with `npm run build`{% if not private %}

## Releases

Versions follow the [semantic versioning spec](https://semver.org/).

To release:

1. Use `npm version <major | minor | patch>` to bump the version
2. Run `git push --follow-tags` to push with tags
3. Wait for GitHub Actions to publish to the NPM registry.
{% endif %}"""

_env = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=True)


def render_readme(*, package_name: str, description: str, private: bool) -> str:
    template = _env.from_string(README_TEMPLATE)
    return template.render(package_name=package_name, description=description, private=private)


def write_readme(path: str | Path, *, package_name: str, description: str, private: bool) -> None:
    readme_path = Path(path)
    readme_path.write_text(
        render_readme(package_name=package_name, description=description, private=private),
        encoding="utf-8",
        newline="\n",
    )
    logger.info("Updated %s", readme_path.name, extra=DONE)
