#!/usr/bin/env python3
"""
Launcher shipped in the library template. Run once after creating a repository
from the template:

    python setup_template.py [--private]

It deletes itself when setup completes.
"""

from template_init.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
