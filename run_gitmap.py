#!/usr/bin/env python
"""
Thin wrapper script to invoke the gitmap CLI.

Running ``python run_gitmap.py`` is equivalent to running the ``gitmap``
console script installed via ``pyproject.toml``.
"""

from gitmap.cli import main


if __name__ == "__main__":
    main(prog_name="gitmap")
