# File: pgtozod/__main__.py
"""
pgtozod - Module entry point.

Allows running the generator directly via::

    python -m pgtozod --table users --output ./schemas

This module simply delegates to the CLI entry point defined in ``pgtozod.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from pgtozod.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
