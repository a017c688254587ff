"""CLI package for NeosCatalog command orchestration."""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from NeosCatalog.cli.runner import CommandRunner
from NeosCatalog.cli.ui import cli


def main() -> None:
    """Run NeosCatalog CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
