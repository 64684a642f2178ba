"""Command-line interface for cachestore.

- main: CLI group and entry point
- diagnostics: memory pressure and provider capability reports
"""

from __future__ import annotations

from cachestore.cli.main import cli, main

__all__ = ["cli", "main"]
