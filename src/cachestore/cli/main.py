"""Main CLI entry point."""

from __future__ import annotations

import click

from cachestore import __version__


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """cachestore - memoizing cache for key-value storage providers.

    Use 'cachestore memory' to check host memory pressure.
    Use 'cachestore probe' to see which provider methods a cache would use.
    """
    pass


# Import and register commands
from cachestore.cli.diagnostics import memory, probe  # noqa: E402

cli.add_command(memory)
cli.add_command(probe)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
