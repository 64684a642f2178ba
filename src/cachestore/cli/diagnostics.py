"""Diagnostic CLI commands.

- memory: Show the memory pressure reading a cache would act on
- probe: Show which provider methods a cache would call
"""

from __future__ import annotations

import importlib
import inspect
import json
import sys
from typing import Any, Optional

import click


@click.command("memory")
@click.option(
    "--floor",
    "-f",
    type=click.FloatRange(0.0, 1.0),
    default=0.2,
    show_default=True,
    help="Available/baseline ratio under which memory counts as low.",
)
@click.option(
    "--baseline",
    "-b",
    type=click.FloatRange(min=0.0, min_open=True),
    default=None,
    help="Baseline in bytes (default: sample available memory now).",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output result as JSON.",
)
def memory(floor: float, baseline: Optional[float], output_json: bool) -> None:
    """Show host memory relative to a baseline.

    Examples:

        cachestore memory

        cachestore memory --baseline 8000000000 --floor 0.3 --json
    """
    from cachestore.memory import MemoryMonitor

    try:
        monitor = MemoryMonitor.system()
    except Exception as e:
        click.echo(f"Error reading host memory: {e}", err=True)
        sys.exit(1)

    if baseline is not None:
        monitor.baseline = baseline

    current = monitor.current()
    ratio = monitor.ratio()
    low = monitor.low_memory(floor)

    if output_json:
        output = {
            "baseline": monitor.baseline,
            "available": current,
            "ratio": ratio,
            "floor": floor,
            "low_memory": low,
        }
        click.echo(json.dumps(output, indent=2))
    else:
        click.echo(f"Baseline:   {monitor.baseline:,.0f} bytes")
        click.echo(f"Available:  {current:,.0f} bytes")
        click.echo(f"Ratio:      {ratio:.2%}")
        click.echo(f"Floor:      {floor:.0%}")
        click.echo(f"Low memory: {'Yes' if low else 'No'}")


def _load_target(target: str) -> Any:
    """Import 'module:attr' and return the attribute.

    Classes are instantiated without arguments.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise click.BadParameter(
            f"expected 'module:attribute', got {target!r}",
            param_hint="TARGET",
        )
    obj: Any = importlib.import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part)
    if inspect.isclass(obj):
        obj = obj()
    return obj


@click.command("probe")
@click.argument("target")
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output result as JSON.",
)
def probe(target: str, output_json: bool) -> None:
    """Show the provider methods a cache would resolve for TARGET.

    TARGET is 'module:attribute'. A class is instantiated without
    arguments before probing.

    Examples:

        cachestore probe myapp.storage:RedisProvider

        cachestore probe myapp.storage:provider --json
    """
    from cachestore.capabilities import ProviderCapabilities

    try:
        provider = _load_target(target)
    except click.BadParameter:
        raise
    except Exception as e:
        click.echo(f"Error loading provider: {e}", err=True)
        sys.exit(1)

    summary = ProviderCapabilities.probe(provider).summary()

    if output_json:
        output = {
            "provider": type(provider).__name__,
            "capabilities": summary,
        }
        click.echo(json.dumps(output, indent=2))
    else:
        click.echo(f"\nProvider: {type(provider).__name__}")
        click.echo("=" * 40)
        for operation, name in summary.items():
            click.echo(f"{operation:<10}  {name or '-'}")
        click.echo()
