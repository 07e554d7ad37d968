"""
CLI commands for the codegen cache.

Thin wrappers over ``specforge.core.persistence.cache_store`` and
``specforge.core.services.codegen_cache``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


def _resolve_config_path(ctx: click.Context) -> Path | None:
    config_path: Path | None = ctx.obj.get("config_path")
    if config_path is None:
        from specforge.core.config.loader import find_build_file

        config_path = find_build_file()
    return config_path


def _resolve_project_root(ctx: click.Context) -> Path:
    """Resolve project root from context or CWD."""
    config_path = _resolve_config_path(ctx)
    from specforge.core.config.loader import project_root

    return project_root(config_path) if config_path else Path.cwd()


def _declared_configurations(ctx: click.Context) -> set[str]:
    from specforge.core.config.loader import ConfigError, load_build

    config_path = _resolve_config_path(ctx)
    if config_path is None:
        return set()
    try:
        return set(load_build(config_path).configurations)
    except ConfigError:
        return set()


def _configurations(ctx: click.Context, project_root: Path, names: tuple[str, ...]) -> list[str]:
    """Stored configurations, or ``names`` if each is declared or stored."""
    from specforge.core.persistence.cache_store import DEFAULT_CACHE_DIR

    base = project_root / DEFAULT_CACHE_DIR
    stored = sorted(p.name for p in base.iterdir() if p.is_dir()) if base.is_dir() else []
    if not names:
        return stored

    known = set(stored) | _declared_configurations(ctx)
    for name in names:
        if name not in known:
            click.secho(f"❌ Unknown configuration '{name}'", fg="red")
            sys.exit(1)
    return list(names)


@click.group()
def cache() -> None:
    """Codegen cache — inspect or drop per-configuration records."""


@cache.command()
@click.argument("configurations", nargs=-1)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, configurations: tuple[str, ...], as_json: bool) -> None:
    """Show the stored fingerprint and outputs per configuration."""
    from specforge.core.persistence.cache_store import cache_store_for
    from specforge.core.services.codegen_cache import read_record

    root = _resolve_project_root(ctx)
    records = {
        name: read_record(cache_store_for(root, name))
        for name in _configurations(ctx, root, configurations)
    }

    if as_json:
        click.echo(json.dumps({n: r.to_dict() for n, r in records.items()}, indent=2))
        return

    if not records:
        click.echo("No codegen cache recorded.")
        return

    for name, record in records.items():
        if record.fingerprint is None:
            click.secho(f"   ✗ {name} ", fg="yellow", nl=False)
            click.echo("(no record)")
            continue
        click.secho(f"   ✓ {name} ", fg="green", nl=False)
        click.echo(f"{record.fingerprint[:12]} — {len(record.outputs)} outputs")


@cache.command()
@click.argument("configurations", nargs=-1)
@click.pass_context
def clear(ctx: click.Context, configurations: tuple[str, ...]) -> None:
    """Drop cache records so the next codegen run regenerates."""
    from specforge.core.persistence.cache_store import cache_store_for

    root = _resolve_project_root(ctx)
    names = _configurations(ctx, root, configurations)
    for name in names:
        cache_store_for(root, name).clear()
        click.echo(f"   🧹 {name}: cache cleared")

    if not names:
        click.echo("No codegen cache recorded.")
