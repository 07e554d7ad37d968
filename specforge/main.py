"""
specforge — CLI entrypoint.

Usage:
    python -m specforge.main --help
    python -m specforge.main codegen
    python -m specforge.main config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from specforge import __version__
from specforge.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="specforge")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to specforge.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """specforge — incremental code generation from schema specs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(level=resolve_level(debug=debug, verbose=verbose, quiet=quiet))


@cli.command()
@click.argument("configurations", nargs=-1)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "--report",
    "report_path",
    type=click.Path(exists=False),
    default=None,
    help="Dependency report from the host build (YAML or JSON).",
)
@click.option("--dry-run", is_flag=True, help="Show cache state without generating.")
@click.pass_context
def codegen(
    ctx: click.Context,
    configurations: tuple[str, ...],
    as_json: bool,
    report_path: str | None,
    dry_run: bool,
) -> None:
    """Generate code for CONFIGURATIONS (default: all).

    Examples:

        specforge codegen

        specforge codegen compile test --report target/resolution.json

        specforge codegen --dry-run
    """
    from specforge.core.use_cases.codegen import run_codegen

    result = run_codegen(
        config_path=ctx.obj.get("config_path"),
        configurations=list(configurations) if configurations else None,
        report_path=Path(report_path) if report_path else None,
        dry_run=dry_run,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
        return

    quiet = ctx.obj.get("quiet", False)

    for task in result.tasks:
        label = "regenerated" if task.outcome.regenerated else "up to date"
        color = "green" if task.outcome.regenerated else "cyan"
        click.secho(f"   ✓ {task.configuration} ", fg=color, nl=False)
        click.echo(
            f"({label}) — {len(task.classified.sources)} sources, "
            f"{len(task.classified.resources)} resources"
        )
        if ctx.obj.get("verbose") and not quiet:
            for path in task.outputs:
                click.echo(f"     │ {path}")

    for name, state in result.plans.items():
        click.echo(f"   • {name}: {state.value}")

    if result.error:
        prefix = f"[{result.failed_configuration}] " if result.failed_configuration else ""
        click.secho(f"❌ {prefix}{result.error}", fg="red")
        sys.exit(1)


@cli.group()
def config() -> None:
    """Build configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate specforge.yml configuration."""
    from specforge.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)
        return

    if result.valid:
        assert result.build is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Build: {result.build.name}")
        click.echo(f"   Configurations: {', '.join(result.build.configurations)}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        sys.exit(1)


@cli.command()
@click.argument("configurations", nargs=-1)
@click.pass_context
def clean(ctx: click.Context, configurations: tuple[str, ...]) -> None:
    """Remove generated directories and caches for CONFIGURATIONS (default: all)."""
    from specforge.core.use_cases.codegen import clean_configuration

    build, project_root = _load_build_or_exit(ctx)

    names = list(configurations) or list(build.configurations)
    for name in names:
        settings = build.get_configuration(name)
        if settings is None:
            click.secho(f"❌ Unknown configuration '{name}'", fg="red")
            sys.exit(1)
        removed = clean_configuration(settings, project_root)
        click.echo(f"   🧹 {name}: removed {len(removed)} paths")


@cli.command()
@click.option("-n", "count", default=20, type=int, help="Number of entries to show.")
@click.option("--configuration", default=None, help="Only show one configuration.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def history(ctx: click.Context, count: int, configuration: str | None, as_json: bool) -> None:
    """Show recent codegen runs from the ledger."""
    from specforge.core.persistence.audit import CodegenLedger

    _, project_root = _load_build_or_exit(ctx)
    entries = CodegenLedger(project_root=project_root).read_recent(count, configuration)

    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return

    if not entries:
        click.echo("No codegen runs recorded.")
        return

    for entry in entries:
        color = "green" if entry.status == "ok" else "red"
        click.secho(f"   {entry.status:<6}", fg=color, nl=False)
        detail = entry.error if entry.error else f"{entry.state}, {entry.sources}+{entry.resources} files"
        click.echo(f" {entry.timestamp}  {entry.configuration}  {detail}")


def _load_build_or_exit(ctx: click.Context):
    """Load the build file for commands that need it, or exit 1."""
    from specforge.core.config.loader import ConfigError, find_build_file, load_build, project_root

    config_path: Path | None = ctx.obj.get("config_path") or find_build_file()
    if config_path is None:
        click.secho("❌ No specforge.yml found.", fg="red")
        sys.exit(1)
    try:
        build = load_build(config_path)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    return build, project_root(config_path)


# ── Register sub-command groups from specforge/ui/cli/ ────────────

from specforge.ui.cli.cache import cache

cli.add_command(cache)


if __name__ == "__main__":
    cli()
