"""
idt — CLI entrypoint.

Usage:
    idt --help
    idt install typescript-language-server ruff-lsp
    idt install all --dry-run
    idt list
    idt check
"""

from __future__ import annotations

from pathlib import Path

import click

from idt import __version__
from idt.core.observability.logging_config import resolve_level, setup_from_env


@click.group()
@click.version_option(version=__version__, prog_name="idt")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to idt.yml (default: $IDT_CONFIG, then ~/.config/idt/idt.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """idt — install editor and language tooling into ~/.local/bin."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    level = resolve_level(debug=debug, verbose=verbose, quiet=quiet)
    setup_from_env(level)


# ── Register commands ───────────────────────────────────────────

from idt.ui.cli.tools import check, install, list_tools  # noqa: E402

cli.add_command(install)
cli.add_command(list_tools)
cli.add_command(check)


if __name__ == "__main__":
    cli()
