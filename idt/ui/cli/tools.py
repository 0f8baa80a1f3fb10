"""
CLI commands for tool provisioning — install, list, check.

Thin wrappers over ``idt.core.services.tool_install``.
"""

from __future__ import annotations

import json
import sys
from typing import NoReturn

import click

from idt.core.models import ALL, InstallResult, Registry


def _load(ctx: click.Context, as_json: bool = False):
    """Load config + registry, exiting 1 on a config error."""
    from idt.core.config.loader import (
        ConfigError,
        build_registry,
        find_config_file,
        load_settings,
    )

    try:
        settings = load_settings(find_config_file(ctx.obj.get("config_path")))
        registry = build_registry(settings)
    except ConfigError as e:
        _fail(str(e), e.kind, as_json)
    return settings, registry


def _fail(message: str, kind: str, as_json: bool) -> NoReturn:
    if as_json:
        click.echo(json.dumps({"status": "failed", "error_kind": kind, "error": message}, indent=2))
    else:
        click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


def _echo_result(result: InstallResult) -> None:
    if result.ok:
        click.secho(f"   ✅ {result.name}", fg="green", nl=False)
        click.echo(f"  → {result.bin_path}")
        if result.check_output:
            click.echo(f"      {result.check_output}")
    elif result.failed:
        click.secho(f"   ❌ {result.name}", fg="red", nl=False)
        click.echo(f"  [{result.error_kind}]")
        for line in (result.error or "").splitlines()[:5]:
            click.echo(f"      {line}")
    else:
        click.secho(f"   ⊘ {result.name}", fg="yellow", nl=False)
        click.echo(f"  {result.detail}")


# ── Install ─────────────────────────────────────────────────────


@click.command()
@click.argument("keys", nargs=-1)
@click.option(
    "--dev-tools-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Per-tool install root (default: $IDT_DEV_TOOLS_DIR, config, ~/.dev-tools).",
)
@click.option(
    "--bin-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory on PATH receiving the binaries (default: ~/.local/bin).",
)
@click.option("--dry-run", is_flag=True, help="Show what would be installed.")
@click.option("--no-check", is_flag=True, help="Skip the post-install smoke checks.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    keys: tuple[str, ...],
    dev_tools_dir: str | None,
    bin_dir: str | None,
    dry_run: bool,
    no_check: bool,
    as_json: bool,
) -> None:
    """Install tools by name or binary name (no KEYS or 'all': everything)."""
    from idt.core.config.loader import resolve_dirs
    from idt.core.errors import UnknownTool
    from idt.core.services.tool_install import run

    settings, registry = _load(ctx, as_json)
    tools_root, bin_root = resolve_dirs(settings, dev_tools_dir, bin_dir)
    quiet = ctx.obj.get("quiet", False)

    if not as_json and not quiet:
        action = "Planning" if dry_run else "Installing"
        click.secho(f"\n🔧 {action} into {bin_root}", fg="cyan", bold=True)

    try:
        report = run(
            list(keys) or None,
            tools_root,
            bin_root,
            registry=registry,
            runner=ctx.obj.get("runner"),
            release_lookup=ctx.obj.get("release_lookup"),
            dry_run=dry_run,
            verify=not no_check,
            on_result=None if as_json else _echo_result,
        )
    except UnknownTool as e:
        _fail(str(e), e.kind, as_json)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(0 if report.all_ok else 1)

    for path in report.pruned:
        click.secho(f"   🧹 removed dead link {path}", fg="yellow")

    click.echo()
    color = {"ok": "green", "partial": "yellow", "failed": "red"}[report.status]
    if dry_run:
        click.secho(f"   {report.skipped} tool(s) would be installed", fg=color)
    else:
        click.secho(
            f"   {report.succeeded}/{report.total} installed, {report.failed} failed",
            fg=color,
            bold=True,
        )
    click.echo()

    if not report.all_ok:
        sys.exit(1)


# ── List ────────────────────────────────────────────────────────


def _registry_rows(registry: Registry) -> list[dict]:
    return [
        {
            "name": tool.name,
            "backend": tool.backend.value,
            "bin_name": tool.bin_name,
            "source": tool.summary(),
            "description": tool.description,
            "skipped": tool.name in registry.skipped,
        }
        for tool in registry
    ]


@click.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_tools(ctx: click.Context, as_json: bool) -> None:
    """List known tools in install order."""
    _, registry = _load(ctx, as_json)
    rows = _registry_rows(registry)

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    click.secho(f"\n📦 Tools: {len(rows)}", fg="cyan", bold=True)
    width = max((len(r["name"]) for r in rows), default=0)
    for row in rows:
        skipped = "  (skipped by config)" if row["skipped"] else ""
        click.echo(f"   • {row['name']:<{width}}  [{row['backend']}] {row['bin_name']}{skipped}")
        if ctx.obj.get("verbose"):
            click.echo(f"       {row['source']}")
    click.echo()


# ── Check ───────────────────────────────────────────────────────


@click.command()
@click.argument("keys", nargs=-1)
@click.option(
    "--bin-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to inspect (default: ~/.local/bin).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, keys: tuple[str, ...], bin_dir: str | None, as_json: bool) -> None:
    """Check prerequisites and which tools are installed."""
    from idt.core.config.loader import resolve_dirs
    from idt.core.errors import UnknownTool
    from idt.core.services.tool_install import check_prerequisites, installed_status

    settings, registry = _load(ctx, as_json)
    _, bin_root = resolve_dirs(settings, None, bin_dir)

    try:
        tools = registry.resolve(list(keys) or None)
    except UnknownTool as e:
        _fail(str(e), e.kind, as_json)

    prerequisites = check_prerequisites()
    status = installed_status(tools, bin_root)
    missing = [s for s in status if not s["installed"]]
    explicit = bool(keys) and ALL not in keys

    if as_json:
        click.echo(json.dumps({
            "bin_dir": str(bin_root),
            "prerequisites": prerequisites,
            "tools": status,
        }, indent=2))
        sys.exit(1 if explicit and missing else 0)

    click.secho("\n🔍 Prerequisites:", fg="cyan", bold=True)
    for item in prerequisites:
        backends = ", ".join(item["backends"])
        if item["found"]:
            click.echo(f"   ✅ {item['program']} ({backends})  → {item['path']}")
        else:
            click.secho(f"   ❌ {item['program']} ({backends})", fg="red")
            if item["hint"]:
                click.echo(f"      {item['hint']}")

    click.secho(f"\n🔍 Tools in {bin_root}:", fg="cyan", bold=True)
    for item in status:
        if item["installed"]:
            click.echo(f"   ✅ {item['bin_name']}")
        elif item["dangling"]:
            click.secho(f"   ⚠️  {item['bin_name']} (dangling link)", fg="yellow")
        else:
            click.secho(f"   ❌ {item['bin_name']}", fg="red")

    click.echo()
    click.echo(f"   {len(status) - len(missing)}/{len(status)} installed")
    click.echo()

    # Explicit keys act as an assertion.
    if explicit and missing:
        sys.exit(1)
