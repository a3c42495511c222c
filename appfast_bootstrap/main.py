"""
AppFast bootstrap — CLI entrypoint.

Usage:
    appfast-bootstrap                # interactive install
    appfast-bootstrap plan --json    # report what the installer would do
    python -m appfast_bootstrap --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from appfast_bootstrap import __version__
from appfast_bootstrap.core.observability.logging_config import setup_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="appfast-bootstrap")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to appfast.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """AppFast bootstrap — set up a new SvelteAppFast project."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = os.environ.get("APPFAST_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("APPFAST_LOG_FILE"),
        log_file_level=os.environ.get("APPFAST_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )

    from appfast_bootstrap.core.config.loader import ConfigError, load_settings

    try:
        ctx.obj["settings"] = load_settings(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if ctx.invoked_subcommand is None:
        ctx.invoke(install)


@cli.command()
@click.pass_context
def install(ctx: click.Context) -> None:
    """Run the interactive installer (the default command)."""
    from appfast_bootstrap.core.errors import InstallerError
    from appfast_bootstrap.core.use_cases.install import run_install
    from appfast_bootstrap.ui.prompts import ClickPrompter

    try:
        run_install(ClickPrompter(), ctx.obj["settings"])
    except InstallerError as e:
        click.secho(f"❌ {e.message}", fg="red", err=True)
        if e.remediation:
            click.secho(e.remediation, fg="yellow", err=True)
        sys.exit(e.exit_code)
    except click.Abort:
        click.secho("❌ Installation cancelled.", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--latest", "use_latest", is_flag=True, help="Resolve the latest release.")
@click.pass_context
def plan(ctx: click.Context, as_json: bool, use_latest: bool) -> None:
    """Probe this machine and show what the installer would do."""
    from appfast_bootstrap.core.use_cases.plan import build_plan

    result = build_plan(ctx.obj["settings"], use_latest=use_latest)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.executable:
            sys.exit(1)
        return

    info = result.platform
    click.secho("📋 Install plan", bold=True)
    click.echo(f"   Platform:        {info.os_family.value}/{info.arch.value}")
    click.echo(f"   Package manager: {info.package_manager.value}")
    click.echo()

    click.secho("🔧 Tools:", bold=True)
    for status in result.tools:
        if status.found:
            version = f" ({status.version})" if status.version else ""
            icon = "✅" if status.satisfied else "⚠️"
            click.echo(f"   {icon} {status.name}{version}")
        else:
            click.echo(f"   ❌ {status.name}")
    click.echo()

    if result.executable:
        asset = result.asset
        click.secho(f"✅ Ready — {asset.file_name} via {result.download_tool}", fg="green")
        click.echo(f"   {asset.download_url}")
        return

    failure = result.failure
    click.secho(f"❌ {failure.message}", fg="red")
    remediation = result.remediation_text()
    if remediation:
        click.secho(remediation, fg="yellow")
    sys.exit(1)


if __name__ == "__main__":
    cli()
