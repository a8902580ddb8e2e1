# src/phantomkit/cli/cmd_config.py

"""
Configuration commands for inspecting and initializing phantomkit configuration.
Matches structure of cli/cmd_list.py.
"""

from __future__ import annotations

import click
import tomli_w
from loguru import logger

from phantomkit.config_loader import (
    load_builtin_config,
    get_builtin_config_path,
    get_user_config_path,
)


@click.group(name="config", invoke_without_command=True)
@click.pass_context
def cmd_config(ctx):
    """
    Inspect configuration settings.
    """
    ctx.ensure_object(dict)

    if ctx.invoked_subcommand is None:
        logger.debug("Default config group command")
        click.echo("\nConfiguration summary:\n")
        _show_config_summary(ctx.obj["config"])
        ctx.exit(0)


# =====================================================================
# Internal: summary printer
# =====================================================================

def _show_config_summary(cfg: dict):
    """Pretty-print the merged configuration."""

    app = cfg.get("application", {})
    gens = cfg.get("generators", {})
    remote = cfg.get("remote", {})

    click.echo("  Active config file:")
    click.echo(f"    {cfg.get('_loaded_from')}")
    click.echo("  Built-in defaults:")
    click.echo(f"    {get_builtin_config_path()}")

    click.echo("\n  [application]")
    click.echo(f"    log_level      = {app.get('log_level')}")
    click.echo(f"    config_folder  = {app.get('config_folder')}")

    click.echo("\n  [generators]")
    click.echo(f"    default_size   = {gens.get('default_size')}")

    click.echo("\n  [remote]")
    provider = remote.get("provider", "none")
    click.echo(f"    provider       = {provider}")
    click.echo(f"    interpolation  = {remote.get('interpolation')}")

    if provider == "http":
        click.echo(f"    base_url       = {remote.get('base_url')}")
        click.echo(f"    extension      = {remote.get('extension')}")
        click.echo(f"    timeout        = {remote.get('timeout')}")
        if not remote.get("base_url"):
            click.echo("    ⚠ provider is 'http' but base_url is empty.")

    if provider == "folder":
        click.echo(f"    image_folder   = {remote.get('image_folder')}")
        click.echo(f"    extensions     = {remote.get('image_extensions')}")


# =====================================================================
# config init
# =====================================================================

@cmd_config.command(name="init")
@click.option("--force", is_flag=True, help="Overwrite an existing user config file.")
def cmd_config_init(force):
    """Write the built-in defaults to the user config folder."""

    target = get_user_config_path()
    if target is None:
        click.echo("No application.config_folder configured; nothing to write.")
        return

    if target.exists() and not force:
        click.echo(f"Config file already exists: {target}")
        click.echo("Use --force to overwrite.")
        return

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(tomli_w.dumps(load_builtin_config()), encoding="utf-8")

    logger.info(f"Wrote user config: {target}")
    click.echo(f"Wrote config file: {target}")
