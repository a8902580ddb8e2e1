# src/phantomkit/cli/_main.py

import click
from loguru import logger

from phantomkit.config_loader import LOG_LEVELS, get_config, init_logging
from phantomkit.core.remote import set_remote_source, source_from_config

from .cmd_generate import cmd_generate
from .cmd_list import cmd_list
from .cmd_config import cmd_config


@click.group(
    invoke_without_command=True,
    context_settings={"max_content_width": 120},
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Override the log level defined in the config file.",
)
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False),
    help="Load an alternate config file instead of the default.",
)
@click.pass_context
def cli(ctx, log_level, config_file):
    """
    phantoms — test images for imaging pipelines.

    \b
    Workflow:
        1) phantoms list - to list registered generators and the remote source
        2) phantoms generate <name> --size W H -p key=value - to build an image
        3) phantoms generate <name> -o out.npy - to save it (.npy or any image format)

    Additional info is available by adding --help to any command
    """

    ctx.ensure_object(dict)

    # ------------------------------------------------------------
    # Load CONFIG FILE (default OR user override)
    # ------------------------------------------------------------
    cfg = get_config(config_file_override=config_file)
    ctx.obj["config"] = cfg
    ctx.obj["config_file"] = config_file

    ctx.obj["log_level_effective"] = init_logging(level=log_level, cfg=cfg)
    logger.debug(f"Loaded configuration from: {cfg.get('_loaded_from')}")

    # An explicit config file also decides the remote source
    if config_file:
        set_remote_source(source_from_config(cfg))

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        click.echo("\nRun 'phantoms config' to see full configuration details.")
        ctx.exit(0)


# Attach subcommands
cli.add_command(cmd_generate)
cli.add_command(cmd_list)
cli.add_command(cmd_config)
