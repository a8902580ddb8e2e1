import click
from loguru import logger

from phantomkit.core import registry as _registry
from phantomkit.core.registry import BUILTIN_GENERATORS
from phantomkit.core.remote import FolderImageSource, get_remote_source


@click.command(name="list")
@click.pass_context
def cmd_list(ctx):
    """List registered generators and the configured remote source."""

    entries = _registry.REGISTRY.entries()

    click.echo("Registered generators:")
    for entry in entries:
        tag = " [built-in]" if entry.name in BUILTIN_GENERATORS else ""
        desc = entry.description or "(no description)"
        click.echo(f"  {entry.name:<20} {desc}{tag}")

    logger.debug(f"Found {len(entries)} generators")

    # ------------------------------------------------------------
    # Remote source
    # ------------------------------------------------------------
    source = get_remote_source()

    click.echo("\nRemote source:")
    if source is None:
        click.echo("  (none configured) — unregistered names cannot be resolved")
        return

    click.echo(f"  {source!r}")

    if isinstance(source, FolderImageSource):
        ids = source.available()
        if not ids:
            click.echo("  No images found.")
            return
        for source_id in ids:
            click.echo(f"    {source_id}")
        logger.info(f"Found {len(ids)} remote images")
