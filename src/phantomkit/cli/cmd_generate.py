# src/phantomkit/cli/cmd_generate.py

import click
import numpy as np
from pathlib import Path
from loguru import logger
from PIL import Image

from phantomkit.core.errors import PhantomError
from phantomkit.core.registry import lookup
from phantomkit.core.rescale import INTERPOLATIONS
from phantomkit.core.resolver import get_image


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------

def parse_value(text: str):
    """
    Turn a --param value into a Python value:
        true/false → bool, "3,2" → (3, 2), "4" → 4, "0.5" → 0.5, else str
    """
    stripped = text.strip()
    lowered = stripped.lower()

    if lowered in ("true", "false"):
        return lowered == "true"

    if "," in stripped:
        return tuple(parse_value(part) for part in stripped.split(","))

    for cast in (int, float):
        try:
            return cast(stripped)
        except ValueError:
            pass

    return stripped


def parse_params(items) -> dict:
    params = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="--param")
        params[key.strip()] = parse_value(value)
    return params


def write_output(pixels: np.ndarray, path: Path) -> None:
    """.npy keeps the float data; any other suffix is written as an 8-bit image by Pillow."""
    if path.suffix.lower() == ".npy":
        np.save(path, pixels)
        return

    peak = pixels.max()
    scaled = pixels / peak * 255.0 if peak > 0 else pixels
    Image.fromarray(np.round(scaled).astype(np.uint8)).save(path)


# ------------------------------------------------------------
# Command
# ------------------------------------------------------------

@click.command(name="generate")
@click.argument("name", type=str)
@click.option(
    "--size",
    nargs=2,
    type=int,
    default=None,
    metavar="W H",
    help="Image size. If omitted, uses config generators.default_size.",
)
@click.option(
    "--param",
    "-p",
    "param_items",
    multiple=True,
    metavar="KEY=VALUE",
    help="Generator parameter, e.g. -p checkers_count=2,3 -p stripe_width=2,1",
)
@click.option(
    "--interpolation",
    type=click.Choice(INTERPOLATIONS, case_sensitive=False),
    help="Rescaling scheme for remote images (default from config).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Write to FILE (.npy or an image format) instead of printing.",
)
@click.pass_context
def cmd_generate(ctx, name, size, param_items, interpolation, output):
    """
    Build the test image NAME and print or save it.

    \b
    Usage:
        phantoms generate checker_image --size 8 8 -p checkers_count=2,3 -p stripe_width=2,1
        phantoms generate delta_image --size 8 8 -p num_of_points=2 -p size_of_point=3,2 \\
            -p distance_of_points=0,4 -p pivot=2,2
        phantoms generate shepp_logan --size 128 128 -o phantom.png
    """

    cfg = ctx.obj["config"]

    if not size:
        size = tuple(cfg.get("generators", {}).get("default_size", (81, 81)))

    kwargs = parse_params(param_items)

    if lookup(name) is None:
        kwargs["interpolation"] = interpolation or cfg.get("remote", {}).get("interpolation")
    elif interpolation:
        logger.warning(f"--interpolation ignored: '{name}' is a registered generator")

    logger.debug(f"cmd_generate: name={name}, size={size}, params={kwargs}")

    try:
        image = get_image(name, tuple(size), **kwargs)
    except PhantomError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if output:
        path = Path(output)
        try:
            write_output(image.pixels, path)
        except (OSError, ValueError) as e:
            click.echo(f"Failed to write {path}: {e}", err=True)
            ctx.exit(1)
        click.echo(f"Wrote {image.name} {image.size[0]}x{image.size[1]} ({image.source}) → {path}")
        return

    click.echo(f"{image.name} {image.size[0]}x{image.size[1]} ({image.source})")
    with np.printoptions(linewidth=200):
        click.echo(np.array2string(image.pixels, precision=3))
