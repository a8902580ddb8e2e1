import numpy as np
import pytest
from click.testing import CliRunner
from PIL import Image

from phantomkit.cli._main import cli
from phantomkit.cli.cmd_generate import parse_params, parse_value
from phantomkit.core import remote
from phantomkit.core.generators import checker_image
from phantomkit.core.remote import FolderImageSource


CHECKER_ARGS = ["generate", "checker_image", "--size", "8", "8",
                "-p", "checkers_count=2,3", "-p", "stripe_width=2,1"]


@pytest.mark.parametrize(
    "text, value",
    [
        ("4", 4),
        ("-3", -3),
        ("0.5", 0.5),
        ("true", True),
        ("False", False),
        ("2,3", (2, 3)),
        ("0,-4", (0, -4)),
        ("linear", "linear"),
    ],
)
def test_parse_value(text, value):
    assert parse_value(text) == value


def test_parse_params():
    assert parse_params(["num_of_points=2", " pivot = 2,2"]) == {
        "num_of_points": 2,
        "pivot": (2, 2),
    }


def test_generate_prints_matrix():
    runner = CliRunner()
    result = runner.invoke(cli, CHECKER_ARGS)

    assert result.exit_code == 0, result.output
    assert "checker_image 8x8 (generator)" in result.output
    assert "[0. 1. 0. 1. 0. 1. 0. 0.]" in result.output


def test_generate_writes_npy(tmp_path):
    out = tmp_path / "checker.npy"
    runner = CliRunner()
    result = runner.invoke(cli, CHECKER_ARGS + ["-o", str(out)])

    assert result.exit_code == 0, result.output
    np.testing.assert_array_equal(np.load(out), checker_image((8, 8), (2, 3), (2, 1)))


def test_generate_writes_png(tmp_path):
    out = tmp_path / "delta.png"
    runner = CliRunner()
    result = runner.invoke(cli, [
        "generate", "delta_image", "--size", "8", "8",
        "-p", "num_of_points=2", "-p", "size_of_point=3,2",
        "-p", "distance_of_points=0,4", "-p", "pivot=2,2",
        "-o", str(out),
    ])

    assert result.exit_code == 0, result.output
    with Image.open(out) as im:
        arr = np.asarray(im)
    assert arr.shape == (8, 8)
    assert set(np.unique(arr)) == {0, 255}
    assert (arr == 255).sum() == 12


def test_generate_remote_image(image_folder):
    remote.set_remote_source(FolderImageSource(image_folder, extensions=["png"]))

    runner = CliRunner()
    result = runner.invoke(cli, ["generate", "gradient", "--size", "3", "5", "--interpolation", "nearest"])

    assert result.exit_code == 0, result.output
    assert "gradient 3x5 (remote)" in result.output


def test_generate_unknown_name_fails():
    runner = CliRunner()
    result = runner.invoke(cli, ["generate", "no_such_phantom", "--size", "4", "4"])

    assert result.exit_code == 1
    assert "Unknown test image 'no_such_phantom'" in result.output


def test_generate_invalid_parameter_fails():
    runner = CliRunner()
    result = runner.invoke(cli, ["generate", "checker_image", "--size", "8", "8", "-p", "checkers_count=0,2"])

    assert result.exit_code == 1
    assert "checkers_count" in result.output


def test_generate_rejects_malformed_param():
    runner = CliRunner()
    result = runner.invoke(cli, ["generate", "checker_image", "-p", "oops"])

    assert result.exit_code == 2
    assert "KEY=VALUE" in result.output


def test_list_shows_builtins_and_source(image_folder):
    remote.set_remote_source(FolderImageSource(image_folder, extensions=["png"]))

    runner = CliRunner()
    result = runner.invoke(cli, ["list"])

    assert result.exit_code == 0, result.output
    assert "checker_image" in result.output
    assert "delta_image" in result.output
    assert "FolderImageSource" in result.output
    assert "gradient" in result.output


def test_list_without_remote_source():
    runner = CliRunner()
    result = runner.invoke(cli, ["list"])

    assert result.exit_code == 0
    assert "none configured" in result.output


def test_log_level_option_reaches_subcommands():
    runner = CliRunner()
    result = runner.invoke(cli, ["--log-level", "DEBUG", "generate", "checker_image", "--size", "4", "4"])

    assert result.exit_code == 0, result.output
    assert "cmd_generate: name=checker_image" in result.output


def test_default_log_level_hides_debug_lines():
    runner = CliRunner()
    result = runner.invoke(cli, ["generate", "checker_image", "--size", "4", "4"])

    assert result.exit_code == 0, result.output
    assert "cmd_generate:" not in result.output
