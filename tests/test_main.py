"""Tests for the command line entry point (headless paths only)."""
import os

from PIL import Image

from floorsurvey.main import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.overview is None
    assert args.output == "overview.png"
    assert args.log_level == "INFO"


def test_overview_writes_png(tmp_path):
    output = tmp_path / "pt.png"
    assert main(["--overview", "PT", "--output", str(output)]) == 0
    with Image.open(output) as img:
        assert img.format == "PNG"


def test_overview_unknown_level(tmp_path):
    output = tmp_path / "none.png"
    assert main(["--overview", "Roof", "--output", str(output)]) == 2
    assert not os.path.exists(output)


def test_overview_bad_plan_dir(tmp_path):
    assert main(["--plan", str(tmp_path), "--overview", "PT", "--output", str(tmp_path / "x.png")]) == 2
