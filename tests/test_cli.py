"""Tests for the Typer command-line interface."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from tile_mosaic.cli import app

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    tiles = tmp_path / "tiles"
    tiles.mkdir()
    for name, color in [("dark.png", (20, 20, 20)), ("light.png", (230, 230, 230))]:
        Image.new("RGB", (8, 8), color).save(tiles / name)

    images = tmp_path / "images"
    images.mkdir()
    rng = np.random.default_rng(11)
    for name in ["one.png", "two.png"]:
        Image.fromarray(rng.integers(0, 256, (12, 16, 3), dtype=np.uint8)).save(images / name)
    (images / "readme.txt").write_text("skipped")
    return tmp_path


class TestSingle:
    def test_exact(self, workspace: Path) -> None:
        out = workspace / "out" / "mosaic.png"
        result = runner.invoke(app, [
            "single", str(workspace / "images" / "one.png"),
            "--tiles", str(workspace / "tiles"),
            "--output", str(out),
            "--width", "4", "--height", "4",
        ])
        assert result.exit_code == 0, result.output
        assert Image.open(out).size == (16, 12)

    def test_resize(self, workspace: Path) -> None:
        out = workspace / "big.png"
        result = runner.invoke(app, [
            "single", str(workspace / "images" / "one.png"),
            "-t", str(workspace / "tiles"), "-o", str(out),
            "-w", "2", "--height", "3", "--resize",
        ])
        assert result.exit_code == 0, result.output
        assert Image.open(out).size == (32, 36)

    def test_opacity(self, workspace: Path) -> None:
        out = workspace / "blend.png"
        result = runner.invoke(app, [
            "single", str(workspace / "images" / "one.png"),
            "-t", str(workspace / "tiles"), "-o", str(out), "--opacity", "100",
        ])
        assert result.exit_code == 0, result.output
        assert Image.open(out).mode == "RGBA"

    def test_opacity_out_of_range(self, workspace: Path) -> None:
        result = runner.invoke(app, [
            "single", str(workspace / "images" / "one.png"),
            "-t", str(workspace / "tiles"), "--opacity", "300",
        ])
        assert result.exit_code != 0

    def test_missing_tiles_dir(self, workspace: Path) -> None:
        result = runner.invoke(app, [
            "single", str(workspace / "images" / "one.png"),
            "-t", str(workspace / "nowhere"), "-o", str(workspace / "x.png"),
        ])
        assert result.exit_code == 1
        assert not (workspace / "x.png").exists()

    def test_no_usable_tiles(self, workspace: Path) -> None:
        empty = workspace / "empty"
        empty.mkdir()
        result = runner.invoke(app, [
            "single", str(workspace / "images" / "one.png"),
            "-t", str(empty), "-o", str(workspace / "x.png"),
        ])
        assert result.exit_code == 1


class TestBatch:
    def test_processes_every_image(self, workspace: Path) -> None:
        out_dir = workspace / "results"
        result = runner.invoke(app, [
            "batch",
            "-i", str(workspace / "images"),
            "-o", str(out_dir),
            "-t", str(workspace / "tiles"),
            "-w", "4", "--height", "4",
        ])
        assert result.exit_code == 0, result.output
        produced = sorted(p.name for p in out_dir.iterdir())
        assert produced == ["one_mosaic.png", "two_mosaic.png"]

    def test_empty_input(self, workspace: Path) -> None:
        empty = workspace / "nothing"
        empty.mkdir()
        result = runner.invoke(app, [
            "batch", "-i", str(empty), "-t", str(workspace / "tiles"),
        ])
        assert result.exit_code == 0
        assert "No images found" in result.output
