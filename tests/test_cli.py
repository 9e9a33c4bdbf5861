"""End-to-end tests for the Typer CLI."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from brick_mosaic.catalog import default_catalog, load_catalog
from brick_mosaic.cli import app

runner = CliRunner()


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    p = tmp_path / "bricks.txt"
    p.write_text("2\nRed 255 0 0\nBlue 0 0 255\n3\n1 1 7\n2 1 10\n2 2 15\n")
    return p


@pytest.fixture
def sprite(tmp_path: Path) -> Path:
    """4x3 sprite: red block, blue column, one transparent pixel."""
    arr = np.zeros((3, 4, 4), dtype=np.uint8)
    arr[:, :2] = [250, 10, 10, 255]
    arr[:, 2] = [10, 10, 250, 255]
    arr[:2, 3] = [10, 10, 250, 255]
    p = tmp_path / "sprite.png"
    Image.fromarray(arr).save(p)
    return p


class TestSolveCommand:
    def test_greedy(self, tmp_path: Path, catalog_file: Path, sprite: Path) -> None:
        out = tmp_path / "out"
        result = runner.invoke(
            app, ["solve", str(catalog_file), str(sprite), "-o", str(out), "-t", "4"],
        )
        assert result.exit_code == 0, result.output
        assert (out / "sprite_mosaic.png").exists()
        assert (out / "sprite_board.png").exists()
        assert (out / "sprite_comparison.png").exists()
        assert Image.open(out / "sprite_mosaic.png").size == (16, 12)
        assert "> Total cost: $" in (out / "sprite_parts.txt").read_text()

    def test_exhaustive_with_progress(
        self, tmp_path: Path, catalog_file: Path,
    ) -> None:
        arr = np.full((1, 2, 4), 255, dtype=np.uint8)
        arr[..., :3] = [255, 0, 0]
        image = tmp_path / "pair.png"
        Image.fromarray(arr).save(image)
        out = tmp_path / "out"

        result = runner.invoke(app, [
            "solve", str(catalog_file), str(image), "-o", str(out),
            "--strategy", "exhaustive", "--progress",
        ])
        assert result.exit_code == 0, result.output
        assert list(out.glob("pair_progress_*.png"))

    def test_threaded_score_ranking(
        self, tmp_path: Path, catalog_file: Path, sprite: Path,
    ) -> None:
        result = runner.invoke(app, [
            "solve", str(catalog_file), str(sprite), "-o", str(tmp_path / "out"),
            "--ranking", "score", "--workers", "2", "--dither",
        ])
        assert result.exit_code == 0, result.output

    def test_missing_catalog(self, tmp_path: Path, sprite: Path) -> None:
        result = runner.invoke(
            app, ["solve", str(tmp_path / "nope.txt"), str(sprite), "-o", str(tmp_path)],
        )
        assert result.exit_code == 1

    def test_binary_catalog(self, tmp_path: Path, sprite: Path) -> None:
        garbage = tmp_path / "garbage.txt"
        garbage.write_bytes(b"\xff\xfe\x00\x81garbage")
        result = runner.invoke(
            app, ["solve", str(garbage), str(sprite), "-o", str(tmp_path / "out")],
        )
        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)

    @pytest.mark.parametrize("max_side", ["0", "-3"])
    def test_bad_max_side(
        self, tmp_path: Path, catalog_file: Path, sprite: Path, max_side: str,
    ) -> None:
        result = runner.invoke(app, [
            "solve", str(catalog_file), str(sprite), "-o", str(tmp_path / "out"),
            "-m", max_side,
        ])
        assert result.exit_code == 1
        assert "max_side" in result.output

    def test_bad_image(self, tmp_path: Path, catalog_file: Path) -> None:
        bogus = tmp_path / "bogus.png"
        bogus.write_bytes(b"nope")
        result = runner.invoke(
            app, ["solve", str(catalog_file), str(bogus), "-o", str(tmp_path / "out")],
        )
        assert result.exit_code == 1

    def test_bad_strategy(self, tmp_path: Path, catalog_file: Path, sprite: Path) -> None:
        result = runner.invoke(app, [
            "solve", str(catalog_file), str(sprite), "--strategy", "random",
        ])
        assert result.exit_code == 1

    def test_unsolvable(self, tmp_path: Path, sprite: Path) -> None:
        only_big = tmp_path / "big.txt"
        only_big.write_text("1\nRed 255 0 0\n1\n2 2 15\n")
        result = runner.invoke(
            app, ["solve", str(only_big), str(sprite), "-o", str(tmp_path / "out")],
        )
        assert result.exit_code == 2


class TestOtherCommands:
    def test_catalog_default(self) -> None:
        result = runner.invoke(app, ["catalog"])
        assert result.exit_code == 0
        assert "Bricks" in result.output

    def test_catalog_file(self, catalog_file: Path) -> None:
        result = runner.invoke(app, ["catalog", str(catalog_file)])
        assert result.exit_code == 0
        assert "Red" in result.output

    def test_catalog_export(self, tmp_path: Path) -> None:
        target = tmp_path / "exported.txt"
        result = runner.invoke(app, ["catalog", "--export", str(target)])
        assert result.exit_code == 0
        assert load_catalog(target) == default_catalog()

    def test_batch(self, tmp_path: Path, catalog_file: Path, sprite: Path) -> None:
        out = tmp_path / "out"
        result = runner.invoke(app, [
            "batch", str(catalog_file), "-i", str(sprite.parent), "-o", str(out),
        ])
        assert result.exit_code == 0, result.output
        assert (out / "sprite_mosaic.png").exists()

    def test_batch_empty(self, tmp_path: Path) -> None:
        result = runner.invoke(app, [
            "batch", "-i", str(tmp_path / "empty"), "-o", str(tmp_path / "out"),
        ])
        assert result.exit_code == 0
