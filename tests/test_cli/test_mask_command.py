"""Tests for the mask command."""

from pathlib import Path

import numpy as np
import tifffile
from click.testing import CliRunner

from virustiter.cli.main import cli


class TestMaskCommand:
    def test_help(self, runner: CliRunner):
        result = runner.invoke(cli, ["mask", "--help"])
        assert result.exit_code == 0
        assert "--width" in result.output
        assert "--offset" in result.output

    def test_counts_nuclei(self, runner: CliRunner, nuclear_tiff: Path):
        result = runner.invoke(cli, ["mask", str(nuclear_tiff)])
        assert result.exit_code == 0, result.output
        assert "Segmentation complete" in result.output
        assert "Nuclei found: 2" in result.output

    def test_writes_labels(self, runner: CliRunner, nuclear_tiff: Path, tmp_path: Path):
        out = tmp_path / "labels.tif"
        result = runner.invoke(cli, ["mask", str(nuclear_tiff), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "Labels written to" in result.output
        labels = tifffile.imread(str(out))
        assert set(np.unique(labels)) == {0, 1, 2}

    def test_pair_stack(self, runner: CliRunner, pair_tiff: Path):
        result = runner.invoke(cli, ["mask", str(pair_tiff), "--which", "2,1"])
        assert result.exit_code == 0, result.output
        assert "Nuclei found: 2" in result.output

    def test_invalid_parameter(self, runner: CliRunner, nuclear_tiff: Path):
        result = runner.invoke(cli, ["mask", str(nuclear_tiff), "--width", "0"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_image(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(cli, ["mask", str(tmp_path / "missing.tif")])
        assert result.exit_code == 2
