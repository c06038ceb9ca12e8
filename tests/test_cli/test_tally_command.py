"""Tests for the tally command."""

from pathlib import Path

import pandas as pd
from click.testing import CliRunner

from virustiter.cli.main import cli


class TestTallyCommand:
    def test_writes_csv(self, runner: CliRunner, table_csv: Path, tmp_path: Path):
        out = tmp_path / "tally.csv"
        result = runner.invoke(cli, ["tally", str(table_csv), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "Tally of 3 groups" in result.output
        df = pd.read_csv(out)
        assert df["pos"].tolist() == [2, 5, 9]
        assert df["neg"].tolist() == [8, 5, 1]
        assert df["x"].tolist() == [0.5, 2.0, 8.0]

    def test_prints_table(self, runner: CliRunner, table_csv: Path):
        result = runner.invoke(cli, ["tally", str(table_csv)])
        assert result.exit_code == 0, result.output
        assert "A3" in result.output

    def test_phenotype(self, runner: CliRunner, table_csv: Path, tmp_path: Path):
        pheno = tmp_path / "pheno.csv"
        pheno.write_text("well,virus\na1,VSV\na2,VSV\na3,VSV\n")
        out = tmp_path / "tally.csv"
        result = runner.invoke(
            cli, ["tally", str(table_csv), "--phenotype", str(pheno), "-o", str(out)]
        )
        assert result.exit_code == 0, result.output
        assert pd.read_csv(out)["virus"].tolist() == ["VSV", "VSV", "VSV"]

    def test_missing_param(self, runner: CliRunner, table_csv: Path):
        result = runner.invoke(cli, ["tally", str(table_csv), "--param", "infected"])
        assert result.exit_code == 1
        assert "infected" in result.output

    def test_phenotype_with_lowercase_wells(self, runner: CliRunner, tmp_path: Path):
        table = tmp_path / "classified.csv"
        pd.DataFrame({
            "well": ["a1", "a1", "a2", "a2"],
            "moi": [1.0, 1.0, 4.0, 4.0],
            "positive": [True, False, True, True],
        }).to_csv(table, index=False)
        pheno = tmp_path / "pheno.csv"
        pheno.write_text("well,virus\na1,VSV\na2,HSV\n")
        out = tmp_path / "tally.csv"
        result = runner.invoke(
            cli, ["tally", str(table), "--phenotype", str(pheno), "-o", str(out)]
        )
        assert result.exit_code == 0, result.output
        df = pd.read_csv(out)
        assert df["well"].tolist() == ["a1", "a2"]
        assert df["virus"].tolist() == ["VSV", "HSV"]
