from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from cli import app

runner = CliRunner()


def test_check_source_reports_counts(catalog_path: Path) -> None:
    result = runner.invoke(app, ["check-source", str(catalog_path)])

    assert result.exit_code == 0
    assert "3 records, 2 distinct ids" in result.output


def test_check_source_fails_on_bad_catalog(catalog_writer) -> None:
    path = catalog_writer("{not a catalog")

    result = runner.invoke(app, ["check-source", str(path)])

    assert result.exit_code == 1


def test_info_shows_configuration() -> None:
    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0
    assert "endpoint=" in result.output
    assert "interval=" in result.output
