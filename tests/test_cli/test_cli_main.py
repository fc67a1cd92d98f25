"""Tests for the distributor-permissions CLI."""
from __future__ import annotations

import pathlib
import textwrap

import pytest
from click.testing import CliRunner

from distributor_permissions.cli import main as cli_main
from distributor_permissions.cli.main import cli

_CITIES = (
    "CHI,IL,US,Chicago,Illinois,United States\n"
    "MAS,TN,IN,Chennai,Tamil Nadu,India\n"
    "BLR,KA,IN,Bangalore,Karnataka,India\n"
    "HBX,KA,IN,Hubli,Karnataka,India\n"
)

_DISTRIBUTORS = textwrap.dedent(
    """\
    version: "1"
    distributors:
      - name: DISTRIBUTOR1
        include: [india, unitedstates]
        exclude: [karnataka-india, chennai-tamilnadu-india]
      - name: DISTRIBUTOR2
        parent: DISTRIBUTOR1
        include: [india]
        exclude: [tamilnadu-india]
      - name: DISTRIBUTOR3
        parent: DISTRIBUTOR2
        include: [hubli-karnataka-india]
    """
)

_HUBLI = ["--city", "Hubli", "--province", "Karnataka", "--country", "India"]


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_main.console, "width", 200)
    monkeypatch.setattr(cli_main.err_console, "width", 200)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def config_file(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "distributors.yaml"
    path.write_text(_DISTRIBUTORS, encoding="utf-8")
    return path


@pytest.fixture()
def config_with_dataset(tmp_path: pathlib.Path) -> pathlib.Path:
    (tmp_path / "cities.csv").write_text(_CITIES, encoding="utf-8")
    path = tmp_path / "with_dataset.yaml"
    path.write_text(_DISTRIBUTORS + "locations:\n  path: cities.csv\n", encoding="utf-8")
    return path


class TestVersionCommand:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestCheckCommand:
    def test_allowed_exits_zero(self, runner: CliRunner, config_file: pathlib.Path) -> None:
        result = runner.invoke(cli, ["check", "DISTRIBUTOR3", *_HUBLI, "-c", str(config_file)])
        assert result.exit_code == 0
        assert "ALLOWED" in result.output

    def test_denied_exits_one(self, runner: CliRunner, config_file: pathlib.Path) -> None:
        args = ["--city", "Bangalore", "--province", "Karnataka", "--country", "India"]
        result = runner.invoke(cli, ["check", "DISTRIBUTOR2", *args, "-c", str(config_file)])
        assert result.exit_code == 1
        assert "DENIED" in result.output

    def test_unknown_distributor_exits_two(
        self, runner: CliRunner, config_file: pathlib.Path
    ) -> None:
        result = runner.invoke(cli, ["check", "NOPE", *_HUBLI, "-c", str(config_file)])
        assert result.exit_code == 2

    def test_missing_config_is_usage_error(self, runner: CliRunner, tmp_path: pathlib.Path) -> None:
        result = runner.invoke(
            cli, ["check", "DISTRIBUTOR3", *_HUBLI, "-c", str(tmp_path / "missing.yaml")]
        )
        assert result.exit_code == 2

    def test_cyclic_config_exits_two(self, runner: CliRunner, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "cycle.yaml"
        path.write_text(
            "distributors:\n  - {name: A, parent: B}\n  - {name: B, parent: A}\n",
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["check", "A", *_HUBLI, "-c", str(path)])
        assert result.exit_code == 2
        assert "Configuration error" in result.output

    def test_dataset_lookup_found(
        self, runner: CliRunner, config_with_dataset: pathlib.Path
    ) -> None:
        result = runner.invoke(
            cli, ["check", "DISTRIBUTOR3", *_HUBLI, "-c", str(config_with_dataset)]
        )
        assert result.exit_code == 0

    def test_dataset_lookup_missing_location_denied(
        self, runner: CliRunner, config_with_dataset: pathlib.Path
    ) -> None:
        args = ["--city", "Hubli", "--province", "Karnataka", "--country", "Canada"]
        result = runner.invoke(cli, ["check", "DISTRIBUTOR3", *args, "-c", str(config_with_dataset)])
        assert result.exit_code == 1

    def test_blank_city_exits_two(self, runner: CliRunner, config_file: pathlib.Path) -> None:
        args = ["--city", " ", "--province", "Karnataka", "--country", "India"]
        result = runner.invoke(cli, ["check", "DISTRIBUTOR3", *args, "-c", str(config_file)])
        assert result.exit_code == 2
        assert "Invalid location" in result.output
        assert "Traceback" not in result.output

    def test_unquoted_version_accepted(self, runner: CliRunner, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "numeric_version.yaml"
        path.write_text(_DISTRIBUTORS.replace('version: "1"', "version: 1"), encoding="utf-8")
        result = runner.invoke(cli, ["check", "DISTRIBUTOR3", *_HUBLI, "-c", str(path)])
        assert result.exit_code == 0
        assert "ALLOWED" in result.output


class TestExplainCommand:
    def test_explain_shows_deciding_rule(
        self, runner: CliRunner, config_file: pathlib.Path
    ) -> None:
        result = runner.invoke(cli, ["explain", "DISTRIBUTOR3", *_HUBLI, "-c", str(config_file)])
        assert result.exit_code == 0
        assert "hubli-karnataka-india" in result.output
        assert "positional" in result.output

    def test_explain_not_found_location(
        self, runner: CliRunner, config_with_dataset: pathlib.Path
    ) -> None:
        args = ["--city", "Mumbai", "--province", "Maharashtra", "--country", "India"]
        result = runner.invoke(cli, ["explain", "DISTRIBUTOR1", *args, "-c", str(config_with_dataset)])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_explain_blank_country_exits_two(
        self, runner: CliRunner, config_file: pathlib.Path
    ) -> None:
        args = ["--city", "Hubli", "--province", "Karnataka", "--country", ""]
        result = runner.invoke(cli, ["explain", "DISTRIBUTOR3", *args, "-c", str(config_file)])
        assert result.exit_code == 2
        assert "Invalid location" in result.output


class TestListCommand:
    def test_lists_distributors(self, runner: CliRunner, config_file: pathlib.Path) -> None:
        result = runner.invoke(cli, ["list", "-c", str(config_file)])
        assert result.exit_code == 0
        assert "DISTRIBUTOR1" in result.output
        assert "DISTRIBUTOR3" in result.output

    def test_empty_config(self, runner: CliRunner, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("version: '1'\n", encoding="utf-8")
        result = runner.invoke(cli, ["list", "-c", str(path)])
        assert result.exit_code == 0
        assert "No distributors" in result.output


class TestLocationsCommand:
    def test_shows_locations(self, runner: CliRunner, config_with_dataset: pathlib.Path) -> None:
        result = runner.invoke(cli, ["locations", "-c", str(config_with_dataset)])
        assert result.exit_code == 0
        assert "Chennai" in result.output
        assert "4 total" in result.output

    def test_without_dataset_exits_two(self, runner: CliRunner, config_file: pathlib.Path) -> None:
        result = runner.invoke(cli, ["locations", "-c", str(config_file)])
        assert result.exit_code == 2
        assert "Location dataset error" in result.output


class TestMatrixCommand:
    def test_matrix(self, runner: CliRunner, config_with_dataset: pathlib.Path) -> None:
        result = runner.invoke(cli, ["matrix", "-c", str(config_with_dataset)])
        assert result.exit_code == 0
        assert "yes" in result.output
        assert "no" in result.output
