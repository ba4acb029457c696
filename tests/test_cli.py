"""
Tests for the hts-supply command-line interface.
"""

import json

import pytest

from hts_supply_collector.cli import (
    CLXY_SOURCE, CLXY_TOKEN, CLXY_TREASURIES, format_csv_report, format_json_report, main
)
from hts_supply_collector.config.validation import get_env_var_mappings
from hts_supply_collector.models.core import AggregationResult

from mirror_fixtures import balances_page, next_path, token_info


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove any HTS_* overrides from the environment."""
    for env_var in get_env_var_mappings():
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def config_path(tmp_path):
    """Path to a configuration file that does not exist yet."""
    return str(tmp_path / "config.yaml")


@pytest.fixture
def fixtures_file(tmp_path):
    """Mirror node fixtures for token 0.0.100 spread over two pages."""
    page2 = next_path("0.0.2")
    path = tmp_path / "mirror.json"
    path.write_text(json.dumps({
        "/api/v1/tokens/0.0.100": token_info("1000000", "2"),
        "/api/v1/tokens/0.0.100/balances": balances_page({"0.0.1": 300000, "0.0.2": 600000}, page2),
        page2: balances_page({"0.0.3": 100000}),
    }))
    return str(path)


@pytest.fixture
def result():
    """A finished aggregation."""
    return AggregationResult(
        token="0.0.100",
        decimals=2,
        source="mirror.test",
        timestamp="1700000000.000000001",
        total_supply=2 ** 70,
        circulating=2 ** 70 - 600000,
        treasury_balances={"0.0.2": 600000, "0.0.9": 0},
        consumer_balances={"0.0.1": 300000},
    )


class TestReports:
    """Test report rendering."""

    def test_csv_report_layout(self, result):
        """Test the CSV layout with both sections."""
        assert format_csv_report(result).splitlines() == [
            "Token,0.0.100",
            "Decimals,2",
            "Source,mirror.test",
            "Timestamp,1700000000.000000001",
            f"Total Supply,{2 ** 70}",
            f"Circulating,{2 ** 70 - 600000}",
            "",
            "Treasuries",
            "0.0.2,600000",
            "0.0.9,0",
            "",
            "Consumers",
            "0.0.1,300000",
        ]

    def test_csv_report_omits_empty_sections(self, result):
        """Test empty treasury and consumer sections are left out."""
        result.treasury_balances = {}
        result.consumer_balances = {}

        assert len(format_csv_report(result).splitlines()) == 6

    def test_json_report_uses_strings(self, result):
        """Test JSON output keeps big amounts exact."""
        data = json.loads(format_json_report(result))

        assert data["total_supply"] == str(2 ** 70)
        assert data["treasury_balances"] == {"0.0.2": "600000", "0.0.9": "0"}
        assert data["consumer_balances"] == {"0.0.1": "300000"}


class TestSupplyCommand:
    """Test the supply command end to end against fixtures."""

    def test_supply_csv(self, capsys, config_path, fixtures_file):
        """Test a supply run prints the CSV report."""
        exit_code = main([
            "--config", config_path, "supply", "--mock-fixtures", fixtures_file,
            "mirror.test", "0.0.100", "0.0.2", "0.0.7",
        ])

        lines = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert lines[0] == "Token,0.0.100"
        assert "Total Supply,1000000" in lines
        assert "Circulating,400000" in lines
        assert lines[lines.index("Treasuries") + 1:lines.index("Treasuries") + 3] == ["0.0.2,600000", "0.0.7,0"]
        assert lines[lines.index("Consumers") + 1:] == ["0.0.1,300000", "0.0.3,100000"]

    def test_supply_json(self, capsys, config_path, fixtures_file):
        """Test the JSON format option."""
        exit_code = main([
            "--config", config_path, "supply", "--format", "json",
            "--mock-fixtures", fixtures_file, "mirror.test", "0.0.100",
        ])

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data["circulating"] == "1000000"
        assert data["treasury_balances"] == {}

    def test_supply_from_config(self, capsys, tmp_path, fixtures_file):
        """Test host, token and treasuries can come from the configuration."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "mirror": {"host": "configured.mirror.test"},
            "token": {"token_id": "0.0.100", "treasuries": ["0.0.1"]},
        }))

        exit_code = main(["--config", str(config_file), "supply", "--mock-fixtures", fixtures_file])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Source,configured.mirror.test" in out
        assert "Circulating,700000" in out

    def test_missing_token_prints_usage(self, capsys, config_path):
        """Test running without a token reports usage."""
        exit_code = main(["--config", config_path, "supply", "mirror.test"])

        assert exit_code == 1
        assert "Usage:" in capsys.readouterr().err

    def test_invalid_token_exit_code(self, capsys, config_path, fixtures_file):
        """Test invalid input is reported before any request."""
        exit_code = main([
            "--config", config_path, "supply", "--mock-fixtures", fixtures_file, "mirror.test", "0.0",
        ])

        assert exit_code == 2
        assert "Error: Invalid token ID 0.0" in capsys.readouterr().err

    def test_unknown_token_exit_code(self, capsys, config_path, fixtures_file):
        """Test a token the mirror node does not know."""
        exit_code = main([
            "--config", config_path, "supply", "--mock-fixtures", fixtures_file, "mirror.test", "0.0.404",
        ])

        assert exit_code == 4
        assert "HTS Token 0.0.404 was not found, code: 404" in capsys.readouterr().err

    def test_invalid_config_exit_code(self, capsys, tmp_path):
        """Test an invalid configuration file fails the command."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("mirror:\n  scheme: ftp\n")

        exit_code = main(["--config", str(config_file), "supply", "mirror.test", "0.0.100"])

        assert exit_code == 2
        assert "Configuration validation failed" in capsys.readouterr().err


class TestClxyCommand:
    """Test the fixed $CLXY command."""

    def test_clxy_uses_fixed_arguments(self, capsys, tmp_path, config_path):
        """Test the $CLXY token and treasuries are queried."""
        fixture_file = tmp_path / "clxy.json"
        fixture_file.write_text(json.dumps({
            f"/api/v1/tokens/{CLXY_TOKEN}": token_info("5000000000", 6),
            f"/api/v1/tokens/{CLXY_TOKEN}/balances": balances_page({"0.0.849428": 4000000000, "0.0.1234": 1000000000}),
        }))

        exit_code = main(["--config", config_path, "clxy", "--mock-fixtures", str(fixture_file)])

        lines = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert f"Source,{CLXY_SOURCE}" in lines
        assert "Circulating,1000000000" in lines
        treasury_start = lines.index("Treasuries") + 1
        assert lines[treasury_start:treasury_start + len(CLXY_TREASURIES)] == (
            ["0.0.849428,4000000000"] + [f"{treasury},0" for treasury in CLXY_TREASURIES[1:]]
        )


class TestConfigCommands:
    """Test init and validate commands."""

    def test_init_and_validate(self, capsys, config_path):
        """Test init writes a config that validate accepts."""
        assert main(["--config", config_path, "init"]) == 0
        assert main(["--config", config_path, "init"]) == 1
        assert main(["--config", config_path, "init", "--force"]) == 0
        assert main(["--config", config_path, "validate"]) == 0

        assert "Configuration is valid" in capsys.readouterr().out

    def test_validate_missing_file(self, capsys, config_path):
        """Test validating a missing configuration file."""
        assert main(["--config", config_path, "validate"]) == 2
        assert "does not exist" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        """Test running without a command prints help."""
        assert main([]) == 1
        assert "Available commands" in capsys.readouterr().out
