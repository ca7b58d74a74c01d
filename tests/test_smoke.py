from bldrgraph import __version__
from click.testing import CliRunner

from bldrgraph.cli.main import cli


def test_version():
    assert __version__ == "0.1.0"


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "package graph dev tool" in result.output


def test_cli_version():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_cli_stats_over_sample_data(sample_config_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(sample_config_file), "stats"])
    assert result.exit_code == 0
    assert "Graph Statistics" in result.output
    assert "Edge count" in result.output


def test_cli_check_reports_conflicts(sample_config_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(sample_config_file), "check", "acme/app"])
    assert result.exit_code == 1
    assert "Dependency version updates:" in result.output
    assert "Conflict: core/openssl/1.0.2l/20170513215008" in result.output
