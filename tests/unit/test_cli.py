"""Unit tests for the command-line interface."""

from click.testing import CliRunner

from providerhub.cli import cli


def test_providers_lists_catalog():
    result = CliRunner().invoke(cli, ["providers"])

    assert result.exit_code == 0
    assert "backup_storage:" in result.output
    assert "notification_channel:" in result.output
    assert "AWS_SECRET_ACCESS_KEY (secret)" in result.output
    assert "AWS_ENDPOINT_URL (optional)" in result.output


def test_providers_single_family():
    result = CliRunner().invoke(cli, ["providers", "--family", "calendar"])

    assert result.exit_code == 0
    assert "google" in result.output
    assert "outlook" in result.output
    assert "backup_storage:" not in result.output


def test_providers_unknown_family():
    result = CliRunner().invoke(cli, ["providers", "--family", "payments"])

    assert result.exit_code == 2
    assert "Unknown family 'payments'" in result.output


def test_info():
    result = CliRunner().invoke(cli, ["info"])

    assert result.exit_code == 0
    assert "ProviderHub v" in result.output
    assert "Test Timeout:" in result.output


def test_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "ProviderHub" in result.output
