"""Tests for the kclcat.cli.open module."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from kclcat.cli import cli


def _fake_response(status: int = 200, json_data=None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.headers = {}
    resp.json.return_value = json_data
    return resp


class TestOpen:
    """kclcat open synchronizes or redirects to setup."""

    def test_without_config(self, data_dir: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["open", "-d", str(data_dir)])

        assert result.exit_code == 1
        assert "No configuration found" in result.output
        assert "kclcat setup" in result.output

    @patch("kclcat.ghremote.client.requests.Session")
    def test_auth_failure_redirects_to_setup(
        self, mock_session_cls: MagicMock, configured_data_dir: Path
    ):
        session = MagicMock()
        session.get.return_value = _fake_response(401)
        mock_session_cls.return_value = session

        runner = CliRunner()
        result = runner.invoke(cli, ["open", "-d", str(configured_data_dir)])

        assert result.exit_code == 1
        assert "Startup synchronization failed" in result.output
        assert "kclcat setup" in result.output

    @patch("kclcat.ghremote.client.requests.Session")
    def test_shows_catalog(self, mock_session_cls: MagicMock, configured_data_dir: Path):
        session = MagicMock()
        session.get.side_effect = [
            _fake_response(json_data=[{"name": "gear.kcl", "sha": "sha1", "type": "file"}]),
            _fake_response(
                json_data=[{"sha": "c1", "commit": {"author": {"name": "Alice", "date": "d"}}}]
            ),
        ]
        mock_session_cls.return_value = session

        runner = CliRunner()
        result = runner.invoke(cli, ["open", "-d", str(configured_data_dir)])

        assert result.exit_code == 0, result.output
        assert "gear" in result.output
        assert "Alice" in result.output
        assert "N/A" in result.output

    @patch("kclcat.ghremote.client.requests.Session")
    def test_corrupt_cache_is_reported(
        self, mock_session_cls: MagicMock, configured_data_dir: Path
    ):
        cache_path = configured_data_dir / "cache" / "sha-cache.json"
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        cache_path.write_text('{"a": {"author": "X"}}')
        mock_session_cls.return_value = MagicMock()

        runner = CliRunner()
        result = runner.invoke(cli, ["open", "-d", str(configured_data_dir)])

        assert result.exit_code == 1
        assert "invalid entry" in result.output
        assert "Startup synchronization failed" not in result.output
