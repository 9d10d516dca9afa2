"""Tests for the kclcat.cli.mass module."""

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from kclcat.cli import cli

_CONTENT = "// units = mm\n// material-density: 2.70\n// material-density-units: g:cm3\n"


def _fake_response(text: str) -> MagicMock:
    resp = MagicMock()
    resp.status_code = 200
    resp.headers = {}
    resp.text = text
    return resp


def _write_cache(data_dir: Path, data: dict) -> Path:
    cache_path = data_dir / "cache" / "sha-cache.json"
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    cache_path.write_text(json.dumps(data))
    return cache_path


class TestMass:
    """kclcat mass computes and caches the mass."""

    @patch("kclcat.mass.subprocess.run")
    @patch("kclcat.ghremote.client.requests.Session")
    def test_success(
        self, mock_session_cls: MagicMock, mock_run: MagicMock, configured_data_dir: Path
    ):
        cache_path = _write_cache(configured_data_dir, {"gear": {"sha": "s", "author": "Alice"}})
        session = MagicMock()
        session.get.return_value = _fake_response(_CONTENT)
        mock_session_cls.return_value = session
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=0, stdout='{"mass": "0.1234", "output_unit": "kg"}', stderr=""
        )

        runner = CliRunner()
        result = runner.invoke(cli, ["mass", "-d", str(configured_data_dir), "gear"])

        assert result.exit_code == 0, result.output
        assert "gear: 0.12 kg" in result.output
        assert json.loads(cache_path.read_text())["gear"] == {
            "sha": "s",
            "mass": 0.12,
            "mass-unit": "kg",
            "author": "Alice",
        }
        # The scratch area is removed when the command ends
        assert list((configured_data_dir / "temp").iterdir()) == []

    @patch("kclcat.mass.subprocess.run")
    @patch("kclcat.ghremote.client.requests.Session")
    def test_failure_exit_code(
        self, mock_session_cls: MagicMock, mock_run: MagicMock, configured_data_dir: Path
    ):
        cache_path = _write_cache(configured_data_dir, {"gear": {"sha": "s", "author": "Alice"}})
        before = cache_path.read_text()
        session = MagicMock()
        session.get.return_value = _fake_response(_CONTENT)
        mock_session_cls.return_value = session
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=2, stdout="", stderr="boom"
        )

        runner = CliRunner()
        result = runner.invoke(cli, ["mass", "-d", str(configured_data_dir), "gear"])

        assert result.exit_code == 1
        assert "1 file(s) failed:" in result.output
        assert "zoo exited with 2: boom" in result.output
        assert cache_path.read_text() == before

    @patch("kclcat.mass.subprocess.run")
    @patch("kclcat.ghremote.client.requests.Session")
    def test_batch_continues_after_failure(
        self, mock_session_cls: MagicMock, mock_run: MagicMock, configured_data_dir: Path
    ):
        cache_path = _write_cache(configured_data_dir, {"gear": {"sha": "s", "author": "Alice"}})
        session = MagicMock()
        session.get.return_value = _fake_response(_CONTENT)
        mock_session_cls.return_value = session
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=0, stdout='{"mass": "2", "output_unit": "kg"}', stderr=""
        )

        runner = CliRunner()
        result = runner.invoke(cli, ["mass", "-d", str(configured_data_dir), "plate", "gear"])

        assert result.exit_code == 1
        assert "gear: 2.0 kg" in result.output
        assert "Computed 1/2 mass(es)." in result.output
        assert "plate: plate is not in the cache" in result.output
        assert json.loads(cache_path.read_text())["gear"]["mass"] == 2.0
