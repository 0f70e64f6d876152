"""
Tests for the CLI — flags, exit codes, human and JSON reports.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from devsetup.adapters.mock import RecordingRunner
from devsetup.main import cli


@pytest.fixture
def fake_runner(monkeypatch) -> RecordingRunner:
    """Route every command the CLI would spawn to a recording fake."""
    fake = RecordingRunner(default_output="v20.11.0")
    monkeypatch.setattr(
        "devsetup.core.use_cases.setup.SubprocessRunner",
        lambda timeout=600: fake,
    )
    return fake


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "--force" in result.output

    def test_short_help(self):
        result = CliRunner().invoke(cli, ["-h"])
        assert result.exit_code == 0
        assert "Idempotent development environment setup" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_unknown_argument(self):
        result = CliRunner().invoke(cli, ["--frobnicate"])
        assert result.exit_code != 0
        assert "No such option" in result.output

    def test_unexpected_positional(self):
        result = CliRunner().invoke(cli, ["install"])
        assert result.exit_code != 0


class TestSetupCommand:
    def test_fresh_setup(self, app_root: Path, fake_runner: RecordingRunner):
        result = CliRunner().invoke(cli, ["--root", str(app_root)])
        assert result.exit_code == 0, result.output
        assert "Setup finished" in result.output
        assert "Next steps" in result.output
        assert (app_root / "server" / ".env").is_file()

    def test_json_report(self, app_root: Path, fake_runner: RecordingRunner):
        result = CliRunner().invoke(cli, ["--root", str(app_root), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["status"] == "ok"
        assert data["project_root"] == str(app_root.resolve())
        assert data["steps"][0]["name"] == "prerequisites"

    def test_force_flag(self, app_root: Path, fake_runner: RecordingRunner):
        (app_root / "server" / "node_modules").mkdir()
        result = CliRunner().invoke(cli, ["--root", str(app_root), "-f", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["force"] is True
        server = next(s for s in data["steps"] if s["name"] == "server-dependencies")
        assert server["status"] == "succeeded"

    def test_missing_prerequisite_exits_non_zero(self, app_root: Path, fake_runner: RecordingRunner):
        fake_runner.set_available("npm")
        result = CliRunner().invoke(cli, ["--root", str(app_root)])
        assert result.exit_code == 1
        assert "node is not installed" in result.output
        assert not (app_root / "server" / ".env").exists()

    def test_non_fatal_failure_exits_zero(self, app_root: Path, fake_runner: RecordingRunner):
        fake_runner.set_failure("npm install")
        result = CliRunner().invoke(cli, ["--root", str(app_root)])
        assert result.exit_code == 0
        assert "server-dependencies" in result.output
        assert "2 failed" in result.output

    def test_config_file(self, tmp_path: Path, fake_runner: RecordingRunner):
        root = tmp_path / "app"
        for name in ("backend", "frontend"):
            (root / name).mkdir(parents=True)
        (root / "devsetup.yml").write_text(
            "server_dir: backend\nclient_dir: frontend\ndirectories: [backend/logs]\n"
        )
        result = CliRunner().invoke(cli, ["--root", str(root)])
        assert result.exit_code == 0, result.output
        assert (root / "backend" / ".env").is_file()
        assert (root / "frontend" / ".env").is_file()
        assert (root / "backend" / "logs").is_dir()

    def test_server_dir_moves_runtime_directories(self, tmp_path: Path, fake_runner: RecordingRunner):
        root = tmp_path / "app"
        for name in ("backend", "client"):
            (root / name).mkdir(parents=True)
        (root / "devsetup.yml").write_text("server_dir: backend\n")
        result = CliRunner().invoke(cli, ["--root", str(root)])
        assert result.exit_code == 0, result.output
        assert (root / "backend" / "logs").is_dir()
        assert (root / "backend" / "uploads").is_dir()
        assert not (root / "server").exists()

    def test_invalid_config_exits_one(self, app_root: Path, fake_runner: RecordingRunner):
        bad = app_root / "custom.yml"
        bad.write_text("unknown_key: 1\n")
        result = CliRunner().invoke(cli, ["--root", str(app_root), "--config", str(bad)])
        assert result.exit_code == 1
        assert "Invalid setup configuration" in result.output
        assert fake_runner.call_count == 0

    def test_quiet_shows_only_failures(self, app_root: Path, fake_runner: RecordingRunner):
        result = CliRunner().invoke(cli, ["--root", str(app_root), "-q"])
        assert result.exit_code == 0
        assert "server-env" not in result.output
        assert "Next steps" not in result.output
