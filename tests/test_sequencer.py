"""
Tests for the sequencer — step order, idempotence, force, fatal vs non-fatal.
"""

import time
from datetime import datetime
from pathlib import Path

from devsetup.adapters.base import CommandResult
from devsetup.adapters.mock import RecordingRunner
from devsetup.core.engine.sequencer import STEP_ORDER, Sequencer
from devsetup.core.models.outcome import StepOutcome
from devsetup.core.models.setup import RunOptions


class InstallingRunner(RecordingRunner):
    """A fake that leaves a node_modules behind after a successful npm install/ci."""

    def run(self, args, cwd=None, quiet=False) -> CommandResult:
        result = super().run(args, cwd=cwd, quiet=quiet)
        if result.ok and args[:2] in (["npm", "install"], ["npm", "ci"]) and cwd is not None:
            (Path(cwd) / "node_modules").mkdir(exist_ok=True)
        return result


class TestOrder:
    def test_steps_run_in_fixed_order(self, options: RunOptions, runner: RecordingRunner):
        report = Sequencer(options, runner).run()
        assert [o.name for o in report.outcomes] == list(STEP_ORDER)

    def test_install_order_server_then_client(self, options: RunOptions, runner: RecordingRunner, app_root: Path):
        Sequencer(options, runner).run()
        installs = [c.cwd for c in runner.call_log if c.args[:1] == ["npm"] and c.args[1] != "--version"]
        assert installs == [str(app_root / "server"), str(app_root / "client")]

    def test_fresh_run_provisions_everything(self, options: RunOptions, runner: RecordingRunner, app_root: Path):
        report = Sequencer(options, runner).run()
        assert report.exit_code == 0
        assert report.status == "ok"
        assert (app_root / "server" / ".env").is_file()
        assert (app_root / "client" / ".env").is_file()
        assert (app_root / "server" / "logs").is_dir()
        assert (app_root / "server" / "uploads").is_dir()
        assert report.get("schema").detail == "no schema"


class TestIdempotence:
    def test_second_run_skips_and_changes_nothing(self, app_root: Path, snapshot):
        options = RunOptions(project_root=app_root)
        runner = InstallingRunner(default_output="v20.11.0")
        first = Sequencer(options, runner).run()
        assert first.get("server-dependencies").ok
        after_first = snapshot(app_root)

        second = Sequencer(options, runner).run()
        for name in ("server-dependencies", "client-dependencies", "server-env", "client-env", "directories"):
            assert second.get(name).skipped, name
        assert snapshot(app_root) == after_first

    def test_existing_env_survives_any_run(self, app_root: Path):
        env = app_root / "server" / ".env"
        env.write_text("DATABASE_URL=postgres://me@localhost/dev\n")
        for force in (False, True):
            Sequencer(RunOptions(project_root=app_root, force=force), RecordingRunner()).run()
            assert env.read_text() == "DATABASE_URL=postgres://me@localhost/dev\n"


class TestForce:
    def test_force_reinstalls(self, app_root: Path):
        runner = InstallingRunner()
        Sequencer(RunOptions(project_root=app_root), runner).run()
        runner.reset()

        skipped = Sequencer(RunOptions(project_root=app_root), runner).run()
        assert skipped.get("server-dependencies").skipped

        forced = Sequencer(RunOptions(project_root=app_root, force=True), runner).run()
        assert forced.get("server-dependencies").ok
        assert forced.get("client-dependencies").ok
        assert forced.force


class TestFailureIsolation:
    def test_failed_server_install_does_not_stop_later_steps(self, options: RunOptions, app_root: Path):
        runner = RecordingRunner()
        runner.set_failure("npm install")
        (app_root / "client" / "package-lock.json").write_text("{}")

        report = Sequencer(options, runner).run()
        assert report.get("server-dependencies").failed
        assert report.get("client-dependencies").ok
        assert report.get("client-env").ok
        assert report.get("directories").ok
        assert (app_root / "client" / ".env").is_file()
        assert report.exit_code == 0
        assert report.status == "partial"

    def test_unexpected_exception_becomes_failed_outcome(self, options: RunOptions, runner: RecordingRunner):
        sequencer = Sequencer(options, runner)

        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        sequencer.directories.ensure_all = explode
        report = sequencer.run()
        assert report.get("directories").failed
        assert "boom" in report.get("directories").detail
        assert report.get("schema") is not None
        assert report.exit_code == 0


class TestPrerequisites:
    def test_missing_tool_is_fatal(self, options: RunOptions, app_root: Path):
        runner = RecordingRunner(available=["node"])
        report = Sequencer(options, runner).run()
        assert report.exit_code != 0
        assert report.status == "aborted"
        assert "npm" in report.fatal_error
        assert report.outcomes == []
        assert runner.call_count == 0
        assert not (app_root / "server" / ".env").exists()

    def test_all_missing_tools_named(self, options: RunOptions):
        report = Sequencer(options, RecordingRunner(available=[])).run()
        assert report.fatal_error.startswith("node, npm are not installed")

    def test_versions_recorded(self, options: RunOptions, runner: RecordingRunner):
        report = Sequencer(options, runner).run()
        prereq = report.get("prerequisites")
        assert prereq.ok
        assert prereq.metadata["versions"] == {"node": "20.11.0", "npm": "20.11.0"}


class TestReport:
    def test_outcome_spans_step_execution(self, options: RunOptions, runner: RecordingRunner):
        def slow_step(name):
            time.sleep(0.05)
            return StepOutcome.success(name)

        outcome = Sequencer(options, runner)._timed("slow", slow_step)
        started = datetime.fromisoformat(outcome.started_at)
        ended = datetime.fromisoformat(outcome.ended_at)
        assert (ended - started).total_seconds() >= 0.04
        assert outcome.duration_ms >= 40

    def test_to_dict(self, options: RunOptions, runner: RecordingRunner):
        data = Sequencer(options, runner).run().to_dict()
        assert data["status"] == "ok"
        assert data["exit_code"] == 0
        assert data["total"] == len(STEP_ORDER)
        assert [s["name"] for s in data["steps"]] == list(STEP_ORDER)
