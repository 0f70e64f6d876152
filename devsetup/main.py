"""
devsetup — CLI entrypoint.

Usage:
    devsetup
    devsetup --force
    python -m devsetup --root path/to/app --json
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from devsetup import __version__
from devsetup.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)

_STATUS_STYLE = {
    "succeeded": ("✅", "green"),
    "skipped": ("⊘ ", "blue"),
    "failed": ("❌", "red"),
}


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="devsetup")
@click.option("--force", "-f", is_flag=True, help="Re-run all install and migrate steps unconditionally.")
@click.option(
    "--root",
    "root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root holding server/ and client/ (default: current directory).",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to devsetup.yml (default: <root>/devsetup.yml if present).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the report as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
def cli(
    force: bool,
    root: Path | None,
    config_path: Path | None,
    as_json: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """Idempotent development environment setup.

    Installs server and client dependencies only when needed, creates
    .env files only if missing, ensures log/upload directories, and
    runs Prisma generate/migrate when a schema exists.
    """
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )

    from devsetup.core.use_cases.setup import run_setup

    if not as_json and not quiet:
        click.secho("🚀 Idempotent Setup", fg="cyan", bold=True)
        click.echo("================================")

    try:
        result = run_setup(project_root=root, config_path=config_path, force=force)
    except KeyboardInterrupt:
        click.secho("\n❌ Interrupted", fg="red", err=True)
        sys.exit(130)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    assert report is not None

    if report.fatal_error:
        for outcome in report.outcomes:
            _echo_outcome(outcome.name, outcome.status, outcome.detail)
        click.secho(f"❌ {report.fatal_error}", fg="red", bold=True)
        sys.exit(report.exit_code)

    click.echo()
    for outcome in report.outcomes:
        if quiet and not outcome.failed:
            continue
        _echo_outcome(outcome.name, outcome.status, outcome.detail)

    click.echo()
    click.echo("==========================================")
    color = "green" if report.failed == 0 else "yellow"
    click.secho(
        f"✅ Setup finished: {report.succeeded} done, {report.skipped} skipped, {report.failed} failed",
        fg=color,
        bold=True,
    )
    click.echo("==========================================")

    if not quiet:
        config = result.options.config if result.options else None
        server_dir = config.server_dir if config else "server"
        client_dir = config.client_dir if config else "client"
        click.echo("\nNext steps:")
        click.echo(f"1) Inspect and edit {server_dir}/.env and {client_dir}/.env as needed.")
        click.echo(f"2) Start the server: cd {server_dir} && npm run dev")
        click.echo(f"3) Start the client: cd {client_dir} && npm run dev")
        click.echo("\nTo force reinstall dependencies, re-run with --force:\n  devsetup --force")

    sys.exit(report.exit_code)


def _echo_outcome(name: str, status: str, detail: str) -> None:
    icon, color = _STATUS_STYLE.get(status, ("  ", "white"))
    click.secho(f"   {icon} {name}", fg=color, nl=False)
    click.echo(f"  {detail}" if detail else "")


if __name__ == "__main__":
    cli()
