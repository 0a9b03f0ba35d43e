"""CLI entry point for agent-observatory."""

import sys
from pathlib import Path
import json

import click

from .api import get_session_payload, get_stats_payload, list_sessions_payload
from .report import format_session_detail, format_sessions_report, format_stats_report
from .sessions import DEFAULT_ACTIVE_MINUTES


# Default path for OpenClaw
def get_default_sessions_dir() -> Path:
    return Path.home() / '.openclaw' / 'agents' / 'main' / 'sessions'


def resolve_sessions_dir(sessions_dir) -> Path:
    return Path(sessions_dir) if sessions_dir else get_default_sessions_dir()


def _fail(payload: dict) -> None:
    click.echo(f"Error: {payload['error']}", err=True)
    sys.exit(1)


sessions_dir_option = click.option(
    "--sessions-dir", envvar="SESSIONS_DIR", default=None,
    help="Path to session logs directory (env: SESSIONS_DIR)",
)
format_option = click.option(
    "--format", "output_format", default="text", type=click.Choice(['text', 'json']),
    help="Output format",
)


@click.group()
@click.version_option(package_name="agent-observatory")
def main():
    """Agent Observatory - OpenClaw session summaries and fleet statistics."""
    pass


@main.command(name="list")
@click.option("--active-minutes", default=DEFAULT_ACTIVE_MINUTES, type=click.IntRange(min=1),
              help="Only sessions updated within this many minutes")
@click.option("--include-archived/--exclude-archived", default=True,
              help="Include archived (.deleted) sessions")
@format_option
@sessions_dir_option
def list_command(active_minutes, include_archived, output_format, sessions_dir):
    """List recent sessions, newest first."""
    sessions_path = resolve_sessions_dir(sessions_dir)

    status, payload = list_sessions_payload(
        sessions_path, active_minutes=active_minutes, include_archived=include_archived
    )
    if status != 200:
        _fail(payload)

    if output_format == 'json':
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(format_sessions_report(payload))


@main.command()
@click.argument("session_id")
@format_option
@sessions_dir_option
def show(session_id, output_format, sessions_dir):
    """Show one session, falling back to its archived log."""
    sessions_path = resolve_sessions_dir(sessions_dir)

    status, payload = get_session_payload(sessions_path, session_id)
    if status != 200:
        _fail(payload)

    if output_format == 'json':
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(format_session_detail(payload))


@main.command()
@format_option
@sessions_dir_option
def stats(output_format, sessions_dir):
    """Show fleet-wide totals across all sessions."""
    sessions_path = resolve_sessions_dir(sessions_dir)

    status, payload = get_stats_payload(sessions_path)
    if status != 200:
        _fail(payload)

    if output_format == 'json':
        click.echo(json.dumps(payload, indent=2))
        return

    # Running/completed counts come from the default 24h listing
    list_status, listing = list_sessions_payload(sessions_path)
    sessions = listing['sessions'] if list_status == 200 else None
    click.echo(format_stats_report(payload, sessions))


if __name__ == "__main__":
    main()
