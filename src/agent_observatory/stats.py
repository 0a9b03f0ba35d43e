"""Fleet-wide statistics across session logs."""

from datetime import datetime, time, timezone
from pathlib import Path
from typing import Iterable, Optional
import sys

from .identity import SESSION_EXTENSION, is_archived_name
from .models import FleetStats, SessionSummary
from .sessions import is_excluded_name, list_directory
from .summarize import summarize_session_file


def local_midnight(now: Optional[datetime] = None) -> datetime:
    """Start of the current day in the local timezone, as an aware datetime."""
    if now is None:
        now = datetime.now(timezone.utc)
    local_date = now.astimezone().date()
    # Offset resolved for midnight itself, which differs on DST change days
    return datetime.combine(local_date, time.min).astimezone()


def compute_stats(sessions_dir: Path, now: Optional[datetime] = None) -> FleetStats:
    """
    Roll up every session log in a directory, active and archived.

    A file whose metadata was read is always counted. If summarizing it
    fails, it is reported on stderr and left out of the token and cost
    totals.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    today = local_midnight(now).timestamp()

    total_sessions = 0
    active_today = 0
    archived_count = 0
    total_tokens = 0
    total_cost = 0.0

    for session_file in list_directory(sessions_dir):
        name = session_file.name
        if SESSION_EXTENSION not in name or is_excluded_name(name):
            continue

        try:
            mtime = session_file.stat().st_mtime
        except OSError as e:
            print(f"Warning: Cannot stat {name} ({type(e).__name__}: {e})", file=sys.stderr)
            continue

        total_sessions += 1
        if is_archived_name(name):
            archived_count += 1
        if mtime >= today:
            active_today += 1

        try:
            summary = summarize_session_file(session_file)
        except Exception as e:
            print(f"Warning: Skipping {name} in totals ({type(e).__name__}: {e})", file=sys.stderr)
            continue
        total_tokens += summary.total_tokens
        total_cost += summary.total_cost

    return FleetStats(
        total_sessions=total_sessions,
        active_today=active_today,
        archived_count=archived_count,
        total_tokens=total_tokens,
        total_cost=total_cost,
        timestamp=now,
    )


def aggregate_summaries(
    summaries: Iterable[SessionSummary],
    now: Optional[datetime] = None,
) -> FleetStats:
    """Same rollup as compute_stats over summaries that are already built."""
    if now is None:
        now = datetime.now(timezone.utc)
    today = local_midnight(now)

    total_sessions = 0
    active_today = 0
    archived_count = 0
    total_tokens = 0
    total_cost = 0.0

    for summary in summaries:
        total_sessions += 1
        if summary.is_deleted:
            archived_count += 1
        if summary.last_updated >= today:
            active_today += 1
        total_tokens += summary.total_tokens
        total_cost += summary.total_cost

    return FleetStats(
        total_sessions=total_sessions,
        active_today=active_today,
        archived_count=archived_count,
        total_tokens=total_tokens,
        total_cost=total_cost,
        timestamp=now,
    )
