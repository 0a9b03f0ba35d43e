"""Read operations returning (status_code, JSON-ready payload).

These back the list / get / stats endpoints. Transport (routing, headers,
JSON encoding) belongs to whatever serves them.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .sessions import (
    DEFAULT_ACTIVE_MINUTES,
    MAX_ACTIVE_MINUTES,
    SessionNotFoundError,
    get_session,
    list_sessions,
)
from .stats import compute_stats


Response = tuple[int, dict]


def parse_active_minutes(value: Any) -> int:
    """
    Lenient recency window: missing, non-numeric or non-positive means 24h.

    Values too large to represent (including infinity) mean everything.
    """
    try:
        minutes = int(value)
    except OverflowError:
        return MAX_ACTIVE_MINUTES
    except (TypeError, ValueError):
        return DEFAULT_ACTIVE_MINUTES
    if minutes <= 0:
        return DEFAULT_ACTIVE_MINUTES
    return min(minutes, MAX_ACTIVE_MINUTES)


def parse_include_archived(value: Any) -> bool:
    """Archived sessions are included unless explicitly turned off."""
    if value is False:
        return False
    return not (isinstance(value, str) and value.strip().lower() == 'false')


def _error(status: int, message: str) -> Response:
    return status, {'error': message}


def list_sessions_payload(
    sessions_dir: Path,
    active_minutes: Any = None,
    include_archived: Any = None,
    now: Optional[datetime] = None,
) -> Response:
    try:
        sessions = list_sessions(
            sessions_dir,
            active_minutes=parse_active_minutes(active_minutes),
            include_archived=parse_include_archived(include_archived),
            now=now,
        )
    except Exception as e:
        return _error(500, str(e))

    return 200, {
        'count': len(sessions),
        'sessions': [s.to_dict() for s in sessions],
    }


def get_session_payload(sessions_dir: Path, session_id: str) -> Response:
    try:
        summary = get_session(sessions_dir, session_id)
    except SessionNotFoundError:
        return _error(404, 'Session not found')
    except Exception as e:
        return _error(500, str(e))
    return 200, summary.to_dict()


def get_stats_payload(sessions_dir: Path, now: Optional[datetime] = None) -> Response:
    try:
        stats = compute_stats(sessions_dir, now=now)
    except Exception as e:
        return _error(500, str(e))
    return 200, stats.to_dict()
