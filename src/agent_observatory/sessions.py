"""Session discovery, listing and lookup."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional
import sys

from .identity import ARCHIVE_MARKER, SESSION_EXTENSION
from .models import SessionSummary
from .summarize import summarize_session_file


DEFAULT_ACTIVE_MINUTES = 1440  # 24 hours
MAX_ACTIVE_MINUTES = 100 * 365 * 1440  # windows beyond this include everything

ARCHIVED_PATTERN = f"{SESSION_EXTENSION}{ARCHIVE_MARKER}"


class SessionStoreError(OSError):
    """The sessions directory itself is missing or unreadable."""


class SessionNotFoundError(LookupError):
    """No active or archived log matches the requested session ID."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


def is_excluded_name(name: str) -> bool:
    """Lock files and JSON sidecar files are never session logs."""
    return name.endswith('.lock') or name.endswith('.json')


def is_session_log_name(name: str, include_archived: bool = True) -> bool:
    if is_excluded_name(name):
        return False
    if name.endswith(SESSION_EXTENSION):
        return True
    return include_archived and ARCHIVED_PATTERN in name


def list_directory(sessions_dir: Path) -> list[Path]:
    """
    List directory entries, raising SessionStoreError when the store is unusable.
    """
    sessions_dir = Path(sessions_dir)
    if not sessions_dir.is_dir():
        raise SessionStoreError(f"Sessions directory not found: {sessions_dir}")
    try:
        return sorted(sessions_dir.iterdir())
    except OSError as e:
        raise SessionStoreError(f"Cannot read sessions directory {sessions_dir}: {e}") from e


def find_session_files(sessions_dir: Path, include_archived: bool = True) -> list[Path]:
    """
    Find session log files in a directory.

    Includes *.jsonl files and, when include_archived is set, archived
    *.jsonl.deleted.<timestamp> files. Excludes .lock and .json files.
    """
    return [
        f for f in list_directory(sessions_dir)
        if is_session_log_name(f.name, include_archived) and f.is_file()
    ]


def list_sessions(
    sessions_dir: Path,
    active_minutes: int = DEFAULT_ACTIVE_MINUTES,
    include_archived: bool = True,
    now: Optional[datetime] = None,
) -> list[SessionSummary]:
    """
    Summarize every session log modified within the recency window.

    A file that cannot be summarized is reported on stderr and skipped.

    Returns summaries sorted by last update, newest first.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    active_minutes = min(active_minutes, MAX_ACTIVE_MINUTES)
    cutoff = (now - timedelta(minutes=active_minutes)).timestamp()

    sessions: list[SessionSummary] = []
    for session_file in find_session_files(sessions_dir, include_archived):
        try:
            if session_file.stat().st_mtime < cutoff:
                continue
            sessions.append(summarize_session_file(session_file))
        except Exception as e:
            print(f"Warning: Skipping {session_file.name} ({type(e).__name__}: {e})", file=sys.stderr)

    sessions.sort(key=lambda s: s.last_updated, reverse=True)
    return sessions


def resolve_session_file(sessions_dir: Path, session_id: str) -> Optional[Path]:
    """
    Locate the log for a session ID.

    Prefers the active <id>.jsonl; otherwise the newest archived
    <id>.jsonl.deleted.* variant. Returns None when neither exists.
    """
    if not session_id or session_id in ('.', '..') or '/' in session_id or '\\' in session_id:
        return None

    sessions_dir = Path(sessions_dir)
    active = sessions_dir / f"{session_id}{SESSION_EXTENSION}"
    if active.is_file():
        return active

    prefix = f"{session_id}{ARCHIVED_PATTERN}"
    archived = [f for f in list_directory(sessions_dir) if f.name.startswith(prefix) and f.is_file()]
    if not archived:
        return None
    # Archival timestamps sort lexically, so the last name is the newest
    return max(archived, key=lambda p: p.name)


def get_session(sessions_dir: Path, session_id: str) -> SessionSummary:
    """
    Summarize a single session by ID.

    Raises:
        SessionNotFoundError: no active or archived log for the ID
    """
    session_file = resolve_session_file(sessions_dir, session_id)
    if session_file is None:
        raise SessionNotFoundError(session_id)
    return summarize_session_file(session_file)
