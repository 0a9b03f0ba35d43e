"""Session identity resolution from file names and session records."""

import re
from typing import Any, Iterable, Optional

from .models import SessionIdentity
from .parser import get_session_record


SESSION_EXTENSION = '.jsonl'
ARCHIVE_MARKER = '.deleted'
SESSION_KEY_PREFIX = 'agent:main:'

# Matches abc123.jsonl as well as abc123.jsonl.deleted.2026-02-11T...
_SESSION_ID_RE = re.compile(r'^([a-f0-9-]+)\.jsonl')


def extract_session_id(name: str) -> str:
    """Session ID from a log file name, or the raw name when it doesn't match."""
    match = _SESSION_ID_RE.match(name)
    return match.group(1) if match else name


def is_archived_name(name: str) -> bool:
    return ARCHIVE_MARKER in name


def _key_from_record(session_record: Optional[dict], session_id: str) -> str:
    if session_record and session_record.get('id'):
        return f"{SESSION_KEY_PREFIX}{session_record['id']}"
    return session_id


def resolve_session_key(events: Iterable[Any], session_id: str) -> str:
    """
    Namespaced key from the first session record's id.

    Falls back to the file-derived session_id when there is no session
    record or it carries no id. Stops reading at the first session record.
    """
    return _key_from_record(get_session_record(events), session_id)


def resolve_identity(name: str, events: Iterable[Any]) -> SessionIdentity:
    """Resolve identity from a file name and its decoded events."""
    session_id = extract_session_id(name)
    return SessionIdentity(
        session_id=session_id,
        session_key=resolve_session_key(events, session_id),
        is_deleted=is_archived_name(name),
    )
