"""Fold a session's event stream into a SessionSummary."""

from contextlib import closing
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional
import math
import re

from .identity import resolve_identity
from .models import (
    DEFAULT_LABEL,
    DEFAULT_MODEL,
    SUBAGENT_LABEL,
    SessionIdentity,
    SessionStatus,
    SessionSummary,
)
from .parser import extract_text_content, parse_jsonl


SUBAGENT_MARKER = 'subagent'
TASK_MARKER = 'Your Task'
TOOL_USE_STOP_REASON = 'toolUse'
MODEL_SNAPSHOT_TYPE = 'model-snapshot'

_TASK_LABEL_RE = re.compile(r'label[\'":\s]+([^\'"}\n]+)', re.IGNORECASE)


@dataclass
class SessionScan:
    """Accumulator filled by a single pass over a session's events."""
    total_tokens: int = 0
    total_cost: float = 0.0
    model: str = DEFAULT_MODEL
    last_status: SessionStatus = "idle"
    message_count: int = 0
    custom_label: Optional[str] = None
    task_text: Optional[str] = None
    snapshot_seen: bool = False
    snapshot_model: Optional[str] = None


def _amount(value: Any) -> float:
    """Usable non-negative number, or 0 for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    try:
        as_float = float(value)
    except OverflowError:
        # JSON integers can exceed float range
        return 0
    if not math.isfinite(as_float) or as_float < 0:
        return 0
    return value


def _fold_message(scan: SessionScan, msg: Any) -> None:
    scan.message_count += 1
    if not isinstance(msg, dict):
        return

    usage = msg.get('usage')
    if isinstance(usage, dict):
        scan.total_tokens += int(_amount(usage.get('totalTokens')))
        cost = usage.get('cost')
        if isinstance(cost, dict):
            scan.total_cost += _amount(cost.get('total'))

    model = msg.get('model')
    if isinstance(model, str) and model:
        scan.model = model

    stop_reason = msg.get('stopReason')
    if stop_reason:
        scan.last_status = 'running' if stop_reason == TOOL_USE_STOP_REASON else 'completed'


def scan_events(events: Iterable[Any]) -> SessionScan:
    """
    Fold events into a SessionScan in one pass.

    Totals, model and stop-reason status are last-write-wins over message
    events with a non-null payload. The custom label, task text and model
    snapshot keep the first occurrence only.
    """
    scan = SessionScan()

    for record in events:
        if not isinstance(record, dict):
            continue
        record_type = record.get('type')

        if record_type == 'message':
            msg = record.get('message')
            if msg is not None:
                _fold_message(scan, msg)
            if scan.task_text is None and isinstance(msg, dict):
                text = extract_text_content(msg.get('content'))
                if TASK_MARKER in text:
                    scan.task_text = text

        elif record_type == 'custom':
            data = record.get('data')
            if not isinstance(data, dict):
                data = {}

            label = data.get('label')
            if scan.custom_label is None and isinstance(label, str) and label:
                scan.custom_label = label

            if record.get('customType') == MODEL_SNAPSHOT_TYPE and not scan.snapshot_seen:
                scan.snapshot_seen = True
                model_id = data.get('modelId')
                if isinstance(model_id, str) and model_id:
                    scan.snapshot_model = model_id

    return scan


def extract_task_label(text: str) -> Optional[str]:
    """
    Pull a label out of free-text sub-agent task instructions.

    Returns None when the text has no task marker or no usable label.
    """
    if not isinstance(text, str) or TASK_MARKER not in text:
        return None
    match = _TASK_LABEL_RE.search(text)
    if not match:
        return None
    label = match.group(1).strip()
    return label or None


def resolve_label(scan: SessionScan, session_key: str) -> str:
    if scan.custom_label:
        return scan.custom_label
    if SUBAGENT_MARKER in session_key:
        return extract_task_label(scan.task_text or '') or SUBAGENT_LABEL
    return DEFAULT_LABEL


def resolve_status(scan: SessionScan, is_deleted: bool) -> SessionStatus:
    if is_deleted:
        return 'archived'
    if scan.total_tokens == 0:
        return 'idle'
    return scan.last_status


def summarize_events(
    events: Iterable[Any],
    identity: SessionIdentity,
    last_updated: datetime,
    created_at: datetime,
    file_path: str = '',
) -> SessionSummary:
    """
    Build a SessionSummary from decoded events and file metadata.

    Args:
        events: Decoded log records, in file order
        identity: Session ID, key and archive flag for the log
        last_updated: File modification time
        created_at: File creation time
        file_path: Path reported back in the summary
    """
    scan = scan_events(events)

    return SessionSummary(
        session_id=identity.session_id,
        session_key=identity.session_key,
        label=resolve_label(scan, identity.session_key),
        model=scan.snapshot_model or scan.model,
        total_tokens=scan.total_tokens,
        total_cost=scan.total_cost,
        status=resolve_status(scan, identity.is_deleted),
        message_count=scan.message_count,
        last_updated=last_updated,
        created_at=created_at,
        file_path=file_path,
        is_deleted=identity.is_deleted,
    )


def get_file_times(path: Path) -> tuple[datetime, datetime]:
    """
    Return (modified, created) times for a file as UTC datetimes.

    Creation time uses st_birthtime where the platform records it,
    otherwise st_ctime.
    """
    st = path.stat()
    created = getattr(st, 'st_birthtime', None) or st.st_ctime
    return (
        datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        datetime.fromtimestamp(created, tz=timezone.utc),
    )


def summarize_session_file(path: Path) -> SessionSummary:
    """
    Summarize one session log, streaming its lines.

    The identity pass stops at the session record, normally the first line;
    the summary pass then streams the whole file.
    """
    path = Path(path)
    last_updated, created_at = get_file_times(path)
    with closing(parse_jsonl(path)) as events:
        identity = resolve_identity(path.name, events)
    return summarize_events(
        parse_jsonl(path),
        identity,
        last_updated=last_updated,
        created_at=created_at,
        file_path=str(path),
    )
