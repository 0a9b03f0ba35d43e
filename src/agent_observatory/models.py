"""Data models for agent-observatory."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal

# 'failed' is part of the dashboard contract but no log path produces it
SessionStatus = Literal["idle", "running", "completed", "failed", "archived"]

DEFAULT_LABEL = "Main"
SUBAGENT_LABEL = "Sub-agent"
DEFAULT_MODEL = "unknown"


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ISO 8601 UTC with millisecond precision and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class SessionIdentity:
    """Identity of a session derived from its file name and session record."""
    session_id: str
    session_key: str
    is_deleted: bool


@dataclass
class SessionSummary:
    """Aggregate view of a single session log."""
    session_id: str
    session_key: str
    last_updated: datetime
    created_at: datetime
    file_path: str
    label: str = DEFAULT_LABEL
    model: str = DEFAULT_MODEL
    total_tokens: int = 0
    total_cost: float = 0.0
    status: SessionStatus = "idle"
    message_count: int = 0
    is_deleted: bool = False

    def to_dict(self) -> dict:
        """JSON-ready representation using the dashboard's field names."""
        return {
            'sessionId': self.session_id,
            'sessionKey': self.session_key,
            'label': self.label,
            'model': self.model,
            'totalTokens': self.total_tokens,
            'totalCost': self.total_cost,
            'status': self.status,
            'messageCount': self.message_count,
            'lastUpdated': format_timestamp(self.last_updated),
            'createdAt': format_timestamp(self.created_at),
            'filePath': self.file_path,
            'isDeleted': self.is_deleted,
        }


@dataclass
class FleetStats:
    """Rollup across all session logs in a directory."""
    total_sessions: int
    active_today: int
    archived_count: int
    total_tokens: int
    total_cost: float
    timestamp: datetime

    @property
    def active_sessions(self) -> int:
        return self.total_sessions - self.archived_count

    def to_dict(self) -> dict:
        return {
            'totalSessions': self.total_sessions,
            'activeToday': self.active_today,
            'archivedCount': self.archived_count,
            'activeSessions': self.active_sessions,
            'totalTokens': self.total_tokens,
            'totalCost': self.total_cost,
            'timestamp': format_timestamp(self.timestamp),
        }
