"""Human-readable formatting of session summaries and fleet stats."""

from datetime import datetime, timezone
from typing import Optional


def format_tokens(tokens: int) -> str:
    """Compact token count: 950, 1.2K, 3.4M."""
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens / 1_000:.1f}K"
    return str(tokens)


def format_cost(cost: float) -> str:
    return f"${cost:.4f}"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as produced in summaries (Z suffix allowed)."""
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


def time_ago(timestamp: str, now: Optional[datetime] = None) -> str:
    """Relative age of a timestamp: just now, 5m ago, 3h ago, 2d ago."""
    if now is None:
        now = datetime.now(timezone.utc)
    diff_mins = int((now - parse_timestamp(timestamp)).total_seconds() // 60)

    if diff_mins < 1:
        return 'just now'
    if diff_mins < 60:
        return f"{diff_mins}m ago"
    if diff_mins < 1440:
        return f"{diff_mins // 60}h ago"
    return f"{diff_mins // 1440}d ago"


def format_sessions_report(payload: dict, now: Optional[datetime] = None) -> str:
    """
    Format a session listing payload as a table.

    Columns: status, label, model, tokens, cost, messages, last update.
    """
    lines = []
    sessions = payload.get('sessions', [])

    lines.append(f"Sessions ({payload.get('count', len(sessions))})")
    lines.append("=" * 50)

    if not sessions:
        lines.append("No sessions in the selected window.")
        return '\n'.join(lines)

    for s in sessions:
        lines.append(
            f"  [{s['status']:<9}] {s['label']:<24} {s['model']:<28} "
            f"{format_tokens(s['totalTokens']):>7} {format_cost(s['totalCost']):>10} "
            f"{s['messageCount']:>5} msgs  {time_ago(s['lastUpdated'], now)}"
        )

    return '\n'.join(lines)


def format_session_detail(summary: dict) -> str:
    lines = []

    lines.append(f"Session {summary['sessionId']}")
    lines.append("-" * 40)
    lines.append(f"  Key: {summary['sessionKey']}")
    lines.append(f"  Label: {summary['label']}")
    lines.append(f"  Model: {summary['model']}")
    lines.append(f"  Status: {summary['status']}")
    lines.append(f"  Tokens: {summary['totalTokens']} ({format_tokens(summary['totalTokens'])})")
    lines.append(f"  Cost: {format_cost(summary['totalCost'])}")
    lines.append(f"  Messages: {summary['messageCount']}")
    lines.append(f"  Created: {summary['createdAt']}")
    lines.append(f"  Last updated: {summary['lastUpdated']}")
    if summary.get('isDeleted'):
        lines.append("  Archived: yes")

    return '\n'.join(lines)


def format_stats_report(stats: dict, sessions: Optional[list[dict]] = None) -> str:
    """
    Format a stats payload.

    When the recent session list is supplied, running and completed
    counts are shown as well.
    """
    lines = []

    lines.append("Agent Observatory Statistics")
    lines.append("=" * 50)
    lines.append("")
    lines.append(f"  Total sessions: {stats['totalSessions']}")
    lines.append(f"    Active: {stats['activeSessions']}")
    lines.append(f"    Archived: {stats['archivedCount']}")
    lines.append(f"  Active today: {stats['activeToday']}")
    lines.append(f"  Total tokens: {format_tokens(stats['totalTokens'])}")
    lines.append(f"  Total cost: {format_cost(stats['totalCost'])}")

    if sessions is not None:
        running = sum(1 for s in sessions if s['status'] == 'running')
        completed = sum(1 for s in sessions if s['status'] == 'completed')
        lines.append("")
        lines.append(f"  Running agents: {running}")
        lines.append(f"  Completed agents: {completed}")

    lines.append("")
    lines.append(f"Generated: {stats['timestamp']}")

    return '\n'.join(lines)
