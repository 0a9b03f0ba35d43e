"""Pytest fixtures for agent-observatory tests."""

import json
import os
import shutil
import tempfile
import time
from pathlib import Path

import pytest


# Hex-style names so session IDs resolve the way real OpenClaw logs do
SAMPLE_ID = '0a1b2c3d-0000-4000-8000-000000000001'
SUBAGENT_ID = '0a1b2c3d-0000-4000-8000-000000000002'
MALFORMED_ID = '0a1b2c3d-0000-4000-8000-000000000003'


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / 'fixtures'


@pytest.fixture
def sample_session_path(fixtures_dir) -> Path:
    """Main-agent session with usage, tool calls and a model snapshot."""
    return fixtures_dir / 'sample_session.jsonl'


@pytest.fixture
def subagent_session_path(fixtures_dir) -> Path:
    """Sub-agent session whose label lives in the task instructions."""
    return fixtures_dir / 'subagent_session.jsonl'


@pytest.fixture
def malformed_path(fixtures_dir) -> Path:
    """Path to the malformed JSONL file."""
    return fixtures_dir / 'malformed.jsonl'


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir)


@pytest.fixture
def sessions_dir(temp_dir) -> Path:
    """Empty sessions directory."""
    path = temp_dir / 'sessions'
    path.mkdir()
    return path


@pytest.fixture
def make_session(sessions_dir):
    """
    Factory writing a session log into sessions_dir.

    Records are written one per line: dicts as JSON, strings verbatim.
    age_minutes backdates the file's modification time.
    """
    def _make(name: str, records=(), age_minutes: float = 0) -> Path:
        path = sessions_dir / name
        lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
        path.write_text('\n'.join(lines) + ('\n' if lines else ''), encoding='utf-8')
        mtime = time.time() - age_minutes * 60
        os.utime(path, (mtime, mtime))
        return path

    return _make


@pytest.fixture
def temp_sessions_dir(sessions_dir, fixtures_dir) -> Path:
    """Sessions directory holding the fixture logs under hex session IDs."""
    for fixture_name, session_id in (
        ('sample_session.jsonl', SAMPLE_ID),
        ('subagent_session.jsonl', SUBAGENT_ID),
        ('malformed.jsonl', MALFORMED_ID),
    ):
        shutil.copy(fixtures_dir / fixture_name, sessions_dir / f"{session_id}.jsonl")
    return sessions_dir


def message(tokens=None, cost=None, model=None, stop_reason=None, content=None) -> dict:
    """Build a message record with only the fields given."""
    msg: dict = {'role': 'assistant'}
    usage: dict = {}
    if tokens is not None:
        usage['totalTokens'] = tokens
    if cost is not None:
        usage['cost'] = {'total': cost}
    if usage:
        msg['usage'] = usage
    if model is not None:
        msg['model'] = model
    if stop_reason is not None:
        msg['stopReason'] = stop_reason
    if content is not None:
        msg['content'] = content
    return {'type': 'message', 'message': msg}
