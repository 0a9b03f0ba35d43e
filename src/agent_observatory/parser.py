"""JSONL session log parser."""

from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Union
import json


def parse_lines(lines: Iterable[Union[str, bytes]]) -> Iterator[Any]:
    """
    Decode newline-delimited JSON, yielding one value per decodable line.

    Blank lines are skipped. Lines that fail to decode are dropped without
    a warning: a log being appended to by another process routinely ends
    with a partial line.
    """
    for line in lines:
        if isinstance(line, bytes):
            line = line.decode('utf-8', errors='replace')
        line = line.strip()
        if not line:
            continue
        try:
            yield json.loads(line)
        except ValueError:
            continue


def parse_jsonl(path: Path) -> Iterator[Any]:
    """
    Stream parse a JSONL file, yielding records.

    Memory-efficient: processes line-by-line without loading entire file.
    """
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        yield from parse_lines(f)


def get_session_record(events: Iterable[Any]) -> Optional[dict]:
    """
    Return the first record with type "session".

    Returns None if no session record found.
    """
    for record in events:
        if isinstance(record, dict) and record.get('type') == 'session':
            return record
    return None


def extract_text_content(content: Any) -> str:
    """Extract text from a message content array (or a bare string)."""
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ''
    texts = []
    for block in content:
        if isinstance(block, dict) and block.get('type') == 'text':
            text = block.get('text', '')
            if isinstance(text, str) and text:
                texts.append(text)
    return '\n'.join(texts)
