"""Tests for JSONL parser module."""

import io

import pytest

from agent_observatory.parser import (
    parse_lines,
    parse_jsonl,
    get_session_record,
    extract_text_content,
)


class TestParseLines:
    """Tests for parse_lines function."""

    def test_skips_blank_and_whitespace_lines(self):
        """Blank lines are ignored, surrounding whitespace trimmed."""
        records = list(parse_lines(['', '   ', '  {"a": 1}  ', '\n']))
        assert records == [{'a': 1}]

    def test_preserves_line_order(self):
        """Output order follows input order."""
        records = list(parse_lines(['{"n": 1}', '{"n": 2}', '{"n": 3}']))
        assert [r['n'] for r in records] == [1, 2, 3]

    def test_drops_undecodable_lines_silently(self, capsys):
        """Malformed lines are skipped without output."""
        records = list(parse_lines(['{"n": 1}', 'not json', '{"n": ', '{"n": 2}']))

        assert [r['n'] for r in records] == [1, 2]
        captured = capsys.readouterr()
        assert captured.err == ''
        assert captured.out == ''

    def test_accepts_bytes(self):
        """Byte lines from a binary stream are decoded."""
        stream = io.BytesIO(b'{"type": "session", "id": "x"}\n\xff\xfe\n{"type": "message"}\n')
        records = list(parse_lines(stream))
        assert [r['type'] for r in records] == ['session', 'message']

    def test_yields_non_object_values(self):
        """Any JSON value is yielded; interpretation happens later."""
        assert list(parse_lines(['3', '"text"', 'null'])) == [3, 'text', None]


class TestParseJsonl:
    """Tests for parse_jsonl function."""

    def test_parse_valid_jsonl(self, sample_session_path):
        """Parse sample_session.jsonl correctly."""
        records = list(parse_jsonl(sample_session_path))

        assert len(records) == 7
        assert records[0]['type'] == 'session'

    def test_parse_streaming(self, sample_session_path):
        """Parsing is lazy."""
        gen = parse_jsonl(sample_session_path)
        first = next(gen)
        assert first['type'] == 'session'
        gen.close()

    def test_parse_malformed_skips_bad_lines(self, malformed_path):
        """Handle malformed.jsonl gracefully by skipping bad lines."""
        records = list(parse_jsonl(malformed_path))

        assert [r.get('id') for r in records] == ['malformed-001', 'g1', 'g2']

    def test_restartable(self, sample_session_path):
        """Separate calls share no state."""
        assert list(parse_jsonl(sample_session_path)) == list(parse_jsonl(sample_session_path))

    def test_empty_file(self, temp_dir):
        empty = temp_dir / 'empty.jsonl'
        empty.write_text('')
        assert list(parse_jsonl(empty)) == []

    def test_missing_file_raises(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            list(parse_jsonl(temp_dir / 'missing.jsonl'))


class TestGetSessionRecord:
    """Tests for get_session_record function."""

    def test_first_session_record(self, sample_session_path):
        record = get_session_record(parse_jsonl(sample_session_path))

        assert record is not None
        assert record['id'] == 'test-session-001'
        assert record['version'] == 3

    def test_missing(self):
        """Return None if no session record."""
        assert get_session_record([{'type': 'message'}, 5, None]) is None

    def test_first_wins(self):
        records = [{'type': 'session', 'id': 'a'}, {'type': 'session', 'id': 'b'}]
        assert get_session_record(records)['id'] == 'a'


class TestExtractTextContent:
    """Tests for extract_text_content function."""

    def test_joins_text_blocks(self):
        content = [
            {'type': 'text', 'text': 'one'},
            {'type': 'toolCall', 'name': 'bash'},
            {'type': 'text', 'text': 'two'},
        ]
        assert extract_text_content(content) == 'one\ntwo'

    def test_plain_string(self):
        assert extract_text_content('hello') == 'hello'

    def test_unusable_content(self):
        assert extract_text_content(None) == ''
        assert extract_text_content({'type': 'text'}) == ''
        assert extract_text_content([{'type': 'text', 'text': 7}]) == ''
