"""Tests for the knowledge-base directory loader."""

import json

import pytest

from code_review_rag.errors import IndexWriteError, RecordParseError
from code_review_rag.ingest.loader import load_knowledge_dir, parse_record
from code_review_rag.models.entry import EntryType


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


def _record(title="Use StringBuilder", **overrides):
    record = {
        "title": title,
        "type": "Best Practice",
        "description": "Concatenating strings in a loop creates garbage.",
        "example": "StringBuilder sb = new StringBuilder();",
        "reference": "Effective Java, Item 63",
        "tags": ["string", "concatenation", "performance"],
    }
    record.update(overrides)
    return record


def test_parse_record(tmp_path):
    path = tmp_path / "stringbuilder.json"
    _write(path, _record())
    entry = parse_record(path)
    assert entry.title == "Use StringBuilder"
    assert entry.type is EntryType.BEST_PRACTICE
    assert entry.tags == ["string", "concatenation", "performance"]


def test_parse_record_without_optional_fields(tmp_path):
    path = tmp_path / "minimal.json"
    _write(path, {"title": "t", "type": "Enhancement", "description": "d"})
    entry = parse_record(path)
    assert entry.example is None
    assert entry.reference is None
    assert entry.tags == []


def test_parse_record_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RecordParseError) as exc_info:
        parse_record(path)
    assert exc_info.value.source == "broken.json"


def test_parse_record_unknown_type(tmp_path):
    path = tmp_path / "bad-type.json"
    _write(path, _record(type="Opinion"))
    with pytest.raises(RecordParseError) as exc_info:
        parse_record(path)
    assert "type" in exc_info.value.reason


def test_load_skips_bad_records(tmp_path):
    _write(tmp_path / "a.json", _record("First"))
    (tmp_path / "b.json").write_text("[]", encoding="utf-8")
    _write(tmp_path / "c.json", _record("Third"))
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    result = load_knowledge_dir(tmp_path)
    assert [e.title for e in result.entries] == ["First", "Third"]
    assert [s.source for s in result.skipped] == ["b.json"]
    assert result.files == ["a.json", "b.json", "c.json"]


def test_load_is_sorted_by_file_name(tmp_path):
    _write(tmp_path / "z.json", _record("Zed"))
    _write(tmp_path / "a.json", _record("Aye"))
    assert [e.title for e in load_knowledge_dir(tmp_path).entries] == ["Aye", "Zed"]


def test_load_empty_directory(tmp_path):
    result = load_knowledge_dir(tmp_path)
    assert result.entries == []
    assert result.files == []


def test_load_missing_directory_is_fatal(tmp_path):
    with pytest.raises(IndexWriteError):
        load_knowledge_dir(tmp_path / "missing")
