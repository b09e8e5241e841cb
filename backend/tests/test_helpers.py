from datetime import datetime

import pytest

from app.utils.helpers import (
    ensure_json_filename,
    safe_id,
    safe_session_filename,
    session_filename,
    template_filename,
)


def test_safe_id_keeps_safe_ids():
    assert safe_id("interview_01-a") == "interview_01-a"
    assert safe_id(safe_id("a b/c")) == safe_id("a b/c")


def test_safe_id_blocks_traversal():
    value = safe_id("a/../b")
    assert "/" not in value
    assert "\\" not in value
    assert ".." not in value
    assert value == "a____b"


def test_safe_id_none_is_empty():
    assert safe_id(None) == ""


def test_template_filename_appends_suffix():
    assert template_filename("career talk") == "career_talk.json"


def test_ensure_json_filename():
    assert ensure_json_filename("hearing_1") == "hearing_1.json"
    assert ensure_json_filename("hearing_1.json") == "hearing_1.json"
    with pytest.raises(ValueError):
        ensure_json_filename("")


def test_safe_session_filename():
    assert safe_session_filename("hearing_20250101_120000.json") == "hearing_20250101_120000.json"
    assert safe_session_filename("hearing_20250101_120000") == "hearing_20250101_120000.json"
    cleaned = safe_session_filename("../../etc/passwd")
    assert "/" not in cleaned
    assert ".." not in cleaned
    assert cleaned.endswith(".json")


def test_session_filename_format():
    name = session_filename(datetime(2025, 10, 22, 15, 30, 45))
    assert name == "hearing_20251022_153045.json"
