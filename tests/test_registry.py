import json
import os
import stat
from datetime import datetime, timezone

import pytest

from models import ChapterRecord, LoadStatus
from registry import (
    derive_chapter_key,
    load_registry,
    lookup_url,
    new_record,
    save_registry,
    upsert,
    utc_timestamp,
)


@pytest.mark.parametrize("file_name, expected", [
    ("06-app-vector-algebra_standalone.html", "06-app-vector-algebra"),
    ("06-app-vector-algebra_standalone.htm", "06-app-vector-algebra"),
    ("06-app-vector-algebra_STANDALONE.HTML", "06-app-vector-algebra"),
    ("06-app-vector-algebra.html", "06-app-vector-algebra"),
    ("intro.HTM", "intro"),
    ("notes.txt", "notes.txt"),
    ("nested/dir/07-matrices_standalone.html", "07-matrices"),
])
def test_derive_chapter_key(file_name, expected):
    assert derive_chapter_key(file_name) == expected


def test_derive_chapter_key_is_deterministic():
    name = "06-app-vector-algebra_Standalone.Html"
    assert {derive_chapter_key(name) for _ in range(5)} == {"06-app-vector-algebra"}


def test_upsert_overwrites_never_merges():
    mappings = {}
    first = ChapterRecord("a-1.html", "html/a-1.html", "https://b.s3.amazonaws.com/html/a-1.html", "t1")
    second = ChapterRecord("a-2.html", "html/a-2.html", "https://b.s3.amazonaws.com/html/a-2.html", "t2")

    assert upsert(mappings, "a", first) is None
    assert upsert(mappings, "a", second) is first
    assert mappings == {"a": second}


def test_load_absent(mappings_path):
    loaded = load_registry(mappings_path)
    assert loaded.status is LoadStatus.ABSENT
    assert loaded.mappings == {}


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", '{"ch": "just a string"}'])
def test_load_corrupt_warns_and_starts_empty(mappings_path, capsys, content):
    mappings_path.parent.mkdir(parents=True)
    mappings_path.write_text(content, encoding="utf-8")

    loaded = load_registry(mappings_path)

    assert loaded.status is LoadStatus.CORRUPT
    assert loaded.mappings == {}
    assert "Warning" in capsys.readouterr().out


def test_save_then_load_round_trip(mappings_path):
    mappings = {
        "06-app-vector-algebra": ChapterRecord(
            file_name="06-app-vector-algebra_standalone-1234.html",
            s3_key="html/STATE_BOARD_CHAPTERS/06-app-vector-algebra_standalone-1234.html",
            url="https://bucket.s3.amazonaws.com/html/STATE_BOARD_CHAPTERS/06-app-vector-algebra_standalone-1234.html",
            last_updated="2026-01-02T03:04:05.678Z",
        ),
        "07-matrices": ChapterRecord("07.html", "07.html", "https://bucket.s3.amazonaws.com/07.html", "t"),
    }
    assert save_registry(mappings, mappings_path)

    loaded = load_registry(mappings_path)
    assert loaded.status is LoadStatus.LOADED
    assert loaded.mappings == mappings

    assert save_registry(loaded.mappings, mappings_path)
    assert load_registry(mappings_path).mappings == mappings


def test_saved_document_uses_flat_camel_case_layout(mappings_path):
    save_registry({"ch": ChapterRecord("f.html", "p/f.html", "https://b.s3.amazonaws.com/p/f.html", "t")}, mappings_path)

    data = json.loads(mappings_path.read_text(encoding="utf-8"))
    assert data == {
        "ch": {
            "fileName": "f.html",
            "s3Key": "p/f.html",
            "url": "https://b.s3.amazonaws.com/p/f.html",
            "lastUpdated": "t",
        }
    }
    assert not list(mappings_path.parent.glob("*.tmp"))


def test_save_failure_reports_and_returns_false(tmp_path, capsys):
    # Parent "directory" is a regular file, so the write cannot succeed.
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    assert save_registry({}, blocker / "chapter-mappings.json") is False
    assert "ERROR" in capsys.readouterr().out


def test_new_record_timestamp_format():
    now = datetime(2026, 10, 19, 8, 30, 15, 123456, tzinfo=timezone.utc)
    record = new_record("f.html", "k/f.html", "https://b.s3.amazonaws.com/k/f.html", now=now)
    assert record.last_updated == "2026-10-19T08:30:15.123Z"
    assert utc_timestamp().endswith("Z")


def test_lookup_url(mappings_path):
    save_registry({"ch": ChapterRecord("f.html", "f.html", "https://b.s3.amazonaws.com/f.html", "t")}, mappings_path)
    assert lookup_url(mappings_path, "ch") == "https://b.s3.amazonaws.com/f.html"
    assert lookup_url(mappings_path, "missing") is None


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
@pytest.mark.parametrize("mode", [0o644, 0o640])
def test_save_keeps_existing_file_mode(mappings_path, mode):
    save_registry({}, mappings_path)
    os.chmod(mappings_path, mode)

    save_registry({"ch": ChapterRecord("f.html", "f.html", "https://b.s3.amazonaws.com/f.html", "t")}, mappings_path)

    assert stat.S_IMODE(mappings_path.stat().st_mode) == mode


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_new_file_gets_umask_default_mode(mappings_path):
    umask = os.umask(0o022)
    try:
        save_registry({}, mappings_path)
    finally:
        os.umask(umask)

    assert stat.S_IMODE(mappings_path.stat().st_mode) == 0o644


def test_null_fields_load_as_empty_strings(mappings_path):
    mappings_path.parent.mkdir(parents=True)
    mappings_path.write_text(
        json.dumps({"ch": {"fileName": None, "s3Key": "k.html", "url": None, "lastUpdated": None}}),
        encoding="utf-8",
    )

    record = load_registry(mappings_path).mappings["ch"]

    assert record == ChapterRecord(file_name="", s3_key="k.html", url="", last_updated="")
