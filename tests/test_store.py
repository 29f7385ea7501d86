from __future__ import annotations

import os

from resume_chat.store import ResumeStore


def test_list_orders_newest_first_and_skips_other_files(tmp_path):
    store = ResumeStore(tmp_path / "cvs")
    store.save("older", b"%PDF-old")
    store.save("newer", b"%PDF-newer")
    os.utime(store.pdf_path("older"), (1_000, 1_000))
    os.utime(store.pdf_path("newer"), (2_000, 2_000))
    (tmp_path / "cvs" / "notes.txt").write_text("ignored")

    items = store.list()

    assert [item.id for item in items] == ["newer", "older"]
    assert items[0].size == len(b"%PDF-newer")
    assert items[0].mtime_ms == 2_000_000


def test_list_merges_metadata_and_thumbnail_flag(tmp_path):
    store = ResumeStore(tmp_path)
    store.save("jane", b"%PDF")
    store.thumbnail_path("jane").write_bytes(b"png")
    store.write_metadata("jane", {"email": "jane@example.com", "hasThumbnail": False})

    (item,) = store.list()
    data = item.to_dict()

    assert item.has_thumbnail is True
    assert data["name"] == "jane.pdf"
    assert data["email"] == "jane@example.com"
    assert data["hasThumbnail"] is False


def test_malformed_metadata_is_ignored(tmp_path):
    store = ResumeStore(tmp_path)
    store.save("broken", b"%PDF")
    store.metadata_path("broken").write_text("{not json")

    (item,) = store.list()

    assert item.metadata == {}


def test_list_creates_missing_directory(tmp_path):
    store = ResumeStore(tmp_path / "missing")

    assert store.list() == []
    assert (tmp_path / "missing").is_dir()


def test_resolve(tmp_path):
    store = ResumeStore(tmp_path / "cvs")
    path = store.save("jane", b"%PDF")
    (tmp_path / "secret.pdf").write_bytes(b"%PDF")

    assert store.resolve("jane") == path
    assert store.resolve("john") is None
    assert store.resolve("../secret") is None
    assert store.resolve("") is None
