import json

import pytest

from conftest import output
from pyslate.cache import commands
from pyslate.cache.record import CacheRecord, dumps


def seed_expired(store, clock, name):
    store.root.mkdir(parents=True, exist_ok=True)
    record = CacheRecord(data=json.dumps({"translation": ["旧"]}), created_at=clock.now - 10_000)
    store.path(name).write_text(dumps(record), encoding="utf-8")


@pytest.mark.parametrize(
    "size, expected",
    [(0, "0B"), (233, "233B"), (999, "999B"), (1000, "1.0KB"), (1024, "1.0KB"),
     (1124, "1.1KB"), (1 << 20, "1.0MB"), (1 << 32, "4.0GB"), (1 << 42, "4096.0GB")],
)
def test_fmt_size(size, expected):
    assert commands.fmt_size(size) == expected


def test_clean_removes_everything(store, console):
    for i in range(5):
        store.set(f"entry-{i}", {"translation": [str(i)]})

    assert commands.clean_cache(store, console) == 5

    assert list(store.root.iterdir()) == []
    assert output(console).startswith("Removed 5/5 file(s), ")


def test_purge_keeps_valid_entries(store, clock, console):
    for i in range(3):
        seed_expired(store, clock, f"expired-{i}")
    store.set("valid-0", {"translation": ["a"]})
    store.set("valid-1", {"translation": ["b"]})

    assert commands.purge_cache(store, console) == 3

    assert sorted(p.name for p in store.root.iterdir()) == ["valid-0", "valid-1"]
    assert output(console).startswith("Removed 3/5 file(s), ")


def test_list_marks_validity(store, clock, console):
    store.set("good", {"translation": ["a"]})
    seed_expired(store, clock, "stale")

    assert commands.list_cache(store, console) == 1

    lines = output(console).splitlines()
    assert lines[0].startswith("✔") and lines[0].endswith(" good")
    assert lines[1].startswith("✘") and lines[1].endswith(" stale")
    assert lines[2].startswith("1/2 valid file(s), ")
    # listing never deletes
    assert store.path("stale").exists()


def test_list_on_missing_directory(store, console):
    assert commands.list_cache(store, console) == 0
    assert output(console) == "0/0 valid file(s), 0B in total.\n"


def test_view_renders_with_recorded_translator(store, console):
    store.set("abcdef", {"sentences": [{"trans": "你好"}]}, translator="google")
    assert commands.view_cache(store, "abc", console) == 1
    text = output(console)
    assert "abcdef" in text and "你好" in text


def test_view_unknown_translator_prints_json(store, console):
    store.set("abcdef", {"answer": 42})
    assert commands.view_cache(store, "abcdef", console) == 1
    assert '"answer": 42' in output(console)


def test_view_reports_expired_without_deleting(store, clock, console):
    seed_expired(store, clock, "stale")
    assert commands.view_cache(store, "st", console) == 0
    assert "CacheExpired" in output(console)
    assert store.path("stale").exists()


def test_view_no_match(store, console):
    assert commands.view_cache(store, "nothing", console) == 0
    assert "No cache file matches" in output(console)
