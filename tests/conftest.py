import io
import os

import pytest
from rich.console import Console

from pyslate.cache.store import CacheStore
from pyslate.config import ProviderConfig
from pyslate.errors import ProviderError
from pyslate.translators.base import Translator

NOW = 1_700_000_000


class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


class FakeTranslator(Translator):
    """Counts translate calls instead of touching the network."""

    name = "youdao"

    def __init__(self, payload=None, error=None, console=None, cacheable=True):
        super().__init__(ProviderConfig(), console)
        self.payload = payload if payload is not None else {"translation": ["你好"]}
        self.error = error
        self.cacheable = cacheable
        self.calls = []

    def translate(self, words, source, target):
        self.calls.append((words, source, target))
        if self.error is not None:
            raise ProviderError(self.name, self.error)
        return dict(self.payload)

    def show(self, payload, more=False):
        self.echo("".join(payload.get("translation", [])))


def output(console):
    return console.file.getvalue()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def store(cache_dir, clock):
    return CacheStore(cache_dir, ttl=300, clock=clock)


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the user's .env, cache and PYSLATE_* settings out of every test."""
    for key in list(os.environ):
        if key.startswith("PYSLATE_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def err_console():
    return Console(file=io.StringIO(), width=200, color_system=None)
