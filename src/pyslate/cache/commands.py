"""`pyslate cache ...` subcommands; each prints a summary and returns the affected count."""
import logging
from typing import Optional

from rich.console import Console

from ..config import ProviderConfig, TranslatorName
from ..errors import CacheError
from ..translators.registry import build_translator
from .store import CacheStore

logger = logging.getLogger(__name__)

UNITS = ["B", "KB", "MB", "GB"]


def fmt_size(size: int) -> str:
    """Human readable size: ``fmt_size(1024) == "1.0KB"``, ``fmt_size(1 << 32) == "4.0GB"``."""
    unit = 0
    value = float(size)
    while value >= 1000.0 and unit < len(UNITS) - 1:
        value /= 1024.0
        unit += 1
    if unit == 0:
        return f"{value:.0f}{UNITS[0]}"
    return f"{value:.1f}{UNITS[unit]}"


def _print(console: Console, text: str, style: Optional[str] = None) -> None:
    console.print(text, style=style, markup=False, highlight=False, soft_wrap=True)


def list_cache(store: CacheStore, console: Console) -> int:
    entries = store.list()
    sizes = [fmt_size(e.size) for e in entries]
    width = max((len(s) for s in sizes), default=0)
    for entry, size in zip(entries, sizes):
        mark = "✔" if entry.valid else "✘"
        _print(console, f"{mark} {size:>{width}} {entry.fingerprint}", None if entry.valid else "bright_black")
    valid = sum(1 for e in entries if e.valid)
    total = fmt_size(sum(e.size for e in entries))
    _print(console, f"{valid}/{len(entries)} valid file(s), {total} in total.")
    return valid


def _removal_summary(store: CacheStore, console: Console, before, removed: int) -> None:
    left = {e.fingerprint for e in store.list()}
    size = sum(e.size for e in before if e.fingerprint not in left)
    _print(console, f"Removed {removed}/{len(before)} file(s), {fmt_size(size)} in total.")


def clean_cache(store: CacheStore, console: Console) -> int:
    before = store.list()
    removed = store.clean_all()
    _removal_summary(store, console, before, removed)
    return removed


def purge_cache(store: CacheStore, console: Console) -> int:
    before = store.list()
    removed = store.purge_expired()
    _removal_summary(store, console, before, removed)
    return removed


def view_cache(
    store: CacheStore,
    prefix: str,
    console: Console,
    settings: Optional[ProviderConfig] = None,
    more: bool = True,
) -> int:
    """Render every valid record whose fingerprint starts with ``prefix``.

    Unlike a query lookup, viewing never deletes expired or corrupt files.
    """
    shown = 0
    matches = store.find(prefix) if prefix else []
    for fp in matches:
        _print(console, fp, "bold")
        try:
            record = store.peek(fp)
        except CacheError as e:
            _print(console, f"  {type(e).__name__}: {e.detail}", "red")
            continue
        payload = record.payload()
        try:
            name = TranslatorName(record.translator)
        except ValueError:
            name = None
        if name is None:
            console.print_json(data=payload)
        else:
            build_translator(name, settings, console).show(payload, more)
        shown += 1
    if not matches:
        _print(console, f"No cache file matches {prefix!r}.", "red")
    return shown
