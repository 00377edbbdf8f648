"""TTL-aware file cache: one JSON record per fingerprint in a flat directory."""
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..errors import CacheCorrupt, CacheError, CacheExpired, CacheIOError, CacheNotFound
from . import record as rec
from .record import CacheRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    fingerprint: str
    size: int
    valid: bool


class CacheStore:
    def __init__(self, root: Path, ttl: int, clock: Callable[[], float] = time.time):
        self.root = Path(root)
        self.ttl = int(ttl)
        self._clock = clock

    def path(self, fingerprint: str) -> Path:
        return self.root / fingerprint

    def set(self, fingerprint: str, payload: Dict[str, Any], translator: Optional[str] = None) -> bool:
        """Write the payload under ``fingerprint``; returns False instead of raising."""
        try:
            content = rec.dumps(rec.pack(payload, self._clock(), translator))
        except (TypeError, ValueError) as e:
            logger.warning("Serialize payload for %s failed: %s", fingerprint, e)
            return False

        target = self.path(fingerprint)
        tmp_name = None
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.root, prefix=".tmp-", delete=False
            ) as tf:
                tmp_name = tf.name
                tf.write(content)
            os.replace(tmp_name, target)
        except (OSError, ValueError) as e:
            logger.warning("Write cache file %s failed: %s", target, e)
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            return False

        logger.debug("Cached %s (%d bytes).", target, len(content))
        return True

    def _read(self, fingerprint: str) -> str:
        path = self.path(fingerprint)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise CacheNotFound(fingerprint, "no cache file") from None
        except IsADirectoryError:
            raise CacheNotFound(fingerprint, "path is a directory") from None
        except UnicodeDecodeError as e:
            raise CacheCorrupt(fingerprint, f"not utf-8 text: {e}") from e
        except OSError as e:
            raise CacheIOError(fingerprint, str(e)) from e
        except ValueError as e:
            # e.g. an embedded NUL; no such file can exist
            raise CacheNotFound(fingerprint, f"invalid path: {e}") from e

    def peek(self, fingerprint: str) -> CacheRecord:
        """Read and validate a record without touching the file."""
        text = self._read(fingerprint)
        try:
            record = rec.loads(text)
        except ValueError as e:
            raise CacheCorrupt(fingerprint, str(e)) from e
        now = self._clock()
        if not record.is_fresh(self.ttl, now):
            raise CacheExpired(fingerprint, f"age {record.age(now):.0f}s >= ttl {self.ttl}s")
        return record

    def get_record(self, fingerprint: str) -> CacheRecord:
        """Return the fresh record or raise; expired and corrupt files are deleted."""
        try:
            record = self.peek(fingerprint)
        except (CacheExpired, CacheCorrupt) as e:
            logger.info("Dropping cache file %s", e)
            self.remove(fingerprint)
            raise
        logger.info("Cache hit: %s", fingerprint)
        return record

    def get(self, fingerprint: str) -> Dict[str, Any]:
        return self.get_record(fingerprint).payload()

    def is_valid(self, fingerprint: str) -> bool:
        try:
            self.peek(fingerprint)
        except CacheError:
            return False
        return True

    def remove(self, fingerprint: str) -> bool:
        try:
            self.path(fingerprint).unlink()
        except (OSError, ValueError) as e:
            logger.warning("Failed to remove cache file %s: %s", fingerprint, e)
            return False
        logger.info("removed: %s", fingerprint)
        return True

    def _iter_files(self) -> Iterator[os.DirEntry]:
        try:
            it = os.scandir(self.root)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning("Cannot read cache directory %s: %s", self.root, e)
            return
        with it:
            for de in sorted(it, key=lambda d: d.name):
                if de.is_dir():
                    logger.debug("%s is a directory.", de.path)
                    continue
                yield de

    def list(self) -> List[CacheEntry]:
        entries = []
        for de in self._iter_files():
            try:
                size = de.stat().st_size
            except OSError:
                size = 0
            entries.append(CacheEntry(de.name, size, self.is_valid(de.name)))
        return entries

    def find(self, prefix: str) -> List[str]:
        return [de.name for de in self._iter_files() if de.name.startswith(prefix)]

    def purge_expired(self) -> int:
        removed = 0
        for entry in self.list():
            if not entry.valid and self.remove(entry.fingerprint):
                removed += 1
        return removed

    def clean_all(self) -> int:
        removed = 0
        for entry in self.list():
            if self.remove(entry.fingerprint):
                removed += 1
        return removed
