import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..cache.fingerprint import fingerprint, normalize_query
from ..cache.store import CacheStore
from ..config import KeyStrategy, QueryConfig
from ..errors import CacheError
from ..translators.base import Translator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    query: str
    fingerprint: str
    payload: Dict[str, Any]
    from_cache: bool
    cached: bool      # written to the cache by this run


class QueryOrchestrator:
    def __init__(
        self,
        translator: Translator,
        store: Optional[CacheStore],
        query_cfg: QueryConfig,
        key_strategy: KeyStrategy = "hash",
    ):
        self.translator = translator
        self.store = store
        self.cfg = query_cfg
        self.key_strategy = key_strategy

    @property
    def caching(self) -> bool:
        return self.store is not None and not self.cfg.no_cache and self.translator.cacheable

    def lookup(self, fp: str) -> Optional[Dict[str, Any]]:
        try:
            return self.store.get(fp)
        except CacheError as e:
            logger.info("Cache miss (%s): %s", type(e).__name__, e)
            return None

    def run(self, words) -> QueryResult:
        """Look up ``words``: cache first, then the translator; render either way.

        ProviderError from the translator propagates; nothing is rendered or cached then.
        """
        query = normalize_query(words)
        fp = fingerprint(query, self.cfg.source, self.cfg.target, self.cfg.translator, self.key_strategy)
        logger.debug("query=%r fingerprint=%s", query, fp)

        if self.caching:
            payload = self.lookup(fp)
            if payload is not None:
                self.translator.show(payload, self.cfg.more)
                return QueryResult(query, fp, payload, from_cache=True, cached=False)
        else:
            logger.debug("Cache disabled for this query.")

        payload = self.translator.translate(query, self.cfg.source, self.cfg.target)
        cached = False
        if self.caching:
            cached = self.store.set(fp, payload, self.translator.name)
            if not cached:
                logger.warning("Proceeding without caching %s", fp)
        self.translator.show(payload, self.cfg.more)
        return QueryResult(query, fp, payload, from_cache=False, cached=cached)
