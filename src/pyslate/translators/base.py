import logging
from typing import Any, Dict, Mapping, Optional

import certifi
import requests
from rich.console import Console

from ..config import Lang, ProviderConfig
from ..errors import ProviderError

logger = logging.getLogger(__name__)

USER_AGENT = "pyslate/0.1"

Payload = Dict[str, Any]


class Translator:
    """One translation/dictionary backend: fetch a payload, then render it.

    Payloads are plain JSON-compatible dicts; nothing outside the translator
    looks inside them.
    """

    name: str = "base"
    # False for backends with no network cost; the orchestrator skips the cache
    cacheable: bool = True

    def __init__(self, settings: Optional[ProviderConfig] = None, console: Optional[Console] = None):
        self.settings = settings or ProviderConfig()
        self.console = console or Console()

    def translate(self, words: str, source: Lang, target: Lang) -> Payload:
        raise NotImplementedError

    def show(self, payload: Payload, more: bool = False) -> None:
        raise NotImplementedError

    def echo(self, text: str, style: Optional[str] = None, end: str = "\n") -> None:
        self.console.print(text, style=style, end=end, markup=False, highlight=False, soft_wrap=True)

    def request_json(
        self,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """HTTP call returning decoded JSON; every failure becomes ProviderError."""
        logger.debug("%s %s params=%s", method, url, params)
        sess = requests.Session()
        headers = {"User-Agent": USER_AGENT}
        try:
            r = sess.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                timeout=self.settings.timeout,
                verify=certifi.where(),
            )
            logger.debug("  -> HTTP %s Content-Type=%r", r.status_code, r.headers.get("Content-Type", ""))
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            raise ProviderError(self.name, f"request failed: {e}") from e
        except ValueError as e:
            raise ProviderError(self.name, f"invalid JSON response: {e}") from e
        finally:
            sess.close()
