import sqlite3

from ..config import Lang
from ..db import ecdict as db
from ..errors import ProviderError
from .base import Payload, Translator


class Ecdict(Translator):
    """Offline English-Chinese lookup; a local query is cheaper than a cache read."""

    name = "ecdict"
    cacheable = False

    def translate(self, words: str, source: Lang, target: Lang) -> Payload:
        word = words.split(" ")[0] if words else ""
        try:
            row = db.lookup(self.settings.ecdict_db, word)
        except FileNotFoundError as e:
            raise ProviderError(
                self.name, f"database {self.settings.ecdict_db} not found, run `pyslate ecdict import`"
            ) from e
        except sqlite3.Error as e:
            raise ProviderError(self.name, f"database query failed: {e}") from e
        if row is None:
            raise ProviderError(self.name, f"'{word}' not found")
        return row

    def show(self, payload: Payload, more: bool = False) -> None:
        if payload.get("word"):
            self.echo(str(payload["word"]))
        if payload.get("exchange"):
            self.echo(payload["exchange"].replace("/", ", "), "bright_cyan")
        if payload.get("phonetic"):
            self.echo(payload["phonetic"], "bright_yellow")
        if payload.get("definition"):
            self.echo(payload["definition"].replace("\\n", "\n"), "bright_green")
        if payload.get("translation"):
            self.echo(payload["translation"].replace("\\n", "\n"), "blue")
