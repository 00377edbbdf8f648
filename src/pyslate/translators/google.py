import logging

from ..config import Lang
from ..errors import ProviderError
from .base import Payload, Translator

logger = logging.getLogger(__name__)

LANGS = {
    Lang.ZH: "zh-CN",
    Lang.ZHT: "zh-TW",
    Lang.YUE: "yue",
    Lang.AUTO: "auto",
    Lang.EN: "en",
    Lang.FR: "fr",
    Lang.DE: "de",
    Lang.IT: "it",
    Lang.ES: "es",
    Lang.PT: "pt",
    Lang.RU: "ru",
    Lang.EL: "el",
    Lang.AR: "ar",
    Lang.LA: "la",
    Lang.JA: "ja",
    Lang.KO: "ko",
}

MAX_ENTRIES = 3


class Google(Translator):
    name = "google"

    def translate(self, words: str, source: Lang, target: Lang) -> Payload:
        params = [
            ("q", words),
            ("sl", LANGS[source]),
            ("tl", LANGS[target]),
            ("dt", "t"),
            ("dt", "bd"),
            ("dj", "1"),
            ("client", "gtx"),
        ]
        data = self.request_json("GET", self.settings.google_url, params=params)
        if not isinstance(data, dict):
            raise ProviderError(self.name, f"unexpected response type {type(data).__name__}")
        return data

    def show(self, payload: Payload, more: bool = False) -> None:
        sentences = payload.get("sentences")
        if isinstance(sentences, list) and sentences and isinstance(sentences[0], dict):
            trans = sentences[0].get("trans")
            if isinstance(trans, str):
                self.echo(trans, "bright_black")

        for d in payload.get("dict") or []:
            if not isinstance(d, dict) or not isinstance(d.get("pos"), str):
                continue
            self.echo(d["pos"], "blue")
            entries = [e for e in d.get("entry") or [] if isinstance(e, dict)]
            for entry in entries[:MAX_ENTRIES]:
                word = entry.get("word")
                reverses = [r for r in entry.get("reverse_translation") or [] if isinstance(r, str)]
                if isinstance(word, str):
                    self.echo(f"  {word} ", "bright_black", end="")
                self.echo(", ".join(reverses), "bright_cyan")
