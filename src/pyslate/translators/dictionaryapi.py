from urllib.parse import quote

from ..config import Lang
from .base import Payload, Translator

LANGS = {
    Lang.EN: "en",
    Lang.ES: "es",
    Lang.FR: "fr",
    Lang.DE: "de",
    Lang.IT: "it",
    Lang.PT: "pt-BR",
    Lang.RU: "ru",
    Lang.JA: "ja",
    Lang.KO: "ko",
    Lang.AR: "ar",
}


class DictionaryApi(Translator):
    """dictionaryapi.dev: monolingual definitions, the target language is ignored."""

    name = "dictionaryapi"

    def translate(self, words: str, source: Lang, target: Lang) -> Payload:
        lang = LANGS.get(source, "en")
        url = f"{self.settings.dictapi_url}/{lang}/{quote(words.strip(), safe='')}"
        # the API answers with a bare list; keep payloads dict-shaped
        return {"entries": self.request_json("GET", url)}

    def show(self, payload: Payload, more: bool = False) -> None:
        entries = payload.get("entries")
        if not isinstance(entries, list):
            return
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            if isinstance(entry.get("word"), str):
                self.echo(entry["word"], "bright_white")

            phonetics = [
                p["text"] for p in entry.get("phonetics") or []
                if isinstance(p, dict) and isinstance(p.get("text"), str)
            ]
            if phonetics:
                self.echo(" ".join(phonetics), "bright_yellow")

            for meaning in entry.get("meanings") or []:
                if not isinstance(meaning, dict):
                    continue
                if isinstance(meaning.get("partOfSpeech"), str):
                    self.echo(meaning["partOfSpeech"], "blue")
                defs = [d for d in meaning.get("definitions") or [] if isinstance(d, dict)]
                for i, d in enumerate(defs, 1):
                    if isinstance(d.get("definition"), str):
                        self.echo(f"{i}. {d['definition']}", "cyan")
                    if isinstance(d.get("example"), str):
                        self.echo(f"   {d['example']}", "bright_black")
                    synonyms = [s for s in d.get("synonyms") or [] if isinstance(s, str)]
                    if synonyms:
                        self.echo(f"   synonyms: {', '.join(synonyms)}", "green")
            self.echo("")
