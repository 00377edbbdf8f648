import hashlib
import logging
import time
import uuid

from ..config import Lang
from ..errors import ConfigError, ProviderError
from .base import Payload, Translator

logger = logging.getLogger(__name__)

LANGS = {
    Lang.ZH: "zh-CHS",
    Lang.ZHT: "zh-CHT",
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


def truncate(words: str) -> str:
    """Signing input for v3: first 10 chars + length + last 10 chars when longer than 20."""
    n = len(words)
    if n <= 20:
        return words
    return f"{words[:10]}{n}{words[-10:]}"


def sign(app_key: str, words: str, salt: str, curtime: str, app_secret: str) -> str:
    raw = app_key + truncate(words) + salt + curtime + app_secret
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def _joined(value) -> str:
    if isinstance(value, list):
        return "".join(str(v) for v in value)
    return str(value)


class Youdao(Translator):
    name = "youdao"

    def _credentials(self):
        key, secret = self.settings.youdao_app_key, self.settings.youdao_app_secret
        if not key or not secret:
            err = ConfigError("PYSLATE_YOUDAO_APP_KEY and PYSLATE_YOUDAO_APP_SECRET must be set")
            raise ProviderError(self.name, str(err)) from err
        return key, secret

    def translate(self, words: str, source: Lang, target: Lang) -> Payload:
        app_key, app_secret = self._credentials()
        curtime = str(int(time.time()))
        salt = str(uuid.uuid4())
        form = {
            "q": words,
            "from": LANGS[source],
            "to": LANGS[target],
            "appKey": app_key,
            "salt": salt,
            "sign": sign(app_key, words, salt, curtime, app_secret),
            "signType": "v3",
            "curtime": curtime,
        }
        logger.debug("from: %s, to: %s", form["from"], form["to"])

        data = self.request_json("POST", self.settings.youdao_url, data=form)
        if not isinstance(data, dict):
            raise ProviderError(self.name, f"unexpected response type {type(data).__name__}")
        code = str(data.get("errorCode", "0"))
        if code != "0":
            raise ProviderError(self.name, f"errorCode {code}")
        return data

    def show(self, payload: Payload, more: bool = False) -> None:
        if more and "returnPhrase" in payload:
            self.echo(_joined(payload["returnPhrase"]), "bright_black")

        if "translation" in payload:
            self.echo(_joined(payload["translation"]), "bright_white")

        basic = payload.get("basic")
        if isinstance(basic, dict):
            phonetics = []
            if basic.get("uk-phonetic"):
                phonetics.append(f"英 [{basic['uk-phonetic']}]")
            if basic.get("us-phonetic"):
                phonetics.append(f"美 [{basic['us-phonetic']}]")
            if phonetics:
                self.echo("    ".join(phonetics), "bright_yellow")

            if more:
                forms = []
                for wrap in basic.get("wfs") or []:
                    if not isinstance(wrap, dict):
                        continue
                    for wf in wrap.values():
                        if isinstance(wf, dict) and "name" in wf and "value" in wf:
                            forms.append(f"{wf['name']}：{wf['value']}")
                if forms:
                    self.echo("；".join(forms), "cyan")
                exams = [t for t in basic.get("exam_type") or [] if isinstance(t, str)]
                if exams:
                    self.echo("; ".join(exams), "green")

            explains = [e for e in basic.get("explains") or [] if isinstance(e, str)]
            if explains:
                self.echo("\n".join(explains), "bright_yellow")

        web = payload.get("web")
        if isinstance(web, list) and web:
            self.echo("网络释义", "blue")
            lines = []
            for item in web:
                if not isinstance(item, dict):
                    continue
                values = [v for v in item.get("value") or [] if isinstance(v, str)]
                lines.append(f"{item.get('key', '')} {'；'.join(values)}".strip())
            self.echo("\n".join(lines), "cyan")
