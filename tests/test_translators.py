import hashlib
import sqlite3

import pytest
import requests

from conftest import output
from pyslate.config import Lang, ProviderConfig, TranslatorName
from pyslate.db import ecdict as ecdict_db
from pyslate.errors import ConfigError, ProviderError
from pyslate.translators.base import Translator
from pyslate.translators.dictionaryapi import DictionaryApi
from pyslate.translators.ecdict import Ecdict
from pyslate.translators.google import Google
from pyslate.translators.registry import build_translator, translator_class
from pyslate.translators.youdao import Youdao, sign, truncate


class FakeResponse:
    def __init__(self, body, status=200):
        self.body = body
        self.status_code = status
        self.headers = {"Content-Type": "application/json"}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def json(self):
        if isinstance(self.body, Exception):
            raise self.body
        return self.body


@pytest.fixture
def http(monkeypatch):
    """Replace requests.Session.request; records (method, url, kwargs)."""
    state = {"calls": [], "response": FakeResponse({})}

    def fake_request(self, method, url, **kwargs):
        state["calls"].append((method, url, kwargs))
        if isinstance(state["response"], Exception):
            raise state["response"]
        return state["response"]

    monkeypatch.setattr(requests.Session, "request", fake_request)
    return state


# -- registry --------------------------------------------------------------

@pytest.mark.parametrize(
    "name, cls",
    [
        (TranslatorName.YOUDAO, Youdao),
        (TranslatorName.GOOGLE, Google),
        (TranslatorName.DICTIONARYAPI, DictionaryApi),
        (TranslatorName.ECDICT, Ecdict),
    ],
)
def test_registry_dispatch(name, cls, console):
    assert translator_class(name) is cls
    translator = build_translator(name, ProviderConfig(), console)
    assert isinstance(translator, Translator)
    assert translator.name == name.value


def test_registry_accepts_plain_names():
    assert translator_class("google") is Google


def test_registry_rejects_unknown():
    with pytest.raises(ValueError):
        translator_class("bing")


def test_only_ecdict_opts_out_of_caching():
    assert [t.value for t in TranslatorName if not translator_class(t).cacheable] == ["ecdict"]


# -- shared HTTP helper ----------------------------------------------------

def test_network_error_becomes_provider_error(http, console):
    http["response"] = requests.ConnectionError("connection refused")
    with pytest.raises(ProviderError) as exc:
        Google(ProviderConfig(), console).translate("hello", Lang.EN, Lang.ZH)
    assert isinstance(exc.value.__cause__, requests.ConnectionError)


def test_http_status_error_becomes_provider_error(http, console):
    http["response"] = FakeResponse({"title": "No Definitions Found"}, status=404)
    with pytest.raises(ProviderError, match="404"):
        DictionaryApi(ProviderConfig(), console).translate("qwertyuiop", Lang.EN, Lang.ZH)


def test_bad_json_becomes_provider_error(http, console):
    http["response"] = FakeResponse(ValueError("Expecting value"))
    with pytest.raises(ProviderError, match="invalid JSON"):
        Google(ProviderConfig(), console).translate("hello", Lang.EN, Lang.ZH)


# -- youdao ----------------------------------------------------------------

def test_truncate():
    assert truncate("short") == "short"
    assert truncate("x" * 20) == "x" * 20
    assert truncate("1word2word3word4word5word") == "1word2word" + "25" + "4word5word"


def test_sign():
    expected = hashlib.sha256("appqsaltcurtimesecret".encode("utf-8")).hexdigest()
    assert sign("app", "q", "salt", "curtime", "secret") == expected


def test_youdao_request(http, console):
    http["response"] = FakeResponse({"errorCode": "0", "translation": ["你好"]})
    settings = ProviderConfig(youdao_app_key="app", youdao_app_secret="secret", youdao_url="http://yd.test/api")

    payload = Youdao(settings, console).translate("hello", Lang.EN, Lang.ZH)

    assert payload["translation"] == ["你好"]
    method, url, kwargs = http["calls"][0]
    assert (method, url) == ("POST", "http://yd.test/api")
    form = kwargs["data"]
    assert form["from"] == "en" and form["to"] == "zh-CHS"
    assert form["signType"] == "v3"
    assert form["sign"] == sign("app", "hello", form["salt"], form["curtime"], "secret")


def test_youdao_error_code(http, console):
    http["response"] = FakeResponse({"errorCode": "108"})
    settings = ProviderConfig(youdao_app_key="app", youdao_app_secret="secret")
    with pytest.raises(ProviderError, match="108"):
        Youdao(settings, console).translate("hello", Lang.EN, Lang.ZH)


def test_youdao_missing_credentials(http, console):
    with pytest.raises(ProviderError) as exc:
        Youdao(ProviderConfig(), console).translate("hello", Lang.EN, Lang.ZH)
    assert isinstance(exc.value.__cause__, ConfigError)
    assert http["calls"] == []


def test_youdao_show(console):
    payload = {
        "returnPhrase": ["hello"],
        "translation": ["你好"],
        "basic": {
            "uk-phonetic": "həˈləʊ",
            "us-phonetic": "həˈloʊ",
            "wfs": [{"wf": {"name": "复数", "value": "hellos"}}],
            "exam_type": ["初中", "高中"],
            "explains": ["int. 喂；哈罗", "n. 表示问候"],
        },
        "web": [{"key": "Hello", "value": ["你好", "您好"]}],
    }
    Youdao(ProviderConfig(), console).show(payload, more=False)
    text = output(console)
    assert "你好" in text
    assert "英 [həˈləʊ]" in text and "美 [həˈloʊ]" in text
    assert "n. 表示问候" in text
    assert "Hello 你好；您好" in text
    assert "复数" not in text and "初中" not in text

    Youdao(ProviderConfig(), console).show(payload, more=True)
    text = output(console)
    assert "复数：hellos" in text
    assert "初中; 高中" in text


# -- google ----------------------------------------------------------------

def test_google_request(http, console):
    http["response"] = FakeResponse({"sentences": [{"trans": "你好"}]})
    settings = ProviderConfig(google_url="http://g.test/single")

    payload = Google(settings, console).translate("hello", Lang.AUTO, Lang.ZHT)

    assert payload == {"sentences": [{"trans": "你好"}]}
    method, url, kwargs = http["calls"][0]
    assert (method, url) == ("GET", "http://g.test/single")
    params = kwargs["params"]
    assert ("sl", "auto") in params and ("tl", "zh-TW") in params
    assert ("dt", "t") in params and ("dt", "bd") in params


def test_google_show_limits_entries(console):
    payload = {
        "sentences": [{"trans": "你好"}],
        "dict": [
            {
                "pos": "感叹词",
                "entry": [
                    {"word": f"w{i}", "reverse_translation": ["Hello", "Hi"]} for i in range(5)
                ],
            },
            {"entry": [{"word": "skipped"}]},
        ],
    }
    Google(ProviderConfig(), console).show(payload)
    text = output(console)
    assert text.splitlines()[0] == "你好"
    assert "感叹词" in text
    assert "  w2 Hello, Hi" in text
    assert "w3" not in text and "skipped" not in text


# -- dictionaryapi ---------------------------------------------------------

def test_dictionaryapi_request(http, console):
    http["response"] = FakeResponse([{"word": "hello"}])
    settings = ProviderConfig(dictapi_url="http://d.test/entries")

    payload = DictionaryApi(settings, console).translate(" ice cream ", Lang.PT, Lang.ZH)

    assert payload == {"entries": [{"word": "hello"}]}
    assert http["calls"][0][1] == "http://d.test/entries/pt-BR/ice%20cream"


def test_dictionaryapi_unsupported_language_falls_back(http, console):
    http["response"] = FakeResponse([])
    DictionaryApi(ProviderConfig(dictapi_url="http://d.test"), console).translate("hi", Lang.ZH, Lang.EN)
    assert http["calls"][0][1] == "http://d.test/en/hi"


def test_dictionaryapi_show(console):
    payload = {
        "entries": [
            {
                "word": "hello",
                "phonetics": [{"text": "/həˈləʊ/"}, {"audio": "x.mp3"}],
                "meanings": [
                    {
                        "partOfSpeech": "noun",
                        "definitions": [
                            {"definition": "A greeting.", "example": "Hello, everyone.", "synonyms": ["hi"]},
                        ],
                    }
                ],
            }
        ]
    }
    DictionaryApi(ProviderConfig(), console).show(payload)
    text = output(console)
    for line in ["hello", "/həˈləʊ/", "noun", "1. A greeting.", "   Hello, everyone.", "   synonyms: hi"]:
        assert line in text.splitlines()


# -- ecdict ----------------------------------------------------------------

CSV = (
    "word,phonetic,definition,translation,pos,collins,oxford,tag,bnc,frq,exchange,detail,audio\n"
    "hello,hə'ləʊ,n. an expression of greeting,int. 喂\\nn. 表示问候,,3,1,zk gk,2130,2405,s:hellos,,\n"
    "null,nʌl,adj. lacking any legal force,adj. 无效的,,,,,,,,,\n"
)


@pytest.fixture
def ecdict_path(tmp_path):
    csv_path = tmp_path / "stardict.csv"
    csv_path.write_text(CSV, encoding="utf-8")
    db_path = tmp_path / "data" / "ecdict.db"
    assert ecdict_db.import_csv(csv_path, db_path, chunksize=1) == 2
    return db_path


def test_ecdict_lookup(ecdict_path, console):
    translator = Ecdict(ProviderConfig(ecdict_db=ecdict_path), console)
    payload = translator.translate("hello world", Lang.EN, Lang.ZH)
    assert payload["word"] == "hello"
    assert payload["exchange"] == "s:hellos"
    assert payload["pos"] is None

    translator.show(payload)
    text = output(console)
    assert "s:hellos" in text
    assert "int. 喂\nn. 表示问候" in text


def test_ecdict_keeps_literal_null_word(ecdict_path):
    row = ecdict_db.lookup(ecdict_path, "null")
    assert row is not None and row["translation"] == "adj. 无效的"


def test_ecdict_unknown_word(ecdict_path, console):
    with pytest.raises(ProviderError, match="not found"):
        Ecdict(ProviderConfig(ecdict_db=ecdict_path), console).translate("zzzz", Lang.EN, Lang.ZH)


def test_ecdict_missing_database(tmp_path, console):
    with pytest.raises(ProviderError, match="ecdict import"):
        Ecdict(ProviderConfig(ecdict_db=tmp_path / "none.db"), console).translate("hello", Lang.EN, Lang.ZH)


def test_ecdict_import_closes_connection_on_failure(tmp_path, monkeypatch):
    opened = []
    real_connect = ecdict_db.connect

    def tracking_connect(db_path):
        conn = real_connect(db_path)
        opened.append(conn)
        return conn

    monkeypatch.setattr(ecdict_db, "connect", tracking_connect)
    with pytest.raises(OSError):
        ecdict_db.import_csv(tmp_path / "missing.csv", tmp_path / "ecdict.db")

    assert len(opened) == 1
    with pytest.raises(sqlite3.ProgrammingError):
        opened[0].execute("SELECT 1")
