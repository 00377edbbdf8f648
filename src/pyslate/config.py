import logging
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal, Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300
DEFAULT_TIMEOUT = 10.0

# blank values for these are dropped so argparse falls back to its defaults
CLEARABLE_ENV = [
    "PYSLATE_TRANSLATOR",
    "PYSLATE_SOURCE_LANG",
    "PYSLATE_TARGET_LANG",
    "PYSLATE_SHOW_MORE",
    "PYSLATE_VERBOSE",
]

_TRUTHY = {"1", "true", "yes", "on"}


class Lang(str, Enum):
    ZH = "zh"      # simplified Chinese
    ZHT = "zht"    # traditional Chinese
    YUE = "yue"    # Cantonese
    AUTO = "auto"  # detect
    EN = "en"
    FR = "fr"
    DE = "de"
    IT = "it"
    ES = "es"
    PT = "pt"
    RU = "ru"
    EL = "el"
    AR = "ar"
    LA = "la"
    KO = "ko"
    JA = "ja"


class TranslatorName(str, Enum):
    YOUDAO = "youdao"
    GOOGLE = "google"
    DICTIONARYAPI = "dictionaryapi"
    ECDICT = "ecdict"


KeyStrategy = Literal["hash", "slug"]


@dataclass(frozen=True)
class CacheConfig:
    dir: Path
    ttl_seconds: int = DEFAULT_TTL
    key_strategy: KeyStrategy = "hash"


@dataclass(frozen=True)
class ProviderConfig:
    youdao_url: str = "https://openapi.youdao.com/api"
    youdao_app_key: Optional[str] = None
    youdao_app_secret: Optional[str] = None
    google_url: str = "https://translate.googleapis.com/translate_a/single"
    dictapi_url: str = "https://api.dictionaryapi.dev/api/v2/entries"
    ecdict_db: Path = field(default_factory=lambda: default_data_dir() / "ecdict.db")
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class QueryConfig:
    translator: TranslatorName = TranslatorName.GOOGLE
    source: Lang = Lang.AUTO
    target: Lang = Lang.ZH
    no_cache: bool = False
    more: bool = False       # print optional sections
    verbose: bool = False


@dataclass(frozen=True)
class AppConfig:
    cache: CacheConfig
    providers: ProviderConfig
    query: QueryConfig = field(default_factory=QueryConfig)


def default_cache_dir(env: Mapping[str, str] = os.environ) -> Path:
    base = env.get("XDG_CACHE_HOME")
    root = Path(base) if base else Path.home() / ".cache"
    return root / "pyslate"


def default_data_dir(env: Mapping[str, str] = os.environ) -> Path:
    base = env.get("XDG_DATA_HOME")
    root = Path(base) if base else Path.home() / ".local" / "share"
    return root / "pyslate"


def parse_ttl(raw: Optional[str]) -> int:
    """TTL in seconds; falls back to the default when unset, unparsable or negative."""
    if raw is None or not raw.strip():
        return DEFAULT_TTL
    try:
        ttl = int(raw.strip())
    except ValueError:
        logger.debug("Unparsable cache TTL %r, using default %s.", raw, DEFAULT_TTL)
        return DEFAULT_TTL
    if ttl < 0:
        logger.debug("Negative cache TTL %r, using default %s.", raw, DEFAULT_TTL)
        return DEFAULT_TTL
    return ttl


def parse_bool(raw: Optional[str]) -> bool:
    return raw is not None and raw.strip().lower() in _TRUTHY


def _parse_timeout(raw: Optional[str]) -> float:
    try:
        return float(raw) if raw else DEFAULT_TIMEOUT
    except ValueError:
        return DEFAULT_TIMEOUT


def _non_empty(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    return value


def env_file_candidates(file_name: str = ".env"):
    yield Path.cwd() / file_name
    yield Path.home() / ".config" / "pyslate" / file_name
    if sys.argv and sys.argv[0]:
        yield Path(sys.argv[0]).resolve().parent / file_name


def load_env_file(file_name: str = ".env") -> Optional[Path]:
    """Load the first .env found; the process environment wins over file values."""
    for path in env_file_candidates(file_name):
        if path.is_file():
            load_dotenv(path, override=False)
            logger.debug("Loaded env file %s", path)
            return path
    logger.debug("No %s file found.", file_name)
    return None


def clear_empty_env(keys=CLEARABLE_ENV, env=os.environ) -> None:
    for key in keys:
        value = env.get(key)
        if value is not None and not value.strip():
            del env[key]


def cache_config_from_env(env: Mapping[str, str] = os.environ, ttl: Optional[int] = None) -> CacheConfig:
    cache_dir = _non_empty(env, "PYSLATE_CACHE_DIR")
    strategy = (env.get("PYSLATE_CACHE_KEY") or "hash").strip().lower()
    if strategy not in ("hash", "slug"):
        logger.debug("Unknown cache key strategy %r, using hash.", strategy)
        strategy = "hash"
    return CacheConfig(
        dir=Path(cache_dir).expanduser() if cache_dir else default_cache_dir(env),
        ttl_seconds=ttl if ttl is not None else parse_ttl(env.get("PYSLATE_CACHE_TTL")),
        key_strategy=strategy,
    )


def provider_config_from_env(env: Mapping[str, str] = os.environ) -> ProviderConfig:
    defaults = ProviderConfig()
    ecdict_db = _non_empty(env, "PYSLATE_ECDICT_DB")
    return ProviderConfig(
        youdao_url=_non_empty(env, "PYSLATE_YOUDAO_URL") or defaults.youdao_url,
        youdao_app_key=_non_empty(env, "PYSLATE_YOUDAO_APP_KEY"),
        youdao_app_secret=_non_empty(env, "PYSLATE_YOUDAO_APP_SECRET"),
        google_url=_non_empty(env, "PYSLATE_GOOGLE_URL") or defaults.google_url,
        dictapi_url=_non_empty(env, "PYSLATE_DICTAPI_URL") or defaults.dictapi_url,
        ecdict_db=Path(ecdict_db).expanduser() if ecdict_db else default_data_dir(env) / "ecdict.db",
        timeout=_parse_timeout(env.get("PYSLATE_TIMEOUT")),
    )
