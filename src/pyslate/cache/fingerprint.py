import hashlib
import re

from ..config import KeyStrategy, Lang, TranslatorName

# / \ ? % * : | " < > , ; =, control characters and any whitespace
_UNSAFE = re.compile(r'[/\\?%*:|"<>,;=\s\x00-\x1f\x7f]')
_DASHES = re.compile(r"-{2,}")


def _value(x) -> str:
    return x.value if isinstance(x, (Lang, TranslatorName)) else str(x)


def normalize_query(words) -> str:
    """Join a word list (or a raw string) into single-space separated text."""
    if isinstance(words, str):
        words = [words]
    return " ".join(" ".join(words).split())


def sanitize(text: str) -> str:
    return _DASHES.sub("-", _UNSAFE.sub("-", text))


def digest_fingerprint(query: str, source, target, provider) -> str:
    # query goes last: the enum fields never contain the separator
    key = f"{_value(source)}|{_value(target)}|{_value(provider)}|{query}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def slug_fingerprint(query: str, source, target, provider) -> str:
    return f"{_value(source)}-{_value(provider)}-{_value(target)}_{sanitize(query)}"


def fingerprint(query: str, source, target, provider, strategy: KeyStrategy = "hash") -> str:
    """Cache key for one (query, source, target, provider) tuple.

    ``hash`` gives a 64 char sha256 hex digest, ``slug`` a readable name.
    A cache directory populated with one strategy is not visible to the other.
    """
    if strategy == "hash":
        return digest_fingerprint(query, source, target, provider)
    if strategy == "slug":
        return slug_fingerprint(query, source, target, provider)
    raise ValueError(f"Unknown fingerprint strategy: {strategy}")
