import json
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CacheRecord:
    data: str                 # provider payload, serialized JSON text
    created_at: int           # unix seconds at write time
    translator: Optional[str] = None

    def payload(self) -> Dict[str, Any]:
        value = json.loads(self.data)
        if not isinstance(value, dict):
            raise ValueError("cached payload is not a JSON object")
        return value

    def is_fresh(self, ttl: int, now: float) -> bool:
        return self.created_at + ttl > now

    def age(self, now: float) -> float:
        return now - self.created_at


def pack(payload: Dict[str, Any], now: float, translator: Optional[str] = None) -> CacheRecord:
    """Serialize the payload without interpreting it; raises TypeError/ValueError if it can't be."""
    return CacheRecord(
        data=json.dumps(payload, ensure_ascii=False),
        created_at=int(now),
        translator=translator,
    )


def dumps(record: CacheRecord) -> str:
    return json.dumps(asdict(record), ensure_ascii=False)


def loads(text: str) -> CacheRecord:
    """Parse a record file's content; ValueError on anything that isn't a record."""
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("record is not a JSON object")
    data = raw.get("data")
    created_at = raw.get("created_at")
    translator = raw.get("translator")
    if not isinstance(data, str):
        raise ValueError("record 'data' must be a string")
    if isinstance(created_at, bool) or not isinstance(created_at, int):
        raise ValueError("record 'created_at' must be an integer")
    if translator is not None and not isinstance(translator, str):
        raise ValueError("record 'translator' must be a string")
    record = CacheRecord(data=data, created_at=created_at, translator=translator)
    record.payload()
    return record
