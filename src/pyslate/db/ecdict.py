"""ECDICT (stardict.csv) in a local sqlite database."""
import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

logger = logging.getLogger(__name__)

TABLE = "words"
COLUMNS = [
    "word", "phonetic", "definition", "translation", "pos", "collins", "oxford",
    "tag", "bnc", "frq", "exchange", "detail", "audio",
]

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {TABLE} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word TEXT NOT NULL,
    {", ".join(f"{c} TEXT" for c in COLUMNS[1:])}
);
CREATE INDEX IF NOT EXISTS idx_{TABLE}_word ON {TABLE} (word);
"""


def connect(db_path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA)


def import_csv(csv_path, db_path, chunksize: int = 1000) -> int:
    """Load stardict.csv into ``db_path``; returns the number of rows inserted."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with closing(connect(db_path)) as conn, conn:
        create_schema(conn)
        reader = pd.read_csv(
            csv_path,
            dtype=str,
            chunksize=chunksize,
            keep_default_na=False,  # "null", "nan", "NA" are real words
            na_values=[""],
        )
        for chunk in reader:
            missing = [c for c in COLUMNS if c not in chunk.columns]
            for c in missing:
                chunk[c] = None
            chunk = chunk[COLUMNS].dropna(subset=["word"])
            chunk.to_sql(TABLE, conn, if_exists="append", index=False)
            count += len(chunk)
            logger.debug("Imported %d rows", count)
    return count


def lookup(db_path, word: str) -> Optional[Dict[str, Any]]:
    db_path = Path(db_path)
    if not db_path.exists():
        raise FileNotFoundError(db_path)
    conn = connect(db_path)
    try:
        row = conn.execute(
            f"SELECT {', '.join(COLUMNS)} FROM {TABLE} WHERE word = ? LIMIT 1", (word,)
        ).fetchone()
    finally:
        conn.close()
    return dict(row) if row is not None else None
