"""
SQLite persistence for aggregated spa readings.

Rows are keyed by the reading timestamp in milliseconds. Boolean flags are
stored as 0/1 integers. The ``aux_hi`` column name is kept for databases
created by earlier releases.
"""
from __future__ import annotations

import sqlite3
import threading
import time
from typing import Optional

from spalink.domain.reading import Reading

FLAG_COLUMNS = (
    "heating",
    "jets_lo",
    "jets_hi",
    "aux_hi",
    "filtering",
    "light_on",
    "edit",
    "am",
    "overheat",
    "jets2_hi",
    "jets2_lo",
    "aux_lo",
)

# Columns added after the first schema; older files get them via ALTER TABLE.
MIGRATED_COLUMNS = ("overheat", "jets2_hi", "jets2_lo", "aux_lo")

RANGE_MILLIS: dict[str, int] = {
    "1h": 60 * 60 * 1000,
    "24h": 24 * 60 * 60 * 1000,
    "7d": 7 * 24 * 60 * 60 * 1000,
    "30d": 30 * 24 * 60 * 60 * 1000,
}
DEFAULT_RANGE = "24h"

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS readings (
    timestamp INTEGER PRIMARY KEY,
    temperature REAL,
    heating INTEGER,
    jets_lo INTEGER,
    jets_hi INTEGER,
    aux_hi INTEGER,
    filtering INTEGER,
    light_on INTEGER,
    edit INTEGER,
    am INTEGER,
    overheat INTEGER,
    jets2_hi INTEGER,
    jets2_lo INTEGER,
    aux_lo INTEGER
)
"""

_COLUMNS = ["timestamp", "temperature", *FLAG_COLUMNS]
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM readings"


class ReadingStore:
    def __init__(self, path: str = "spa-data.db") -> None:
        self.path = path
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._migrate()

    def _migrate(self) -> None:
        with self._lock, self._conn:
            self._conn.execute(_CREATE_TABLE)
            existing = {row["name"] for row in self._conn.execute("PRAGMA table_info(readings)")}
            for column in MIGRATED_COLUMNS:
                if column not in existing:
                    self._conn.execute(f"ALTER TABLE readings ADD COLUMN {column} INTEGER DEFAULT 0")
            self._conn.execute("CREATE INDEX IF NOT EXISTS idx_readings_timestamp ON readings(timestamp)")

    def insert_reading(self, reading: Reading) -> None:
        values = [reading.timestamp, reading.temperature]
        values += [1 if getattr(reading, column) else 0 for column in FLAG_COLUMNS]
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._lock, self._conn:
            self._conn.execute(
                f"INSERT OR REPLACE INTO readings ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                values,
            )

    def get_readings(self, from_timestamp: int, to_timestamp: int) -> list[Reading]:
        with self._lock:
            rows = self._conn.execute(
                f"{_SELECT} WHERE timestamp >= ? AND timestamp <= ? ORDER BY timestamp ASC",
                (from_timestamp, to_timestamp),
            ).fetchall()
        return [self._row_to_reading(row) for row in rows]

    def get_readings_for_range(self, range_name: str, now: Optional[int] = None) -> list[Reading]:
        now = int(time.time() * 1000) if now is None else now
        span = RANGE_MILLIS.get(range_name, RANGE_MILLIS[DEFAULT_RANGE])
        return self.get_readings(now - span, now)

    def get_latest_reading(self) -> Optional[Reading]:
        with self._lock:
            row = self._conn.execute(f"{_SELECT} ORDER BY timestamp DESC LIMIT 1").fetchone()
        return self._row_to_reading(row) if row else None

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    @staticmethod
    def _row_to_reading(row: sqlite3.Row) -> Reading:
        return Reading(
            timestamp=row["timestamp"],
            temperature=row["temperature"],
            **{column: row[column] == 1 for column in FLAG_COLUMNS},
        )
