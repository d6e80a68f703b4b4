"""Tests for the SQLite readings store."""
import sqlite3

from spalink.domain import Reading
from spalink.storage import ReadingStore

HOUR = 60 * 60 * 1000


def _reading(ts, temp=98.0, **flags):
    return Reading(timestamp=ts, temperature=temp, **flags)


def test_insert_and_latest(tmp_path):
    store = ReadingStore(str(tmp_path / "spa.db"))
    store.insert_reading(_reading(1_000, 97.0))
    store.insert_reading(_reading(2_000, 101.0, heating=True, jets2_lo=True, am=True))

    latest = store.get_latest_reading()
    assert latest == _reading(2_000, 101.0, heating=True, jets2_lo=True, am=True)
    store.close()


def test_latest_empty(tmp_path):
    store = ReadingStore(str(tmp_path / "spa.db"))
    assert store.get_latest_reading() is None
    store.close()


def test_null_temperature_round_trip(tmp_path):
    store = ReadingStore(str(tmp_path / "spa.db"))
    store.insert_reading(_reading(5, None, light_on=True))
    assert store.get_latest_reading() == _reading(5, None, light_on=True)
    store.close()


def test_same_timestamp_replaces(tmp_path):
    store = ReadingStore(str(tmp_path / "spa.db"))
    store.insert_reading(_reading(10, 97.0))
    store.insert_reading(_reading(10, 99.0))
    assert [r.temperature for r in store.get_readings(0, 100)] == [99.0]
    store.close()


def test_get_readings_window_is_ordered(tmp_path):
    store = ReadingStore(str(tmp_path / "spa.db"))
    for ts in (300, 100, 200, 400):
        store.insert_reading(_reading(ts))
    assert [r.timestamp for r in store.get_readings(100, 300)] == [100, 200, 300]
    store.close()


def test_range_queries(tmp_path):
    store = ReadingStore(str(tmp_path / "spa.db"))
    now = 100 * 24 * HOUR
    store.insert_reading(_reading(now - HOUR // 2))
    store.insert_reading(_reading(now - 2 * HOUR))
    store.insert_reading(_reading(now - 3 * 24 * HOUR))
    store.insert_reading(_reading(now - 20 * 24 * HOUR))

    assert len(store.get_readings_for_range("1h", now=now)) == 1
    assert len(store.get_readings_for_range("24h", now=now)) == 2
    assert len(store.get_readings_for_range("7d", now=now)) == 3
    assert len(store.get_readings_for_range("30d", now=now)) == 4
    # Unknown ranges fall back to 24h.
    assert len(store.get_readings_for_range("1y", now=now)) == 2
    store.close()


def test_migrates_old_schema(tmp_path):
    path = str(tmp_path / "old.db")
    conn = sqlite3.connect(path)
    conn.execute(
        "CREATE TABLE readings (timestamp INTEGER PRIMARY KEY, temperature REAL, heating INTEGER, "
        "jets_lo INTEGER, jets_hi INTEGER, aux_hi INTEGER, filtering INTEGER, light_on INTEGER, "
        "edit INTEGER, am INTEGER)"
    )
    conn.execute("INSERT INTO readings VALUES (42, 100.0, 1, 0, 0, 0, 1, 0, 0, 0)")
    conn.commit()
    conn.close()

    store = ReadingStore(path)
    old = store.get_latest_reading()
    assert old == _reading(42, 100.0, heating=True, filtering=True)

    store.insert_reading(_reading(43, 99.0, aux_lo=True, overheat=True))
    assert store.get_latest_reading() == _reading(43, 99.0, aux_lo=True, overheat=True)
    store.close()
