"""Unit tests for the bounded cron run history store."""

from __future__ import annotations

from mission_control.infra.store.cron_history import CronHistoryStore, CronRunRecord


def _record(n: int) -> CronRunRecord:
    return CronRunRecord(cron_id=f"c{n}", name=f"Job {n}", status="success", duration_ms=n)


def test_get_returns_newest_first_with_limit() -> None:
    store = CronHistoryStore(max_records=10)
    for n in range(3):
        store.append(_record(n))

    assert [item.cron_id for item in store.get()] == ["c2", "c1", "c0"]
    assert [item.cron_id for item in store.get(limit=2)] == ["c2", "c1"]


def test_capacity_drops_oldest() -> None:
    store = CronHistoryStore(max_records=2)
    for n in range(4):
        store.append(_record(n))

    assert len(store) == 2
    assert [item.cron_id for item in store.get()] == ["c3", "c2"]


def test_trim_keeps_newest() -> None:
    store = CronHistoryStore(max_records=10)
    for n in range(5):
        store.append(_record(n))

    assert store.trim(2) == 3
    assert [item.cron_id for item in store.get()] == ["c4", "c3"]
    assert store.trim(5) == 0


def test_record_timestamp_defaults_to_utc_iso() -> None:
    assert _record(1).timestamp.endswith("Z")
