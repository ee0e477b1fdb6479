from __future__ import annotations

import pendulum
import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from matchscore.errors import ConflictError, NotFoundError
from matchscore.schemas import ScoreFilter
from matchscore.store import ScoreStore, SqlScoreStore, create_database_engine, session_scope
from matchscore.store.database import create_session_factory
from matchscore.store.models import MatchScore


@pytest.fixture
def store() -> SqlScoreStore:
    return SqlScoreStore(create_database_engine("sqlite://"))


def at(hours: int):
    return pendulum.datetime(2024, 4, 1, tz="UTC").add(hours=hours)


def test_store_satisfies_protocol(store):
    assert isinstance(store, ScoreStore)


def test_create_round_trips_record(store, record_factory):
    record = record_factory(overall=72.75, calculated_at=at(0))

    stored = store.create(record)
    fetched = store.find_by_pair("W-1", "J-1")

    assert stored == fetched
    assert fetched.calculated_at == record.calculated_at
    assert fetched.calculated_at.utcoffset().total_seconds() == 0
    assert fetched.overall_score == 72.75


def test_second_create_conflicts(store, record_factory):
    store.create(record_factory(calculated_at=at(0)))

    with pytest.raises(ConflictError) as excinfo:
        store.create(record_factory(overall=90.0, calculated_at=at(1)))

    assert excinfo.value.worker_id == "W-1"
    assert store.get_current("W-1", "J-1").overall_score == 70.0


def test_schema_rejects_second_current_row(store, record_factory):
    store.create(record_factory(calculated_at=at(0)))
    sessions = create_session_factory(store._engine)

    with pytest.raises(IntegrityError):
        with session_scope(sessions) as session:
            session.add(SqlScoreStore._to_row(record_factory(overall=90.0, calculated_at=at(1))))

    assert store.count(ScoreFilter(include_history=True)) == 1
    assert store.get_current("W-1", "J-1").overall_score == 70.0


def test_unique_index_violation_becomes_conflict(store, record_factory, monkeypatch):
    store.create(record_factory(calculated_at=at(0)))
    # Hide the current row from the pre-insert lookup so only the index guards the pair.
    monkeypatch.setattr(
        store, "_current_stmt", lambda worker_id, job_id: select(MatchScore).where(MatchScore.id == -1)
    )

    with pytest.raises(ConflictError) as excinfo:
        store.create(record_factory(overall=90.0, calculated_at=at(1)))

    assert excinfo.value.job_id == "J-1"
    monkeypatch.undo()
    assert store.count(ScoreFilter(include_history=True)) == 1
    assert store.get_current("W-1", "J-1").overall_score == 70.0


def test_forced_create_keeps_history(store, record_factory):
    store.create(record_factory(overall=60.0, calculated_at=at(0)))
    store.create(record_factory(overall=80.0, calculated_at=at(1)), force=True)

    history = store.history("W-1", "J-1")

    assert [record.overall_score for record in history] == [80.0, 60.0]
    assert store.get_current("W-1", "J-1").overall_score == 80.0
    assert store.count() == 1
    assert store.count(ScoreFilter(include_history=True)) == 2


def test_missing_pair(store):
    assert store.get_current("W-1", "J-404") is None
    assert store.history("W-1", "J-404") == []
    with pytest.raises(NotFoundError):
        store.find_by_pair("W-1", "J-404")


def test_find_by_worker_paginates_and_orders(store, record_factory):
    for idx, overall in enumerate([55.0, 95.0, 75.0]):
        store.create(record_factory(job_id=f"J-{idx}", overall=overall, calculated_at=at(idx)))
    store.create(record_factory(worker_id="W-2", job_id="J-0", calculated_at=at(5)))

    newest = store.find_by_worker("W-1", limit=2)
    rest = store.find_by_worker("W-1", limit=2, offset=2)
    by_score = store.find_by_worker("W-1", order_by="overall_score")
    ascending = store.find_by_job("J-0", descending=False)

    assert [record.job_id for record in newest] == ["J-2", "J-1"]
    assert [record.job_id for record in rest] == ["J-0"]
    assert [record.overall_score for record in by_score] == [95.0, 75.0, 55.0]
    assert [record.worker_id for record in ascending] == ["W-1", "W-2"]
    with pytest.raises(ValueError):
        store.find_by_worker("W-1", order_by="worker_id")


def test_iter_records_streams_in_chronological_pages(store, record_factory):
    for idx in reversed(range(5)):
        store.create(record_factory(job_id=f"J-{idx}", calculated_at=at(idx)))

    streamed = list(store.iter_records(batch_size=2))

    assert [record.job_id for record in streamed] == ["J-0", "J-1", "J-2", "J-3", "J-4"]


def test_iter_records_applies_filter(store, record_factory):
    store.create(record_factory(job_id="J-0", overall=40.0, calculated_at=at(0)))
    store.create(record_factory(job_id="J-1", overall=85.0, calculated_at=at(10)))
    store.create(record_factory(job_id="J-2", overall=90.0, calculated_at=at(30)))

    window = ScoreFilter(date_from=at(5), date_to=at(20))
    high = ScoreFilter(min_score=80.0)

    assert [record.job_id for record in store.iter_records(window)] == ["J-1"]
    assert [record.job_id for record in store.iter_records(high)] == ["J-1", "J-2"]
    assert store.count(ScoreFilter(job_id="J-0")) == 1


def test_bulk_create_reports_each_record(store, record_factory):
    records = [
        record_factory(job_id="J-1", calculated_at=at(0)),
        record_factory(job_id="J-2", calculated_at=at(1)),
        record_factory(job_id="J-1", overall=99.0, calculated_at=at(2)),
    ]

    results = store.bulk_create(records)

    assert [result.success for result in results] == [True, True, False]
    assert results[2].error == "ConflictError"
    assert store.count() == 2
