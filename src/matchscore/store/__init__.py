"""Score persistence."""

from __future__ import annotations

from typing import Iterable, Iterator, Protocol, runtime_checkable

from ..schemas import ScoreFilter, ScoreRecord
from .database import DEFAULT_DATABASE_URL, create_database_engine, init_schema, session_scope
from .sql import BulkCreateResult, SqlScoreStore


@runtime_checkable
class ScoreStore(Protocol):
    """Store contract consumed by the engine."""

    def create(self, record: ScoreRecord, *, force: bool = False) -> ScoreRecord:
        """Persist a record, raising ConflictError if the pair already has one."""

    def bulk_create(self, records: Iterable[ScoreRecord], *, force: bool = False) -> list[BulkCreateResult]:
        """Persist many records, reporting each outcome individually."""

    def get_current(self, worker_id: str, job_id: str) -> ScoreRecord | None:
        """Return the pair's current record, if any."""

    def find_by_pair(self, worker_id: str, job_id: str) -> ScoreRecord:
        """Return the pair's current record or raise NotFoundError."""

    def history(self, worker_id: str, job_id: str) -> list[ScoreRecord]:
        """Return all records for the pair, newest first."""

    def find_by_worker(self, worker_id: str, **options) -> list[ScoreRecord]:
        """Return a page of the worker's records."""

    def find_by_job(self, job_id: str, **options) -> list[ScoreRecord]:
        """Return a page of the job's records."""

    def count(self, score_filter: ScoreFilter | None = None) -> int:
        """Count records matching the filter."""

    def iter_records(self, score_filter: ScoreFilter | None = None, *, batch_size: int = 500) -> Iterator[ScoreRecord]:
        """Stream records matching the filter in chronological order."""


__all__ = [
    "DEFAULT_DATABASE_URL",
    "BulkCreateResult",
    "ScoreStore",
    "SqlScoreStore",
    "create_database_engine",
    "init_schema",
    "session_scope",
]
