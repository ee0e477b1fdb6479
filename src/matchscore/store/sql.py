"""SQLAlchemy-backed score store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator

import pendulum
import structlog
from sqlalchemy import Select, func, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from ..errors import ConflictError, MatchScoreError, NotFoundError
from ..schemas import ScoreFilter, ScoreRecord
from .database import create_session_factory, init_schema, session_scope
from .models import MatchScore

logger = structlog.get_logger(__name__)

_ORDERABLE = {
    "calculated_at": MatchScore.calculated_at,
    "overall_score": MatchScore.overall_score,
}


@dataclass(slots=True)
class BulkCreateResult:
    """Per-record outcome of a bulk insert."""

    worker_id: str
    job_id: str
    success: bool
    record: ScoreRecord | None = None
    error: str | None = None
    message: str | None = None


def to_utc(value: datetime) -> pendulum.DateTime:
    """Normalize to aware UTC; naive values are taken to be UTC already."""
    return pendulum.instance(value, tz="UTC").in_timezone("UTC")


class SqlScoreStore:
    """Score persistence with a storage-level one-current-record-per-pair rule."""

    def __init__(self, engine: Engine, *, create_schema: bool = True) -> None:
        self._engine = engine
        self._sessions = create_session_factory(engine)
        if create_schema:
            init_schema(engine)

    def create(self, record: ScoreRecord, *, force: bool = False) -> ScoreRecord:
        """Persist a record as the pair's current score.

        Without ``force`` an existing current record raises ConflictError; with
        it the previous record is kept as history and the new one becomes
        current in the same transaction.
        """
        try:
            with session_scope(self._sessions) as session:
                current = session.execute(
                    self._current_stmt(record.worker_id, record.job_id)
                ).scalar_one_or_none()
                if current is not None:
                    if not force:
                        raise ConflictError(record.worker_id, record.job_id)
                    session.execute(
                        update(MatchScore)
                        .where(MatchScore.id == current.id)
                        .values(is_current=False)
                    )
                    session.flush()
                row = self._to_row(record)
                session.add(row)
                session.flush()
                stored = self._to_record(row)
        except IntegrityError as exc:
            logger.warning(
                "store.conflict",
                worker_id=record.worker_id,
                job_id=record.job_id,
                error=str(exc.orig),
            )
            raise ConflictError(record.worker_id, record.job_id) from exc
        return stored

    def bulk_create(self, records: Iterable[ScoreRecord], *, force: bool = False) -> list[BulkCreateResult]:
        """Insert records one transaction each; failures are reported, not raised."""
        results: list[BulkCreateResult] = []
        for record in records:
            try:
                stored = self.create(record, force=force)
            except MatchScoreError as exc:
                results.append(
                    BulkCreateResult(
                        worker_id=record.worker_id,
                        job_id=record.job_id,
                        success=False,
                        error=type(exc).__name__,
                        message=str(exc),
                    )
                )
                continue
            results.append(
                BulkCreateResult(
                    worker_id=record.worker_id,
                    job_id=record.job_id,
                    success=True,
                    record=stored,
                )
            )
        logger.info(
            "store.bulk_create",
            total=len(results),
            failed=sum(1 for result in results if not result.success),
        )
        return results

    def get_current(self, worker_id: str, job_id: str) -> ScoreRecord | None:
        with session_scope(self._sessions) as session:
            row = session.execute(self._current_stmt(worker_id, job_id)).scalar_one_or_none()
            return self._to_record(row) if row is not None else None

    def find_by_pair(self, worker_id: str, job_id: str) -> ScoreRecord:
        record = self.get_current(worker_id, job_id)
        if record is None:
            raise NotFoundError("score", (worker_id, job_id))
        return record

    def history(self, worker_id: str, job_id: str) -> list[ScoreRecord]:
        """Every record for the pair, newest first."""
        stmt = (
            select(MatchScore)
            .where(MatchScore.worker_id == worker_id, MatchScore.job_id == job_id)
            .order_by(MatchScore.calculated_at.desc(), MatchScore.id.desc())
        )
        with session_scope(self._sessions) as session:
            return [self._to_record(row) for row in session.execute(stmt).scalars()]

    def find_by_worker(
        self,
        worker_id: str,
        *,
        limit: int | None = None,
        offset: int = 0,
        order_by: str = "calculated_at",
        descending: bool = True,
        include_history: bool = False,
    ) -> list[ScoreRecord]:
        stmt = select(MatchScore).where(MatchScore.worker_id == worker_id)
        return self._page(stmt, limit, offset, order_by, descending, include_history)

    def find_by_job(
        self,
        job_id: str,
        *,
        limit: int | None = None,
        offset: int = 0,
        order_by: str = "calculated_at",
        descending: bool = True,
        include_history: bool = False,
    ) -> list[ScoreRecord]:
        stmt = select(MatchScore).where(MatchScore.job_id == job_id)
        return self._page(stmt, limit, offset, order_by, descending, include_history)

    def count(self, score_filter: ScoreFilter | None = None) -> int:
        stmt = self._apply_filter(
            select(func.count()).select_from(MatchScore), score_filter or ScoreFilter()
        )
        with session_scope(self._sessions) as session:
            return int(session.execute(stmt).scalar_one())

    def iter_records(
        self,
        score_filter: ScoreFilter | None = None,
        *,
        batch_size: int = 500,
    ) -> Iterator[ScoreRecord]:
        """Stream matching records in chronological order, one page at a time."""
        base = self._apply_filter(select(MatchScore), score_filter or ScoreFilter()).order_by(
            MatchScore.calculated_at.asc(), MatchScore.id.asc()
        )
        last_id: int | None = None
        last_at: datetime | None = None
        while True:
            stmt = base
            if last_id is not None:
                stmt = stmt.where(
                    (MatchScore.calculated_at > last_at)
                    | ((MatchScore.calculated_at == last_at) & (MatchScore.id > last_id))
                )
            with session_scope(self._sessions) as session:
                rows = list(session.execute(stmt.limit(batch_size)).scalars())
                page = [(row.id, row.calculated_at, self._to_record(row)) for row in rows]
            if not page:
                return
            for _, _, record in page:
                yield record
            last_id, last_at, _ = page[-1]
            if len(page) < batch_size:
                return

    def _page(
        self,
        stmt: Select,
        limit: int | None,
        offset: int,
        order_by: str,
        descending: bool,
        include_history: bool,
    ) -> list[ScoreRecord]:
        column = _ORDERABLE.get(order_by)
        if column is None:
            raise ValueError(f"Unsupported order column: {order_by!r}")
        if not include_history:
            stmt = stmt.where(MatchScore.is_current.is_(True))
        stmt = stmt.order_by(column.desc() if descending else column.asc(), MatchScore.id.desc())
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        with session_scope(self._sessions) as session:
            return [self._to_record(row) for row in session.execute(stmt).scalars()]

    @staticmethod
    def _current_stmt(worker_id: str, job_id: str) -> Select:
        return select(MatchScore).where(
            MatchScore.worker_id == worker_id,
            MatchScore.job_id == job_id,
            MatchScore.is_current.is_(True),
        )

    @staticmethod
    def _apply_filter(stmt: Select, score_filter: ScoreFilter) -> Select:
        if not score_filter.include_history:
            stmt = stmt.where(MatchScore.is_current.is_(True))
        if score_filter.worker_id is not None:
            stmt = stmt.where(MatchScore.worker_id == score_filter.worker_id)
        if score_filter.job_id is not None:
            stmt = stmt.where(MatchScore.job_id == score_filter.job_id)
        if score_filter.date_from is not None:
            stmt = stmt.where(MatchScore.calculated_at >= to_utc(score_filter.date_from))
        if score_filter.date_to is not None:
            stmt = stmt.where(MatchScore.calculated_at <= to_utc(score_filter.date_to))
        if score_filter.min_score is not None:
            stmt = stmt.where(MatchScore.overall_score >= score_filter.min_score)
        if score_filter.max_score is not None:
            stmt = stmt.where(MatchScore.overall_score <= score_filter.max_score)
        return stmt

    @staticmethod
    def _to_row(record: ScoreRecord) -> MatchScore:
        return MatchScore(
            worker_id=record.worker_id,
            job_id=record.job_id,
            calculated_at=to_utc(record.calculated_at),
            is_current=True,
            skills_score=record.skills_score,
            experience_score=record.experience_score,
            location_score=record.location_score,
            availability_score=record.availability_score,
            education_score=record.education_score,
            cultural_score=record.cultural_score,
            overall_score=record.overall_score,
            strengths=list(record.strengths),
            weaknesses=list(record.weaknesses),
            suggestions=list(record.suggestions),
            recommendation=record.recommendation.value,
            version=record.version,
            details=dict(record.details),
        )

    @staticmethod
    def _to_record(row: MatchScore) -> ScoreRecord:
        return ScoreRecord(
            worker_id=row.worker_id,
            job_id=row.job_id,
            calculated_at=to_utc(row.calculated_at),
            skills_score=row.skills_score,
            experience_score=row.experience_score,
            location_score=row.location_score,
            availability_score=row.availability_score,
            education_score=row.education_score,
            cultural_score=row.cultural_score,
            overall_score=row.overall_score,
            strengths=list(row.strengths or []),
            weaknesses=list(row.weaknesses or []),
            suggestions=list(row.suggestions or []),
            recommendation=row.recommendation,
            version=row.version,
            details=dict(row.details or {}),
        )
