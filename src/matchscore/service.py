"""Engine facade: scoring, persistence and read-side reporting."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Iterable, Mapping, Sequence

import structlog

from .core import (
    AccuracyEvaluator,
    AccuracyReport,
    InsightGenerator,
    JobRecommendation,
    RecommendationEstimator,
    ScoreStatistics,
    StatisticsEngine,
    WeightedScorer,
    WorkerInsights,
)
from .directory import ProfileDirectory
from .errors import ConflictError, MatchScoreError, NotFoundError, ValidationError
from .schemas import (
    JobProfile,
    ScoreFilter,
    ScoreRecord,
    TrendPeriod,
    WorkerProfile,
    coerce_filter,
    coerce_period,
)
from .store import ScoreStore


@dataclass(slots=True)
class ScoreCreatedEvent:
    """Emitted after a record is persisted, e.g. to refresh cached application scores."""

    record: ScoreRecord
    recalculated: bool


@dataclass(slots=True)
class BatchResult:
    worker_id: str | None
    job_id: str | None
    success: bool
    record: ScoreRecord | None = None
    existing: bool = False
    error: str | None = None
    message: str | None = None


ScoreListener = Callable[[ScoreCreatedEvent], None]

_ONE_MICROSECOND = timedelta(microseconds=1)


def default_max_workers(pair_count: int, per_core: int = 4) -> int:
    return max(1, min(pair_count, (os.cpu_count() or 1) * per_core))


class MatchScoreService:
    """Coordinates scorer, store and reporting engines."""

    def __init__(
        self,
        *,
        scorer: WeightedScorer,
        store: ScoreStore,
        directory: ProfileDirectory,
        statistics_engine: StatisticsEngine,
        estimator: RecommendationEstimator,
        accuracy_evaluator: AccuracyEvaluator,
        insight_generator: InsightGenerator,
        max_workers: int | None = None,
        listeners: Iterable[ScoreListener] = (),
    ) -> None:
        self._scorer = scorer
        self._store = store
        self._directory = directory
        self._statistics = statistics_engine
        self._estimator = estimator
        self._accuracy = accuracy_evaluator
        self._insights = insight_generator
        self._max_workers = max_workers
        self._listeners = list(listeners)
        self._logger = structlog.get_logger(__name__)

    def add_listener(self, listener: ScoreListener) -> None:
        self._listeners.append(listener)

    def score(self, worker_id: str, job_id: str, *, force_recalculate: bool = False) -> ScoreRecord:
        """Return the pair's score, calculating and persisting it when needed.

        Without ``force_recalculate`` an existing current record is returned
        as-is. With it a new record is written and the old one is kept as
        history.
        """
        previous = self._store.get_current(worker_id, job_id)
        if previous is not None and not force_recalculate:
            self._logger.debug("score.reused", worker_id=worker_id, job_id=job_id)
            return previous

        worker, job = self._load_pair(worker_id, job_id)
        record = self._calculate(worker, job, previous)
        stored, _ = self._persist(record, force=force_recalculate)
        return stored

    def batch_score(
        self,
        pairs: Iterable[tuple[str, str] | Mapping[str, str]],
        *,
        force_recalculate: bool = False,
    ) -> list[BatchResult]:
        """Score many pairs; each pair's failure is reported, never raised.

        Calculation fans out over a bounded thread pool, persistence runs
        sequentially in input order.
        """
        items = list(pairs)
        results: list[BatchResult | None] = [None] * len(items)
        pending: list[tuple[int, WorkerProfile, JobProfile, ScoreRecord | None]] = []

        for index, item in enumerate(items):
            worker_id = job_id = None
            try:
                worker_id, job_id = self._pair(item)
                previous = self._store.get_current(worker_id, job_id)
                if previous is not None and not force_recalculate:
                    results[index] = BatchResult(
                        worker_id=worker_id, job_id=job_id, success=True, record=previous, existing=True
                    )
                    continue
                worker, job = self._load_pair(worker_id, job_id)
            except MatchScoreError as exc:
                results[index] = self._failure(worker_id, job_id, exc)
                continue
            pending.append((index, worker, job, previous))

        if pending:
            max_workers = self._max_workers or default_max_workers(len(pending))
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                calculated = list(
                    pool.map(lambda item: self._calculate(item[1], item[2], item[3]), pending)
                )
            written: dict[tuple[str, str], ScoreRecord] = {}
            for (index, worker, job, _), record in zip(pending, calculated):
                # A pair repeated in one batch must stay ordered after its earlier copy.
                record = self._stamp_after(record, written.get(record.pair))
                try:
                    stored, created = self._persist(record, force=force_recalculate)
                except ConflictError as exc:
                    results[index] = self._failure(worker.worker_id, job.job_id, exc)
                    continue
                written[stored.pair] = stored
                results[index] = BatchResult(
                    worker_id=worker.worker_id,
                    job_id=job.job_id,
                    success=True,
                    record=stored,
                    existing=not created,
                )

        finished = [result for result in results if result is not None]
        self._logger.info(
            "batch.completed",
            total=len(finished),
            calculated=len(pending),
            failed=sum(1 for result in finished if not result.success),
        )
        return finished

    def history(self, worker_id: str, job_id: str) -> list[ScoreRecord]:
        return self._store.history(worker_id, job_id)

    def statistics(
        self,
        score_filter: ScoreFilter | Mapping[str, Any] | None = None,
        *,
        period: TrendPeriod | str | None = None,
        top_n: int | None = None,
    ) -> ScoreStatistics:
        return self._statistics.statistics(
            coerce_filter(score_filter),
            period=coerce_period(period) if period is not None else None,
            top_n=top_n,
        )

    def accuracy(self, score_filter: ScoreFilter | Mapping[str, Any] | None = None) -> AccuracyReport:
        resolved = coerce_filter(score_filter)
        return self._accuracy.evaluate(
            self._store.iter_records(resolved),
            self._directory.outcomes(resolved.worker_id),
        )

    def recommendations(self, worker_id: str, limit: int = 10) -> list[JobRecommendation]:
        """Rank jobs the worker has no score for by estimated score."""
        worker = self._directory.get_worker(worker_id)
        if worker is None:
            raise NotFoundError("worker", worker_id)

        scored = self._store.find_by_worker(worker_id)
        scored_job_ids = {record.job_id for record in scored}
        high_score_jobs = self._resolve_jobs(
            record.job_id
            for record in scored
            if record.overall_score >= self._estimator.high_score_threshold
        )
        categories = {job.category for job in high_score_jobs if job.category}

        candidates = [
            job
            for job in self._directory.list_jobs()
            if job.job_id not in scored_job_ids and (not categories or job.category in categories)
        ]
        ranked = self._estimator.estimate(worker, candidates, high_score_jobs)
        return ranked[: max(limit, 0)]

    def insights(self, worker_id: str) -> WorkerInsights:
        records = self._store.find_by_worker(worker_id, limit=self._insights.history_limit)
        scored_jobs = {record.job_id for record in records}
        outcomes = [
            outcome
            for outcome in self._directory.outcomes(worker_id)
            if outcome.job_id in scored_jobs
        ]
        return self._insights.generate(worker_id, records, outcomes)

    def resolve_context(self, worker_id: str, job_id: str) -> tuple[WorkerProfile | None, JobProfile | None]:
        return self._directory.get_worker(worker_id), self._directory.get_job(job_id)

    def _load_pair(self, worker_id: str, job_id: str) -> tuple[WorkerProfile, JobProfile]:
        worker = self._directory.get_worker(worker_id)
        if worker is None:
            raise NotFoundError("worker", worker_id)
        job = self._directory.get_job(job_id)
        if job is None:
            raise NotFoundError("job", job_id)
        return worker, job

    def _calculate(
        self,
        worker: WorkerProfile,
        job: JobProfile,
        previous: ScoreRecord | None,
    ) -> ScoreRecord:
        return self._stamp_after(self._scorer.score(worker, job), previous)

    @staticmethod
    def _stamp_after(record: ScoreRecord, previous: ScoreRecord | None) -> ScoreRecord:
        """Keep history strictly ordered even on coarse clocks."""
        if previous is None or record.calculated_at > previous.calculated_at:
            return record
        bumped = previous.calculated_at + _ONE_MICROSECOND
        return record.model_copy(update={"calculated_at": bumped})

    def _persist(self, record: ScoreRecord, *, force: bool) -> tuple[ScoreRecord, bool]:
        """Write the record; returns the current record and whether it is new."""
        try:
            stored = self._store.create(record, force=force)
        except ConflictError:
            existing = self._store.get_current(record.worker_id, record.job_id)
            if existing is None or force:
                raise
            # Lost a race with a concurrent writer; theirs is the current record.
            self._logger.info("score.race_lost", worker_id=record.worker_id, job_id=record.job_id)
            return existing, False

        self._logger.info(
            "score.created",
            worker_id=stored.worker_id,
            job_id=stored.job_id,
            overall_score=stored.overall_score,
            recommendation=stored.recommendation.value,
            recalculated=force,
        )
        self._notify(ScoreCreatedEvent(record=stored, recalculated=force))
        return stored, True

    def _notify(self, event: ScoreCreatedEvent) -> None:
        for listener in self._listeners:
            try:
                listener(event)
            except Exception as exc:  # noqa: BLE001
                self._logger.warning(
                    "score.listener_failed",
                    worker_id=event.record.worker_id,
                    job_id=event.record.job_id,
                    error=str(exc),
                )

    def _resolve_jobs(self, job_ids: Iterable[str]) -> list[JobProfile]:
        jobs: list[JobProfile] = []
        for job_id in job_ids:
            job = self._directory.get_job(job_id)
            if job is not None:
                jobs.append(job)
        return jobs

    @staticmethod
    def _pair(item: tuple[str, str] | Mapping[str, str] | Sequence[str]) -> tuple[str, str]:
        try:
            if isinstance(item, Mapping):
                worker_id, job_id = item["worker_id"], item["job_id"]
            else:
                worker_id, job_id = item
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError(f"Malformed pair: {item!r}", field="pairs") from exc
        return str(worker_id), str(job_id)

    def _failure(self, worker_id: str | None, job_id: str | None, exc: MatchScoreError) -> BatchResult:
        self._logger.warning(
            "batch.pair_failed",
            worker_id=worker_id,
            job_id=job_id,
            error=type(exc).__name__,
            message=str(exc),
        )
        return BatchResult(
            worker_id=worker_id,
            job_id=job_id,
            success=False,
            error=type(exc).__name__,
            message=str(exc),
        )


