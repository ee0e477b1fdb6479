"""Aggregations over stored score records."""

from __future__ import annotations

import heapq
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Literal, Sequence

import pendulum
import structlog

from ..errors import ValidationError
from ..schemas import (
    Component,
    JobProfile,
    RecommendationBucket,
    ScoreFilter,
    ScoreRecord,
    TrendPeriod,
    WorkerProfile,
    coerce_period,
)
from .scoring import BucketThresholds

logger = structlog.get_logger(__name__)

TrendDirection = Literal["improving", "declining", "stable"]


@dataclass
class StatisticsConfig:
    """Aggregation parameters.

    ``component_sample_cap`` limits how many records feed the per-component
    breakdown (the earliest records in calculation order). On populations
    larger than the cap the breakdown describes that sample only; ``None``
    disables the cap.
    """

    component_sample_cap: int | None = 1000
    trend_change_threshold: float = 0.10
    top_n: int = 10
    default_period: TrendPeriod = TrendPeriod.MONTHLY

    def __post_init__(self) -> None:
        self.default_period = coerce_period(self.default_period)
        if self.trend_change_threshold < 0:
            raise ValidationError("trend_change_threshold must be non-negative", field="trend_change_threshold")
        if self.component_sample_cap is not None and self.component_sample_cap < 1:
            raise ValidationError("component_sample_cap must be positive or None", field="component_sample_cap")


@dataclass(slots=True)
class AverageScores:
    overall: float = 0.0
    components: dict[Component, float] = field(
        default_factory=lambda: {component: 0.0 for component in Component}
    )
    count: int = 0


@dataclass(slots=True)
class BucketShare:
    count: int = 0
    percent: float = 0.0


@dataclass(slots=True)
class ComponentSummary:
    average: float = 0.0
    max: float = 0.0
    min: float = 0.0
    std_dev: float = 0.0
    count: int = 0


@dataclass(slots=True)
class TrendPoint:
    period: str
    count: int
    average: float


@dataclass(slots=True)
class TopMatch:
    record: ScoreRecord
    worker: WorkerProfile | None = None
    job: JobProfile | None = None


@dataclass(slots=True)
class ScoreStatistics:
    total: int
    average: AverageScores
    distribution: dict[RecommendationBucket, BucketShare]
    by_component: dict[Component, ComponentSummary]
    trend: list[TrendPoint]
    trend_direction: TrendDirection
    top_matches: list[TopMatch]
    component_sample_size: int = 0


def period_key(moment: Any, period: TrendPeriod) -> str:
    """Calendar bucket label for a calculation time (UTC)."""
    dt = pendulum.instance(moment, tz="UTC").in_timezone("UTC")
    if period is TrendPeriod.DAILY:
        return dt.to_date_string()
    if period is TrendPeriod.WEEKLY:
        iso_year, iso_week, _ = dt.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    return dt.format("YYYY-MM")


def population_std_dev(values: Sequence[float], mean: float) -> float:
    if not values:
        return 0.0
    return math.sqrt(sum((value - mean) ** 2 for value in values) / len(values))


def classify_trend(scores: Sequence[float], threshold: float = 0.10) -> TrendDirection:
    """Compare the mean of the first half of a chronological series to the second.

    A relative change above ``threshold`` is improving, below ``-threshold``
    declining, otherwise stable.
    """
    if len(scores) < 2:
        return "stable"
    middle = len(scores) // 2
    first = sum(scores[:middle]) / middle
    second = sum(scores[middle:]) / (len(scores) - middle)
    if first == 0:
        return "improving" if second > 0 else "stable"
    change = (second - first) / first
    if change > threshold:
        return "improving"
    if change < -threshold:
        return "declining"
    return "stable"


def summarize_distribution(
    scores: Iterable[float],
    thresholds: BucketThresholds,
) -> dict[RecommendationBucket, BucketShare]:
    shares = {bucket: BucketShare() for bucket in RecommendationBucket}
    total = 0
    for score in scores:
        shares[thresholds.bucket_for(score)].count += 1
        total += 1
    if total:
        for share in shares.values():
            share.percent = share.count / total * 100.0
    return shares


class StatisticsEngine:
    """Computes score statistics from a streamed store read."""

    def __init__(
        self,
        store: Any,
        *,
        thresholds: BucketThresholds | None = None,
        config: StatisticsConfig | None = None,
        context_resolver: Callable[[str, str], tuple[WorkerProfile | None, JobProfile | None]] | None = None,
    ) -> None:
        self._store = store
        self._thresholds = thresholds or BucketThresholds()
        self._config = config or StatisticsConfig()
        self._context_resolver = context_resolver

    def statistics(
        self,
        score_filter: ScoreFilter | None = None,
        *,
        period: TrendPeriod | None = None,
        top_n: int | None = None,
    ) -> ScoreStatistics:
        return self.summarize(
            self._store.iter_records(score_filter or ScoreFilter()),
            period=period,
            top_n=top_n,
        )

    def summarize(
        self,
        records: Iterable[ScoreRecord],
        *,
        period: TrendPeriod | None = None,
        top_n: int | None = None,
    ) -> ScoreStatistics:
        """Single pass over records, expected in chronological order."""
        period = period or self._config.default_period
        top_n = self._config.top_n if top_n is None else top_n
        cap = self._config.component_sample_cap

        count = 0
        overall_sum = 0.0
        component_sums = {component: 0.0 for component in Component}
        component_samples: dict[Component, list[float]] = {component: [] for component in Component}
        overall_series: list[float] = []
        trend_buckets: dict[str, list[float]] = {}
        candidates: list[tuple[float, int, ScoreRecord]] = []

        for index, record in enumerate(records):
            count += 1
            overall_sum += record.overall_score
            overall_series.append(record.overall_score)
            in_sample = cap is None or index < cap
            for component, value in record.component_scores().items():
                component_sums[component] += value
                if in_sample:
                    component_samples[component].append(value)

            bucket = trend_buckets.setdefault(period_key(record.calculated_at, period), [0, 0.0])
            bucket[0] += 1
            bucket[1] += record.overall_score

            if top_n > 0:
                entry = (record.overall_score, -index, record)
                if len(candidates) < top_n:
                    heapq.heappush(candidates, entry)
                else:
                    heapq.heappushpop(candidates, entry)

        if cap is not None and count > cap:
            logger.info("statistics.component_sample_capped", total=count, sample=cap)

        average = AverageScores(count=count)
        if count:
            average.overall = overall_sum / count
            average.components = {
                component: total / count for component, total in component_sums.items()
            }

        return ScoreStatistics(
            total=count,
            average=average,
            distribution=summarize_distribution(overall_series, self._thresholds),
            by_component={
                component: self._summarize_component(values)
                for component, values in component_samples.items()
            },
            trend=[
                TrendPoint(period=key, count=int(values[0]), average=values[1] / values[0])
                for key, values in sorted(trend_buckets.items())
            ],
            trend_direction=classify_trend(overall_series, self._config.trend_change_threshold),
            top_matches=[
                self._with_context(record)
                for _, _, record in sorted(candidates, key=lambda item: (item[0], item[1]), reverse=True)
            ],
            component_sample_size=len(component_samples[Component.SKILLS]),
        )

    @staticmethod
    def _summarize_component(values: list[float]) -> ComponentSummary:
        if not values:
            return ComponentSummary()
        mean = sum(values) / len(values)
        return ComponentSummary(
            average=mean,
            max=max(values),
            min=min(values),
            std_dev=population_std_dev(values, mean),
            count=len(values),
        )

    def _with_context(self, record: ScoreRecord) -> TopMatch:
        if self._context_resolver is None:
            return TopMatch(record=record)
        worker, job = self._context_resolver(record.worker_id, record.job_id)
        return TopMatch(record=record, worker=worker, job=job)
