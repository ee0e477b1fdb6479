"""Weighted combination of component scores into a ScoreRecord."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

import pendulum

from ..errors import ValidationError
from ..schemas import Component, JobProfile, RecommendationBucket, ScoreRecord, WorkerProfile
from .calculators import ComponentScore, clamp_score, default_calculators

SCORING_VERSION = "2.0"


@runtime_checkable
class ComponentCalculator(Protocol):
    """Calculator contract: one component, pure function of the two profiles."""

    component: Component

    def evaluate(self, worker: WorkerProfile, job: JobProfile) -> ComponentScore:
        """Return the component score for a worker/job pair."""


@dataclass(frozen=True)
class ScoreWeights:
    """Per-component weights; must be non-negative and sum to 1.0."""

    skills: float = 0.30
    experience: float = 0.25
    location: float = 0.15
    availability: float = 0.15
    education: float = 0.10
    cultural: float = 0.05

    TOLERANCE = 1e-6

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if not isinstance(value, (int, float)) or math.isnan(value) or value < 0:
                raise ValidationError(
                    f"Weight for {item.name!r} must be a non-negative number", field=item.name
                )
        total = sum(getattr(self, item.name) for item in fields(self))
        if abs(total - 1.0) > self.TOLERANCE:
            raise ValidationError(f"Score weights must sum to 1.0, got {total:.6f}", field="weights")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, float]) -> "ScoreWeights":
        known = {item.name for item in fields(cls)}
        unknown = set(raw) - known
        if unknown:
            raise ValidationError(f"Unknown weight components: {sorted(unknown)}", field="weights")
        return cls(**{key: float(value) for key, value in raw.items()})

    def weight(self, component: Component) -> float:
        return getattr(self, component.value)

    def as_dict(self) -> dict[str, float]:
        return {component.value: self.weight(component) for component in Component}


@dataclass(frozen=True)
class BucketThresholds:
    """Lower bounds of the excellent/good/average buckets; below average is poor."""

    excellent: float = 90.0
    good: float = 75.0
    average: float = 60.0

    def __post_init__(self) -> None:
        if not 0.0 < self.average < self.good < self.excellent <= 100.0:
            raise ValidationError(
                "Bucket thresholds must satisfy 0 < average < good < excellent <= 100",
                field="thresholds",
            )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, float]) -> "BucketThresholds":
        unknown = set(raw) - {"excellent", "good", "average"}
        if unknown:
            raise ValidationError(f"Unknown bucket thresholds: {sorted(unknown)}", field="thresholds")
        return cls(**{key: float(value) for key, value in raw.items()})

    def bucket_for(self, score: float) -> RecommendationBucket:
        if score >= self.excellent:
            return RecommendationBucket.EXCELLENT
        if score >= self.good:
            return RecommendationBucket.GOOD
        if score >= self.average:
            return RecommendationBucket.AVERAGE
        return RecommendationBucket.POOR


class WeightedScorer:
    """Runs the component calculators and weighs their output."""

    def __init__(
        self,
        calculators: Iterable[ComponentCalculator] | None = None,
        *,
        weights: ScoreWeights | Mapping[str, float] | None = None,
        thresholds: BucketThresholds | Mapping[str, float] | None = None,
        strength_threshold: float = 80.0,
        weakness_threshold: float = 50.0,
        suggestion_threshold: float = 60.0,
        version: str = SCORING_VERSION,
        now_provider: Any | None = None,
    ) -> None:
        self._calculators = self._index_calculators(
            calculators if calculators is not None else default_calculators()
        )
        if isinstance(weights, Mapping):
            weights = ScoreWeights.from_mapping(weights)
        if isinstance(thresholds, Mapping):
            thresholds = BucketThresholds.from_mapping(thresholds)
        self._weights = weights or ScoreWeights()
        self._thresholds = thresholds or BucketThresholds()
        self._strength_threshold = strength_threshold
        self._weakness_threshold = weakness_threshold
        self._suggestion_threshold = suggestion_threshold
        self._version = version
        self._now_provider = now_provider or (lambda: pendulum.now("UTC"))

    @property
    def weights(self) -> ScoreWeights:
        return self._weights

    @property
    def thresholds(self) -> BucketThresholds:
        return self._thresholds

    @property
    def version(self) -> str:
        return self._version

    def score(
        self,
        worker: WorkerProfile,
        job: JobProfile,
        *,
        calculated_at: datetime | None = None,
    ) -> ScoreRecord:
        results = {
            component: self._calculators[component].evaluate(worker, job)
            for component in Component
        }
        components = {
            component: round(clamp_score(result.score), 2)
            for component, result in results.items()
        }
        overall = self.combine(components)

        return ScoreRecord(
            worker_id=worker.worker_id,
            job_id=job.job_id,
            calculated_at=calculated_at or self._now_provider(),
            **{component.field_name: value for component, value in components.items()},
            overall_score=overall,
            strengths=self._strengths(components),
            weaknesses=self._weaknesses(components),
            suggestions=self._suggestions(components),
            recommendation=self._thresholds.bucket_for(overall),
            version=self._version,
            details={
                component.value: dict(result.metadata)
                for component, result in results.items()
            },
        )

    def combine(self, components: Mapping[Component, float]) -> float:
        total = sum(
            components.get(component, 0.0) * self._weights.weight(component)
            for component in Component
        )
        return round(clamp_score(total), 2)

    def _strengths(self, components: Mapping[Component, float]) -> list[str]:
        return [
            f"Strong {component.value} match"
            for component, value in components.items()
            if value >= self._strength_threshold
        ]

    def _weaknesses(self, components: Mapping[Component, float]) -> list[str]:
        return [
            f"Room for improvement in {component.value}"
            for component, value in components.items()
            if value <= self._weakness_threshold
        ]

    def _suggestions(self, components: Mapping[Component, float]) -> list[str]:
        suggestions = [
            f"Consider improving {component.value}"
            for component, value in components.items()
            if value < self._suggestion_threshold
        ]
        return suggestions or ["Strong match overall"]

    @staticmethod
    def _index_calculators(
        calculators: Iterable[ComponentCalculator],
    ) -> dict[Component, ComponentCalculator]:
        indexed: dict[Component, ComponentCalculator] = {}
        for calculator in calculators:
            component = Component(calculator.component)
            if component in indexed:
                raise ValidationError(
                    f"Duplicate calculator for component {component.value!r}", field="calculators"
                )
            indexed[component] = calculator
        missing = [component.value for component in Component if component not in indexed]
        if missing:
            raise ValidationError(f"Missing calculators for components: {missing}", field="calculators")
        return indexed
