"""Availability lookup."""

from __future__ import annotations

from dataclasses import dataclass, field

from ...schemas import Availability, Component, JobProfile, WorkerProfile
from .base import ComponentScore, clamp_score

AVAILABILITY_SCORES: dict[str, float] = {
    Availability.AVAILABLE.value: 100.0,
    Availability.SOON.value: 80.0,
    Availability.UNAVAILABLE.value: 0.0,
}


@dataclass
class AvailabilityConfig:
    scores: dict[str, float] = field(default_factory=lambda: dict(AVAILABILITY_SCORES))
    unknown_score: float = 60.0


class AvailabilityCalculator:
    component = Component.AVAILABILITY

    def __init__(self, *, config: AvailabilityConfig | None = None) -> None:
        self._config = config or AvailabilityConfig()

    def evaluate(self, worker: WorkerProfile, job: JobProfile) -> ComponentScore:
        state = (worker.availability or "").strip().upper()
        score = self._config.scores.get(state, self._config.unknown_score)
        return ComponentScore(
            component=self.component,
            score=clamp_score(score),
            metadata={"availability": state or None, "known": state in self._config.scores},
        )
