"""Years of experience against the job's required level."""

from __future__ import annotations

from dataclasses import dataclass, field

from ...schemas import Component, JobProfile, WorkerProfile
from .base import ComponentScore, clamp_score

EXPERIENCE_LEVEL_YEARS: dict[str, float] = {
    "ENTRY": 1.0,
    "JUNIOR": 2.0,
    "MID": 4.0,
    "SENIOR": 7.0,
    "LEAD": 10.0,
    "EXECUTIVE": 15.0,
}


@dataclass
class ExperienceConfig:
    """Level-to-years lookup and the threshold used for unknown levels."""

    level_years: dict[str, float] = field(default_factory=lambda: dict(EXPERIENCE_LEVEL_YEARS))
    default_years: float = 4.0


class ExperienceCalculator:
    """Full marks once the worker meets the level threshold, linear below it."""

    component = Component.EXPERIENCE

    def __init__(self, *, config: ExperienceConfig | None = None) -> None:
        self._config = config or ExperienceConfig()

    def required_years(self, level: str | None) -> float:
        if level:
            years = self._config.level_years.get(level.strip().upper())
            if years is not None:
                return years
        return self._config.default_years

    def evaluate(self, worker: WorkerProfile, job: JobProfile) -> ComponentScore:
        threshold = self.required_years(job.experience_level)
        worker_years = max(float(worker.years_experience or 0.0), 0.0)

        if threshold <= 0 or worker_years >= threshold:
            score = 100.0
        else:
            score = worker_years / threshold * 100.0

        return ComponentScore(
            component=self.component,
            score=clamp_score(score),
            metadata={
                "required_years": threshold,
                "worker_years": worker_years,
                "level": job.experience_level,
            },
        )
