"""Industry-based cultural fit."""

from __future__ import annotations

from dataclasses import dataclass

from ...schemas import Component, JobProfile, WorkerProfile
from .base import ComponentScore, clamp_score


@dataclass
class CulturalConfig:
    same_industry_score: float = 90.0
    default_score: float = 70.0


class CulturalCalculator:
    """Exact (case-sensitive) industry equality; everything else is neutral."""

    component = Component.CULTURAL

    def __init__(self, *, config: CulturalConfig | None = None) -> None:
        self._config = config or CulturalConfig()

    def evaluate(self, worker: WorkerProfile, job: JobProfile) -> ComponentScore:
        same = bool(worker.industry and job.industry and worker.industry == job.industry)
        score = self._config.same_industry_score if same else self._config.default_score
        return ComponentScore(
            component=self.component,
            score=clamp_score(score),
            metadata={"worker_industry": worker.industry, "job_industry": job.industry, "same_industry": same},
        )
