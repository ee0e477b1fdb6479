"""Highest education credential lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ...schemas import Component, EducationEntry, JobProfile, WorkerProfile
from .base import ComponentScore, clamp_score

EDUCATION_RANKS: tuple[str, ...] = ("HIGH_SCHOOL", "ASSOCIATE", "BACHELOR", "MASTER", "PHD")

EDUCATION_SCORES: dict[str, float] = {
    "PHD": 95.0,
    "MASTER": 90.0,
    "BACHELOR": 80.0,
    "ASSOCIATE": 60.0,
    "HIGH_SCHOOL": 40.0,
}

# Checked highest first; the first level with a matching keyword wins.
DEGREE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "PHD": ("phd", "ph.d", "doctor"),
    "MASTER": ("master", "mba"),
    "BACHELOR": ("bachelor",),
    "ASSOCIATE": ("associate",),
}


def classify_degree(degree: str | None) -> str:
    """Map degree text to a credential level, defaulting to HIGH_SCHOOL."""
    text = (degree or "").lower()
    for level, keywords in DEGREE_KEYWORDS.items():
        if any(keyword in text for keyword in keywords):
            return level
    return "HIGH_SCHOOL"


def highest_level(entries: Iterable[EducationEntry]) -> str | None:
    levels = [classify_degree(entry.degree) for entry in entries]
    if not levels:
        return None
    return max(levels, key=EDUCATION_RANKS.index)


@dataclass
class EducationConfig:
    scores: dict[str, float] = field(default_factory=lambda: dict(EDUCATION_SCORES))
    no_education_score: float = 50.0


class EducationCalculator:
    """Score the worker's highest credential."""

    component = Component.EDUCATION

    def __init__(self, *, config: EducationConfig | None = None) -> None:
        self._config = config or EducationConfig()

    def evaluate(self, worker: WorkerProfile, job: JobProfile) -> ComponentScore:
        level = highest_level(worker.education)
        if level is None:
            score = self._config.no_education_score
        else:
            score = self._config.scores.get(level, self._config.no_education_score)
        return ComponentScore(
            component=self.component,
            score=clamp_score(score),
            metadata={"highest_level": level, "records": len(worker.education)},
        )
