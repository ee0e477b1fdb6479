"""Skill overlap between a worker and a job."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from rapidfuzz import fuzz

from ...schemas import Component, JobProfile, WorkerProfile
from .base import ComponentScore, clamp_score

SKILL_VOCABULARY: tuple[str, ...] = (
    "javascript",
    "python",
    "java",
    "react",
    "node.js",
    "typescript",
    "html",
    "css",
    "sql",
    "mongodb",
    "aws",
    "docker",
    "kubernetes",
    "git",
    "agile",
    "scrum",
    "machine learning",
    "ai",
    "data science",
    "product management",
    "ux",
    "ui",
    "design",
    "devops",
    "cloud",
)


def _normalize(names: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for name in names:
        cleaned = name.strip().lower()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def extract_job_skills(
    job: JobProfile,
    vocabulary: Sequence[str] = SKILL_VOCABULARY,
) -> list[str]:
    """Return normalized job skills.

    Structured required skills win, then preferred skills; jobs without either
    fall back to whole-word matches of the vocabulary in title, description and
    requirements.
    """
    structured = _normalize(job.required_skills) or _normalize(job.preferred_skills)
    if structured:
        return structured

    text = job.searchable_text()
    if not text:
        return []
    return [
        term
        for term in _normalize(vocabulary)
        if re.search(rf"(?<![a-z0-9]){re.escape(term)}(?![a-z0-9])", text)
    ]


def match_skills(
    worker_skills: Sequence[str],
    job_skills: Sequence[str],
    *,
    fuzzy_threshold: float | None = None,
) -> list[str]:
    """Return the job skills covered by the worker's skills."""
    worker_set = set(worker_skills)
    matched: list[str] = []
    for skill in job_skills:
        if skill in worker_set:
            matched.append(skill)
            continue
        if fuzzy_threshold is None:
            continue
        if any(fuzz.ratio(skill, candidate) >= fuzzy_threshold for candidate in worker_set):
            matched.append(skill)
    return matched


@dataclass
class SkillsConfig:
    """Configuration for skill matching."""

    neutral_score: float = 70.0
    fuzzy_threshold: float | None = 90.0
    vocabulary: tuple[str, ...] = SKILL_VOCABULARY


class SkillsCalculator:
    """Fraction of the job's skills the worker already has."""

    component = Component.SKILLS

    def __init__(self, *, config: SkillsConfig | None = None) -> None:
        self._config = config or SkillsConfig()

    def evaluate(self, worker: WorkerProfile, job: JobProfile) -> ComponentScore:
        job_skills = extract_job_skills(job, self._config.vocabulary)
        if not job_skills:
            return ComponentScore(
                component=self.component,
                score=clamp_score(self._config.neutral_score),
                metadata={"job_skills": [], "matched": [], "missing": [], "status": "no_job_skills"},
            )

        matched = match_skills(
            worker.skill_names(),
            job_skills,
            fuzzy_threshold=self._config.fuzzy_threshold,
        )
        score = len(matched) / len(job_skills) * 100.0
        return ComponentScore(
            component=self.component,
            score=clamp_score(score),
            metadata={
                "job_skills": job_skills,
                "matched": matched,
                "missing": [skill for skill in job_skills if skill not in matched],
                "status": "ok",
            },
        )
