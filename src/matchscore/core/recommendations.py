"""Cheap score estimates for jobs a worker has not been scored against."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from ..schemas import JobProfile, RemotePreference, WorkerProfile
from .calculators import extract_job_skills, location_matches, match_skills
from .calculators.skills import SKILL_VOCABULARY


@dataclass
class RecommendationConfig:
    """Heuristic weights for estimated scores."""

    base_score: float = 50.0
    similar_job_bonus: float = 20.0
    skills_bonus: float = 20.0
    location_bonus: float = 10.0
    remote_bonus: float = 10.0
    high_score_threshold: float = 75.0
    vocabulary: tuple[str, ...] = SKILL_VOCABULARY


@dataclass(slots=True)
class JobRecommendation:
    """A candidate job annotated with its estimated score.

    The estimate is weaker than a calculated ScoreRecord and is never
    persisted as one.
    """

    job: JobProfile
    estimated_score: float
    match_reasons: list[str]


class RecommendationEstimator:
    """Attribute-similarity heuristic used to rank unscored jobs."""

    def __init__(self, *, config: RecommendationConfig | None = None) -> None:
        self._config = config or RecommendationConfig()

    @property
    def high_score_threshold(self) -> float:
        return self._config.high_score_threshold

    def estimate(
        self,
        worker: WorkerProfile,
        candidate_jobs: Iterable[JobProfile],
        historical_high_score_jobs: Sequence[JobProfile] = (),
    ) -> list[JobRecommendation]:
        """Estimate each candidate job; ordered by estimate, highest first."""
        recommendations = [
            self.estimate_job(worker, job, historical_high_score_jobs)
            for job in candidate_jobs
        ]
        recommendations.sort(key=lambda item: (-item.estimated_score, item.job.job_id))
        return recommendations

    def estimate_job(
        self,
        worker: WorkerProfile,
        job: JobProfile,
        historical_high_score_jobs: Sequence[JobProfile] = (),
    ) -> JobRecommendation:
        score = self._config.base_score
        reasons: list[str] = []

        if any(self._similar(job, previous) for previous in historical_high_score_jobs):
            score += self._config.similar_job_bonus
            reasons.append("Similar to your high-scoring jobs")

        job_skills = extract_job_skills(job, self._config.vocabulary)
        matched = match_skills(worker.skill_names(), job_skills)
        if job_skills:
            score += len(matched) / len(job_skills) * self._config.skills_bonus
        if matched:
            reasons.append(f"Matches {len(matched)} required skills")

        if worker.industry and job.category and worker.industry == job.category:
            reasons.append("Industry match")

        if location_matches(worker.preferred_locations, job.location):
            score += self._config.location_bonus
            reasons.append("Location match")

        if job.is_remote and (worker.remote_preference or "").upper() == RemotePreference.REMOTE.value:
            score += self._config.remote_bonus
            reasons.append("Remote work preference match")

        return JobRecommendation(
            job=job,
            estimated_score=round(min(max(score, 0.0), 100.0), 2),
            match_reasons=reasons,
        )

    @staticmethod
    def _similar(job: JobProfile, previous: JobProfile) -> bool:
        return (
            job.category == previous.category
            and job.experience_level == previous.experience_level
            and job.job_type == previous.job_type
        )
