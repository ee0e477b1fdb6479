"""Location compatibility."""

from __future__ import annotations

from dataclasses import dataclass

from ...schemas import Component, JobProfile, WorkerProfile
from .base import ComponentScore, clamp_score


def location_matches(preferred_locations: list[str], job_location: str | None) -> list[str]:
    """Return preferred locations contained in the job location (case-insensitive)."""
    if not job_location:
        return []
    target = job_location.lower()
    return [
        location
        for location in preferred_locations
        if location.strip() and location.strip().lower() in target
    ]


@dataclass
class LocationConfig:
    remote_score: float = 100.0
    match_score: float = 90.0
    mismatch_score: float = 50.0
    unknown_location_score: float = 70.0


class LocationCalculator:
    """Remote jobs always fit; otherwise compare against preferred locations."""

    component = Component.LOCATION

    def __init__(self, *, config: LocationConfig | None = None) -> None:
        self._config = config or LocationConfig()

    def evaluate(self, worker: WorkerProfile, job: JobProfile) -> ComponentScore:
        if job.is_remote:
            return self._result(self._config.remote_score, status="remote")
        if not job.location:
            return self._result(self._config.unknown_location_score, status="no_job_location")

        matched = location_matches(worker.preferred_locations, job.location)
        if matched:
            return self._result(self._config.match_score, status="match", matched=matched)
        return self._result(self._config.mismatch_score, status="no_match")

    def _result(self, score: float, *, status: str, matched: list[str] | None = None) -> ComponentScore:
        return ComponentScore(
            component=self.component,
            score=clamp_score(score),
            metadata={"status": status, "matched": matched or []},
        )
