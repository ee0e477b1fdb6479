"""Error taxonomy for the match score engine."""

from __future__ import annotations

from typing import Any


class MatchScoreError(Exception):
    """Base class for engine errors."""


class ConflictError(MatchScoreError):
    """Raised when a current score already exists for a worker/job pair."""

    def __init__(self, worker_id: str, job_id: str):
        super().__init__(
            f"Score already calculated for worker {worker_id!r} and job {job_id!r}"
        )
        self.worker_id = worker_id
        self.job_id = job_id


class NotFoundError(MatchScoreError, LookupError):
    """Raised when a worker, job or score record does not exist."""

    def __init__(self, kind: str, identifier: Any):
        super().__init__(f"{kind} not found: {identifier!r}")
        self.kind = kind
        self.identifier = identifier


class ValidationError(MatchScoreError, ValueError):
    """Raised for malformed weights, thresholds or filter parameters."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class ProfileLoadError(MatchScoreError, ValueError):
    """Raised when profile loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[Any]):
        super().__init__("Profile loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Profile loading failed: {self.errors}"


__all__ = [
    "MatchScoreError",
    "ConflictError",
    "NotFoundError",
    "ValidationError",
    "ProfileLoadError",
]
