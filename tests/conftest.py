from __future__ import annotations

from typing import Any, Callable

import pendulum
import pytest

from matchscore.core import BucketThresholds
from matchscore.schemas import Component, JobProfile, ScoreRecord, WorkerProfile


@pytest.fixture
def worker_factory() -> Callable[..., WorkerProfile]:
    def build(**overrides: Any) -> WorkerProfile:
        data: dict[str, Any] = {
            "worker_id": "W-1",
            "name": "Ada Example",
            "skills": [{"name": "Python"}, {"name": "SQL"}],
            "years_experience": 3,
            "preferred_locations": [],
            "availability": "AVAILABLE",
            "education": [{"degree": "Bachelor of Science", "field": "Computer Science"}],
            "industry": "Finance",
        }
        data.update(overrides)
        return WorkerProfile.model_validate(data)

    return build


@pytest.fixture
def job_factory() -> Callable[..., JobProfile]:
    def build(**overrides: Any) -> JobProfile:
        data: dict[str, Any] = {
            "job_id": "J-1",
            "title": "Data Engineer",
            "required_skills": ["python", "sql", "aws"],
            "experience_level": "MID",
            "location": "Austin",
            "is_remote": False,
            "industry": "Retail",
            "category": "Engineering",
            "job_type": "FULL_TIME",
        }
        data.update(overrides)
        return JobProfile.model_validate(data)

    return build


@pytest.fixture
def record_factory() -> Callable[..., ScoreRecord]:
    thresholds = BucketThresholds()

    def build(
        worker_id: str = "W-1",
        job_id: str = "J-1",
        overall: float = 70.0,
        calculated_at: Any = None,
        **components: float,
    ) -> ScoreRecord:
        scores = {component.field_name: overall for component in Component}
        scores.update({f"{name}_score": value for name, value in components.items()})
        return ScoreRecord(
            worker_id=worker_id,
            job_id=job_id,
            calculated_at=calculated_at or pendulum.datetime(2024, 1, 1, tz="UTC"),
            overall_score=overall,
            recommendation=thresholds.bucket_for(overall),
            version="2.0",
            **scores,
        )

    return build
