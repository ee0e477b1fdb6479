from __future__ import annotations

import pendulum
import pytest
from pydantic import ValidationError as PydanticValidationError

from matchscore.schemas import (
    ApplicationOutcome,
    Component,
    JobProfile,
    RecommendationBucket,
    ScoreRecord,
    WorkerProfile,
)


def test_worker_profile_normalizes_skill_names():
    worker = WorkerProfile.model_validate(
        {
            "worker_id": "W-9",
            "skills": [{"name": " Python "}, {"name": "SQL", "proficiency": "expert", "years": 4}],
            "availability": "LATER",
            "source_system": "crm",
        }
    )

    assert worker.skill_names() == ["python", "sql"]
    assert worker.availability == "LATER"
    assert worker.model_extra == {"source_system": "crm"}


def test_worker_skill_rejects_unknown_fields():
    with pytest.raises(PydanticValidationError):
        WorkerProfile.model_validate({"worker_id": "W-9", "skills": [{"name": "Go", "level": 3}]})


def test_job_searchable_text_is_lowercase():
    job = JobProfile(job_id="J-9", title="Senior Python Dev", requirements="AWS, Docker")

    assert job.searchable_text() == "senior python dev\naws, docker"


def test_score_record_is_immutable_and_bounded():
    record = ScoreRecord(
        worker_id="W-1",
        job_id="J-1",
        calculated_at=pendulum.datetime(2024, 1, 1, tz="UTC"),
        skills_score=10,
        experience_score=20,
        location_score=30,
        availability_score=40,
        education_score=50,
        cultural_score=60,
        overall_score=25,
        recommendation="poor",
        version="2.0",
    )

    assert record.pair == ("W-1", "J-1")
    assert record.recommendation is RecommendationBucket.POOR
    assert record.component_score(Component.EDUCATION) == 50
    assert list(record.component_scores()) == list(Component)
    with pytest.raises(PydanticValidationError):
        record.overall_score = 99
    with pytest.raises(PydanticValidationError):
        ScoreRecord.model_validate({**record.model_dump(), "skills_score": 120})


def test_outcome_pair():
    outcome = ApplicationOutcome(worker_id="W-1", job_id="J-1", status="HIRED", decided_at="2024-02-01")

    assert outcome.pair == ("W-1", "J-1")
