from __future__ import annotations

import pytest

from matchscore.core import RecommendationConfig, RecommendationEstimator


@pytest.fixture
def worker(worker_factory):
    return worker_factory(
        preferred_locations=["Austin"],
        remote_preference="REMOTE",
        industry="Engineering",
    )


def test_estimate_job_sums_matching_signals(worker, job_factory):
    job = job_factory(job_id="J-10", required_skills=["python", "sql"], location="Austin, TX")

    result = RecommendationEstimator().estimate_job(worker, job)

    assert result.estimated_score == pytest.approx(80.0)
    assert result.match_reasons == ["Matches 2 required skills", "Industry match", "Location match"]


def test_remote_preference_bonus(worker, job_factory):
    job = job_factory(job_id="J-11", required_skills=["go"], location=None, is_remote=True, category="Ops")

    result = RecommendationEstimator().estimate_job(worker, job)

    assert result.estimated_score == pytest.approx(60.0)
    assert result.match_reasons == ["Remote work preference match"]


def test_partial_skill_overlap_scales_bonus(worker, job_factory):
    job = job_factory(job_id="J-12", location="Denver", category="Ops")

    result = RecommendationEstimator().estimate_job(worker, job)

    assert result.estimated_score == pytest.approx(50.0 + 20.0 * 2 / 3, rel=1e-3)


def test_similar_high_scoring_job_bonus(worker, job_factory):
    previous = job_factory(job_id="J-OLD", category="Ops", experience_level="MID", job_type="FULL_TIME")
    job = job_factory(job_id="J-13", required_skills=["go"], location="Denver", category="Ops")

    result = RecommendationEstimator().estimate_job(worker, job, [previous])

    assert result.estimated_score == pytest.approx(70.0)
    assert result.match_reasons[0] == "Similar to your high-scoring jobs"


def test_estimate_orders_by_score_then_job_id(worker, job_factory):
    jobs = [
        job_factory(job_id="J-B", required_skills=["go"], location="Denver", category="Ops"),
        job_factory(job_id="J-A", required_skills=["go"], location="Denver", category="Ops"),
        job_factory(job_id="J-C", required_skills=["python"], location="Austin", category="Ops"),
    ]

    ranked = RecommendationEstimator().estimate(worker, jobs)

    assert [item.job.job_id for item in ranked] == ["J-C", "J-A", "J-B"]


def test_estimate_is_capped_at_100(worker, job_factory):
    estimator = RecommendationEstimator(config=RecommendationConfig(base_score=95.0))
    job = job_factory(required_skills=["python"], location="Austin")

    assert estimator.estimate_job(worker, job).estimated_score == 100.0
