from __future__ import annotations

import pendulum
import pytest

from matchscore.core import InsightGenerator
from matchscore.schemas import ApplicationOutcome, Component, RecommendationBucket


def at(n: int):
    return pendulum.datetime(2024, 5, 1, tz="UTC").add(days=n)


def test_no_history_produces_empty_insights():
    result = InsightGenerator().generate("W-1", [])

    assert result.insights == []
    assert result.recommendations == []
    assert result.recent == []
    assert result.statistics.total == 0
    assert all(share.count == 0 for share in result.statistics.distribution.values())


def test_low_scores_flag_overall_and_components(record_factory):
    records = [
        record_factory(job_id="J-2", overall=55.0, calculated_at=at(1), cultural=75.0),
        record_factory(job_id="J-1", overall=50.0, calculated_at=at(0), cultural=75.0),
    ]

    result = InsightGenerator().generate("W-1", records)

    types = [(insight.type, insight.component) for insight in result.insights]
    assert ("OVERALL_SCORE", "overall") in types
    assert ("COMPONENT_SCORE", "skills") in types
    assert ("COMPONENT_SCORE", "experience") in types
    assert ("COMPONENT_SCORE", "cultural") not in types
    assert [rec.type for rec in result.recommendations][:3] == [
        "IMPROVE_PROFILE",
        "ADD_SKILLS",
        "ENHANCE_EXPERIENCE",
    ]
    assert result.statistics.average_score == pytest.approx(52.5)
    assert result.statistics.component_averages[Component.CULTURAL] == pytest.approx(75.0)
    assert result.statistics.distribution[RecommendationBucket.POOR].count == 2


def test_success_correlation_insight(record_factory):
    records = [
        record_factory(job_id="J-3", overall=95.0, calculated_at=at(2)),
        record_factory(job_id="J-2", overall=70.0, calculated_at=at(1)),
        record_factory(job_id="J-1", overall=70.0, calculated_at=at(0)),
    ]
    outcomes = [
        ApplicationOutcome(worker_id="W-1", job_id="J-3", status="OFFERED"),
        ApplicationOutcome(worker_id="W-1", job_id="J-2", status="REJECTED"),
    ]

    result = InsightGenerator().generate("W-1", records, outcomes)

    success = result.statistics.success
    assert success.successful_applications == 1
    assert success.average_score_for_success == pytest.approx(95.0)
    assert success.success_rate == pytest.approx(50.0)
    assert "SUCCESS_CORRELATION" in [insight.type for insight in result.insights]
    assert "TARGET_HIGH_MATCH" in [rec.type for rec in result.recommendations]


def test_trend_uses_chronological_order(record_factory):
    newest_first = [
        record_factory(job_id="J-4", overall=90.0, calculated_at=at(3)),
        record_factory(job_id="J-3", overall=90.0, calculated_at=at(2)),
        record_factory(job_id="J-2", overall=75.0, calculated_at=at(1)),
        record_factory(job_id="J-1", overall=75.0, calculated_at=at(0)),
    ]

    result = InsightGenerator().generate("W-1", newest_first)

    assert result.statistics.trend == "improving"
    trend = [insight for insight in result.insights if insight.type == "TREND"]
    assert trend and trend[0].positive is True


def test_good_history_keeps_current_strategy(record_factory):
    records = [record_factory(job_id=f"J-{idx}", overall=85.0, calculated_at=at(idx)) for idx in range(7)]

    result = InsightGenerator().generate("W-1", list(reversed(records)))

    assert result.insights == []
    assert [rec.type for rec in result.recommendations] == ["CONTINUE_STRATEGY"]
    assert [record.job_id for record in result.recent] == ["J-6", "J-5", "J-4", "J-3", "J-2"]
