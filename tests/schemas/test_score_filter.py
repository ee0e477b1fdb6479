from __future__ import annotations

from datetime import datetime, timedelta

import pendulum
import pytest

from matchscore.errors import ValidationError
from matchscore.schemas import ScoreFilter, TrendPeriod, coerce_filter, coerce_period


def test_coerce_filter_accepts_mapping_and_none():
    assert coerce_filter(None) == ScoreFilter()

    score_filter = coerce_filter({"worker_id": "W-1", "min_score": 10, "max_score": 90})

    assert score_filter.worker_id == "W-1"
    assert score_filter.min_score == 10.0
    assert score_filter.include_history is False


def test_existing_filter_passes_through():
    score_filter = ScoreFilter(job_id="J-1")

    assert coerce_filter(score_filter) is score_filter


@pytest.mark.parametrize(
    "raw",
    [
        {"min_score": 80, "max_score": 20},
        {"min_score": -1},
        {"max_score": 101},
        {
            "date_from": pendulum.datetime(2024, 2, 1, tz="UTC"),
            "date_to": pendulum.datetime(2024, 1, 1, tz="UTC"),
        },
        {"limit": 10},
    ],
)
def test_invalid_filters_raise_validation_error(raw):
    with pytest.raises(ValidationError):
        coerce_filter(raw)


def test_non_mapping_filter_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        coerce_filter(["W-1"])
    assert excinfo.value.field == "filter"


def test_coerce_period():
    assert coerce_period(None) is TrendPeriod.MONTHLY
    assert coerce_period("daily") is TrendPeriod.DAILY
    assert coerce_period(TrendPeriod.WEEKLY) is TrendPeriod.WEEKLY
    with pytest.raises(ValidationError):
        coerce_period("hourly")


def test_naive_dates_are_read_as_utc():
    score_filter = coerce_filter(
        {
            "date_from": pendulum.datetime(2024, 1, 1, tz="Europe/Paris"),
            "date_to": datetime(2024, 2, 1),
        }
    )

    assert score_filter.date_to == pendulum.datetime(2024, 2, 1, tz="UTC")
    assert score_filter.date_from == pendulum.datetime(2023, 12, 31, 23, tz="UTC")
    assert score_filter.date_from.utcoffset() == timedelta(0)


def test_mixed_naive_and_aware_range_is_checked():
    with pytest.raises(ValidationError) as excinfo:
        coerce_filter(
            {
                "date_from": pendulum.datetime(2024, 2, 1, tz="UTC"),
                "date_to": datetime(2024, 1, 1),
            }
        )
    assert "date_from" in str(excinfo.value)
