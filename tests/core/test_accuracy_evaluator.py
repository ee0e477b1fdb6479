from __future__ import annotations

import pytest

from matchscore.core import AccuracyConfig, AccuracyEvaluator
from matchscore.schemas import ApplicationOutcome


def outcome(job_id: str, status: str, worker_id: str = "W-1") -> ApplicationOutcome:
    return ApplicationOutcome(worker_id=worker_id, job_id=job_id, status=status)


def test_confusion_matrix_and_metrics(record_factory):
    records = [
        record_factory(job_id="J-1", overall=80.0),
        record_factory(job_id="J-2", overall=80.0),
        record_factory(job_id="J-3", overall=50.0),
        record_factory(job_id="J-4", overall=50.0),
        record_factory(job_id="J-5", overall=90.0),
    ]
    outcomes = [
        outcome("J-1", "HIRED"),
        outcome("J-2", "REJECTED"),
        outcome("J-3", "HIRED"),
        outcome("J-4", "WITHDRAWN"),
    ]

    report = AccuracyEvaluator().evaluate(records, outcomes)

    matrix = report.confusion_matrix
    assert (matrix.true_positives, matrix.false_positives, matrix.false_negatives, matrix.true_negatives) == (1, 1, 1, 1)
    assert report.total == matrix.total == 4
    assert report.accuracy == pytest.approx(0.5)
    assert report.precision == pytest.approx(0.5)
    assert report.recall == pytest.approx(0.5)
    assert report.f1_score == pytest.approx(0.5)


def test_no_joined_pairs_reports_zeros(record_factory):
    report = AccuracyEvaluator().evaluate([record_factory()], [])

    assert report.total == 0
    assert report.accuracy == report.precision == report.recall == report.f1_score == 0.0


def test_zero_denominators_do_not_fail(record_factory):
    records = [record_factory(job_id="J-1", overall=40.0), record_factory(job_id="J-2", overall=30.0)]

    report = AccuracyEvaluator().evaluate(records, [outcome("J-1", "REJECTED"), outcome("J-2", "PENDING")])

    assert report.accuracy == pytest.approx(1.0)
    assert report.precision == 0.0
    assert report.recall == 0.0
    assert report.f1_score == 0.0


def test_threshold_boundary_and_last_outcome_wins(record_factory):
    records = [record_factory(job_id="J-1", overall=75.0)]
    outcomes = [outcome("J-1", "PENDING"), outcome("J-1", "hired")]

    report = AccuracyEvaluator().evaluate(records, outcomes)

    assert report.confusion_matrix.true_positives == 1


def test_metrics_are_rounded(record_factory):
    records = [
        record_factory(job_id="J-1", overall=80.0),
        record_factory(job_id="J-2", overall=80.0),
        record_factory(job_id="J-3", overall=80.0),
    ]
    outcomes = [outcome("J-1", "HIRED"), outcome("J-2", "REJECTED"), outcome("J-3", "REJECTED")]

    report = AccuracyEvaluator().evaluate(records, outcomes)

    assert report.precision == 0.333
    assert report.f1_score == 0.5


def test_positive_statuses_are_configurable(record_factory):
    evaluator = AccuracyEvaluator(config=AccuracyConfig(positive_statuses=("HIRED", "OFFERED")))

    report = evaluator.evaluate([record_factory(overall=90.0)], [outcome("J-1", "OFFERED")])

    assert report.confusion_matrix.true_positives == 1
