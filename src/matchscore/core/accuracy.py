"""Predictive accuracy of scores against hiring outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import structlog

from ..schemas import ApplicationOutcome, OutcomeStatus, ScoreRecord

logger = structlog.get_logger(__name__)


@dataclass
class AccuracyConfig:
    """Binary task definition: predicted hire vs. actual hire."""

    prediction_threshold: float = 75.0
    positive_statuses: tuple[str, ...] = (OutcomeStatus.HIRED.value,)
    precision_digits: int = 3


@dataclass(slots=True)
class ConfusionMatrix:
    true_positives: int = 0
    false_positives: int = 0
    true_negatives: int = 0
    false_negatives: int = 0

    @property
    def total(self) -> int:
        return self.true_positives + self.false_positives + self.true_negatives + self.false_negatives


@dataclass(slots=True)
class AccuracyReport:
    accuracy: float = 0.0
    precision: float = 0.0
    recall: float = 0.0
    f1_score: float = 0.0
    total: int = 0
    confusion_matrix: ConfusionMatrix = field(default_factory=ConfusionMatrix)


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


class AccuracyEvaluator:
    """Joins scores with outcomes on (worker_id, job_id) and scores the prediction."""

    def __init__(self, *, config: AccuracyConfig | None = None) -> None:
        self._config = config or AccuracyConfig()

    def evaluate(
        self,
        records: Iterable[ScoreRecord],
        outcomes: Iterable[ApplicationOutcome],
    ) -> AccuracyReport:
        # Later outcomes for the same pair replace earlier ones.
        statuses = {outcome.pair: outcome.status.upper() for outcome in outcomes}
        positives = {status.upper() for status in self._config.positive_statuses}

        matrix = ConfusionMatrix()
        for record in records:
            status = statuses.get(record.pair)
            if status is None:
                continue
            predicted = record.overall_score >= self._config.prediction_threshold
            actual = status in positives
            if predicted and actual:
                matrix.true_positives += 1
            elif predicted:
                matrix.false_positives += 1
            elif actual:
                matrix.false_negatives += 1
            else:
                matrix.true_negatives += 1

        report = self.report(matrix)
        logger.info(
            "accuracy.evaluated",
            total=report.total,
            accuracy=report.accuracy,
            precision=report.precision,
            recall=report.recall,
        )
        return report

    def report(self, matrix: ConfusionMatrix) -> AccuracyReport:
        total = matrix.total
        if not total:
            return AccuracyReport(confusion_matrix=matrix)

        precision = _ratio(matrix.true_positives, matrix.true_positives + matrix.false_positives)
        recall = _ratio(matrix.true_positives, matrix.true_positives + matrix.false_negatives)
        f1_score = _ratio(2 * precision * recall, precision + recall)
        digits = self._config.precision_digits
        return AccuracyReport(
            accuracy=round(_ratio(matrix.true_positives + matrix.true_negatives, total), digits),
            precision=round(precision, digits),
            recall=round(recall, digits),
            f1_score=round(f1_score, digits),
            total=total,
            confusion_matrix=matrix,
        )
