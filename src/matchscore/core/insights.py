"""Per-worker insights derived from score history and application outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..schemas import ApplicationOutcome, Component, OutcomeStatus, RecommendationBucket, ScoreRecord
from .scoring import BucketThresholds
from .statistics import BucketShare, TrendDirection, classify_trend, summarize_distribution


@dataclass
class InsightConfig:
    low_overall_threshold: float = 70.0
    low_component_threshold: float = 60.0
    success_margin: float = 10.0
    success_statuses: tuple[str, ...] = (OutcomeStatus.HIRED.value, OutcomeStatus.OFFERED.value)
    history_limit: int = 50
    recent_limit: int = 5
    trend_change_threshold: float = 0.10


@dataclass(slots=True)
class SuccessCorrelation:
    successful_applications: int = 0
    average_score_for_success: float = 0.0
    success_rate: float = 0.0


@dataclass(slots=True)
class WorkerStatistics:
    total: int = 0
    average_score: float = 0.0
    component_averages: dict[Component, float] = field(default_factory=dict)
    distribution: dict[RecommendationBucket, BucketShare] = field(default_factory=dict)
    trend: TrendDirection = "stable"
    success: SuccessCorrelation = field(default_factory=SuccessCorrelation)


@dataclass(slots=True)
class Insight:
    type: str
    title: str
    description: str
    severity: str
    component: str | None = None
    positive: bool = False


@dataclass(slots=True)
class ProfileRecommendation:
    type: str
    title: str
    description: str
    action: str
    priority: str


@dataclass(slots=True)
class WorkerInsights:
    worker_id: str
    statistics: WorkerStatistics
    insights: list[Insight]
    recommendations: list[ProfileRecommendation]
    recent: list[ScoreRecord]


class InsightGenerator:
    """Turns a worker's score history into readable insights and next steps."""

    def __init__(
        self,
        *,
        thresholds: BucketThresholds | None = None,
        config: InsightConfig | None = None,
    ) -> None:
        self._thresholds = thresholds or BucketThresholds()
        self._config = config or InsightConfig()

    @property
    def history_limit(self) -> int:
        return self._config.history_limit

    def generate(
        self,
        worker_id: str,
        records: Sequence[ScoreRecord],
        outcomes: Iterable[ApplicationOutcome] = (),
    ) -> WorkerInsights:
        """Build insights from records (newest first) and the worker's outcomes."""
        if not records:
            return WorkerInsights(
                worker_id=worker_id,
                statistics=WorkerStatistics(
                    distribution=summarize_distribution((), self._thresholds),
                ),
                insights=[],
                recommendations=[],
                recent=[],
            )

        statistics = self._statistics(records, list(outcomes))
        insights = self._insights(statistics)
        return WorkerInsights(
            worker_id=worker_id,
            statistics=statistics,
            insights=insights,
            recommendations=self._recommendations(insights),
            recent=list(records[: self._config.recent_limit]),
        )

    def _statistics(
        self,
        records: Sequence[ScoreRecord],
        outcomes: list[ApplicationOutcome],
    ) -> WorkerStatistics:
        scores = [record.overall_score for record in records]
        chronological = sorted(records, key=lambda record: record.calculated_at)

        scores_by_job = {record.job_id: record.overall_score for record in records}
        successes = {status.upper() for status in self._config.success_statuses}
        successful = [outcome for outcome in outcomes if outcome.status.upper() in successes]
        success_scores = [scores_by_job.get(outcome.job_id, 0.0) for outcome in successful]

        return WorkerStatistics(
            total=len(records),
            average_score=sum(scores) / len(scores),
            component_averages={
                component: sum(record.component_score(component) for record in records) / len(records)
                for component in Component
            },
            distribution=summarize_distribution(scores, self._thresholds),
            trend=classify_trend(
                [record.overall_score for record in chronological],
                self._config.trend_change_threshold,
            ),
            success=SuccessCorrelation(
                successful_applications=len(successful),
                average_score_for_success=(
                    sum(success_scores) / len(success_scores) if success_scores else 0.0
                ),
                success_rate=len(successful) / len(outcomes) * 100.0 if outcomes else 0.0,
            ),
        )

    def _insights(self, stats: WorkerStatistics) -> list[Insight]:
        insights: list[Insight] = []

        if stats.average_score < self._config.low_overall_threshold:
            insights.append(
                Insight(
                    type="OVERALL_SCORE",
                    title="Below Average Match Score",
                    description=(
                        f"Your average match score is {stats.average_score:.1f}%, which is below "
                        f"the recommended threshold of {self._config.low_overall_threshold:.0f}%."
                    ),
                    severity="HIGH",
                    component="overall",
                )
            )

        for component, average in stats.component_averages.items():
            if average < self._config.low_component_threshold:
                insights.append(
                    Insight(
                        type="COMPONENT_SCORE",
                        title=f"Low {component.value.capitalize()} Score",
                        description=f"Your average {component.value} score is {average:.1f}%.",
                        severity="MEDIUM",
                        component=component.value,
                    )
                )

        if stats.success.average_score_for_success > stats.average_score + self._config.success_margin:
            insights.append(
                Insight(
                    type="SUCCESS_CORRELATION",
                    title="Successful Applications Have Higher Match Scores",
                    description="Applications with higher match scores are more likely to result in offers.",
                    severity="LOW",
                )
            )

        if stats.trend == "declining":
            insights.append(
                Insight(
                    type="TREND",
                    title="Declining Match Scores",
                    description="Your recent match scores are lower than previous ones.",
                    severity="MEDIUM",
                )
            )
        elif stats.trend == "improving":
            insights.append(
                Insight(
                    type="TREND",
                    title="Improving Match Scores",
                    description="Your recent match scores are showing improvement.",
                    severity="LOW",
                    positive=True,
                )
            )

        return insights

    @staticmethod
    def _recommendations(insights: list[Insight]) -> list[ProfileRecommendation]:
        recommendations: list[ProfileRecommendation] = []
        for insight in insights:
            if insight.type == "OVERALL_SCORE":
                recommendations.append(
                    ProfileRecommendation(
                        type="IMPROVE_PROFILE",
                        title="Enhance Your Profile",
                        description="Consider adding more skills, experiences, and detailed information to your profile.",
                        action="Update profile",
                        priority="HIGH",
                    )
                )
            elif insight.type == "COMPONENT_SCORE" and insight.component == Component.SKILLS.value:
                recommendations.append(
                    ProfileRecommendation(
                        type="ADD_SKILLS",
                        title="Add More Relevant Skills",
                        description="Identify and add skills that are in high demand for your target roles.",
                        action="Add skills",
                        priority="MEDIUM",
                    )
                )
            elif insight.type == "COMPONENT_SCORE" and insight.component == Component.EXPERIENCE.value:
                recommendations.append(
                    ProfileRecommendation(
                        type="ENHANCE_EXPERIENCE",
                        title="Highlight Relevant Experience",
                        description="Focus on experience that matches your target job requirements.",
                        action="Update experience",
                        priority="MEDIUM",
                    )
                )
            elif insight.type == "SUCCESS_CORRELATION":
                recommendations.append(
                    ProfileRecommendation(
                        type="TARGET_HIGH_MATCH",
                        title="Target High-Match Positions",
                        description="Focus on applying to positions where you have a higher match score.",
                        action="View high-match jobs",
                        priority="LOW",
                    )
                )

        if not recommendations:
            recommendations.append(
                ProfileRecommendation(
                    type="CONTINUE_STRATEGY",
                    title="Continue Current Strategy",
                    description="Your match scores are good. Continue applying to similar positions.",
                    action="Browse jobs",
                    priority="LOW",
                )
            )
        return recommendations
