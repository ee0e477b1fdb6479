"""Core scoring engine components."""

from __future__ import annotations

from .accuracy import AccuracyConfig, AccuracyEvaluator, AccuracyReport, ConfusionMatrix
from .calculators import (
    AvailabilityCalculator,
    ComponentScore,
    CulturalCalculator,
    EducationCalculator,
    ExperienceCalculator,
    LocationCalculator,
    SkillsCalculator,
    default_calculators,
)
from .insights import InsightConfig, InsightGenerator, WorkerInsights
from .recommendations import JobRecommendation, RecommendationConfig, RecommendationEstimator
from .scoring import BucketThresholds, ComponentCalculator, ScoreWeights, WeightedScorer
from .statistics import (
    ScoreStatistics,
    StatisticsConfig,
    StatisticsEngine,
    TopMatch,
    TrendPoint,
    classify_trend,
)

__all__ = [
    "AccuracyConfig",
    "AccuracyEvaluator",
    "AccuracyReport",
    "AvailabilityCalculator",
    "BucketThresholds",
    "ComponentCalculator",
    "ComponentScore",
    "ConfusionMatrix",
    "CulturalCalculator",
    "EducationCalculator",
    "ExperienceCalculator",
    "InsightConfig",
    "InsightGenerator",
    "JobRecommendation",
    "LocationCalculator",
    "RecommendationConfig",
    "RecommendationEstimator",
    "ScoreStatistics",
    "ScoreWeights",
    "SkillsCalculator",
    "StatisticsConfig",
    "StatisticsEngine",
    "TopMatch",
    "TrendPoint",
    "WeightedScorer",
    "WorkerInsights",
    "classify_trend",
    "default_calculators",
]
