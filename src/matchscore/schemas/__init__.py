"""Pydantic schema definitions for engine inputs and outputs."""

from __future__ import annotations

from .filters import ScoreFilter, TrendPeriod, coerce_filter, coerce_period
from .job import ExperienceLevel, JobProfile, SalaryBand
from .score import (
    ApplicationOutcome,
    Component,
    OutcomeStatus,
    RecommendationBucket,
    ScoreRecord,
)
from .worker import (
    Availability,
    EducationEntry,
    RemotePreference,
    WorkerProfile,
    WorkerSkill,
)

__all__ = [
    "ApplicationOutcome",
    "Availability",
    "Component",
    "EducationEntry",
    "ExperienceLevel",
    "JobProfile",
    "OutcomeStatus",
    "RecommendationBucket",
    "RemotePreference",
    "SalaryBand",
    "ScoreFilter",
    "ScoreRecord",
    "TrendPeriod",
    "WorkerProfile",
    "WorkerSkill",
    "coerce_filter",
    "coerce_period",
]
