"""Score records, outcomes and the enums that key them."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Component(str, Enum):
    """The six compatibility dimensions feeding the overall score."""

    SKILLS = "skills"
    EXPERIENCE = "experience"
    LOCATION = "location"
    AVAILABILITY = "availability"
    EDUCATION = "education"
    CULTURAL = "cultural"

    @property
    def field_name(self) -> str:
        return f"{self.value}_score"


class RecommendationBucket(str, Enum):
    """Four-way partition of overall scores."""

    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"


class OutcomeStatus(str, Enum):
    """Known final application statuses."""

    HIRED = "HIRED"
    OFFERED = "OFFERED"
    INTERVIEWING = "INTERVIEWING"
    PENDING = "PENDING"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


class ScoreRecord(BaseModel):
    """Immutable compatibility score for one worker/job pair."""

    worker_id: str
    job_id: str
    calculated_at: datetime
    skills_score: float = Field(ge=0.0, le=100.0)
    experience_score: float = Field(ge=0.0, le=100.0)
    location_score: float = Field(ge=0.0, le=100.0)
    availability_score: float = Field(ge=0.0, le=100.0)
    education_score: float = Field(ge=0.0, le=100.0)
    cultural_score: float = Field(ge=0.0, le=100.0)
    overall_score: float = Field(ge=0.0, le=100.0)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    recommendation: RecommendationBucket
    version: str
    details: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def pair(self) -> tuple[str, str]:
        return self.worker_id, self.job_id

    def component_score(self, component: Component) -> float:
        return getattr(self, component.field_name)

    def component_scores(self) -> dict[Component, float]:
        return {component: self.component_score(component) for component in Component}


class ApplicationOutcome(BaseModel):
    """Ground-truth hiring outcome for a worker/job pair."""

    worker_id: str
    job_id: str
    status: str

    model_config = ConfigDict(extra="allow")

    @property
    def pair(self) -> tuple[str, str]:
        return self.worker_id, self.job_id
