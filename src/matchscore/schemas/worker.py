"""Worker read model consumed by the scoring engine."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Availability(str, Enum):
    """Known worker availability states."""

    AVAILABLE = "AVAILABLE"
    SOON = "SOON"
    UNAVAILABLE = "UNAVAILABLE"


class RemotePreference(str, Enum):
    """Known remote-work preferences."""

    REMOTE = "REMOTE"
    HYBRID = "HYBRID"
    ONSITE = "ONSITE"


class WorkerSkill(BaseModel):
    """Skill declared on a worker profile."""

    name: str
    proficiency: str | None = None
    years: float | None = None

    model_config = ConfigDict(extra="forbid")


class EducationEntry(BaseModel):
    """Structured education history entry."""

    degree: str | None = None
    field: str | None = None
    institution: str | None = None

    model_config = ConfigDict(extra="forbid")


class WorkerProfile(BaseModel):
    """Worker snapshot owned by the worker-management subsystem.

    Availability and remote preference are plain strings so unknown values
    fall through to the calculators' neutral defaults instead of failing
    validation.
    """

    worker_id: str
    name: str | None = None
    skills: list[WorkerSkill] = Field(default_factory=list)
    years_experience: float | None = None
    preferred_locations: list[str] = Field(default_factory=list)
    remote_preference: str | None = None
    availability: str | None = None
    education: list[EducationEntry] = Field(default_factory=list)
    industry: str | None = None

    model_config = ConfigDict(extra="allow")

    def skill_names(self) -> list[str]:
        """Return normalized (lower-cased, stripped) skill names."""
        return [skill.name.strip().lower() for skill in self.skills if skill.name.strip()]
