"""Job read model consumed by the scoring engine."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ExperienceLevel(str, Enum):
    """Experience levels a job can require."""

    ENTRY = "ENTRY"
    JUNIOR = "JUNIOR"
    MID = "MID"
    SENIOR = "SENIOR"
    LEAD = "LEAD"
    EXECUTIVE = "EXECUTIVE"


class SalaryBand(BaseModel):
    """Salary range offered for a job."""

    min: float | None = None
    max: float | None = None
    currency: str | None = None

    model_config = ConfigDict(extra="forbid")


class JobProfile(BaseModel):
    """Job snapshot owned by the job-management subsystem."""

    job_id: str
    title: str = ""
    description: str = ""
    requirements: str = ""
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    experience_level: str | None = None
    location: str | None = None
    is_remote: bool = False
    industry: str | None = None
    category: str | None = None
    job_type: str | None = None
    company_name: str | None = None
    salary: SalaryBand | None = None

    model_config = ConfigDict(extra="allow")

    def searchable_text(self) -> str:
        """Lower-cased free text used for keyword skill extraction."""
        return "\n".join(
            part for part in (self.title, self.description, self.requirements) if part
        ).lower()
