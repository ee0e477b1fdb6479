"""Component calculators for the six compatibility dimensions."""

from .base import ComponentScore, clamp_score
from .skills import SkillsCalculator, SkillsConfig, extract_job_skills, match_skills
from .experience import ExperienceCalculator, ExperienceConfig
from .location import LocationCalculator, LocationConfig, location_matches
from .availability import AvailabilityCalculator, AvailabilityConfig
from .education import EducationCalculator, EducationConfig
from .cultural import CulturalCalculator, CulturalConfig


def default_calculators() -> list:
    """One calculator per component, with default configuration."""
    return [
        SkillsCalculator(),
        ExperienceCalculator(),
        LocationCalculator(),
        AvailabilityCalculator(),
        EducationCalculator(),
        CulturalCalculator(),
    ]


__all__ = [
    "ComponentScore",
    "clamp_score",
    "default_calculators",
    "extract_job_skills",
    "match_skills",
    "location_matches",
    "SkillsCalculator",
    "SkillsConfig",
    "ExperienceCalculator",
    "ExperienceConfig",
    "LocationCalculator",
    "LocationConfig",
    "AvailabilityCalculator",
    "AvailabilityConfig",
    "EducationCalculator",
    "EducationConfig",
    "CulturalCalculator",
    "CulturalConfig",
]
