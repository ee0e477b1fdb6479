"""Pydantic configuration schema for YAML settings."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError


class CoreConfig(BaseModel):
    score_weights: dict[str, float] | None = None
    thresholds: dict[str, float] | None = None
    strength_threshold: float | None = None
    weakness_threshold: float | None = None
    version: str | None = None

    model_config = ConfigDict(extra="forbid")


class CalculatorConfig(BaseModel):
    skills: dict[str, Any] | None = None
    experience: dict[str, Any] | None = None
    location: dict[str, Any] | None = None
    availability: dict[str, Any] | None = None
    education: dict[str, Any] | None = None
    cultural: dict[str, Any] | None = None

    model_config = ConfigDict(extra="forbid")


class DatabaseConfig(BaseModel):
    url: str | None = None

    model_config = ConfigDict(extra="forbid")


class BatchConfig(BaseModel):
    max_workers: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    core: CoreConfig = Field(default_factory=CoreConfig)
    calculators: CalculatorConfig = Field(default_factory=CalculatorConfig)
    statistics: dict[str, Any] | None = None
    accuracy: dict[str, Any] | None = None
    recommendations: dict[str, Any] | None = None
    insights: dict[str, Any] | None = None
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        core = self.core.model_dump(exclude_none=True)
        if core:
            settings["core"] = core
        calculators = self.calculators.model_dump(exclude_none=True)
        if calculators:
            settings["calculators"] = calculators
        for section in ("statistics", "accuracy", "recommendations", "insights"):
            value = getattr(self, section)
            if value:
                settings[section] = dict(value)
        if self.database.url:
            settings["database"] = {"url": self.database.url}
        if self.batch.max_workers:
            settings["batch"] = {"max_workers": self.batch.max_workers}
        return settings


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValidationError("Config must be a mapping", field="config")
    try:
        return AppConfig.model_validate(raw)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(f"Invalid config: {first.get('msg')}", field=field) from exc
