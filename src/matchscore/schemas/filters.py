"""Query filters for score aggregation."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Mapping

import pendulum
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError


class TrendPeriod(str, Enum):
    """Calendar bucket used by trend series."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ScoreFilter(BaseModel):
    """Restricts the score population by pair, calculation time and score."""

    worker_id: str | None = None
    job_id: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    min_score: float | None = None
    max_score: float | None = None
    include_history: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("date_from", "date_to")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        # Naive bounds are read as UTC so they compare with aware ones.
        if value is None:
            return None
        return pendulum.instance(value, tz="UTC").in_timezone("UTC")

    @model_validator(mode="after")
    def _check_ranges(self) -> "ScoreFilter":
        for name in ("min_score", "max_score"):
            value = getattr(self, name)
            if value is not None and not 0.0 <= value <= 100.0:
                raise ValueError(f"{name} must be within [0, 100]")
        if (
            self.min_score is not None
            and self.max_score is not None
            and self.min_score > self.max_score
        ):
            raise ValueError("min_score must not exceed max_score")
        if (
            self.date_from is not None
            and self.date_to is not None
            and self.date_from > self.date_to
        ):
            raise ValueError("date_from must not be later than date_to")
        return self


def coerce_filter(raw: ScoreFilter | Mapping[str, Any] | None) -> ScoreFilter:
    """Build a ScoreFilter, translating schema errors into engine errors."""
    if raw is None:
        return ScoreFilter()
    if isinstance(raw, ScoreFilter):
        return raw
    if not isinstance(raw, Mapping):
        raise ValidationError("Filter must be a mapping", field="filter")
    try:
        return ScoreFilter.model_validate(dict(raw))
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(f"Invalid filter: {first.get('msg')}", field=field) from exc


def coerce_period(raw: TrendPeriod | str | None, default: TrendPeriod = TrendPeriod.MONTHLY) -> TrendPeriod:
    if raw is None:
        return default
    try:
        return TrendPeriod(raw)
    except ValueError as exc:
        raise ValidationError(f"Unsupported trend period: {raw!r}", field="period") from exc
