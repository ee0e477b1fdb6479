"""Shared result type for component calculators."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from ...schemas import Component


@dataclass(slots=True)
class ComponentScore:
    """Normalized calculator output."""

    component: Component
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


def clamp_score(value: float) -> float:
    """Clamp into [0, 100]; NaN collapses to 0."""
    if math.isnan(value):
        return 0.0
    return min(max(float(value), 0.0), 100.0)
