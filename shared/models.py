"""Shared data models for codebase vitals.

Core Pydantic models passed between the vital checks, the orchestrator,
the health report and the reporters.
"""

import copy
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


# --- Enums ---


class Vital(str, Enum):
    """Health dimensions measured for a codebase."""

    COMPLEXITY = "complexity"
    SMELLS = "smells"
    COVERAGE = "coverage"


class HealthStatus(str, Enum):
    """Classification tiers for an overall health score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs_improvement"
    HIGH_RISK = "high_risk"


class OutputFormat(str, Enum):
    CLI = "cli"
    JSON = "json"
    HTML = "html"


def _now() -> datetime:
    return datetime.now().astimezone()


# --- Results ---


class Violation(BaseModel):
    """A single issue reported by a vital check.

    Providers may attach extra fields (severity, context, coverage
    numbers); they are kept and serialized as-is.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    file: str
    line: int | None = None
    message: str | None = None
    type: str | None = None

    @model_validator(mode="after")
    def _require_label(self) -> "Violation":
        if not self.message and not self.type:
            raise ValueError("violation needs a message or a type")
        return self

    @property
    def label(self) -> str:
        """Text shown for the violation: its message, else its type."""
        return self.message or self.type or ""

    @property
    def location(self) -> str:
        if self.line is None:
            return self.file
        return f"{self.file}:{self.line}"


class VitalResult(BaseModel):
    """Outcome of one vital check run. Immutable once built.

    Violations are a tuple of frozen models and metadata is a read-only
    deep copy of what the check passed in.
    """

    model_config = ConfigDict(frozen=True)

    vital: Vital
    score: float
    violations: tuple[Violation, ...] = ()
    metadata: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    timestamp: datetime = Field(default_factory=_now)

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(copy.deepcopy(dict(value)))

    def healthy(self, threshold: float) -> bool:
        """True when the score meets the threshold (inclusive)."""
        return self.score >= threshold

    def to_dict(self) -> dict[str, Any]:
        return {
            "vital": self.vital.value,
            "score": self.score,
            "violations_count": len(self.violations),
            "violations": [v.model_dump(mode="json", exclude_none=True) for v in self.violations],
            "metadata": copy.deepcopy(dict(self.metadata)),
            "timestamp": self.timestamp.strftime(TIMESTAMP_FORMAT),
        }
