"""Base class for vital checks.

A vital check takes a filesystem path and produces a VitalResult. The
check's vital tag comes from its class name (``SmellsVital`` ->
``smells``) and is fixed at construction.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from shared.config import VitalsConfig
from shared.errors import PathNotFoundError
from shared.models import Violation, Vital, VitalResult

_SUFFIX = re.compile(r"Vital$")


class BaseVital(ABC):
    """Contract shared by every vital check."""

    def __init__(self, config: VitalsConfig):
        self.config = config
        self._name = Vital(_SUFFIX.sub("", type(self).__name__).lower())

    @property
    def name(self) -> Vital:
        return self._name

    @property
    def threshold(self) -> int:
        """Pass/fail cutoff for this vital, read from config."""
        return self.config.threshold_for(self._name)

    @abstractmethod
    def check(self, path: str | Path) -> VitalResult:
        """Analyze path and return the result for this vital."""

    def _resolve(self, path: str | Path) -> Path:
        """Expand path, raising PathNotFoundError if it is missing."""
        resolved = Path(path).expanduser().resolve()
        if not resolved.exists():
            raise PathNotFoundError(str(resolved))
        return resolved

    def _create_result(
        self,
        score: float,
        violations: list[Violation] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> VitalResult:
        return VitalResult(
            vital=self._name,
            score=max(score, 0),
            violations=tuple(violations or ()),
            metadata=metadata or {},
        )
