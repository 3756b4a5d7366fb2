"""Vital checks and the registry that maps vital names to them."""

from __future__ import annotations

from shared.config import VitalsConfig
from shared.errors import UnknownVitalError
from shared.models import Vital
from vitals.checks.base import BaseVital
from vitals.checks.complexity import ComplexityVital
from vitals.checks.coverage import CoverageVital
from vitals.checks.smells import SmellsVital

VITAL_CLASSES: dict[Vital, type[BaseVital]] = {
    Vital.COMPLEXITY: ComplexityVital,
    Vital.SMELLS: SmellsVital,
    Vital.COVERAGE: CoverageVital,
}


def resolve_vital(name: Vital | str) -> Vital:
    """Map a vital name to its tag. Raises UnknownVitalError for anything else."""
    try:
        vital = Vital(name)
    except ValueError:
        raise UnknownVitalError(name) from None
    if vital not in VITAL_CLASSES:
        raise UnknownVitalError(name)
    return vital


def create_vital(name: Vital | str, config: VitalsConfig) -> BaseVital:
    """Construct the check registered for a vital."""
    return VITAL_CLASSES[resolve_vital(name)](config)


__all__ = [
    "BaseVital",
    "ComplexityVital",
    "CoverageVital",
    "SmellsVital",
    "VITAL_CLASSES",
    "create_vital",
    "resolve_vital",
]
