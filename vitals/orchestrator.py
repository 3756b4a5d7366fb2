"""Vitals orchestrator.

Runs the configured vital checks against one path and aggregates the
results into a HealthReport. A check that has no data to work with
(NoDataAvailableError) is skipped; every other failure propagates.

Checks never depend on each other's results, so ``run_async`` may run
them concurrently and still produce the same report as ``run``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

import structlog

from shared.config import VitalsConfig, load_config
from shared.errors import NoDataAvailableError
from shared.models import Vital, VitalResult
from vitals.checks import BaseVital, create_vital
from vitals.health_report import HealthReport

logger = structlog.get_logger(__name__)

DEFAULT_VITALS: tuple[Vital, ...] = (Vital.COMPLEXITY, Vital.SMELLS, Vital.COVERAGE)


class Orchestrator:
    """Drives vital checks in configured order and builds the report."""

    def __init__(
        self,
        config: VitalsConfig | None = None,
        vitals: Sequence[Vital | str] = DEFAULT_VITALS,
    ):
        if config is None:
            config = load_config()
        self.config = config
        self.vitals_to_run = list(vitals)
        self.skipped: list[Vital] = []

    def _load_vitals(self) -> list[BaseVital]:
        """Build every configured check up front.

        Raises:
            UnknownVitalError: A configured name has no check. Raised before
                any check runs, so no partial report is produced.
        """
        return [create_vital(name, self.config) for name in self.vitals_to_run]

    def run(self, path: str | Path) -> HealthReport:
        """Run each configured vital against path, one at a time."""
        checks = self._load_vitals()
        self.skipped = []
        results: list[VitalResult] = []

        for vital in checks:
            try:
                results.append(vital.check(path))
            except NoDataAvailableError as e:
                self._skip(vital, e)

        return HealthReport(vital_results=results, config=self.config)

    async def run_async(self, path: str | Path) -> HealthReport:
        """Run all configured vitals concurrently in worker threads.

        Results keep the configured order regardless of completion order.
        """
        checks = self._load_vitals()
        self.skipped = []

        outcomes = await asyncio.gather(
            *[asyncio.to_thread(vital.check, path) for vital in checks],
            return_exceptions=True,
        )

        results: list[VitalResult] = []
        for vital, outcome in zip(checks, outcomes):
            if isinstance(outcome, NoDataAvailableError):
                self._skip(vital, outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(outcome)

        return HealthReport(vital_results=results, config=self.config)

    def _skip(self, vital: BaseVital, error: NoDataAvailableError) -> None:
        self.skipped.append(vital.name)
        logger.warning("vital_skipped", vital=vital.name.value, reason=str(error))
