"""Reporters and the factory that picks one for an output format."""

from __future__ import annotations

import structlog

from shared.config import VitalsConfig
from shared.models import OutputFormat, VitalResult
from vitals.health_report import HealthReport
from vitals.reporters.base import BaseReporter
from vitals.reporters.cli_reporter import CliReporter
from vitals.reporters.json_reporter import JsonReporter

logger = structlog.get_logger(__name__)

REPORTERS: dict[OutputFormat, type[BaseReporter]] = {
    OutputFormat.CLI: CliReporter,
    OutputFormat.JSON: JsonReporter,
}


def create_reporter(
    fmt: OutputFormat | str | None,
    report: HealthReport,
    config: VitalsConfig,
) -> BaseReporter:
    """Reporter for an output format.

    Formats without a reporter of their own (html, unknown names, None)
    get the human-readable CliReporter.
    """
    try:
        output_format = OutputFormat(fmt) if fmt is not None else OutputFormat.CLI
    except ValueError:
        output_format = None

    reporter_cls = REPORTERS.get(output_format) if output_format else None
    if reporter_cls is None:
        logger.debug("reporter_fallback", requested=str(fmt), using=OutputFormat.CLI.value)
        reporter_cls = CliReporter
    return reporter_cls(report=report, config=config)


def reporter_for_result(result: VitalResult, config: VitalsConfig) -> CliReporter:
    """Human reporter over a report wrapping a single result."""
    report = HealthReport(vital_results=[result], config=config)
    return CliReporter(report=report, config=config)


__all__ = [
    "BaseReporter",
    "CliReporter",
    "JsonReporter",
    "REPORTERS",
    "create_reporter",
    "reporter_for_result",
]
