"""Reporter interface shared by every output format."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shared.config import VitalsConfig
from shared.models import Vital
from vitals.health_report import HealthReport


class BaseReporter(ABC):
    """Renders a HealthReport to a string. Stateless between calls."""

    def __init__(self, report: HealthReport, config: VitalsConfig):
        self.report = report
        self.config = config

    @abstractmethod
    def render(self) -> str:
        """Full rendering of the report."""

    def render_summary(self) -> str:
        """Shorter rendering for the check command. Defaults to render()."""
        return self.render()

    def threshold_for_vital(self, vital: Vital | str) -> int:
        return self.config.threshold_for(vital)
