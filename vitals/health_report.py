"""Health report: weighted aggregation of vital results.

The overall score is a fixed-weight sum over the vitals that actually
ran. A vital that was skipped simply contributes nothing; the remaining
weights are not renormalized.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from shared.config import VitalsConfig
from shared.models import TIMESTAMP_FORMAT, HealthStatus, Vital, VitalResult

WEIGHTS: dict[Vital, float] = {
    Vital.COMPLEXITY: 0.40,
    Vital.SMELLS: 0.30,
    Vital.COVERAGE: 0.30,
}

# Lower bound (inclusive) of each tier, best first
STATUS_FLOORS: list[tuple[float, HealthStatus]] = [
    (90, HealthStatus.EXCELLENT),
    (75, HealthStatus.GOOD),
    (60, HealthStatus.NEEDS_IMPROVEMENT),
]


def weight_for(vital: Vital | str) -> float:
    """Weight of a vital in the overall score. Unknown vitals weigh 0."""
    try:
        return WEIGHTS.get(Vital(vital), 0.0)
    except ValueError:
        return 0.0


def compute_overall_score(results: list[VitalResult]) -> float:
    """Weighted sum of result scores, rounded to one decimal. 0 when empty."""
    if not results:
        return 0
    weighted_sum = sum(r.score * weight_for(r.vital) for r in results)
    return round(weighted_sum, 1)


def classify(score: float) -> HealthStatus:
    """Health tier for a score, clamped to 0-100 first.

    Tiers cover [90, 100], [75, 90), [60, 75) and [0, 60); a score above
    100 reads as 100.
    """
    score = min(max(score, 0), 100)
    for floor, status in STATUS_FLOORS:
        if score >= floor:
            return status
    return HealthStatus.HIGH_RISK


class HealthReport:
    """Aggregated view over a finished list of vital results.

    Read-only after construction: the score, status and recommendations
    are all derived from ``vital_results`` and ``config``.
    """

    def __init__(self, vital_results: list[VitalResult], config: VitalsConfig):
        self._vital_results = tuple(vital_results)
        self.config = config

    @property
    def vital_results(self) -> list[VitalResult]:
        return list(self._vital_results)

    @property
    def overall_score(self) -> float:
        return compute_overall_score(self.vital_results)

    @property
    def health_status(self) -> HealthStatus:
        return classify(self.overall_score)

    def threshold_for(self, vital: Vital | str) -> int:
        return self.config.threshold_for(vital)

    def is_healthy(self, result: VitalResult) -> bool:
        return result.healthy(self.threshold_for(result.vital))

    def all_healthy(self) -> bool:
        """True when every vital that ran meets its threshold."""
        return all(self.is_healthy(r) for r in self._vital_results)

    @property
    def recommendations(self) -> list[str]:
        recommendations: list[str] = []
        for result in self._vital_results:
            recommendations.extend(self._recommendations_for(result))
        return recommendations

    def _recommendations_for(self, result: VitalResult) -> list[str]:
        lines = []
        name = result.vital.value
        threshold = self.threshold_for(result.vital)

        if not result.healthy(threshold):
            lines.append(
                f"{name.capitalize()} vital is below threshold "
                f"({format_score(result.score)} < {threshold})"
            )

        if result.violations:
            lines.append(f"Address {len(result.violations)} {name} violations")

        return lines

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_score": round(self.overall_score, 1),
            "health_status": self.health_status.value,
            "vitals": [r.to_dict() for r in self._vital_results],
            "recommendations": self.recommendations,
            "generated_at": datetime.now().astimezone().strftime(TIMESTAMP_FORMAT),
        }


def format_score(score: float) -> str:
    """Render a score without a trailing .0 for whole numbers."""
    if float(score).is_integer():
        return str(int(score))
    return str(score)
