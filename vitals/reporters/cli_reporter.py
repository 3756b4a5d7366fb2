"""Human-readable terminal reporter.

Three layouts: a bordered panel (``render``), a flat summary used by
the check command (``render_summary``) and the detail view for a single
vital result (``render_result``).
"""

from __future__ import annotations

from shared.models import HealthStatus, VitalResult
from vitals.health_report import format_score
from vitals.reporters.base import BaseReporter

RULE = "━" * 50
PANEL_TOP = "╔═══════════════════════════════════════════╗"
PANEL_TITLE = "║   CODEBASE HEALTH REPORT                  ║"
PANEL_DIVIDER = "╠═══════════════════════════════════════════╣"
PANEL_BOTTOM = "╚═══════════════════════════════════════════╝"

# Fixed cutoff for the single-result view, independent of config thresholds
RESULT_HEALTHY_CUTOFF = 80
MAX_VIOLATIONS_SHOWN = 10

EMOJI_GLYPHS = {
    "positive": "🟢",
    "caution": "🟡",
    "negative": "🔴",
    "neutral": "⚪",
    "bullet": "•",
    "warning": "⚠️ ",
    "done": "✓",
    "summary": "📊",
    "tip": "💡",
}

PLAIN_GLYPHS = {
    "positive": "[OK]",
    "caution": "[!!]",
    "negative": "[XX]",
    "neutral": "[--]",
    "bullet": "-",
    "warning": "!",
    "done": "OK",
    "summary": "#",
    "tip": "*",
}

STATUS_TONES = {
    HealthStatus.EXCELLENT: "positive",
    HealthStatus.GOOD: "positive",
    HealthStatus.NEEDS_IMPROVEMENT: "caution",
    HealthStatus.HIGH_RISK: "negative",
}


def status_label(status: HealthStatus | str) -> str:
    """EXCELLENT, GOOD, NEEDS IMPROVEMENT, HIGH RISK."""
    value = status.value if isinstance(status, HealthStatus) else str(status)
    return value.upper().replace("_", " ")


class CliReporter(BaseReporter):
    @property
    def glyphs(self) -> dict[str, str]:
        return EMOJI_GLYPHS if self.config.output.color else PLAIN_GLYPHS

    def status_glyph(self, status: HealthStatus | str) -> str:
        """Glyph for a health tier; anything unrecognized gets the neutral one."""
        try:
            tone = STATUS_TONES.get(HealthStatus(status), "neutral")
        except ValueError:
            tone = "neutral"
        return self.glyphs[tone]

    def _pass_glyph(self, passed: bool) -> str:
        return self.glyphs["positive"] if passed else self.glyphs["negative"]

    def render(self) -> str:
        report = self.report
        g = self.glyphs
        output = [
            PANEL_TOP,
            PANEL_TITLE,
            PANEL_DIVIDER,
            f"║   Overall Score: {format_score(report.overall_score)}/100",
            f"║   Status: {self.status_glyph(report.health_status)} "
            f"{status_label(report.health_status)}",
            PANEL_DIVIDER,
        ]

        for result in report.vital_results:
            passed = report.is_healthy(result)
            output.append(
                f"║   {result.vital.value.capitalize()} Vital: "
                f"{self._pass_glyph(passed)} {format_score(result.score)}/100"
            )

        output.append(PANEL_DIVIDER)

        recommendations = report.recommendations
        if recommendations:
            output.append("║   Recommendations:")
            for rec in recommendations:
                output.append(f"║   {g['bullet']} {rec}")
        else:
            output.append(f"║   {g['done']} All vitals are healthy!")

        output.append(PANEL_BOTTOM)
        return "\n".join(output)

    def render_summary(self) -> str:
        report = self.report
        g = self.glyphs
        output = [
            RULE,
            f"{g['summary']} HEALTH REPORT",
            RULE,
            "",
            f" Overall Score: {format_score(report.overall_score)}/100 "
            f"({status_label(report.health_status)})",
        ]

        for result in report.vital_results:
            threshold = self.threshold_for_vital(result.vital)
            verdict = "PASS" if result.healthy(threshold) else "FAIL"
            output.append("")
            output.append(
                f"{result.vital.value.capitalize()}: "
                f"{self._pass_glyph(result.healthy(threshold))} {verdict}"
            )
            output.append(f"  Score: {format_score(result.score)}/100 (threshold: {threshold})")
            output.append(f"  Violations: {len(result.violations)}")

        recommendations = report.recommendations
        if recommendations:
            output.append("")
            output.append(f"{g['tip']} Recommendations:")
            for rec in recommendations:
                output.append(f"  {g['bullet']} {rec}")

        output.append("")
        output.append(RULE)
        return "\n".join(output)

    def render_result(self, result: VitalResult) -> str:
        """Detail view for one vital: score, status, first violations."""
        g = self.glyphs
        healthy = result.healthy(RESULT_HEALTHY_CUTOFF)
        status = "HEALTHY" if healthy else "NEEDS ATTENTION"
        output = [
            "",
            f"{g['summary']} Result:",
            f"  Score: {format_score(result.score)}/100",
            f"  Status: {self._pass_glyph(healthy)} {status}",
            f"  Violations: {len(result.violations)}",
        ]

        violations = result.violations
        if not violations:
            return "\n".join(output)

        output.append("")
        if len(violations) <= MAX_VIOLATIONS_SHOWN:
            output.append(f"{g['warning']} Top violations:")
        else:
            output.append(
                f"{g['warning']} {len(violations)} violations found "
                f"(showing first {MAX_VIOLATIONS_SHOWN}):"
            )

        for violation in violations[:MAX_VIOLATIONS_SHOWN]:
            output.append(f"  {g['bullet']} {violation.location} - {violation.label}")

        hidden = len(violations) - MAX_VIOLATIONS_SHOWN
        if hidden > 0:
            output.append(f"  ... and {hidden} more")

        output.append("")
        output.append(f"{g['done']} Analysis complete")
        return "\n".join(output)
