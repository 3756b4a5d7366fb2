"""Tests for health report aggregation."""

import json

import pytest

from helpers import make_result
from shared.config import VitalsConfig
from shared.models import HealthStatus, Vital
from vitals.health_report import (
    WEIGHTS,
    HealthReport,
    classify,
    compute_overall_score,
    format_score,
    weight_for,
)


@pytest.fixture()
def three_vitals():
    return [
        make_result(Vital.COMPLEXITY, 90),
        make_result(Vital.SMELLS, 75, violations=1),
        make_result(Vital.COVERAGE, 85),
    ]


# --- Overall Score ---


class TestOverallScore:
    def test_weighted_sum(self, three_vitals, config):
        report = HealthReport(vital_results=three_vitals, config=config)
        # 90 * 0.4 + 75 * 0.3 + 85 * 0.3
        assert report.overall_score == 84.0

    def test_empty_is_zero(self, config):
        report = HealthReport(vital_results=[], config=config)
        assert report.overall_score == 0

    def test_missing_vital_not_renormalized(self, config):
        results = [make_result(Vital.COMPLEXITY, 90), make_result(Vital.SMELLS, 80)]
        report = HealthReport(vital_results=results, config=config)
        assert report.overall_score == 60.0

    def test_single_vital(self, config):
        report = HealthReport(vital_results=[make_result(Vital.COVERAGE, 100)], config=config)
        assert report.overall_score == 30.0

    def test_rounded_to_one_decimal(self):
        results = [make_result(Vital.COMPLEXITY, 77.77), make_result(Vital.SMELLS, 66.66)]
        assert compute_overall_score(results) == round(77.77 * 0.4 + 66.66 * 0.3, 1)

    def test_recomputation_is_stable(self, three_vitals, config):
        report = HealthReport(vital_results=three_vitals, config=config)
        assert report.overall_score == report.overall_score
        again = HealthReport(vital_results=three_vitals, config=config)
        assert again.overall_score == report.overall_score

    def test_weights(self):
        assert WEIGHTS == {Vital.COMPLEXITY: 0.40, Vital.SMELLS: 0.30, Vital.COVERAGE: 0.30}
        assert weight_for("complexity") == 0.40
        assert weight_for("performance") == 0.0


# --- Health Status ---


class TestHealthStatus:
    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (100, HealthStatus.EXCELLENT),
            (90, HealthStatus.EXCELLENT),
            (89.9, HealthStatus.GOOD),
            (75, HealthStatus.GOOD),
            (74.9, HealthStatus.NEEDS_IMPROVEMENT),
            (60, HealthStatus.NEEDS_IMPROVEMENT),
            (59.9, HealthStatus.HIGH_RISK),
            (0, HealthStatus.HIGH_RISK),
        ],
    )
    def test_boundaries(self, score, expected):
        assert classify(score) == expected

    @pytest.mark.parametrize(
        ("score", "expected"),
        [(130, HealthStatus.EXCELLENT), (-5, HealthStatus.HIGH_RISK)],
    )
    def test_out_of_range_scores_clamped(self, score, expected):
        assert classify(score) == expected

    def test_report_status(self, three_vitals, config):
        report = HealthReport(vital_results=three_vitals, config=config)
        assert report.health_status == HealthStatus.GOOD

    def test_empty_report_is_high_risk(self, config):
        assert HealthReport(vital_results=[], config=config).health_status == HealthStatus.HIGH_RISK


# --- Recommendations ---


class TestRecommendations:
    def test_unhealthy_with_violations_gives_two_lines(self, config):
        report = HealthReport(
            vital_results=[make_result(Vital.SMELLS, 75, violations=1)], config=config
        )
        assert report.recommendations == [
            "Smells vital is below threshold (75 < 80)",
            "Address 1 smells violations",
        ]

    def test_healthy_without_violations_gives_none(self, config):
        results = [
            make_result(Vital.COMPLEXITY, 95),
            make_result(Vital.SMELLS, 90),
            make_result(Vital.COVERAGE, 90),
        ]
        report = HealthReport(vital_results=results, config=config)
        assert report.recommendations == []

    def test_healthy_with_violations_gives_one_line(self, config):
        report = HealthReport(
            vital_results=[make_result(Vital.COMPLEXITY, 95, violations=3)], config=config
        )
        assert report.recommendations == ["Address 3 complexity violations"]

    def test_order_follows_results(self, config):
        results = [
            make_result(Vital.COVERAGE, 40),
            make_result(Vital.COMPLEXITY, 50, violations=2),
        ]
        report = HealthReport(vital_results=results, config=config)
        assert report.recommendations == [
            "Coverage vital is below threshold (40 < 90)",
            "Complexity vital is below threshold (50 < 90)",
            "Address 2 complexity violations",
        ]

    def test_uses_adjusted_threshold(self):
        config = VitalsConfig()
        config.smells.threshold = 70
        report = HealthReport(vital_results=[make_result(Vital.SMELLS, 75)], config=config)
        assert report.recommendations == []

    def test_fractional_score_shown(self, config):
        report = HealthReport(vital_results=[make_result(Vital.COVERAGE, 45.5)], config=config)
        assert report.recommendations == ["Coverage vital is below threshold (45.5 < 90)"]


# --- Health Checks ---


class TestAllHealthy:
    def test_all_healthy(self, config):
        results = [make_result(Vital.COMPLEXITY, 90), make_result(Vital.SMELLS, 80)]
        assert HealthReport(vital_results=results, config=config).all_healthy() is True

    def test_one_unhealthy(self, config):
        results = [make_result(Vital.COMPLEXITY, 90), make_result(Vital.SMELLS, 79)]
        assert HealthReport(vital_results=results, config=config).all_healthy() is False

    def test_empty_is_healthy(self, config):
        assert HealthReport(vital_results=[], config=config).all_healthy() is True


# --- Serialization ---


class TestSerialization:
    def test_to_dict_shape(self, three_vitals, config):
        data = HealthReport(vital_results=three_vitals, config=config).to_dict()
        assert set(data) == {
            "overall_score",
            "health_status",
            "vitals",
            "recommendations",
            "generated_at",
        }
        assert data["overall_score"] == 84.0
        assert data["health_status"] == "good"
        assert [v["vital"] for v in data["vitals"]] == ["complexity", "smells", "coverage"]

    def test_json_round_trip(self, three_vitals, config):
        report = HealthReport(vital_results=three_vitals, config=config)
        decoded = json.loads(json.dumps(report.to_dict()))
        assert decoded["overall_score"] == report.overall_score
        assert decoded["health_status"] == report.health_status.value
        assert [v["score"] for v in decoded["vitals"]] == [r.score for r in three_vitals]
        assert [v["violations_count"] for v in decoded["vitals"]] == [0, 1, 0]

    def test_results_not_mutable_through_report(self, three_vitals, config):
        report = HealthReport(vital_results=three_vitals, config=config)
        report.vital_results.clear()
        assert len(report.vital_results) == 3


class TestFormatScore:
    def test_whole_numbers(self):
        assert format_score(84.0) == "84"
        assert format_score(90) == "90"

    def test_fractions(self):
        assert format_score(84.5) == "84.5"
