"""Builders for vital results and coverage reports used across the tests."""

import json
from pathlib import Path

from shared.models import Violation, Vital, VitalResult


def make_result(vital=Vital.COMPLEXITY, score=90, violations=0, metadata=None) -> VitalResult:
    """Build a VitalResult with n generated violations."""
    return VitalResult(
        vital=vital,
        score=score,
        violations=tuple(
            Violation(file=f"pkg/mod_{i}.py", line=i + 1, message=f"issue {i}")
            for i in range(violations)
        ),
        metadata=metadata or {},
    )


def write_coverage_json(directory: Path, files: dict, name: str = "coverage.json") -> Path:
    """Write a coverage.py style JSON report.

    files maps path -> (executed_lines, missing_lines) or
    (executed_lines, missing_lines, num_branches, covered_branches).
    """
    report_files = {}
    for path, entry in files.items():
        executed, missing = entry[0], entry[1]
        summary = {
            "covered_lines": len(executed),
            "num_statements": len(executed) + len(missing),
            "missing_lines": len(missing),
        }
        if len(entry) == 4:
            summary["num_branches"] = entry[2]
            summary["covered_branches"] = entry[3]
        report_files[path] = {
            "executed_lines": executed,
            "missing_lines": missing,
            "summary": summary,
        }
    report = {"meta": {"version": "7.4.0"}, "files": report_files, "totals": {}}
    target = directory / name
    target.write_text(json.dumps(report))
    return target
