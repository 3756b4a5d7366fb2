"""Coverage vital.

Reads a coverage.py JSON report (``coverage json``) produced by an
earlier test run. Nothing is measured here: without a report the check
raises NoDataAvailableError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from shared.errors import NoDataAvailableError
from shared.models import Violation, VitalResult
from vitals.checks.base import BaseVital

PROJECT_MARKERS = ("pyproject.toml", "setup.py", "setup.cfg", ".git")
CRITICAL_PATHS_LIMIT = 10


@dataclass
class FileCoverage:
    file: str
    total_lines: int
    covered_lines: int
    missing_lines: list[int]

    @property
    def coverage_percent(self) -> float:
        if self.total_lines == 0:
            return 100.0
        return round(self.covered_lines / self.total_lines * 100, 2)


@dataclass
class CoverageData:
    source: Path
    files: list[FileCoverage]
    total_branches: int = 0
    covered_branches: int = 0

    @property
    def total_lines(self) -> int:
        return sum(f.total_lines for f in self.files)

    @property
    def covered_lines(self) -> int:
        return sum(f.covered_lines for f in self.files)

    @property
    def line_coverage(self) -> float:
        if self.total_lines == 0:
            return 100.0
        return round(self.covered_lines / self.total_lines * 100, 2)

    @property
    def has_branch_data(self) -> bool:
        return self.total_branches > 0

    @property
    def branch_coverage(self) -> float:
        # Reports without branch measurement fall back to line coverage
        if not self.has_branch_data:
            return self.line_coverage
        return round(self.covered_branches / self.total_branches * 100, 2)


def find_project_root(path: Path) -> Path:
    """Walk up from path to the first directory holding a project marker."""
    start = path if path.is_dir() else path.parent
    for current in (start, *start.parents):
        if any((current / marker).exists() for marker in PROJECT_MARKERS):
            return current
    return start


def parse_report(report_path: Path) -> CoverageData:
    """Parse a coverage.py JSON report.

    Raises:
        NoDataAvailableError: The file is unreadable or not a coverage report.
    """
    try:
        data = json.loads(report_path.read_text())
    except (OSError, ValueError) as e:
        raise NoDataAvailableError(f"Could not read coverage data from {report_path}: {e}") from e

    not_a_report = f"{report_path} is not a coverage.py JSON report"
    files_data = data.get("files") if isinstance(data, dict) else None
    if not isinstance(files_data, dict):
        raise NoDataAvailableError(not_a_report)

    files: list[FileCoverage] = []
    total_branches = 0
    covered_branches = 0

    for file_path, file_data in files_data.items():
        summary = file_data.get("summary", {}) if isinstance(file_data, dict) else None
        if not isinstance(summary, dict):
            raise NoDataAvailableError(not_a_report)
        try:
            files.append(_file_coverage(file_path, file_data, summary))
            total_branches += int(summary.get("num_branches", 0))
            covered_branches += int(summary.get("covered_branches", 0))
        except (TypeError, ValueError) as e:
            raise NoDataAvailableError(f"{not_a_report}: bad entry for {file_path}") from e

    return CoverageData(
        source=report_path,
        files=files,
        total_branches=total_branches,
        covered_branches=covered_branches,
    )


def _file_coverage(file_path: str, file_data: dict, summary: dict) -> FileCoverage:
    executed = list(file_data.get("executed_lines", []))
    missing = sorted(int(line) for line in file_data.get("missing_lines", []))
    return FileCoverage(
        file=file_path,
        total_lines=int(summary.get("num_statements", len(executed) + len(missing))),
        covered_lines=int(summary.get("covered_lines", len(executed))),
        missing_lines=missing,
    )


class CoverageVital(BaseVital):
    """Scores line coverage from a coverage.py JSON report.

    Violations are per file: every file below the threshold, worst first.
    """

    def check(self, path: str | Path) -> VitalResult:
        root = self._resolve(path)
        data = self._load_data(root)

        score = data.line_coverage
        if self.config.coverage.require_branch_coverage and data.has_branch_data:
            score = min(score, data.branch_coverage)

        violations = self._uncovered_files(data)

        return self._create_result(
            score=score,
            violations=violations,
            metadata={
                "line_coverage": data.line_coverage,
                "branch_coverage": data.branch_coverage,
                "total_lines": data.total_lines,
                "covered_lines": data.covered_lines,
                "data_file": str(data.source),
                "uncovered_critical_paths": [
                    v.model_dump(mode="json", exclude_none=True)
                    for v in violations[:CRITICAL_PATHS_LIMIT]
                ],
            },
        )

    def candidate_reports(self, path: Path) -> list[Path]:
        """Locations searched for the report, in order."""
        data_file = Path(self.config.coverage.data_file)
        if data_file.is_absolute():
            return [data_file]

        candidates = [find_project_root(path) / data_file]
        local = (path if path.is_dir() else path.parent) / data_file
        if local not in candidates:
            candidates.append(local)
        return candidates

    def _load_data(self, path: Path) -> CoverageData:
        for candidate in self.candidate_reports(path):
            if candidate.is_file():
                return parse_report(candidate)
        raise NoDataAvailableError(
            "No coverage data found. Run your tests under coverage and "
            f"write a JSON report ({self.config.coverage.data_file}) first."
        )

    def _uncovered_files(self, data: CoverageData) -> list[Violation]:
        threshold = self.threshold
        below = [f for f in data.files if f.coverage_percent < threshold]
        below.sort(key=lambda f: f.coverage_percent)
        return [_file_violation(f, threshold) for f in below]


def _file_violation(file_cov: FileCoverage, threshold: int) -> Violation:
    return Violation(
        file=file_cov.file,
        line=file_cov.missing_lines[0] if file_cov.missing_lines else None,
        message=f"Coverage {file_cov.coverage_percent}% (below threshold of {threshold}%)",
        coverage_percent=file_cov.coverage_percent,
        covered_lines=file_cov.covered_lines,
        total_lines=file_cov.total_lines,
    )
