"""Complexity vital.

Measures per-function cyclomatic complexity from the AST and flags every
function above the configured limit. Pure static analysis.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from shared.models import Violation, VitalResult
from vitals.checks.base import BaseVital
from vitals.checks.source import SourceFile, iter_functions, parse_sources

logger = structlog.get_logger(__name__)

# Max penalty when every function is over the limit (score floor of 40)
MAX_PENALTY = 60
WORST_OFFENDERS_LIMIT = 10


@dataclass
class FunctionComplexity:
    file: str
    line: int
    name: str
    complexity: int


def cyclomatic_complexity(node: ast.AST) -> int:
    """Count decision points in a function body (cyclomatic complexity).

    Counts: if, elif, for, while, except, with, and, or, assert,
    ternary (IfExp), comprehension conditions.
    Starts at 1 (base path).
    """
    complexity = 1

    for child in ast.walk(node):
        if isinstance(child, (ast.If, ast.IfExp)):
            complexity += 1
        elif isinstance(child, (ast.For, ast.AsyncFor, ast.While)):
            complexity += 1
        elif isinstance(child, ast.ExceptHandler):
            complexity += 1
        elif isinstance(child, (ast.With, ast.AsyncWith)):
            complexity += 1
        elif isinstance(child, ast.Assert):
            complexity += 1
        elif isinstance(child, ast.BoolOp):
            # Each 'and'/'or' adds a path
            complexity += len(child.values) - 1
        elif isinstance(child, ast.comprehension):
            complexity += len(child.ifs)

    return complexity


def measure(sources: list[SourceFile]) -> list[FunctionComplexity]:
    """Complexity of every function in the given sources, in file order."""
    measured = []
    for source in sources:
        for func in iter_functions(source.tree):
            measured.append(
                FunctionComplexity(
                    file=source.display,
                    line=func.lineno,
                    name=func.name,
                    complexity=cyclomatic_complexity(func),
                )
            )
    return measured


def complexity_score(total_functions: int, over_limit: int) -> int:
    """100 when nothing is over the limit, down to 40 when everything is."""
    if total_functions == 0:
        return 100
    violation_rate = over_limit / total_functions
    penalty = min(violation_rate * MAX_PENALTY, MAX_PENALTY)
    return max(round(100 - penalty), 0)


class ComplexityVital(BaseVital):
    """Flags functions whose cyclomatic complexity exceeds max_complexity."""

    def check(self, path: str | Path) -> VitalResult:
        root = self._resolve(path)
        settings = self.config.complexity

        try:
            sources, skipped = parse_sources(root, settings.exclude)
            functions = measure(sources)
        except Exception as e:
            logger.warning("analysis_failed", vital=self.name.value, path=str(root), error=str(e))
            return self._create_result(score=100, metadata={"error": str(e)})

        limit = settings.max_complexity
        offenders = [f for f in functions if f.complexity > limit]
        violations = [
            Violation(
                file=f.file,
                line=f.line,
                message=f"Cyclomatic complexity for {f.name} is too high. [{f.complexity}/{limit}]",
                severity="warning",
                complexity=f.complexity,
            )
            for f in offenders
        ]

        return self._create_result(
            score=complexity_score(len(functions), len(offenders)),
            violations=violations,
            metadata={
                "average_complexity": _average(functions),
                "max_complexity": limit,
                "methods_over_threshold": len(offenders),
                "worst_offenders": _worst_offenders(offenders),
                "total_methods_analyzed": len(functions),
                "files_analyzed": len(sources),
                "files_skipped": skipped,
            },
        )


def _average(functions: list[FunctionComplexity]) -> float:
    if not functions:
        return 0.0
    return round(sum(f.complexity for f in functions) / len(functions), 2)


def _worst_offenders(offenders: list[FunctionComplexity]) -> list[dict[str, Any]]:
    ranked = sorted(offenders, key=lambda f: f.complexity, reverse=True)
    return [
        {
            "location": f"{f.file}:{f.line}",
            "function": f.name,
            "complexity": f.complexity,
        }
        for f in ranked[:WORST_OFFENDERS_LIMIT]
    ]
