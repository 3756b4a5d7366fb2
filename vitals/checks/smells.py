"""Smells vital.

Runs a set of AST smell detectors over Python sources. Each detector is
a plain function taking a parsed module and the smells settings and
returning the smells it found; ``DETECTORS`` maps detector names to
those functions.
"""

from __future__ import annotations

import ast
import re
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import structlog

from shared.config import SmellsConfig
from shared.models import Violation, VitalResult
from vitals.checks.base import BaseVital
from vitals.checks.source import iter_functions, parse_sources

logger = structlog.get_logger(__name__)

# Each smell costs 2 points, capped so the score never drops below 20
POINTS_PER_SMELL = 2
MAX_PENALTY = 80
MIN_SCORE = 20


@dataclass
class Smell:
    """A smell found in one module, before it is tied to a file."""

    type: str
    line: int
    message: str
    context: str


Detector = Callable[[ast.Module, SmellsConfig], list[Smell]]


# --- Long Method ---


def _last_line(node: ast.AST) -> int:
    """Get the last line number of an AST node (recursive)."""
    max_line = getattr(node, "lineno", 0)
    end = getattr(node, "end_lineno", None)
    if end is not None:
        max_line = max(max_line, end)
    for child in ast.iter_child_nodes(node):
        max_line = max(max_line, _last_line(child))
    return max_line


def detect_long_methods(tree: ast.Module, settings: SmellsConfig) -> list[Smell]:
    smells = []
    for func in iter_functions(tree):
        length = _last_line(func) - func.lineno + 1
        if length > settings.max_method_lines:
            smells.append(
                Smell(
                    type="long_method",
                    line=func.lineno,
                    message=f"has {length} lines (max {settings.max_method_lines})",
                    context=func.name,
                )
            )
    return smells


# --- Deep Nesting ---

_NESTING_NODES = (
    ast.If,
    ast.For,
    ast.AsyncFor,
    ast.While,
    ast.With,
    ast.AsyncWith,
    ast.Try,
)


def _max_nesting(body: list[ast.stmt], current_depth: int) -> int:
    """Recursively calculate maximum nesting depth."""
    max_depth = current_depth

    for stmt in body:
        if isinstance(stmt, _NESTING_NODES):
            for attr in ("body", "orelse", "finalbody", "handlers"):
                sub = getattr(stmt, attr, None)
                if not sub:
                    continue
                if attr == "handlers":
                    for handler in sub:
                        max_depth = max(max_depth, _max_nesting(handler.body, current_depth + 1))
                else:
                    max_depth = max(max_depth, _max_nesting(sub, current_depth + 1))

    return max_depth


def detect_deep_nesting(tree: ast.Module, settings: SmellsConfig) -> list[Smell]:
    smells = []
    for func in iter_functions(tree):
        depth = _max_nesting(func.body, current_depth=0)
        if depth > settings.max_nesting_depth:
            smells.append(
                Smell(
                    type="deep_nesting",
                    line=func.lineno,
                    message=f"nests {depth} levels deep (max {settings.max_nesting_depth})",
                    context=func.name,
                )
            )
    return smells


# --- Long Parameter List ---


def detect_long_parameter_lists(tree: ast.Module, settings: SmellsConfig) -> list[Smell]:
    smells = []
    for func in iter_functions(tree):
        args = func.args
        names = [a.arg for a in args.posonlyargs + args.args + args.kwonlyargs]
        if names and names[0] in ("self", "cls"):
            names = names[1:]
        if len(names) > settings.max_parameters:
            smells.append(
                Smell(
                    type="long_parameter_list",
                    line=func.lineno,
                    message=f"takes {len(names)} parameters (max {settings.max_parameters})",
                    context=func.name,
                )
            )
    return smells


# --- Large Class ---


def detect_large_classes(tree: ast.Module, settings: SmellsConfig) -> list[Smell]:
    smells = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.ClassDef):
            continue
        methods = [
            n for n in node.body if isinstance(n, (ast.FunctionDef, ast.AsyncFunctionDef))
        ]
        if len(methods) > settings.max_methods_per_class:
            smells.append(
                Smell(
                    type="large_class",
                    line=node.lineno,
                    message=f"has {len(methods)} methods (max {settings.max_methods_per_class})",
                    context=node.name,
                )
            )
    return smells


# --- Bare / Empty Except ---


def detect_bare_excepts(tree: ast.Module, settings: SmellsConfig) -> list[Smell]:
    smells = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.ExceptHandler):
            continue
        if node.type is None:
            smells.append(
                Smell(type="bare_except", line=node.lineno, message="bare except", context="except")
            )
        elif len(node.body) == 1 and _is_noop(node.body[0]):
            smells.append(
                Smell(
                    type="bare_except",
                    line=node.lineno,
                    message="exception silently ignored",
                    context="except",
                )
            )
    return smells


def _is_noop(stmt: ast.stmt) -> bool:
    if isinstance(stmt, ast.Pass):
        return True
    return (
        isinstance(stmt, ast.Expr)
        and isinstance(stmt.value, ast.Constant)
        and stmt.value.value is ...
    )


# --- Naming ---

_SNAKE_CASE = re.compile(r"^_{0,2}[a-z][a-z0-9_]*$")
_PASCAL_CASE = re.compile(r"^_?[A-Z][a-zA-Z0-9]*$")
_DUNDER = re.compile(r"^__[a-z0-9_]+__$")


def detect_bad_names(tree: ast.Module, settings: SmellsConfig) -> list[Smell]:
    smells = []
    for node in ast.walk(tree):
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            if not (_SNAKE_CASE.match(node.name) or _DUNDER.match(node.name)):
                smells.append(
                    Smell(
                        type="naming",
                        line=node.lineno,
                        message="function name is not snake_case",
                        context=node.name,
                    )
                )
        elif isinstance(node, ast.ClassDef) and not _PASCAL_CASE.match(node.name):
            smells.append(
                Smell(
                    type="naming",
                    line=node.lineno,
                    message="class name is not PascalCase",
                    context=node.name,
                )
            )
    return smells


DETECTORS: dict[str, Detector] = {
    "long_method": detect_long_methods,
    "deep_nesting": detect_deep_nesting,
    "long_parameter_list": detect_long_parameter_lists,
    "large_class": detect_large_classes,
    "bare_except": detect_bare_excepts,
    "naming": detect_bad_names,
}


def smells_score(smell_count: int) -> int:
    """0 smells = 100, 5 smells = 90, 10 smells = 80, floor of 20."""
    penalty = min(smell_count * POINTS_PER_SMELL, MAX_PENALTY)
    return max(100 - penalty, MIN_SCORE)


class SmellsVital(BaseVital):
    """Detects code smells with the detectors enabled in config."""

    def enabled_detectors(self) -> dict[str, Detector]:
        selected = self.config.smells.enabled_detectors
        if selected == "all":
            return dict(DETECTORS)

        enabled = {}
        for name in selected:
            if name in DETECTORS:
                enabled[name] = DETECTORS[name]
            else:
                logger.warning("unknown_detector", detector=name)
        return enabled

    def check(self, path: str | Path) -> VitalResult:
        root = self._resolve(path)
        settings = self.config.smells
        detectors = self.enabled_detectors()

        try:
            sources, skipped = parse_sources(root, settings.exclude)
            violations = []
            for source in sources:
                for detector in detectors.values():
                    for smell in detector(source.tree, settings):
                        violations.append(
                            Violation(
                                file=source.display,
                                line=smell.line,
                                type=smell.type,
                                message=f"{smell.context} {smell.message}",
                                context=smell.context,
                            )
                        )
        except Exception as e:
            logger.warning("analysis_failed", vital=self.name.value, path=str(root), error=str(e))
            return self._create_result(score=100, metadata={"error": str(e)})

        distribution = Counter(v.type for v in violations)

        return self._create_result(
            score=smells_score(len(violations)),
            violations=violations,
            metadata={
                "total_smells": len(violations),
                "smell_distribution": dict(distribution.most_common()),
                "detectors": list(detectors),
                "files_analyzed": len(sources),
                "files_skipped": skipped,
            },
        )
