"""Python source discovery and parsing helpers for AST-based checks."""

from __future__ import annotations

import ast
from collections.abc import Iterator
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path

SKIP_DIRS = {
    "__pycache__",
    "build",
    "dist",
    "node_modules",
    "site-packages",
    "venv",
}


@dataclass
class SourceFile:
    """A parsed Python module."""

    path: Path
    display: str
    code: str
    tree: ast.Module


def _is_skipped_dir(name: str) -> bool:
    return name.startswith(".") or name in SKIP_DIRS or name.endswith(".egg-info")


def _is_excluded(relative: str, exclude: list[str]) -> bool:
    return any(fnmatch(relative, pattern) for pattern in exclude)


def iter_python_files(root: Path, exclude: list[str] | None = None) -> Iterator[Path]:
    """Yield .py files under root in sorted order.

    A file root is yielded as-is. Hidden directories, virtualenvs and
    build output are skipped, as is anything matching an exclude glob
    (matched against the path relative to root).
    """
    exclude = exclude or []
    if root.is_file():
        if root.suffix == ".py":
            yield root
        return

    for path in sorted(root.rglob("*.py")):
        relative = path.relative_to(root)
        if any(_is_skipped_dir(part) for part in relative.parts[:-1]):
            continue
        if _is_excluded(relative.as_posix(), exclude):
            continue
        yield path


def display_path(path: Path, root: Path) -> str:
    """Path shown in violations: relative to root when root is a directory."""
    if root.is_dir():
        return path.relative_to(root).as_posix()
    return path.name


def parse_sources(root: Path, exclude: list[str] | None = None) -> tuple[list[SourceFile], list[str]]:
    """Parse every Python file under root.

    Returns:
        (parsed files, display paths of files that could not be read or parsed)
    """
    parsed: list[SourceFile] = []
    skipped: list[str] = []
    for path in iter_python_files(root, exclude):
        display = display_path(path, root)
        try:
            code = path.read_text(encoding="utf-8")
            tree = ast.parse(code, filename=str(path))
        except (OSError, UnicodeDecodeError, SyntaxError, ValueError):
            skipped.append(display)
            continue
        parsed.append(SourceFile(path=path, display=display, code=code, tree=tree))
    return parsed, skipped


def iter_functions(tree: ast.AST) -> Iterator[ast.FunctionDef | ast.AsyncFunctionDef]:
    for node in ast.walk(tree):
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            yield node
