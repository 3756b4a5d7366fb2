"""Configuration management for codebase vitals.

Builds the effective config in three layers: built-in defaults, an
optional YAML file, then caller overrides (highest precedence).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field

from shared.models import OutputFormat, Vital

logger = structlog.get_logger(__name__)

# --- Config Schema ---

CONFIG_FILENAME = ".vitals.yml"


class ComplexityConfig(BaseModel):
    """Settings for the complexity vital."""

    model_config = ConfigDict(validate_assignment=True)

    threshold: int = Field(default=90, ge=0, le=100)
    exclude: list[str] = Field(default_factory=list)
    max_complexity: int = 10


class SmellsConfig(BaseModel):
    """Settings for the smells vital."""

    model_config = ConfigDict(validate_assignment=True)

    threshold: int = Field(default=80, ge=0, le=100)
    enabled_detectors: Literal["all"] | list[str] = "all"
    exclude: list[str] = Field(default_factory=list)
    max_method_lines: int = 25
    max_nesting_depth: int = 4
    max_parameters: int = 5
    max_methods_per_class: int = 20


class CoverageConfig(BaseModel):
    """Settings for the coverage vital."""

    model_config = ConfigDict(validate_assignment=True)

    threshold: int = Field(default=90, ge=0, le=100)
    require_branch_coverage: bool = False
    data_file: str = "coverage.json"


class OutputConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    format: OutputFormat = OutputFormat.CLI
    color: bool = True


class VitalsConfig(BaseModel):
    """Top-level configuration for codebase vitals."""

    complexity: ComplexityConfig = Field(default_factory=ComplexityConfig)
    smells: SmellsConfig = Field(default_factory=SmellsConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def section(self, vital: Vital | str) -> ComplexityConfig | SmellsConfig | CoverageConfig | None:
        """Return the live settings section for a vital, or None if unknown."""
        try:
            key = Vital(vital).value
        except ValueError:
            return None
        return getattr(self, key)

    def threshold_for(self, vital: Vital | str) -> int:
        """Configured threshold for a vital. Unknown vitals have threshold 0."""
        section = self.section(vital)
        if section is None:
            return 0
        return section.threshold


# --- Config Loading ---


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dict."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge override into base. Override values take precedence.

    Nested mappings are merged key by key; any other value (lists
    included) replaces the base value outright. Neither input is mutated.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def default_config_dict() -> dict[str, Any]:
    """A fresh mapping of the built-in defaults."""
    return VitalsConfig().model_dump(mode="json")


def load_config(
    config_path: Path | str | None = None,
    overrides: dict[str, Any] | None = None,
    start_dir: Path | None = None,
) -> VitalsConfig:
    """Load vitals configuration.

    Priority (highest to lowest):
    1. overrides
    2. Explicit config_path, or .vitals.yml in start_dir when no path is given
    3. Built-in defaults

    A config_path that does not exist is not an error: a warning is
    logged and the defaults are used.

    Args:
        config_path: Explicit path to a YAML config file.
        overrides: Mapping deep-merged over everything else.
        start_dir: Directory searched for .vitals.yml (defaults to cwd).

    Returns:
        Validated VitalsConfig.
    """
    merged = default_config_dict()

    if config_path is not None:
        path = Path(config_path)
        if path.is_file():
            merged = deep_merge(merged, _load_yaml(path))
        else:
            logger.warning("config_not_found", path=str(path))
    else:
        discovered = (start_dir or Path.cwd()) / CONFIG_FILENAME
        if discovered.is_file():
            merged = deep_merge(merged, _load_yaml(discovered))

    if overrides:
        merged = deep_merge(merged, overrides)

    return VitalsConfig.model_validate(merged)
