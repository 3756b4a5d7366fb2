"""Tests for the vital check contract and registry."""

from pathlib import Path

import pytest

from shared.config import VitalsConfig
from shared.errors import PathNotFoundError, UnknownVitalError
from shared.models import Vital, VitalResult
from vitals.checks import (
    VITAL_CLASSES,
    BaseVital,
    ComplexityVital,
    CoverageVital,
    SmellsVital,
    create_vital,
    resolve_vital,
)
from vitals.checks.source import display_path, iter_python_files


class FixedVital(BaseVital):
    """Test double that always scores the same."""

    def check(self, path):
        self._resolve(path)
        return self._create_result(score=-5, metadata={"fixed": True})


# --- Naming ---


class TestNaming:
    def test_names_from_class(self, config):
        assert ComplexityVital(config).name == Vital.COMPLEXITY
        assert SmellsVital(config).name == Vital.SMELLS
        assert CoverageVital(config).name == Vital.COVERAGE

    def test_name_is_read_only(self, config):
        vital = SmellsVital(config)
        with pytest.raises(AttributeError):
            vital.name = Vital.COVERAGE

    def test_unknown_class_name_rejected(self, config):
        with pytest.raises(ValueError):
            FixedVital(config)

    def test_abstract_check(self, config):
        with pytest.raises(TypeError):
            BaseVital(config)


# --- Thresholds ---


class TestThreshold:
    def test_reads_config(self, config):
        assert ComplexityVital(config).threshold == 90
        assert SmellsVital(config).threshold == 80
        assert CoverageVital(config).threshold == 90

    def test_follows_config_changes(self):
        config = VitalsConfig()
        vital = SmellsVital(config)
        config.smells.threshold = 65
        assert vital.threshold == 65


# --- Results ---


class TestCreateResult:
    def test_score_clamped_at_zero(self, config, tmp_path):
        class ComplexityVital(FixedVital):
            pass

        result = ComplexityVital(config).check(tmp_path)
        assert isinstance(result, VitalResult)
        assert result.score == 0
        assert result.vital == Vital.COMPLEXITY
        assert result.metadata == {"fixed": True}

    def test_missing_path(self, config, tmp_path):
        for cls in VITAL_CLASSES.values():
            with pytest.raises(PathNotFoundError, match="Path does not exist"):
                cls(config).check(tmp_path / "missing")


# --- Registry ---


class TestRegistry:
    def test_registry_is_closed_over_vitals(self):
        assert set(VITAL_CLASSES) == set(Vital)

    def test_create_by_tag_or_enum(self, config):
        assert isinstance(create_vital("smells", config), SmellsVital)
        assert isinstance(create_vital(Vital.COVERAGE, config), CoverageVital)

    def test_unknown_vital(self, config):
        with pytest.raises(UnknownVitalError, match="Unknown vital: performance"):
            create_vital("performance", config)

    def test_resolve_vital(self):
        assert resolve_vital("complexity") == Vital.COMPLEXITY
        with pytest.raises(UnknownVitalError):
            resolve_vital("Complexity")


# --- Source discovery ---


class TestSourceDiscovery:
    def _touch(self, root: Path, relative: str) -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x = 1\n")
        return path

    def test_finds_python_files_recursively(self, tmp_path):
        self._touch(tmp_path, "a.py")
        self._touch(tmp_path, "pkg/b.py")
        self._touch(tmp_path, "notes.txt")
        found = [p.relative_to(tmp_path).as_posix() for p in iter_python_files(tmp_path)]
        assert found == ["a.py", "pkg/b.py"]

    def test_skips_hidden_and_build_dirs(self, tmp_path):
        self._touch(tmp_path, "a.py")
        self._touch(tmp_path, ".venv/lib/x.py")
        self._touch(tmp_path, "__pycache__/c.py")
        self._touch(tmp_path, "build/d.py")
        found = [p.relative_to(tmp_path).as_posix() for p in iter_python_files(tmp_path)]
        assert found == ["a.py"]

    def test_exclude_globs(self, tmp_path):
        self._touch(tmp_path, "a.py")
        self._touch(tmp_path, "tests/test_a.py")
        found = [
            p.relative_to(tmp_path).as_posix()
            for p in iter_python_files(tmp_path, exclude=["tests/*"])
        ]
        assert found == ["a.py"]

    def test_single_file(self, tmp_path):
        path = self._touch(tmp_path, "a.py")
        assert list(iter_python_files(path)) == [path]
        assert display_path(path, path) == "a.py"
