"""Centralized project configuration and path resolution."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path
import tomllib
from typing import Any

from omegaconf import OmegaConf
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .constants import (
    BAND4_MS,
    BAND5_MS,
    GLITCH_DISTANCE_M,
    MAX_PLAUSIBLE_SPEED_KMH,
    MIN_TIME_STEP_S,
    RECENT_WINDOW_PACKETS,
)


DEFAULT_DATA_FILE = "data/samples.csv"
DEFAULT_OUTPUT_DIR = "outputs"
DEFAULT_CONFIG_FILE = "config/match_kinematics.yaml"


class PathSettings(BaseModel):
    """File and directory locations for this project."""

    data_file: str = DEFAULT_DATA_FILE
    output_dir: str = DEFAULT_OUTPUT_DIR

    @field_validator("data_file", "output_dir")
    @classmethod
    def _non_empty_path(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("path values must not be empty")
        return cleaned


class RuntimeSettings(BaseModel):
    """Runtime behavior controls for the CLI and pipelines."""

    create_output_dirs: bool = False


class EstimatorSettings(BaseModel):
    """Outlier thresholds and speed-band edges used by `MotionEstimator`."""

    model_config = ConfigDict(frozen=True)

    glitch_distance_m: float = GLITCH_DISTANCE_M
    max_speed_kmh: float = MAX_PLAUSIBLE_SPEED_KMH
    min_time_step_s: int = MIN_TIME_STEP_S
    band4_ms: tuple[float, float] = BAND4_MS
    band5_ms: tuple[float, float] = BAND5_MS
    recent_window_packets: int = RECENT_WINDOW_PACKETS

    @field_validator("glitch_distance_m", "max_speed_kmh")
    @classmethod
    def _positive_threshold(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("thresholds must be > 0")
        return value

    @field_validator("min_time_step_s", "recent_window_packets")
    @classmethod
    def _positive_count(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be >= 1")
        return value

    @field_validator("band4_ms", "band5_ms")
    @classmethod
    def _ordered_band(cls, value: tuple[float, float]) -> tuple[float, float]:
        lower, upper = value
        if lower < 0 or upper <= lower:
            raise ValueError("band edges must satisfy 0 <= lower < upper")
        return value

    @model_validator(mode="after")
    def _bands_do_not_overlap(self) -> EstimatorSettings:
        if self.band4_ms[1] > self.band5_ms[0]:
            raise ValueError("band4_ms must end at or below the start of band5_ms")
        return self


class MatchKinematicsConfig(BaseModel):
    """Typed configuration model for project behavior."""

    model_config = ConfigDict(extra="ignore")
    paths: PathSettings = Field(default_factory=PathSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    estimator: EstimatorSettings = Field(default_factory=EstimatorSettings)


@dataclass(frozen=True)
class ProjectPaths:
    """Resolved canonical project paths."""

    project_root: Path
    data_file: Path
    output_dir: Path


def find_project_root(start: Path | None = None) -> Path:
    """Find the project root by locating `pyproject.toml`."""
    env_root = os.getenv("MATCH_KINEMATICS_PROJECT_ROOT")
    if env_root:
        return _resolve_path(Path(env_root), Path.cwd())

    cursor = (start or Path.cwd()).resolve()
    for candidate in (cursor, *cursor.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate

    module_cursor = Path(__file__).resolve()
    for candidate in (module_cursor, *module_cursor.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate

    raise FileNotFoundError("Could not find project root containing pyproject.toml")


@lru_cache(maxsize=1)
def default_project_config() -> MatchKinematicsConfig:
    """Load config with OmegaConf merge + Pydantic validation."""
    project_root = find_project_root()
    merged = _load_merged_config(project_root)
    try:
        return MatchKinematicsConfig.model_validate(merged)
    except ValidationError as exc:
        raise ValueError(f"Invalid match_kinematics config: {exc}") from exc


@lru_cache(maxsize=1)
def default_project_paths() -> ProjectPaths:
    """Resolve canonical paths from validated project config."""
    project_root = find_project_root()
    config = default_project_config()

    data_file = _resolve_path(Path(config.paths.data_file), project_root)
    output_dir = _resolve_path(Path(config.paths.output_dir), project_root)

    if config.runtime.create_output_dirs:
        output_dir.mkdir(parents=True, exist_ok=True)

    return ProjectPaths(project_root=project_root, data_file=data_file, output_dir=output_dir)


def default_estimator_settings() -> EstimatorSettings:
    return default_project_config().estimator


def resolve_data_file(input_path: str | Path | None = None) -> Path:
    """Resolve an explicit or default sample-file path."""
    paths = default_project_paths()
    if input_path is None:
        return paths.data_file
    return _resolve_path(Path(input_path), paths.project_root)


def resolve_output_dir(output_dir: str | Path | None = None) -> Path:
    """Resolve an explicit or default output directory path."""
    paths = default_project_paths()
    if output_dir is None:
        return paths.output_dir
    return _resolve_path(Path(output_dir), paths.project_root)


def clear_project_config_cache() -> None:
    """Clear cached config; useful for tests or env-var changes."""
    default_project_config.cache_clear()
    default_project_paths.cache_clear()


def _load_merged_config(project_root: Path) -> dict[str, Any]:
    base_cfg = {
        "paths": {
            "data_file": DEFAULT_DATA_FILE,
            "output_dir": DEFAULT_OUTPUT_DIR,
        },
        "runtime": {
            "create_output_dirs": False,
        },
        "estimator": {
            "glitch_distance_m": GLITCH_DISTANCE_M,
            "max_speed_kmh": MAX_PLAUSIBLE_SPEED_KMH,
            "min_time_step_s": MIN_TIME_STEP_S,
            "band4_ms": list(BAND4_MS),
            "band5_ms": list(BAND5_MS),
            "recent_window_packets": RECENT_WINDOW_PACKETS,
        },
    }

    merged = OmegaConf.merge(
        base_cfg,
        _load_pyproject_config(project_root),
        _load_file_config(project_root),
        _load_env_overrides(),
    )
    raw = OmegaConf.to_container(merged, resolve=True)
    return raw if isinstance(raw, dict) else {}


def _load_file_config(project_root: Path) -> dict[str, Any]:
    env_path = os.getenv("MATCH_KINEMATICS_CONFIG_FILE")
    if env_path:
        cfg_path = _resolve_path(Path(env_path), project_root)
        if not cfg_path.exists():
            raise FileNotFoundError(
                f"MATCH_KINEMATICS_CONFIG_FILE points to missing file: {cfg_path}"
            )
    else:
        cfg_path = project_root / DEFAULT_CONFIG_FILE
        if not cfg_path.exists():
            return {}

    loaded = OmegaConf.load(cfg_path)
    raw = OmegaConf.to_container(loaded, resolve=True)
    return raw if isinstance(raw, dict) else {}


def _load_env_overrides() -> dict[str, Any]:
    paths: dict[str, Any] = {}
    if env_data := os.getenv("MATCH_KINEMATICS_DATA_FILE"):
        paths["data_file"] = env_data
    if env_output := os.getenv("MATCH_KINEMATICS_OUTPUT_DIR"):
        paths["output_dir"] = env_output

    runtime: dict[str, Any] = {}
    if env_create_output := os.getenv("MATCH_KINEMATICS_CREATE_OUTPUT_DIRS"):
        runtime["create_output_dirs"] = _parse_env_bool(env_create_output)

    estimator: dict[str, Any] = {}
    if env_glitch := os.getenv("MATCH_KINEMATICS_GLITCH_DISTANCE_M"):
        estimator["glitch_distance_m"] = float(env_glitch)
    if env_speed := os.getenv("MATCH_KINEMATICS_MAX_SPEED_KMH"):
        estimator["max_speed_kmh"] = float(env_speed)

    overrides: dict[str, Any] = {}
    if paths:
        overrides["paths"] = paths
    if runtime:
        overrides["runtime"] = runtime
    if estimator:
        overrides["estimator"] = estimator
    return overrides


def _resolve_path(path: Path, project_root: Path) -> Path:
    if path.is_absolute():
        return path.expanduser().resolve()
    return (project_root / path).resolve()


def _parse_env_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ValueError(
        "MATCH_KINEMATICS_CREATE_OUTPUT_DIRS must be one of: "
        "1,true,yes,on,0,false,no,off"
    )


def _load_pyproject_config(project_root: Path) -> dict[str, Any]:
    pyproject_path = project_root / "pyproject.toml"
    if not pyproject_path.exists():
        return {}

    with pyproject_path.open("rb") as handle:
        pyproject = tomllib.load(handle)

    tool_cfg = pyproject.get("tool", {}).get("match_kinematics", {})
    if not isinstance(tool_cfg, dict):
        return {}
    return {key: value for key, value in tool_cfg.items() if key in {"paths", "runtime", "estimator"}}
