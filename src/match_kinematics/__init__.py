"""Incremental GPS kinematics for sports tracking sessions."""

from .config import (
    EstimatorSettings,
    MatchKinematicsConfig,
    PathSettings,
    ProjectPaths,
    clear_project_config_cache,
    default_estimator_settings,
    default_project_config,
    default_project_paths,
    find_project_root,
    resolve_data_file,
    resolve_output_dir,
)
from .constants import (
    EARTH_RADIUS_M,
    GLITCH_DISTANCE_M,
    MAX_PLAUSIBLE_SPEED_KMH,
    MS_TO_KMH,
)
from .estimator import MotionEstimator
from .geodesic import haversine_distance, haversine_distance_array
from .metrics import SpeedBand, default_speed_bands, summarize_speed_bands
from .models import Sample, Snapshot
from .pipeline import load_samples, replay_samples, summarize_session
from .results import load_session_results, write_session_results

__all__ = [
    "EARTH_RADIUS_M",
    "GLITCH_DISTANCE_M",
    "MAX_PLAUSIBLE_SPEED_KMH",
    "MS_TO_KMH",
    "EstimatorSettings",
    "MatchKinematicsConfig",
    "MotionEstimator",
    "PathSettings",
    "ProjectPaths",
    "Sample",
    "Snapshot",
    "SpeedBand",
    "clear_project_config_cache",
    "default_estimator_settings",
    "default_project_config",
    "default_project_paths",
    "default_speed_bands",
    "find_project_root",
    "haversine_distance",
    "haversine_distance_array",
    "load_samples",
    "load_session_results",
    "replay_samples",
    "resolve_data_file",
    "resolve_output_dir",
    "summarize_session",
    "summarize_speed_bands",
    "write_session_results",
]
