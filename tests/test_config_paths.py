from __future__ import annotations

from pathlib import Path

import pytest

from match_kinematics.config import (
    EstimatorSettings,
    clear_project_config_cache,
    default_estimator_settings,
    default_project_config,
    default_project_paths,
    resolve_data_file,
    resolve_output_dir,
)


def test_default_data_path_points_at_demo_session() -> None:
    clear_project_config_cache()
    paths = default_project_paths()
    assert paths.data_file.as_posix().endswith("data/samples.csv")
    assert paths.data_file.exists()


def test_default_estimator_settings_use_standard_thresholds() -> None:
    clear_project_config_cache()
    settings = default_estimator_settings()
    assert settings.glitch_distance_m == 100.0
    assert settings.max_speed_kmh == 40.0
    assert settings.min_time_step_s == 1
    assert settings.band4_ms == (4.0, 5.5)
    assert settings.band5_ms == (5.5, 7.0)


def test_env_override_for_data_file(monkeypatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom_session.csv"
    custom.write_text("timestamp,latitude,longitude\n", encoding="utf-8")

    monkeypatch.setenv("MATCH_KINEMATICS_DATA_FILE", str(custom))
    clear_project_config_cache()

    resolved = resolve_data_file()
    assert resolved == custom.resolve()

    monkeypatch.delenv("MATCH_KINEMATICS_DATA_FILE", raising=False)
    clear_project_config_cache()


def test_env_override_for_output_dir(monkeypatch, tmp_path: Path) -> None:
    custom_output = tmp_path / "exports"
    monkeypatch.setenv("MATCH_KINEMATICS_OUTPUT_DIR", str(custom_output))
    clear_project_config_cache()

    resolved = resolve_output_dir()
    assert resolved == custom_output.resolve()

    monkeypatch.delenv("MATCH_KINEMATICS_OUTPUT_DIR", raising=False)
    clear_project_config_cache()


def test_env_override_for_estimator_thresholds(monkeypatch) -> None:
    monkeypatch.setenv("MATCH_KINEMATICS_MAX_SPEED_KMH", "32.5")
    monkeypatch.setenv("MATCH_KINEMATICS_GLITCH_DISTANCE_M", "60")
    clear_project_config_cache()

    settings = default_estimator_settings()
    assert settings.max_speed_kmh == 32.5
    assert settings.glitch_distance_m == 60.0

    monkeypatch.delenv("MATCH_KINEMATICS_MAX_SPEED_KMH", raising=False)
    monkeypatch.delenv("MATCH_KINEMATICS_GLITCH_DISTANCE_M", raising=False)
    clear_project_config_cache()


def test_external_yaml_config_file_override(monkeypatch, tmp_path: Path) -> None:
    custom = tmp_path / "yaml_session.csv"
    custom.write_text("timestamp,latitude,longitude\n", encoding="utf-8")
    custom_output = tmp_path / "yaml_exports"
    cfg = tmp_path / "match_kinematics.yaml"
    cfg.write_text(
        "\n".join(
            [
                "paths:",
                f"  data_file: {custom.as_posix()}",
                f"  output_dir: {custom_output.as_posix()}",
                "estimator:",
                "  band5_ms: [5.5, 8.0]",
                "  recent_window_packets: 30",
            ]
        ),
        encoding="utf-8",
    )

    monkeypatch.setenv("MATCH_KINEMATICS_CONFIG_FILE", str(cfg))
    clear_project_config_cache()

    model = default_project_config()
    paths = default_project_paths()
    assert model.paths.data_file == custom.as_posix()
    assert model.estimator.band5_ms == (5.5, 8.0)
    assert model.estimator.recent_window_packets == 30
    assert model.estimator.glitch_distance_m == 100.0
    assert paths.data_file == custom.resolve()
    assert paths.output_dir == custom_output.resolve()

    monkeypatch.delenv("MATCH_KINEMATICS_CONFIG_FILE", raising=False)
    clear_project_config_cache()


def test_missing_explicit_config_file_raises(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("MATCH_KINEMATICS_CONFIG_FILE", str(tmp_path / "absent.yaml"))
    clear_project_config_cache()

    with pytest.raises(FileNotFoundError):
        default_project_config()

    monkeypatch.delenv("MATCH_KINEMATICS_CONFIG_FILE", raising=False)
    clear_project_config_cache()


def test_invalid_estimator_config_is_rejected(monkeypatch, tmp_path: Path) -> None:
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("estimator:\n  glitch_distance_m: -5\n", encoding="utf-8")
    monkeypatch.setenv("MATCH_KINEMATICS_CONFIG_FILE", str(cfg))
    clear_project_config_cache()

    with pytest.raises(ValueError, match="Invalid match_kinematics config"):
        default_project_config()

    monkeypatch.delenv("MATCH_KINEMATICS_CONFIG_FILE", raising=False)
    clear_project_config_cache()


def test_estimator_settings_reject_inverted_band() -> None:
    with pytest.raises(ValueError):
        EstimatorSettings(band4_ms=(5.5, 4.0))

    with pytest.raises(ValueError, match="band4_ms must end"):
        EstimatorSettings(band4_ms=(4.0, 6.0), band5_ms=(5.0, 7.0))

    touching = EstimatorSettings(band4_ms=(3.0, 5.0), band5_ms=(5.0, 7.0))
    assert touching.band4_ms[1] == touching.band5_ms[0]


def test_create_output_dirs_runtime_flag(monkeypatch, tmp_path: Path) -> None:
    custom_output = tmp_path / "auto_created_outputs"
    monkeypatch.setenv("MATCH_KINEMATICS_OUTPUT_DIR", str(custom_output))
    monkeypatch.setenv("MATCH_KINEMATICS_CREATE_OUTPUT_DIRS", "true")
    clear_project_config_cache()

    paths = default_project_paths()
    assert paths.output_dir == custom_output.resolve()
    assert custom_output.exists()

    monkeypatch.delenv("MATCH_KINEMATICS_OUTPUT_DIR", raising=False)
    monkeypatch.delenv("MATCH_KINEMATICS_CREATE_OUTPUT_DIRS", raising=False)
    clear_project_config_cache()


def test_invalid_create_output_dirs_value(monkeypatch) -> None:
    monkeypatch.setenv("MATCH_KINEMATICS_CREATE_OUTPUT_DIRS", "maybe")
    clear_project_config_cache()

    with pytest.raises(ValueError, match="MATCH_KINEMATICS_CREATE_OUTPUT_DIRS"):
        default_project_config()

    monkeypatch.delenv("MATCH_KINEMATICS_CREATE_OUTPUT_DIRS", raising=False)
    clear_project_config_cache()
