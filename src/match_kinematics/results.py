"""Results files for a replayed session: `snapshots.csv` and `results.json`."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from .config import EstimatorSettings
from .constants import EARTH_RADIUS_M, MS_TO_KMH
from .metrics import default_speed_bands, summarize_speed_bands

logger = logging.getLogger(__name__)

SNAPSHOTS_FILE = "snapshots.csv"
RESULTS_FILE = "results.json"


def write_session_results(
    frame: pd.DataFrame,
    summary: dict[str, Any],
    *,
    input_path: str | Path,
    output_dir: str | Path,
    settings: EstimatorSettings | None = None,
    diagnostics: dict[str, int] | None = None,
) -> Path:
    """Write the replay frame and a JSON contract describing how it was produced."""
    settings = settings or EstimatorSettings()
    root = Path(output_dir)
    root.mkdir(parents=True, exist_ok=True)

    snapshots_path = root / SNAPSHOTS_FILE
    frame.to_csv(snapshots_path, index=False)

    bands = default_speed_bands(settings)
    band_table = summarize_speed_bands(frame, bands)

    contract: dict[str, Any] = {
        "generated_at_utc": pd.Timestamp.now(tz="UTC").isoformat(),
        "input_path": str(Path(input_path)),
        "output_dir": str(root),
        "units": {
            "distance": "meters",
            "velocity": "m/s (km/h = m/s * 3.6)",
            "acceleration": "m/s^2",
            "time_step": "whole seconds",
        },
        "distance_policy": {
            "formula": "haversine",
            "earth_radius_m": EARTH_RADIUS_M,
            "kmh_per_ms": MS_TO_KMH,
        },
        "thresholds": {
            "glitch_distance_m": settings.glitch_distance_m,
            "max_speed_kmh": settings.max_speed_kmh,
            "min_time_step_s": settings.min_time_step_s,
            "speed_bands_ms": [
                {"name": band.name, "lower_ms": band.lower_ms, "upper_ms": band.upper_ms}
                for band in bands
            ],
        },
        "session_summary": _jsonify_obj(summary),
        "speed_bands": _jsonify_records(band_table),
        "diagnostics": _jsonify_obj(diagnostics or {}),
        "artifacts": {"snapshots": SNAPSHOTS_FILE},
    }

    contract_path = root / RESULTS_FILE
    contract_path.write_text(json.dumps(_jsonify_obj(contract), indent=2) + "\n", encoding="utf-8")
    logger.info(f"Wrote {snapshots_path} and {contract_path}")
    return contract_path


def load_session_results(output_dir: str | Path) -> dict[str, Any]:
    """Load `results.json` from an output directory."""
    contract_path = Path(output_dir) / RESULTS_FILE
    if not contract_path.exists():
        raise FileNotFoundError(
            f"Missing results contract at {contract_path}. Run `match-kinematics --write` first."
        )
    return json.loads(contract_path.read_text(encoding="utf-8"))


def _jsonify_records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    return [_jsonify_obj(row) for row in frame.to_dict(orient="records")]


def _jsonify_obj(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _jsonify_obj(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonify_obj(item) for item in value]
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and np.isnan(value):
        return None
    return value
