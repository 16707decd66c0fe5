"""Session loading, replay through the estimator, and session summaries."""

from __future__ import annotations

from dataclasses import asdict, fields
import logging
from pathlib import Path
from typing import Iterable

import numpy as np
import pandas as pd

from .config import EstimatorSettings
from .estimator import MotionEstimator
from .models import Sample, Snapshot

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("timestamp", "latitude", "longitude")
AXIS_COLUMNS = ("xg", "yg", "zg", "xa", "ya", "za")
SNAPSHOT_COLUMNS = tuple(field.name for field in fields(Snapshot))


def load_samples(csv_path: str | Path) -> list[Sample]:
    """Load a recorded session CSV into samples, keeping file order."""
    df = pd.read_csv(csv_path)
    missing = set(REQUIRED_COLUMNS) - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns in {csv_path}: {sorted(missing)}")

    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    df["latitude"] = pd.to_numeric(df["latitude"], errors="coerce")
    df["longitude"] = pd.to_numeric(df["longitude"], errors="coerce")
    for col in AXIS_COLUMNS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0)
        else:
            df[col] = 0.0

    valid = df["timestamp"].notna() & np.isfinite(df["latitude"]) & np.isfinite(df["longitude"])
    dropped = int((~valid).sum())
    if dropped:
        logger.warning(f"Dropped {dropped} unparseable rows from {csv_path}")
    df = df.loc[valid]

    samples = [
        Sample(
            timestamp=row.timestamp.to_pydatetime(),
            latitude=float(row.latitude),
            longitude=float(row.longitude),
            xg=float(row.xg),
            yg=float(row.yg),
            zg=float(row.zg),
            xa=float(row.xa),
            ya=float(row.ya),
            za=float(row.za),
        )
        for row in df.itertuples(index=False)
    ]
    logger.info(f"Loaded {len(samples)} samples from {csv_path}")
    return samples


def replay_samples(
    samples: Iterable[Sample],
    estimator: MotionEstimator | None = None,
    *,
    settings: EstimatorSettings | None = None,
) -> pd.DataFrame:
    """Feed samples through one estimator in order and tabulate every snapshot."""
    if estimator is None:
        estimator = MotionEstimator(settings)

    rows: list[dict[str, object]] = []
    for sample in samples:
        was_tracking = estimator.is_tracking
        distance_before = estimator.total_distance
        snapshot = estimator.update(sample)

        if not was_tracking:
            status = "initial"
        elif snapshot.time_step == 0:
            status = "filtered"
        else:
            status = "accepted"

        rows.append(
            {
                "timestamp": sample.timestamp,
                "latitude": sample.latitude,
                "longitude": sample.longitude,
                "step_status": status,
                "step_distance_m": snapshot.total_distance - distance_before,
                **asdict(snapshot),
            }
        )

    frame = pd.DataFrame(
        rows,
        columns=["timestamp", "latitude", "longitude", "step_status", "step_distance_m", *SNAPSHOT_COLUMNS],
    )
    logger.info(
        f"Replayed {len(frame)} samples: {estimator.total_distance:.1f} m, "
        f"{estimator.glitch_count} glitches, {estimator.speed_filtered_count} speed-filtered"
    )
    return frame


def summarize_session(frame: pd.DataFrame) -> dict[str, float | int | str]:
    """Compact per-session summary of a replay frame."""
    if frame.empty:
        return {
            "rows": 0,
            "start_ts_utc": "",
            "end_ts_utc": "",
            "total_distance_m": 0.0,
            "band4_distance_m": 0.0,
            "band5_distance_m": 0.0,
            "accumulated_time_s": 0,
            "accepted_step_count": 0,
            "filtered_step_count": 0,
            "mean_velocity_kmh": 0.0,
            "peak_velocity_kmh": 0.0,
            "peak_accel_ms2": 0.0,
            "peak_decel_ms2": 0.0,
        }

    accepted = frame[frame["step_status"] == "accepted"]
    last = frame.iloc[-1]

    return {
        "rows": int(len(frame)),
        "start_ts_utc": str(frame["timestamp"].iloc[0]),
        "end_ts_utc": str(last["timestamp"]),
        "total_distance_m": float(last["total_distance"]),
        "band4_distance_m": float(last["band4_distance"]),
        "band5_distance_m": float(last["band5_distance"]),
        "accumulated_time_s": int(frame["time_step"].sum()),
        "accepted_step_count": int(len(accepted)),
        "filtered_step_count": int((frame["step_status"] == "filtered").sum()),
        "mean_velocity_kmh": float(accepted["velocity_kmh"].mean()) if not accepted.empty else 0.0,
        "peak_velocity_kmh": float(frame["velocity_kmh"].max()),
        "peak_accel_ms2": float(frame["acceleration_ms2"].max()),
        "peak_decel_ms2": float(frame["acceleration_ms2"].min()),
    }
