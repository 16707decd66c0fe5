"""Speed-band definitions and band summaries over replayed sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from .config import EstimatorSettings


@dataclass(frozen=True)
class SpeedBand:
    """Closed-open speed band in m/s; `upper_ms=None` means unbounded."""

    name: str
    lower_ms: float
    upper_ms: float | None

    def contains(self, velocity_ms: float) -> bool:
        if velocity_ms < self.lower_ms:
            return False
        return self.upper_ms is None or velocity_ms < self.upper_ms


def default_speed_bands(settings: EstimatorSettings | None = None) -> list[SpeedBand]:
    """The two intensity bands tracked by the estimator."""
    settings = settings or EstimatorSettings()
    return [
        SpeedBand("Band 4", *settings.band4_ms),
        SpeedBand("Band 5", *settings.band5_ms),
    ]


def assign_speed_band(
    velocity_ms: pd.Series, bands: Sequence[SpeedBand], out_of_range_label: str = "Out of band"
) -> pd.Series:
    """Assign each step to a speed-band label."""
    labels = pd.Series(out_of_range_label, index=velocity_ms.index, dtype="object")
    for band in bands:
        if band.upper_ms is None:
            mask = velocity_ms >= band.lower_ms
        else:
            mask = (velocity_ms >= band.lower_ms) & (velocity_ms < band.upper_ms)
        labels.loc[mask] = band.name
    return labels


def summarize_speed_bands(
    frame: pd.DataFrame,
    bands: Sequence[SpeedBand],
    *,
    speed_col: str = "velocity_ms",
    distance_col: str = "step_distance_m",
    time_col: str = "time_step",
) -> pd.DataFrame:
    """Summarize distance and time accumulated in each speed band.

    Only accepted steps count; the initial sample and filtered steps carry
    zero time and distance and are excluded so they do not skew means.
    """
    columns = [speed_col, distance_col, time_col]
    missing = set(columns) - set(frame.columns)
    if missing:
        raise ValueError(f"Missing columns for speed band summary: {missing}")

    work = frame.loc[frame[time_col] > 0, columns].copy()
    work["speed_band"] = assign_speed_band(work[speed_col], bands)

    total_distance = work[distance_col].sum()
    total_time = work[time_col].sum()

    summary = (
        work.groupby("speed_band", dropna=False)
        .agg(
            distance_m=(distance_col, "sum"),
            time_s=(time_col, "sum"),
            step_count=(speed_col, "size"),
            mean_velocity_ms=(speed_col, "mean"),
        )
        .reindex([band.name for band in bands] + ["Out of band"])
        .fillna({"distance_m": 0.0, "time_s": 0, "step_count": 0})
        .rename_axis("speed_band")
        .reset_index()
    )

    summary["distance_pct"] = np.where(
        total_distance > 0, (summary["distance_m"] / total_distance) * 100.0, 0.0
    )
    summary["time_pct"] = np.where(total_time > 0, (summary["time_s"] / total_time) * 100.0, 0.0)
    summary["time_s"] = summary["time_s"].astype(int)
    summary["step_count"] = summary["step_count"].astype(int)
    return summary
