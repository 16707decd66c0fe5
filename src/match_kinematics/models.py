"""Input and output records for the motion estimator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Sample:
    """One timestamped reading from the tracking device.

    The gyro (`xg`, `yg`, `zg`) and accelerometer (`xa`, `ya`, `za`) axes are
    carried through unchanged; no metric reads them yet.
    """

    timestamp: datetime
    latitude: float
    longitude: float
    xg: float = 0.0
    yg: float = 0.0
    zg: float = 0.0
    xa: float = 0.0
    ya: float = 0.0
    za: float = 0.0


@dataclass(frozen=True)
class Snapshot:
    """Instantaneous and cumulative metrics for one estimator update."""

    velocity_ms: float
    velocity_kmh: float
    acceleration_ms2: float
    total_distance: float
    time_step: int
    band4_distance: float
    band5_distance: float

    @classmethod
    def zero(cls) -> Snapshot:
        return cls(
            velocity_ms=0.0,
            velocity_kmh=0.0,
            acceleration_ms2=0.0,
            total_distance=0.0,
            time_step=0,
            band4_distance=0.0,
            band5_distance=0.0,
        )
