"""Incremental velocity, acceleration and distance estimation from GPS samples."""

from __future__ import annotations

from collections import deque
from datetime import timedelta
import logging

from .config import EstimatorSettings
from .constants import MS_TO_KMH
from .geodesic import haversine_distance
from .metrics import SpeedBand
from .models import Sample, Snapshot

logger = logging.getLogger(__name__)


class MotionEstimator:
    """Stateful per-session estimator fed one `Sample` at a time.

    The first update only stores a baseline and returns an all-zero snapshot.
    Every later update measures the step from the baseline to the new sample,
    drops steps that look like GPS glitches (too far) or implausible readings
    (too fast), and accumulates what is left. Dropped steps still move the
    baseline forward.

    Not thread-safe; feed samples from a single producer in arrival order.
    """

    def __init__(self, settings: EstimatorSettings | None = None) -> None:
        self.settings = settings or EstimatorSettings()
        self.band4 = SpeedBand("Band 4", *self.settings.band4_ms)
        self.band5 = SpeedBand("Band 5", *self.settings.band5_ms)

        self._last_sample: Sample | None = None
        self._last_velocity_ms = 0.0
        self._total_distance = 0.0
        self._accumulated_time = 0
        self._band4_distance = 0.0
        self._band5_distance = 0.0
        self._recent_distances: deque[float] = deque(maxlen=self.settings.recent_window_packets)

        self._update_count = 0
        self._glitch_count = 0
        self._speed_filtered_count = 0
        self._reordered_count = 0

    @property
    def is_tracking(self) -> bool:
        return self._last_sample is not None

    @property
    def last_sample(self) -> Sample | None:
        return self._last_sample

    @property
    def last_velocity_ms(self) -> float:
        return self._last_velocity_ms

    @property
    def total_distance(self) -> float:
        return self._total_distance

    @property
    def accumulated_time(self) -> int:
        return self._accumulated_time

    @property
    def band4_distance(self) -> float:
        return self._band4_distance

    @property
    def band5_distance(self) -> float:
        return self._band5_distance

    @property
    def distance_per_minute(self) -> float:
        """Distance over the most recent window of tracking updates (60 by default)."""
        return float(sum(self._recent_distances))

    @property
    def update_count(self) -> int:
        return self._update_count

    @property
    def glitch_count(self) -> int:
        return self._glitch_count

    @property
    def speed_filtered_count(self) -> int:
        return self._speed_filtered_count

    @property
    def reordered_count(self) -> int:
        return self._reordered_count

    def diagnostics(self) -> dict[str, int]:
        """Counters describing how many steps were seen and dropped."""
        return {
            "update_count": self._update_count,
            "glitch_count": self._glitch_count,
            "speed_filtered_count": self._speed_filtered_count,
            "reordered_count": self._reordered_count,
        }

    def update(self, current: Sample) -> Snapshot:
        """Consume the next sample and return the metrics for this step."""
        self._update_count += 1

        if self._last_sample is None:
            self._last_sample = current
            return Snapshot.zero()

        prev = self._last_sample
        settings = self.settings

        delta = current.timestamp - prev.timestamp
        if delta < timedelta(0):
            # Out-of-order samples fold to the absolute gap.
            logger.debug(f"Sample arrived {-delta} before its baseline; using absolute gap")
            self._reordered_count += 1

        dt = _whole_seconds(delta)
        if dt == 0:
            dt = settings.min_time_step_s

        dist = haversine_distance(prev.latitude, prev.longitude, current.latitude, current.longitude)

        if dist > settings.glitch_distance_m:
            logger.debug(f"Dropping {dist:.1f} m jump at {current.timestamp} as a GPS glitch")
            self._glitch_count += 1
            dist = 0.0
            dt = 0

        velocity_ms = dist / dt if dt > 0 and dist > 0 else 0.0
        velocity_kmh = velocity_ms * MS_TO_KMH

        if velocity_kmh > settings.max_speed_kmh:
            logger.debug(f"Dropping implausible {velocity_kmh:.1f} km/h step at {current.timestamp}")
            self._speed_filtered_count += 1
            velocity_ms = 0.0
            velocity_kmh = 0.0
            dist = 0.0
            dt = 0

        self._total_distance += dist
        self._accumulated_time += dt
        self._recent_distances.append(dist)

        acceleration_ms2 = (velocity_ms - self._last_velocity_ms) / dt if dt > 0 else 0.0

        if self.band4.contains(velocity_ms):
            self._band4_distance += dist
        if self.band5.contains(velocity_ms):
            self._band5_distance += dist

        self._last_sample = current
        self._last_velocity_ms = velocity_ms

        return Snapshot(
            velocity_ms=velocity_ms,
            velocity_kmh=velocity_kmh,
            acceleration_ms2=acceleration_ms2,
            total_distance=self._total_distance,
            time_step=dt,
            band4_distance=self._band4_distance,
            band5_distance=self._band5_distance,
        )


def _whole_seconds(delta: timedelta) -> int:
    return int(abs(delta) // timedelta(seconds=1))
