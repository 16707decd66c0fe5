"""Physical constants and default filter thresholds."""

EARTH_RADIUS_M = 6_371_000.0
MS_TO_KMH = 3.6

GLITCH_DISTANCE_M = 100.0
MAX_PLAUSIBLE_SPEED_KMH = 40.0
MIN_TIME_STEP_S = 1

BAND4_MS = (4.0, 5.5)
BAND5_MS = (5.5, 7.0)

RECENT_WINDOW_PACKETS = 60
