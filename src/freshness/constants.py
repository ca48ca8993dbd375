"""Constants for freshness evaluation."""

# Threshold sentinel: any non-negative day count is a staleness candidate
ALWAYS_CANDIDATE = -1

# Default global day threshold
DEFAULT_THRESHOLD_DAYS = 30
