"""Constants for the ranker module."""

import sys


# Below this distance the observer is considered to be at the station
DISTANCE_EPSILON: float = 0.01

# Urgency assigned to stations within DISTANCE_EPSILON
MAX_URGENCY: float = sys.float_info.max
