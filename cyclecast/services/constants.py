"""
Constants and shared data for cycle-related services.
"""

# Fallback lengths used when neither logs nor settings provide a value
DEFAULT_CYCLE_LENGTH = 28
DEFAULT_PERIOD_LENGTH = 5

# The luteal phase varies far less than the follicular phase, so phase
# boundaries are anchored from the end of the cycle
LUTEAL_PHASE_LENGTH = 14

# Flow entries more than this many days apart belong to different episodes
CLUSTER_GAP_DAYS = 2

# Only the newest start-to-start gaps feed the cycle length average
MAX_CYCLE_GAPS = 6

# A lone single-day entry says nothing about period length
MIN_LOGGED_PERIOD_DAYS = 2

# Number of future periods projected for calendar and upcoming views
PREDICTION_HORIZON_CYCLES = 3

# Fertile window relative to the ovulation day (sperm viability + 1 day)
FERTILE_DAYS_BEFORE_OVULATION = 5
FERTILE_DAYS_AFTER_OVULATION = 1

# Ovulation is reported for the estimated day and one day either side
OVULATION_SPREAD_DAYS = 1

# Number of inter-episode gaps shown on the cycle length trend chart
TREND_CYCLES = 6
