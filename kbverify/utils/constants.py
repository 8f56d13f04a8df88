# kbverify/utils/constants.py
# Harness configuration constants. Single authoritative definition.
# Runtime overrides come only from run_harness command-line options.
#
# Standard import pattern:
#   from kbverify.utils.constants import (
#       DEFAULT_BIT_WIDTH,
#       PRACTICAL_BIT_WIDTH_LIMIT,
#       MAX_SUPPORTED_BIT_WIDTH,
#       DEFAULT_MAX_PAIRS,
#       DEFAULT_TIMEOUT_SECONDS,
#       CI_BIT_WIDTHS,
#   )


# ---------------------------------------------------------------------------
# BIT WIDTHS
# ---------------------------------------------------------------------------

# Used when the bit-width argument is present but not a non-negative integer.
DEFAULT_BIT_WIDTH: int = 4

# Largest width the harness brute-forces without --force.
# Width 8 is 43 million ordered pairs; width 9 is nearly 400 million.
PRACTICAL_BIT_WIDTH_LIMIT: int = 8

# Hard ceiling of the numpy path: sign-extended products of two 32-bit
# values fit in a signed 64-bit integer. Wider values never reach the
# vectorized concretizer.
MAX_SUPPORTED_BIT_WIDTH: int = 32


# ---------------------------------------------------------------------------
# ITERATION BUDGET
# ---------------------------------------------------------------------------

# Pair cap for one run. 3**12 = 531441 pairs at width 6 fit with headroom.
DEFAULT_MAX_PAIRS: int = 600_000

# Wall-clock cap for one run.
DEFAULT_TIMEOUT_SECONDS: float = 600.0

# Outer-loop rows (one lhs value each) between DEBUG progress lines.
PROGRESS_LOG_INTERVAL_ROWS: int = 81


# ---------------------------------------------------------------------------
# CI GATE
# ---------------------------------------------------------------------------

# Widths over which the candidate must report zero unsound pairs.
CI_BIT_WIDTHS: tuple = (1, 2, 3, 4, 5, 6)
