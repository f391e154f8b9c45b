"""
Configuration constants for the linear-progression calculations.

All weights are in the reference units of the bundled programs (lbs).
Program-specific values (increments, deload percentage, double threshold)
live in the program YAML files, not here.
"""

from typing import Final

# =============================================================================
# ROUNDING
# =============================================================================

ROUNDING_INCREMENT: Final[float] = 2.5  # Smallest loadable jump (1.25 per side)

# =============================================================================
# WARMUPS
# =============================================================================

WARMUP_WEIGHT_FLOOR: Final[float] = 85.0  # At or below this, no warmup sets
BAR_WEIGHT: Final[float] = 45.0  # Used for 0% warmup templates (empty bar)

# =============================================================================
# PROGRESSION
# =============================================================================

DELOAD_REP_THRESHOLD: Final[int] = 5  # AMRAP reps below this trigger a deload

# =============================================================================
# STORAGE
# =============================================================================

APP_DIR_NAME: Final[str] = "greyskull"
USERS_DIR_NAME: Final[str] = "users"
CURRENT_USER_FILE: Final[str] = "current_user.txt"
PROGRAMS_DIR_NAME: Final[str] = "programs"
