"""Trust score constants.

All bracket tables are checked top to bottom; the first matching row wins.
"""

from typing import Final

# Reserved transaction-count value: upstream failure, not a real count
TX_COUNT_UNAVAILABLE: Final[int] = -1

# =============================================================================
# Component caps
# =============================================================================

MAX_BALANCE_SCORE: Final[int] = 40
BALANCE_POINTS_PER_SOL: Final[int] = 4

MAX_DIVERSITY_SCORE: Final[int] = 20
DIVERSITY_POINTS_PER_TOKEN: Final[int] = 4

MAX_TRUST_SCORE: Final[int] = 100

# Activity brackets: (min effective tx count, points)
ACTIVITY_BRACKETS: Final[tuple[tuple[int, int], ...]] = (
    (1000, 40),
    (300, 30),
    (100, 22),
    (50, 15),
    (10, 7),
    (1, 2),
)

# =============================================================================
# Penalties and bonuses
# =============================================================================

FRESH_WALLET_TX_THRESHOLD: Final[int] = 5
FRESH_WALLET_PENALTY: Final[int] = 20

MAX_JEET_PENALTY: Final[int] = 30
OPEN_ONLY_JEET_SCALE: Final[float] = 0.35
MAX_RUG_PENALTY: Final[int] = 20

DIAMOND_HANDS_BONUS: Final[int] = 20
DIAMOND_HANDS_MAX_JEET: Final[int] = 10
DIAMOND_HANDS_MAX_RUG: Final[int] = 40  # exclusive upper bound

# =============================================================================
# Presentation
# =============================================================================

HIGH_TRUST_MIN: Final[int] = 80
MEDIUM_TRUST_MIN: Final[int] = 50

# Wallet age brackets: (min age days, points); null or younger -> 0
AGE_BRACKETS: Final[tuple[tuple[int, float], ...]] = (
    (180, 2.0),
    (30, 1.0),
    (7, 0.5),
)
