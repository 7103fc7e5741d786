"""Badge trigger thresholds and aggregation constants."""

from typing import Final

WHALE_MIN_BALANCE_SOL: Final[float] = 10.0  # exclusive
OG_WALLET_MIN_TX_COUNT: Final[int] = 1000  # exclusive
DEV_MIN_DIVERSITY: Final[int] = 10  # exclusive

MEGA_JEET_MIN_CLOSED: Final[int] = 3
MEGA_JEET_MIN_SCORE: Final[int] = 90
RUG_MAGNET_MIN_SCORE: Final[int] = 40

COMMUNITY_TRUSTED_MIN_ENDORSEMENTS: Final[int] = 3

# Rank-based decay applied to SOCIAL badges sorted by weight (rank >= 3 -> 0)
SOCIAL_DECAY_FACTORS: Final[tuple[float, ...]] = (1.0, 0.6, 0.3)
