"""Match confidence constants."""

from typing import Final

MAX_BADGE_BONUS: Final[float] = 25.0
MAX_CONTEXT_BONUS: Final[int] = 20
TAG_SYNERGY_BONUS: Final[int] = 10

# Weak-link weights: lower trust score dominates
WEAK_LINK_MIN_WEIGHT: Final[float] = 0.7
WEAK_LINK_MAX_WEIGHT: Final[float] = 0.3

# Final confidence ceiling; 100 is never reported
MAX_CONFIDENCE: Final[int] = 98

# Activity multiplier brackets: (max hours since active, multiplier)
ACTIVITY_DECAY_BRACKETS: Final[tuple[tuple[float, float], ...]] = (
    (24.0, 1.0),
    (72.0, 0.9),
)
STALE_ACTIVITY_MULTIPLIER: Final[float] = 0.7

# Self-role inference and interest thresholds (exclusive)
WHALE_ROLE_MIN_BALANCE: Final[float] = 10.0
DEV_ROLE_MIN_DIVERSITY: Final[int] = 10
NFT_INTEREST_MIN_NFTS: Final[int] = 5
DEFI_INTEREST_MIN_TOKENS: Final[int] = 10
TRADING_INTEREST_MIN_DIVERSITY: Final[int] = 5

# Ranking: confidences within this band are considered tied
RANKING_TIE_BAND: Final[float] = 2.0

# Membership timing
SLEEPING_THRESHOLD_SECONDS: Final[int] = 7 * 24 * 60 * 60
SOFT_COOLDOWN_SECONDS: Final[int] = 60 * 60

NETWORK_SEARCH_LIMIT: Final[int] = 50
