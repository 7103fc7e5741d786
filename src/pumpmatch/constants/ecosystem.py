"""Target ecosystem (pump.fun) identifiers and position-lifecycle limits."""

from typing import Final

# pump.fun bonding-curve program
PUMP_PROGRAM_ID: Final[str] = "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P"

# Helius enhanced-transaction `source` tag for pump.fun activity
PUMP_SOURCE_TAG: Final[str] = "PUMP_FUN"

# Vanity suffix carried by pump.fun mint addresses
PUMP_MINT_SUFFIX: Final[str] = "pump"

# Balances this close to zero are treated as exactly zero
ZERO_BALANCE_EPSILON: Final[float] = 1e-9

# Fewer mints than this yields no pump verdict
MIN_MINTS_TOUCHED: Final[int] = 3

# An open position older than this counts as "dead" exposure
DEAD_POSITION_AGE_SECONDS: Final[int] = 3 * 24 * 60 * 60

# Jeet score steps: (max median hold seconds, score), checked in order
JEET_SCORE_STEPS: Final[tuple[tuple[int, int], ...]] = (
    (120, 100),
    (300, 90),
    (900, 75),
    (3600, 50),
    (14400, 30),
    (86400, 10),
)
