"""Trust score calculation.

Combines balance, activity bracket, token diversity and (when available)
pump-behavior statistics into a single 0-100 score:

    total = clamp(0, 100,
                  balance + activity + diversity
                  - fresh_penalty - jeet_penalty - rug_penalty
                  + diamond_bonus)

The calculation is pure: identical inputs always produce an identical
ScoreBreakdown.
"""

import math

from pumpmatch.constants.scoring import (
    ACTIVITY_BRACKETS,
    AGE_BRACKETS,
    BALANCE_POINTS_PER_SOL,
    DIAMOND_HANDS_BONUS,
    DIAMOND_HANDS_MAX_JEET,
    DIAMOND_HANDS_MAX_RUG,
    DIVERSITY_POINTS_PER_TOKEN,
    FRESH_WALLET_PENALTY,
    FRESH_WALLET_TX_THRESHOLD,
    HIGH_TRUST_MIN,
    MAX_BALANCE_SCORE,
    MAX_DIVERSITY_SCORE,
    MAX_JEET_PENALTY,
    MAX_RUG_PENALTY,
    MAX_TRUST_SCORE,
    MEDIUM_TRUST_MIN,
    OPEN_ONLY_JEET_SCALE,
    TX_COUNT_UNAVAILABLE,
)
from pumpmatch.core.numeric import clamp, round_half_up
from pumpmatch.models.pump import PumpStats
from pumpmatch.models.wallet import ScoreBreakdown

# Explanation labels, in the order they can appear
EXPLAIN_TX_UNAVAILABLE = "Transaction history unavailable (upstream issue)"
EXPLAIN_FRESH_WALLET = "Fresh wallet: low activity penalty"
EXPLAIN_HIGH_BALANCE = "High balance"
EXPLAIN_OG_ACTIVITY = "OG activity level"
EXPLAIN_ACTIVE_USER = "Active user"
EXPLAIN_MODERATE_ACTIVITY = "Moderate activity"
EXPLAIN_DIVERSE_PORTFOLIO = "Diverse token portfolio"
EXPLAIN_JEET = "Fast flipping on pump.fun (jeet penalty)"
EXPLAIN_RUG = "Holds dead pump.fun tokens (rug exposure penalty)"
EXPLAIN_DIAMOND = "Diamond hands on pump.fun"
EXPLAIN_STANDARD = "Standard profile"


def effective_transaction_count(transaction_count: int) -> int:
    """Treat the unavailable sentinel as zero activity."""
    return 0 if transaction_count == TX_COUNT_UNAVAILABLE else max(transaction_count, 0)


def balance_score(sol_balance: float) -> int:
    """min(40, floor(4 * balance)); non-finite or negative balances score 0."""
    if not math.isfinite(sol_balance) or sol_balance <= 0:
        return 0
    return min(MAX_BALANCE_SCORE, math.floor(sol_balance * BALANCE_POINTS_PER_SOL))


def activity_score(transaction_count: int) -> int:
    effective = effective_transaction_count(transaction_count)
    for min_count, points in ACTIVITY_BRACKETS:
        if effective >= min_count:
            return points
    return 0


def diversity_score(token_diversity: int) -> int:
    return min(MAX_DIVERSITY_SCORE, max(token_diversity, 0) * DIVERSITY_POINTS_PER_TOKEN)


def fresh_wallet_penalty(transaction_count: int) -> int:
    """Penalty for wallets with almost no history; never applied to the sentinel."""
    if transaction_count == TX_COUNT_UNAVAILABLE:
        return 0
    if effective_transaction_count(transaction_count) < FRESH_WALLET_TX_THRESHOLD:
        return FRESH_WALLET_PENALTY
    return 0


def jeet_penalty(pump_stats: PumpStats) -> int:
    """Up to 30 points; open-only histories are penalized at 35%."""
    scale = 1.0 if pump_stats.closed_positions > 0 else OPEN_ONLY_JEET_SCALE
    return round_half_up((pump_stats.jeet_score / 100) * MAX_JEET_PENALTY * scale)


def rug_penalty(pump_stats: PumpStats) -> int:
    return round_half_up((pump_stats.rug_magnet_score / 100) * MAX_RUG_PENALTY)


def qualifies_for_diamond_hands(pump_stats: PumpStats) -> bool:
    return (
        pump_stats.closed_positions >= 1
        and pump_stats.jeet_score <= DIAMOND_HANDS_MAX_JEET
        and pump_stats.rug_magnet_score < DIAMOND_HANDS_MAX_RUG
    )


def calculate_trust_score(
    sol_balance: float,
    transaction_count: int,
    token_diversity: int,
    pump_stats: PumpStats | None = None,
) -> ScoreBreakdown:
    """Calculate the trust score breakdown for a wallet.

    Args:
        sol_balance: SOL balance (>= 0).
        transaction_count: Signature count, or -1 when unavailable.
        token_diversity: Distinct token ids held.
        pump_stats: Position-lifecycle statistics; None skips every
            pump adjustment (it is not treated as zero scores).

    Returns:
        ScoreBreakdown with the total clamped to 0-100.

    Example:
        >>> calculate_trust_score(15, 1200, 12).total
        100
        >>> calculate_trust_score(0.1, 2, 0).total
        0
    """
    tx_unavailable = transaction_count == TX_COUNT_UNAVAILABLE

    balance = balance_score(sol_balance)
    activity = activity_score(transaction_count)
    diversity = diversity_score(token_diversity)
    base_penalty = fresh_wallet_penalty(transaction_count)

    jeet = 0
    rug = 0
    diamond = 0
    if pump_stats is not None:
        jeet = jeet_penalty(pump_stats)
        rug = rug_penalty(pump_stats)
        if qualifies_for_diamond_hands(pump_stats):
            diamond = DIAMOND_HANDS_BONUS

    penalty = base_penalty + jeet + rug
    total = int(clamp(balance + activity + diversity - penalty + diamond, 0, MAX_TRUST_SCORE))

    explanation: list[str] = []
    if tx_unavailable:
        explanation.append(EXPLAIN_TX_UNAVAILABLE)
    if base_penalty > 0:
        explanation.append(EXPLAIN_FRESH_WALLET)
    if balance >= 30:
        explanation.append(EXPLAIN_HIGH_BALANCE)
    if activity >= 40:
        explanation.append(EXPLAIN_OG_ACTIVITY)
    elif activity >= 22:
        explanation.append(EXPLAIN_ACTIVE_USER)
    elif activity >= 15:
        explanation.append(EXPLAIN_MODERATE_ACTIVITY)
    if diversity >= 15:
        explanation.append(EXPLAIN_DIVERSE_PORTFOLIO)
    if jeet > 0:
        explanation.append(EXPLAIN_JEET)
    if rug > 0:
        explanation.append(EXPLAIN_RUG)
    if diamond > 0:
        explanation.append(EXPLAIN_DIAMOND)
    if not explanation:
        explanation.append(EXPLAIN_STANDARD)

    return ScoreBreakdown(
        balance_score=balance,
        activity_score=activity,
        diversity_score=diversity,
        penalty=penalty,
        diamond_bonus=diamond,
        total=total,
        explanation=list(dict.fromkeys(explanation)),
    )


def trust_label(trust_score: int) -> str:
    if trust_score >= HIGH_TRUST_MIN:
        return "High Trust"
    if trust_score >= MEDIUM_TRUST_MIN:
        return "Medium Trust"
    return "Low Trust"


def age_bracket_score(approx_wallet_age_days: int | None) -> float:
    """Informational wallet-age points; first activity, not creation date."""
    if approx_wallet_age_days is None:
        return 0.0
    for min_days, points in AGE_BRACKETS:
        if approx_wallet_age_days >= min_days:
            return points
    return 0.0
