"""Badge derivation and badge score aggregation.

Badges are derived from wallet signals on every analysis. The one
exception is `community_trusted`, which depends on a live endorsement
count from the profile store and is reconciled separately for registered
members. `governor` is never derived here; it only appears when a stored
profile already carries it.

Aggregation:
    System Score = sum of SYSTEM badge weights
    Social Score = SOCIAL badges sorted by weight (desc), weighted by
                   [1.0, 0.6, 0.3, 0, ...] by rank, summed
"""

from collections.abc import Iterable

from pumpmatch.constants.badges import (
    COMMUNITY_TRUSTED_MIN_ENDORSEMENTS,
    DEV_MIN_DIVERSITY,
    MEGA_JEET_MIN_CLOSED,
    MEGA_JEET_MIN_SCORE,
    OG_WALLET_MIN_TX_COUNT,
    RUG_MAGNET_MIN_SCORE,
    SOCIAL_DECAY_FACTORS,
    WHALE_MIN_BALANCE_SOL,
)
from pumpmatch.constants.scoring import TX_COUNT_UNAVAILABLE
from pumpmatch.core.scoring.trust_score import qualifies_for_diamond_hands
from pumpmatch.models.badge import Badge, BadgeCategory, BadgeId
from pumpmatch.models.pump import PumpStats


def assign_badges(
    sol_balance: float,
    transaction_count: int,
    token_diversity: int,
    pump_stats: PumpStats | None = None,
) -> list[BadgeId]:
    """Derive signal-based badges for a wallet.

    Args:
        sol_balance: SOL balance.
        transaction_count: Signature count, or -1 when unavailable.
        token_diversity: Distinct token ids held.
        pump_stats: Pump statistics; None derives no pump badges.

    Returns:
        Badge ids in catalogue order.
    """
    badges: list[BadgeId] = []

    if sol_balance > WHALE_MIN_BALANCE_SOL:
        badges.append(BadgeId.WHALE)

    if token_diversity > DEV_MIN_DIVERSITY:
        badges.append(BadgeId.DEV)

    if transaction_count != TX_COUNT_UNAVAILABLE and transaction_count > OG_WALLET_MIN_TX_COUNT:
        badges.append(BadgeId.OG_WALLET)

    if pump_stats is not None:
        if qualifies_for_diamond_hands(pump_stats):
            badges.append(BadgeId.DIAMOND_HANDS)
        if (
            pump_stats.closed_positions >= MEGA_JEET_MIN_CLOSED
            and pump_stats.jeet_score >= MEGA_JEET_MIN_SCORE
        ):
            badges.append(BadgeId.MEGA_JEET)
        if pump_stats.rug_magnet_score >= RUG_MAGNET_MIN_SCORE:
            badges.append(BadgeId.RUG_MAGNET)

    return badges


def reconcile_community_badge(badges: Iterable[BadgeId], endorsement_count: int) -> list[BadgeId]:
    """Add or drop `community_trusted` against a live endorsement count."""
    reconciled = [b for b in badges if b != BadgeId.COMMUNITY_TRUSTED]
    if endorsement_count >= COMMUNITY_TRUSTED_MIN_ENDORSEMENTS:
        reconciled.append(BadgeId.COMMUNITY_TRUSTED)
    return reconciled


def _badge_weights(badges: Iterable[BadgeId | Badge], category: BadgeCategory) -> list[float]:
    weights: list[float] = []
    for badge in badges:
        if badge.category == category:
            weights.append(float(badge.base_weight))
    return weights


def system_score(badges: Iterable[BadgeId | Badge]) -> float:
    return sum(_badge_weights(badges, BadgeCategory.SYSTEM))


def social_score(badges: Iterable[BadgeId | Badge]) -> float:
    """Rank-then-decay sum; rewards a few strong social signals over many weak ones."""
    weights = sorted(_badge_weights(badges, BadgeCategory.SOCIAL), reverse=True)
    return sum(
        weight * SOCIAL_DECAY_FACTORS[rank]
        for rank, weight in enumerate(weights)
        if rank < len(SOCIAL_DECAY_FACTORS)
    )


def calculate_badge_scores(badges: Iterable[BadgeId | Badge]) -> tuple[float, float]:
    """Return (system_score, social_score) for a badge set."""
    badge_list = list(badges)
    return system_score(badge_list), social_score(badge_list)


def materialize_badges(badge_ids: Iterable[BadgeId]) -> list[Badge]:
    """Expand ids into full badge snapshots for storage on a profile."""
    return [Badge.from_id(badge_id) for badge_id in badge_ids]


def wallet_level(badges: Iterable[BadgeId]) -> str:
    """Coarse level stored with each analysis: Whale > Dev > OG > Rookie."""
    badge_set = set(badges)
    if BadgeId.WHALE in badge_set:
        return "Whale"
    if BadgeId.DEV in badge_set:
        return "Dev"
    if BadgeId.OG_WALLET in badge_set:
        return "OG"
    return "Rookie"
