"""Match confidence between a requesting wallet and a network member.

Pipeline for one (self, candidate) pair:

1. Reciprocity gate: the candidate's `min_trust_score` floor is checked
   against self's trust score; failing it yields confidence 0 and stops.
2. Badge bonus: candidate System Score + Social Score, capped at 25.
3. Context bonus: asymmetric role synergy + whole-word tag synergy +
   symmetric intent synergy, capped at 20.
4. Base score (weak link): min * 0.7 + max * 0.3 of the two trust scores.
5. Activity multiplier from the candidate's last activity.
6. Final: min(98, round((base + badge + context) * multiplier)).
"""

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

import structlog

from pumpmatch.constants.matching import (
    ACTIVITY_DECAY_BRACKETS,
    DEFI_INTEREST_MIN_TOKENS,
    DEV_ROLE_MIN_DIVERSITY,
    MAX_BADGE_BONUS,
    MAX_CONFIDENCE,
    MAX_CONTEXT_BONUS,
    NFT_INTEREST_MIN_NFTS,
    STALE_ACTIVITY_MULTIPLIER,
    TAG_SYNERGY_BONUS,
    TRADING_INTEREST_MIN_DIVERSITY,
    WEAK_LINK_MAX_WEIGHT,
    WEAK_LINK_MIN_WEIGHT,
    WHALE_ROLE_MIN_BALANCE,
)
from pumpmatch.core.numeric import round_half_up
from pumpmatch.core.scoring.badges import calculate_badge_scores
from pumpmatch.models.badge import BadgeCategory, BadgeId
from pumpmatch.models.identity import MemberRole, UserIntent
from pumpmatch.models.match import (
    ConfidenceBreakdown,
    MatchReason,
    MatchReasonCode,
    MatchResult,
    ReasonImpact,
    ReasonStatus,
)
from pumpmatch.models.member import MemberProfile
from pumpmatch.models.wallet import WalletAnalysis

log = structlog.get_logger(__name__)


class SelfRole(str, Enum):
    """Role inferred for the requesting wallet (never read from storage)."""

    WHALE = "Whale"
    DEV = "Dev"
    NORMAL = "Normal"


@dataclass(frozen=True)
class Synergy:
    bonus: int
    code: MatchReasonCode
    impact: ReasonImpact
    label: str


# Keyed by (self role, candidate role); direction matters
ROLE_SYNERGIES: dict[tuple[SelfRole, MemberRole], Synergy] = {
    (SelfRole.DEV, MemberRole.WHALE): Synergy(
        20, MatchReasonCode.ROLE_SYNERGY_FUNDING, ReasonImpact.HIGH, "Funding Match"
    ),
    (SelfRole.WHALE, MemberRole.DEV): Synergy(
        25, MatchReasonCode.ROLE_SYNERGY_PRODUCT, ReasonImpact.HIGH, "Product Match"
    ),
    (SelfRole.DEV, MemberRole.MARKETING): Synergy(
        20, MatchReasonCode.ROLE_SYNERGY_GROWTH, ReasonImpact.HIGH, "Growth Match"
    ),
    (SelfRole.DEV, MemberRole.DEV): Synergy(
        5, MatchReasonCode.ROLE_SYNERGY_PEER, ReasonImpact.LOW, "Peer Match"
    ),
    (SelfRole.WHALE, MemberRole.ARTIST): Synergy(
        15, MatchReasonCode.ROLE_SYNERGY_CREATIVE, ReasonImpact.MEDIUM, "Creative Match"
    ),
    (SelfRole.WHALE, MemberRole.MARKETING): Synergy(
        15, MatchReasonCode.ROLE_SYNERGY_GROWTH, ReasonImpact.MEDIUM, "Growth Match"
    ),
    (SelfRole.WHALE, MemberRole.COMMUNITY): Synergy(
        12, MatchReasonCode.ROLE_SYNERGY_COMMUNITY, ReasonImpact.MEDIUM, "Community Match"
    ),
    (SelfRole.NORMAL, MemberRole.WHALE): Synergy(
        10, MatchReasonCode.ROLE_SYNERGY_COMMUNITY, ReasonImpact.MEDIUM, "Community Match"
    ),
    (SelfRole.NORMAL, MemberRole.MARKETING): Synergy(
        18, MatchReasonCode.ROLE_SYNERGY_COMMUNITY, ReasonImpact.MEDIUM, "Community Growth Match"
    ),
    (SelfRole.NORMAL, MemberRole.COMMUNITY): Synergy(
        10, MatchReasonCode.ROLE_SYNERGY_COMMUNITY, ReasonImpact.LOW, "Community Peer Match"
    ),
}

NFT_SYNERGY = Synergy(
    15, MatchReasonCode.ROLE_SYNERGY_NFT, ReasonImpact.MEDIUM, "NFT Project Match"
)

# Keyed by the unordered intent pair; a single-element set means both sides agree
INTENT_SYNERGIES: dict[frozenset[UserIntent], Synergy] = {
    frozenset({UserIntent.BUILD_SQUAD, UserIntent.JOIN_PROJECT}): Synergy(
        20,
        MatchReasonCode.INTENT_MATCH_PERFECT,
        ReasonImpact.HIGH,
        "Perfect Fit: Squad Builder meets Project Joiner",
    ),
    frozenset({UserIntent.HIRE_TALENT, UserIntent.JOIN_PROJECT}): Synergy(
        20,
        MatchReasonCode.INTENT_MATCH_PERFECT,
        ReasonImpact.HIGH,
        "Perfect Fit: Talent Seeker meets Project Joiner",
    ),
    frozenset({UserIntent.BUILD_SQUAD, UserIntent.HIRE_TALENT}): Synergy(
        15,
        MatchReasonCode.INTENT_MATCH_SAFE,
        ReasonImpact.MEDIUM,
        "Builders Aligned: Squad Builder meets Talent Seeker",
    ),
    frozenset({UserIntent.FIND_FUNDING, UserIntent.BUILD_SQUAD}): Synergy(
        15, MatchReasonCode.INTENT_MATCH_CAPITAL, ReasonImpact.HIGH, "Capital meets Talent"
    ),
    frozenset({UserIntent.NETWORK}): Synergy(
        10, MatchReasonCode.INTENT_MATCH_SAFE, ReasonImpact.MEDIUM, "Safe Match: Both networking"
    ),
    frozenset({UserIntent.FIND_FUNDING}): Synergy(
        0, MatchReasonCode.INTENT_NEUTRAL, ReasonImpact.LOW, "Neutral: Both seeking funding"
    ),
}

_WORD_RE = re.compile(r"[a-z0-9]+")


def infer_self_role(analysis: WalletAnalysis) -> SelfRole:
    if analysis.sol_balance > WHALE_ROLE_MIN_BALANCE or BadgeId.WHALE in analysis.badges:
        return SelfRole.WHALE
    if analysis.token_diversity > DEV_ROLE_MIN_DIVERSITY:
        return SelfRole.DEV
    return SelfRole.NORMAL


def infer_interests(analysis: WalletAnalysis) -> list[str]:
    interests: list[str] = []
    if analysis.nft_count > NFT_INTEREST_MIN_NFTS:
        interests.append("NFT")
    if analysis.token_count > DEFI_INTEREST_MIN_TOKENS:
        interests.append("DeFi")
    if analysis.token_diversity > TRADING_INTEREST_MIN_DIVERSITY:
        interests.append("Trading")
    return interests


def find_shared_tag(interests: list[str], tags: list[str]) -> str | None:
    """Return the first candidate tag sharing a whole word with an interest.

    "DeFi Degen" matches DeFi; "fi" or "Defiant" do not.
    """
    wanted = {interest.lower() for interest in interests}
    for tag in tags:
        if wanted.intersection(_WORD_RE.findall(tag.lower())):
            return tag
    return None


def activity_multiplier(last_active_at: datetime | None, now: datetime | None = None) -> float:
    """Recency multiplier: <=24h 1.0, <=72h 0.9, otherwise 0.7.

    Members inactive for more than 7 days are expected to be filtered out
    by the candidate query, not here. Unknown activity is not decayed.
    """
    if last_active_at is None:
        return 1.0
    current = now or datetime.now(UTC)
    elapsed_hours = (current - last_active_at).total_seconds() / 3600
    for max_hours, multiplier in ACTIVITY_DECAY_BRACKETS:
        if elapsed_hours <= max_hours:
            return multiplier
    return STALE_ACTIVITY_MULTIPLIER


def weak_link_base(self_score: float, candidate_score: float) -> float:
    low = min(self_score, candidate_score)
    high = max(self_score, candidate_score)
    return low * WEAK_LINK_MIN_WEIGHT + high * WEAK_LINK_MAX_WEIGHT


def _reason(code: MatchReasonCode, impact: ReasonImpact, status: ReasonStatus) -> MatchReason:
    return MatchReason(code=code, impact=impact, status=status)


def calculate_match_score(
    analysis: WalletAnalysis,
    candidate: MemberProfile,
    now: datetime | None = None,
) -> MatchResult:
    """Compute match confidence of `candidate` for the analyzed wallet.

    Args:
        analysis: The requesting wallet's analysis (trust score, badges,
            balances and declared intent).
        candidate: Network member being scored.
        now: Reference time for the activity multiplier.

    Returns:
        MatchResult with confidence in [0, 98].
    """
    reasons: list[MatchReason] = []

    # 1. Reciprocity gate (candidate's floor only)
    filters = candidate.match_filters
    if filters is not None and filters.min_trust_score is not None:
        if analysis.trust_score < filters.min_trust_score:
            reasons.append(
                _reason(
                    MatchReasonCode.TRUST_THRESHOLD_MISMATCH,
                    ReasonImpact.HIGH,
                    ReasonStatus.MISSING,
                )
            )
            log.debug(
                "match_reciprocity_rejected",
                candidate=candidate.address[:8] + "...",
                min_trust_score=filters.min_trust_score,
                trust_score=analysis.trust_score,
            )
            return MatchResult(
                confidence=0,
                reason="Trust threshold not met",
                breakdown=ConfidenceBreakdown(),
                match_reasons=reasons,
            )

    # 2. Badge bonus
    badges = candidate.active_badges
    system, social = calculate_badge_scores(badges)
    badge_raw = system + social
    badge_bonus = min(badge_raw, MAX_BADGE_BONUS)

    badge_ids = {b.id for b in badges}
    if system > 0:
        reasons.append(
            _reason(MatchReasonCode.BADGE_BONUS_SYSTEM, ReasonImpact.MEDIUM, ReasonStatus.POSITIVE)
        )
    if social > 0:
        reasons.append(
            _reason(MatchReasonCode.BADGE_BONUS_SOCIAL, ReasonImpact.MEDIUM, ReasonStatus.POSITIVE)
        )
    if BadgeId.WHALE in badge_ids:
        reasons.append(
            _reason(MatchReasonCode.BADGE_BONUS_WHALE, ReasonImpact.HIGH, ReasonStatus.POSITIVE)
        )
    if BadgeId.DEV in badge_ids:
        reasons.append(
            _reason(MatchReasonCode.BADGE_BONUS_DEV, ReasonImpact.MEDIUM, ReasonStatus.POSITIVE)
        )
    if any(b.id == BadgeId.GOVERNOR and b.category == BadgeCategory.SOCIAL for b in badges):
        reasons.append(
            _reason(MatchReasonCode.BADGE_BONUS_GOVERNOR, ReasonImpact.HIGH, ReasonStatus.POSITIVE)
        )

    # 3. Context bonus: role + tags + intent
    role_bonus = 0
    role_reason = ""
    tag_reason = ""

    self_role = infer_self_role(analysis)
    synergy = ROLE_SYNERGIES.get((self_role, candidate.role))
    if synergy is None and analysis.nft_count > NFT_INTEREST_MIN_NFTS:
        if candidate.role == MemberRole.ARTIST:
            synergy = NFT_SYNERGY
    if synergy is not None:
        role_bonus = synergy.bonus
        role_reason = f"{synergy.label} (+{synergy.bonus}%)"
        reasons.append(_reason(synergy.code, synergy.impact, ReasonStatus.POSITIVE))

    shared_tag = find_shared_tag(infer_interests(analysis), candidate.tags)
    if shared_tag is not None:
        role_bonus += TAG_SYNERGY_BONUS
        tag_reason = f" & Shared {shared_tag} Interest (+{TAG_SYNERGY_BONUS}%)"
        reasons.append(
            _reason(MatchReasonCode.TAG_SYNERGY, ReasonImpact.MEDIUM, ReasonStatus.POSITIVE)
        )

    intent_bonus = 0
    intent_reason = ""
    if analysis.intent is not None and candidate.intent is not None:
        intent_synergy = INTENT_SYNERGIES.get(frozenset({analysis.intent, candidate.intent}))
        if intent_synergy is not None:
            intent_bonus = intent_synergy.bonus
            intent_reason = intent_synergy.label
            reasons.append(
                _reason(intent_synergy.code, intent_synergy.impact, ReasonStatus.POSITIVE)
            )
        else:
            reasons.append(
                _reason(MatchReasonCode.INTENT_MISMATCH, ReasonImpact.HIGH, ReasonStatus.MISSING)
            )

    context_bonus = min(role_bonus + intent_bonus, MAX_CONTEXT_BONUS)

    # 4. Weak-link base
    base = weak_link_base(analysis.trust_score, candidate.trust_score)
    reasons.append(
        _reason(MatchReasonCode.WEAK_LINK_APPLIED, ReasonImpact.LOW, ReasonStatus.POSITIVE)
    )

    # 5. Activity multiplier
    multiplier = activity_multiplier(candidate.last_active_at, now)
    if multiplier < 1.0:
        reasons.append(
            _reason(
                MatchReasonCode.ACTIVITY_DECAY_APPLIED, ReasonImpact.MEDIUM, ReasonStatus.MISSING
            )
        )

    # 6. Final
    raw_total = base + badge_bonus + context_bonus
    confidence = max(0, min(MAX_CONFIDENCE, round_half_up(raw_total * multiplier)))

    # Social proof (display only)
    proof = candidate.social_proof
    if proof.community_trusted:
        reasons.append(
            _reason(
                MatchReasonCode.SOCIAL_PROOF_COMMUNITY, ReasonImpact.HIGH, ReasonStatus.POSITIVE
            )
        )
    elif proof.verified:
        reasons.append(
            _reason(
                MatchReasonCode.SOCIAL_PROOF_VERIFIED, ReasonImpact.MEDIUM, ReasonStatus.POSITIVE
            )
        )
    else:
        reasons.append(
            _reason(MatchReasonCode.NO_SOCIAL_PROOF, ReasonImpact.MEDIUM, ReasonStatus.MISSING)
        )

    breakdown = ConfidenceBreakdown(
        base=round_half_up(base),
        context=context_bonus,
        badge_raw=badge_raw,
        badge_capped=badge_bonus,
        activity_multiplier=multiplier,
    )

    # Intent reason leads, then role, then tags
    if intent_reason:
        reason = intent_reason
        if role_reason:
            reason += f" · {role_reason}"
        reason += tag_reason
    elif role_reason:
        reason = role_reason + tag_reason
    elif tag_reason:
        reason = f"Trust Score Compatibility{tag_reason}"
    else:
        reason = f"Trust Score Alignment ({breakdown.base}% base compatibility)"

    if proof.community_trusted:
        reason = f"Community Trusted · {reason}"
    elif proof.verified:
        reason = f"Verified · {reason}"

    return MatchResult(
        confidence=confidence,
        reason=reason,
        breakdown=breakdown,
        match_reasons=reasons,
    )
