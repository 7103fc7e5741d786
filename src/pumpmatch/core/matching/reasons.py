"""Human-facing presentation of match reason codes."""

from collections.abc import Iterable

from pumpmatch.models.match import MatchReason, MatchReasonCode, ReasonImpact, ReasonStatus

# code -> (positive label, missing label)
REASON_LABELS: dict[MatchReasonCode, tuple[str, str]] = {
    MatchReasonCode.ROLE_SYNERGY_FUNDING: ("Funding synergy detected", "No funding alignment"),
    MatchReasonCode.ROLE_SYNERGY_PRODUCT: ("Product synergy detected", "No product alignment"),
    MatchReasonCode.ROLE_SYNERGY_GROWTH: ("Growth synergy detected", "No growth alignment"),
    MatchReasonCode.ROLE_SYNERGY_PEER: ("Peer collaboration match", "Low peer synergy"),
    MatchReasonCode.ROLE_SYNERGY_CREATIVE: ("Creative synergy detected", "No creative alignment"),
    MatchReasonCode.ROLE_SYNERGY_NFT: ("NFT project synergy", "No NFT alignment"),
    MatchReasonCode.ROLE_SYNERGY_COMMUNITY: (
        "Community synergy detected",
        "No community alignment",
    ),
    MatchReasonCode.TAG_SYNERGY: ("Shared interests found", "No shared interests"),
    MatchReasonCode.INTENT_MATCH_PERFECT: ("Goals perfectly aligned", "Goals not aligned"),
    MatchReasonCode.INTENT_MATCH_SAFE: ("Compatible networking goals", "Networking goals differ"),
    MatchReasonCode.INTENT_MATCH_CAPITAL: ("Capital meets talent", "Capital-talent gap"),
    MatchReasonCode.INTENT_NEUTRAL: ("Neutral intent overlap", "Intent overlap unclear"),
    MatchReasonCode.INTENT_MISMATCH: ("Intent aligned", "Goals not aligned"),
    MatchReasonCode.BADGE_BONUS_SYSTEM: ("System badges active", "No system badges"),
    MatchReasonCode.BADGE_BONUS_SOCIAL: ("Social badges active", "No social badges"),
    MatchReasonCode.BADGE_BONUS_WHALE: ("Whale badge boost", "No whale status"),
    MatchReasonCode.BADGE_BONUS_DEV: ("Developer badge boost", "No dev badge"),
    MatchReasonCode.BADGE_BONUS_GOVERNOR: ("Governor badge boost", "No governance role"),
    MatchReasonCode.SOCIAL_PROOF_COMMUNITY: ("Community trusted", "No community trust"),
    MatchReasonCode.SOCIAL_PROOF_VERIFIED: ("Identity verified", "Not verified"),
    MatchReasonCode.NO_SOCIAL_PROOF: ("Social proof present", "No shared communities found"),
    MatchReasonCode.WEAK_LINK_APPLIED: ("Base trust calculated", "Trust gap detected"),
    MatchReasonCode.ACTIVITY_DECAY_APPLIED: ("Recently active", "Activity declining"),
    MatchReasonCode.TRUST_THRESHOLD_MISMATCH: ("Trust threshold met", "Trust threshold not met"),
}

# Actionable advice for MISSING reasons
MENTOR_TIPS: dict[MatchReasonCode, str] = {
    MatchReasonCode.INTENT_MISMATCH: (
        "To improve this match, align your goals or look for users with compatible intents."
    ),
    MatchReasonCode.NO_SOCIAL_PROOF: (
        "Get verified or earn community trust to unlock higher match scores."
    ),
    MatchReasonCode.ACTIVITY_DECAY_APPLIED: (
        "Stay active on-chain to maintain full match potential."
    ),
    MatchReasonCode.TRUST_THRESHOLD_MISMATCH: (
        "Increase your trust score to match with this user's requirements."
    ),
}

DEFAULT_MENTOR_TIP = "Improve your on-chain activity and verify your identity for better matches."

_IMPACT_ORDER = {ReasonImpact.HIGH: 0, ReasonImpact.MEDIUM: 1, ReasonImpact.LOW: 2}
_STATUS_ORDER = {ReasonStatus.POSITIVE: 0, ReasonStatus.MISSING: 1}


def reason_label(reason: MatchReason) -> str:
    positive, missing = REASON_LABELS[reason.code]
    return positive if reason.status == ReasonStatus.POSITIVE else missing


def sort_match_reasons(reasons: Iterable[MatchReason]) -> list[MatchReason]:
    """Order for display: HIGH before MEDIUM before LOW, POSITIVE before MISSING."""
    return sorted(reasons, key=lambda r: (_IMPACT_ORDER[r.impact], _STATUS_ORDER[r.status]))


def mentor_tip(reasons: Iterable[MatchReason]) -> str | None:
    """Single improvement tip for a match.

    Returns None when nothing is MISSING; otherwise the tip for the
    highest-impact MISSING reason that has one, or a generic fallback.
    """
    missing = [r for r in reasons if r.status == ReasonStatus.MISSING]
    if not missing:
        return None
    for reason in sort_match_reasons(missing):
        tip = MENTOR_TIPS.get(reason.code)
        if tip:
            return tip
    return DEFAULT_MENTOR_TIP
