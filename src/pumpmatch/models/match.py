"""Match confidence result models and machine-readable reason codes."""

from enum import Enum

from pydantic import BaseModel, Field

from pumpmatch.models.badge import Badge
from pumpmatch.models.identity import IdentityState, MemberRole, SocialProof, UserIntent


class MatchReasonCode(str, Enum):
    """Every reason the match engine can emit."""

    ROLE_SYNERGY_FUNDING = "ROLE_SYNERGY_FUNDING"
    ROLE_SYNERGY_PRODUCT = "ROLE_SYNERGY_PRODUCT"
    ROLE_SYNERGY_GROWTH = "ROLE_SYNERGY_GROWTH"
    ROLE_SYNERGY_PEER = "ROLE_SYNERGY_PEER"
    ROLE_SYNERGY_CREATIVE = "ROLE_SYNERGY_CREATIVE"
    ROLE_SYNERGY_NFT = "ROLE_SYNERGY_NFT"
    ROLE_SYNERGY_COMMUNITY = "ROLE_SYNERGY_COMMUNITY"
    TAG_SYNERGY = "TAG_SYNERGY"
    INTENT_MATCH_PERFECT = "INTENT_MATCH_PERFECT"
    INTENT_MATCH_SAFE = "INTENT_MATCH_SAFE"
    INTENT_MATCH_CAPITAL = "INTENT_MATCH_CAPITAL"
    INTENT_NEUTRAL = "INTENT_NEUTRAL"
    INTENT_MISMATCH = "INTENT_MISMATCH"
    BADGE_BONUS_SYSTEM = "BADGE_BONUS_SYSTEM"
    BADGE_BONUS_SOCIAL = "BADGE_BONUS_SOCIAL"
    BADGE_BONUS_WHALE = "BADGE_BONUS_WHALE"
    BADGE_BONUS_DEV = "BADGE_BONUS_DEV"
    BADGE_BONUS_GOVERNOR = "BADGE_BONUS_GOVERNOR"
    SOCIAL_PROOF_COMMUNITY = "SOCIAL_PROOF_COMMUNITY"
    SOCIAL_PROOF_VERIFIED = "SOCIAL_PROOF_VERIFIED"
    NO_SOCIAL_PROOF = "NO_SOCIAL_PROOF"
    WEAK_LINK_APPLIED = "WEAK_LINK_APPLIED"
    ACTIVITY_DECAY_APPLIED = "ACTIVITY_DECAY_APPLIED"
    TRUST_THRESHOLD_MISMATCH = "TRUST_THRESHOLD_MISMATCH"


class ReasonImpact(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ReasonStatus(str, Enum):
    POSITIVE = "POSITIVE"
    MISSING = "MISSING"


class MatchReason(BaseModel):
    """A single tagged contribution to (or gap in) a match."""

    code: MatchReasonCode
    impact: ReasonImpact
    status: ReasonStatus


class ConfidenceBreakdown(BaseModel):
    """Numeric components behind a match confidence.

    Attributes:
        base: Rounded weak-link base score.
        context: Role + intent bonus after the cap.
        badge_raw: System Score + Social Score before the cap.
        badge_capped: Badge bonus after the cap.
        activity_multiplier: Recency multiplier applied to the sum.
    """

    base: int = 0
    context: int = 0
    badge_raw: float = 0.0
    badge_capped: float = 0.0
    activity_multiplier: float = 0.0


class MatchResult(BaseModel):
    """Output of a single self/candidate confidence calculation."""

    confidence: int = Field(ge=0, le=98)
    reason: str
    breakdown: ConfidenceBreakdown
    match_reasons: list[MatchReason] = Field(default_factory=list)

    def has_reason(self, code: MatchReasonCode) -> bool:
        return any(r.code == code for r in self.match_reasons)

    @property
    def reciprocity_rejected(self) -> bool:
        return self.confidence == 0 and self.has_reason(
            MatchReasonCode.TRUST_THRESHOLD_MISMATCH
        )


class MatchProfile(BaseModel):
    """Candidate as presented to the requesting member."""

    id: str
    address: str
    username: str
    role: MemberRole
    trust_score: int = Field(ge=0, le=100)
    tags: list[str] = Field(default_factory=list)
    intent: UserIntent | None = None
    identity_state: IdentityState = IdentityState.GHOST
    social_proof: SocialProof = Field(default_factory=SocialProof)
    active_badges: list[Badge] = Field(default_factory=list)
    match_confidence: int = Field(ge=0, le=98)
    match_reason: str
    confidence_breakdown: ConfidenceBreakdown
    match_reasons: list[MatchReason] = Field(default_factory=list)
