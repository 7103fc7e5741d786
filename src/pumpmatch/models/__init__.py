"""Pydantic models shared across the engine."""

from pumpmatch.models.badge import Badge, BadgeCategory, BadgeId
from pumpmatch.models.identity import (
    IdentityState,
    MatchFilters,
    MemberRole,
    SocialProof,
    UserIntent,
)
from pumpmatch.models.match import (
    ConfidenceBreakdown,
    MatchProfile,
    MatchReason,
    MatchReasonCode,
    MatchResult,
    ReasonImpact,
    ReasonStatus,
)
from pumpmatch.models.member import MemberProfile, MembershipResult
from pumpmatch.models.pump import PumpStats
from pumpmatch.models.transaction import EnhancedTransaction, TokenTransfer
from pumpmatch.models.wallet import ScoreBreakdown, WalletAnalysis, WalletSignals

__all__ = [
    "Badge",
    "BadgeCategory",
    "BadgeId",
    "ConfidenceBreakdown",
    "EnhancedTransaction",
    "IdentityState",
    "MatchFilters",
    "MatchProfile",
    "MatchReason",
    "MatchReasonCode",
    "MatchResult",
    "MemberProfile",
    "MembershipResult",
    "MemberRole",
    "PumpStats",
    "ReasonImpact",
    "ReasonStatus",
    "ScoreBreakdown",
    "SocialProof",
    "TokenTransfer",
    "UserIntent",
    "WalletAnalysis",
    "WalletSignals",
]
