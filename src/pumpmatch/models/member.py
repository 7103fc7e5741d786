"""Network member profile owned by the profile store."""

from datetime import datetime

from pydantic import BaseModel, Field

from pumpmatch.models.badge import Badge, BadgeCategory
from pumpmatch.models.identity import (
    IdentityState,
    MatchFilters,
    MemberRole,
    SocialProof,
    UserIntent,
)
from pumpmatch.models.match import MatchProfile


class MemberProfile(BaseModel):
    """Registered (or previously analyzed) member.

    Maps to the `users` table. Timestamps are timezone-aware datetimes
    here; the repository converts to and from epoch milliseconds.

    Attributes:
        id: Row id.
        address: Wallet address (primary key for lookups and upserts).
        username: Display name.
        role: Stored role used by the match engine's synergy table.
        trust_score: Last persisted trust score.
        tags: Declared interest tags.
        intent: Declared network intent.
        social_proof: Display trust signals.
        active_badges: Cached badge snapshot.
        last_active_at: Last activity (drives the activity multiplier).
        is_opted_in: Only opted-in members are matchable.
        joined_at: Immutable first-join time.
        identity_state: GHOST / REACHABLE / VERIFIED.
        match_filters: Reciprocity filters on incoming matches.
        cached_matches: Last computed match list.
        last_match_snapshot_at: When cached_matches was written.
    """

    id: str = ""
    address: str
    username: str = "Anon"
    role: MemberRole = MemberRole.COMMUNITY
    trust_score: int = Field(default=0, ge=0, le=100)
    tags: list[str] = Field(default_factory=list)
    intent: UserIntent | None = None
    social_proof: SocialProof = Field(default_factory=SocialProof)
    active_badges: list[Badge] = Field(default_factory=list)
    last_active_at: datetime | None = None
    is_opted_in: bool = False
    joined_at: datetime | None = None
    identity_state: IdentityState = IdentityState.GHOST
    match_filters: MatchFilters | None = None
    cached_matches: list[MatchProfile] | None = None
    last_match_snapshot_at: datetime | None = None

    @property
    def system_score(self) -> int:
        """Sum of SYSTEM badge weights on the stored snapshot."""
        return sum(
            badge.base_weight
            for badge in self.active_badges
            if badge.category == BadgeCategory.SYSTEM
        )


class MembershipResult(BaseModel):
    """Outcome of a network membership or identity action."""

    success: bool
    message: str
    identity_state: IdentityState | None = None
