"""Member identity, role and intent enums plus small profile value objects."""

from enum import Enum

from pydantic import BaseModel, Field


class IdentityState(str, Enum):
    """Identity hierarchy, lowest first: GHOST < REACHABLE < VERIFIED."""

    GHOST = "GHOST"
    REACHABLE = "REACHABLE"
    VERIFIED = "VERIFIED"


class UserIntent(str, Enum):
    """What a member is looking for on the network."""

    BUILD_SQUAD = "BUILD_SQUAD"
    FIND_FUNDING = "FIND_FUNDING"
    HIRE_TALENT = "HIRE_TALENT"
    JOIN_PROJECT = "JOIN_PROJECT"
    NETWORK = "NETWORK"


class MemberRole(str, Enum):
    """Stored member role."""

    DEV = "Dev"
    ARTIST = "Artist"
    MARKETING = "Marketing"
    WHALE = "Whale"
    COMMUNITY = "Community"


class SocialProof(BaseModel):
    """Display-level trust signals for a member."""

    verified: bool = False
    community_trusted: bool = False
    endorsements: int = Field(default=0, ge=0)


class MatchFilters(BaseModel):
    """Reciprocity filters a member sets on incoming matches."""

    min_trust_score: int | None = Field(default=None, ge=0, le=100)
