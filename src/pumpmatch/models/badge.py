"""Badge identifiers with their static metadata.

Every `BadgeId` member has exactly one `BadgeDefinition`; the mapping is
closed, so looking up a member never fails at runtime.
"""

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, Field


class BadgeCategory(str, Enum):
    """SYSTEM badges are algorithmic, SOCIAL badges are community-sourced."""

    SYSTEM = "SYSTEM"
    SOCIAL = "SOCIAL"


class BadgeDefinition(NamedTuple):
    label: str
    category: BadgeCategory
    base_weight: int
    icon: str


class BadgeId(str, Enum):
    """Closed set of badge identifiers."""

    WHALE = "whale"
    DEV = "dev"
    OG_WALLET = "og_wallet"
    DIAMOND_HANDS = "diamond_hands"
    MEGA_JEET = "mega_jeet"
    RUG_MAGNET = "rug_magnet"
    COMMUNITY_TRUSTED = "community_trusted"
    GOVERNOR = "governor"

    @property
    def definition(self) -> BadgeDefinition:
        return BADGE_DEFINITIONS[self]

    @property
    def category(self) -> BadgeCategory:
        return BADGE_DEFINITIONS[self].category

    @property
    def base_weight(self) -> int:
        return BADGE_DEFINITIONS[self].base_weight


BADGE_DEFINITIONS: dict[BadgeId, BadgeDefinition] = {
    BadgeId.WHALE: BadgeDefinition("Whale", BadgeCategory.SYSTEM, 6, "Waves"),
    BadgeId.DEV: BadgeDefinition("Dev", BadgeCategory.SYSTEM, 5, "Code"),
    BadgeId.OG_WALLET: BadgeDefinition("OG Wallet", BadgeCategory.SYSTEM, 4, "Clock"),
    BadgeId.DIAMOND_HANDS: BadgeDefinition("Diamond Hands", BadgeCategory.SYSTEM, 5, "Gem"),
    # Warning badges: displayed, never weighted
    BadgeId.MEGA_JEET: BadgeDefinition("Mega Jeet", BadgeCategory.SYSTEM, 0, "TrendingDown"),
    BadgeId.RUG_MAGNET: BadgeDefinition("Rug Magnet", BadgeCategory.SYSTEM, 0, "Skull"),
    BadgeId.COMMUNITY_TRUSTED: BadgeDefinition(
        "Community Trusted", BadgeCategory.SOCIAL, 7, "ShieldCheck"
    ),
    BadgeId.GOVERNOR: BadgeDefinition("Governor", BadgeCategory.SOCIAL, 12, "Crown"),
}


class Badge(BaseModel):
    """Badge snapshot as stored on a member profile.

    Attributes:
        id: Badge identifier.
        label: Display label.
        category: SYSTEM or SOCIAL.
        base_weight: Fixed weight used by System/Social score aggregation.
        icon: Icon reference for the presentation layer.
    """

    id: BadgeId
    label: str
    category: BadgeCategory
    base_weight: int = Field(ge=0)
    icon: str

    @classmethod
    def from_id(cls, badge_id: BadgeId) -> "Badge":
        """Materialize a badge from its static definition."""
        definition = badge_id.definition
        return cls(
            id=badge_id,
            label=definition.label,
            category=definition.category,
            base_weight=definition.base_weight,
            icon=definition.icon,
        )
