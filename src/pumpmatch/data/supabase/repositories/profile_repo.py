"""Profile repository for Supabase.

Table schema expected:
    users (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        wallet_address TEXT NOT NULL UNIQUE,
        username TEXT,
        level TEXT DEFAULT 'Rookie',          -- stored role / analysis level
        trust_score INTEGER DEFAULT 0,
        tags TEXT[] DEFAULT '{}',
        intent TEXT,
        social_proof JSONB DEFAULT '{}',
        active_badges JSONB DEFAULT '[]',
        identity_state TEXT DEFAULT 'GHOST',
        is_opted_in BOOLEAN DEFAULT FALSE,
        match_filters JSONB DEFAULT '{}',
        cached_matches JSONB DEFAULT '[]',
        last_active_at BIGINT,                -- epoch milliseconds
        joined_at BIGINT,                     -- epoch milliseconds
        last_match_snapshot_at BIGINT         -- epoch milliseconds
    )
    endorsements (
        id UUID PRIMARY KEY,
        target_wallet TEXT NOT NULL,
        ...
    )
"""

from datetime import UTC, datetime
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from pumpmatch.data.supabase.client import SupabaseClient
from pumpmatch.models.badge import Badge, BadgeId
from pumpmatch.models.identity import (
    IdentityState,
    MatchFilters,
    MemberRole,
    SocialProof,
    UserIntent,
)
from pumpmatch.models.match import MatchProfile
from pumpmatch.models.member import MemberProfile

log = structlog.get_logger(__name__)

_BADGE_IDS = {badge.value for badge in BadgeId}
_ROLES = {role.value for role in MemberRole}
_INTENTS = {intent.value for intent in UserIntent}
_IDENTITY_STATES = {state.value for state in IdentityState}


def to_epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def from_epoch_ms(value: Any) -> datetime | None:
    if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
        return None
    return datetime.fromtimestamp(value / 1000, tz=UTC)


def _parse_badges(raw: Any) -> list[Badge]:
    """Rebuild stored badges from their ids; unknown ids are dropped."""
    if not isinstance(raw, list):
        return []
    badges: list[Badge] = []
    for entry in raw:
        badge_id = entry.get("id") if isinstance(entry, dict) else entry
        if badge_id in _BADGE_IDS:
            badges.append(Badge.from_id(BadgeId(badge_id)))
    return badges


def _parse_social_proof(raw: Any) -> SocialProof:
    if not isinstance(raw, dict):
        return SocialProof()
    endorsements = raw.get("endorsements")
    return SocialProof(
        verified=raw.get("verified") is True,
        community_trusted=(raw.get("communityTrusted", raw.get("community_trusted")) is True),
        endorsements=endorsements if isinstance(endorsements, int) and endorsements > 0 else 0,
    )


def _parse_match_filters(raw: Any) -> MatchFilters | None:
    if not isinstance(raw, dict):
        return None
    floor = raw.get("minTrustScore", raw.get("min_trust_score"))
    if isinstance(floor, bool) or not isinstance(floor, int) or not 0 <= floor <= 100:
        return MatchFilters()
    return MatchFilters(min_trust_score=floor)


def _parse_cached_matches(raw: Any, wallet_address: str) -> list[MatchProfile] | None:
    if not isinstance(raw, list):
        return None
    try:
        return [MatchProfile.model_validate(item) for item in raw]
    except PydanticValidationError:
        log.debug("cached_matches_unreadable", wallet_address=wallet_address[:8] + "...")
        return None


def row_to_profile(row: dict[str, Any]) -> MemberProfile:
    """Map a `users` row to a MemberProfile, tolerating missing or legacy values."""
    address = str(row.get("wallet_address") or "")
    level = row.get("level")
    intent = row.get("intent")
    identity_state = row.get("identity_state")
    trust_score = row.get("trust_score")
    tags = row.get("tags")

    return MemberProfile(
        id=str(row.get("id") or ""),
        address=address,
        username=row.get("username") or "Anon",
        role=MemberRole(level) if level in _ROLES else MemberRole.COMMUNITY,
        trust_score=max(0, min(100, trust_score)) if isinstance(trust_score, int) else 0,
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
        intent=UserIntent(intent) if intent in _INTENTS else None,
        social_proof=_parse_social_proof(row.get("social_proof")),
        active_badges=_parse_badges(row.get("active_badges")),
        last_active_at=from_epoch_ms(row.get("last_active_at")),
        is_opted_in=row.get("is_opted_in") is True,
        joined_at=from_epoch_ms(row.get("joined_at")),
        identity_state=(
            IdentityState(identity_state)
            if identity_state in _IDENTITY_STATES
            else IdentityState.GHOST
        ),
        match_filters=_parse_match_filters(row.get("match_filters")),
        cached_matches=_parse_cached_matches(row.get("cached_matches"), address),
        last_match_snapshot_at=from_epoch_ms(row.get("last_match_snapshot_at")),
    )


def profile_to_record(profile: MemberProfile) -> dict[str, Any]:
    """Storage fields written when a member joins the network.

    `None` values are left in place; `upsert_profile` drops them so
    existing columns are not nulled.
    """
    return {
        "username": profile.username,
        "level": profile.role.value,
        "trust_score": profile.trust_score,
        "tags": list(profile.tags),
        "intent": profile.intent.value if profile.intent else None,
        "social_proof": {
            "verified": profile.social_proof.verified,
            "communityTrusted": profile.social_proof.community_trusted,
            "endorsements": profile.social_proof.endorsements,
        },
        "active_badges": [badge.model_dump(mode="json") for badge in profile.active_badges],
        "identity_state": profile.identity_state.value,
        "is_opted_in": profile.is_opted_in,
        "joined_at": to_epoch_ms(profile.joined_at) if profile.joined_at else None,
        "match_filters": (
            {"minTrustScore": profile.match_filters.min_trust_score}
            if profile.match_filters
            else None
        ),
    }


class ProfileRepository:
    """Repository for member profiles in the `users` table.

    Example:
        client = await get_supabase_client()
        repo = ProfileRepository(client)
        profile = await repo.get_profile("9xQeWvG...")
        await repo.upsert_profile("9xQeWvG...", {"trust_score": 72, "level": "Dev"})
    """

    TABLE_NAME = "users"
    ENDORSEMENTS_TABLE = "endorsements"

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def get_profile(self, wallet_address: str) -> MemberProfile | None:
        """Get a profile by wallet address.

        Returns:
            MemberProfile if found, None otherwise (including on query errors).
        """
        try:
            result = await (
                self._client.client.table(self.TABLE_NAME)
                .select("*")
                .eq("wallet_address", wallet_address)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            log.warning(
                "profile_fetch_failed",
                wallet_address=wallet_address[:8] + "...",
                error=str(e),
            )
            return None

        if result is None or not result.data:
            return None
        return row_to_profile(result.data)

    async def is_registered(self, wallet_address: str) -> bool:
        """True when the wallet has opted in to the network."""
        profile = await self.get_profile(wallet_address)
        return profile is not None and profile.is_opted_in

    async def upsert_profile(
        self,
        wallet_address: str,
        fields: dict[str, Any],
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Merge-upsert profile columns keyed by wallet address.

        Keys whose value is None are dropped so existing columns are kept.
        `last_active_at` is always refreshed.

        Returns:
            The upserted row.

        Raises:
            Exception: Any Supabase error, after logging.
        """
        record = {key: value for key, value in fields.items() if value is not None}
        record["wallet_address"] = wallet_address
        record["last_active_at"] = to_epoch_ms(now or datetime.now(UTC))

        try:
            result = await (
                self._client.client.table(self.TABLE_NAME)
                .upsert(record, on_conflict="wallet_address")
                .execute()
            )
        except Exception as e:
            log.error(
                "profile_upsert_failed",
                wallet_address=wallet_address[:8] + "...",
                error=str(e),
            )
            raise

        log.debug(
            "profile_upserted",
            wallet_address=wallet_address[:8] + "...",
            fields=sorted(record),
        )
        return result.data[0] if result.data else record

    async def find_candidates(
        self,
        exclude_address: str,
        limit: int = 20,
        active_since: datetime | None = None,
    ) -> list[MemberProfile]:
        """Opted-in members other than `exclude_address`.

        Args:
            exclude_address: The requesting member.
            limit: Maximum rows.
            active_since: When set, only members active at or after this time.

        Returns:
            Candidate profiles; empty on query errors.
        """
        try:
            query = (
                self._client.client.table(self.TABLE_NAME)
                .select("*")
                .eq("is_opted_in", True)
                .neq("wallet_address", exclude_address)
            )
            if active_since is not None:
                query = query.gte("last_active_at", to_epoch_ms(active_since))
            result = await query.limit(limit).execute()
        except Exception as e:
            log.warning(
                "candidate_fetch_failed",
                wallet_address=exclude_address[:8] + "...",
                error=str(e),
            )
            return []

        return [row_to_profile(row) for row in result.data or []]

    async def get_endorsement_count(self, wallet_address: str) -> int:
        """Number of endorsements received; 0 on query errors."""
        try:
            result = await (
                self._client.client.table(self.ENDORSEMENTS_TABLE)
                .select("id", count="exact")
                .eq("target_wallet", wallet_address)
                .execute()
            )
        except Exception as e:
            log.warning(
                "endorsement_count_failed",
                wallet_address=wallet_address[:8] + "...",
                error=str(e),
            )
            return 0

        count = result.count
        if isinstance(count, int):
            return count
        return len(result.data or [])

    async def update_match_snapshot(
        self,
        wallet_address: str,
        matches: list[MatchProfile],
        now: datetime | None = None,
    ) -> None:
        """Store a computed match list with its snapshot time."""
        await (
            self._client.client.table(self.TABLE_NAME)
            .update(
                {
                    "cached_matches": [match.model_dump(mode="json") for match in matches],
                    "last_match_snapshot_at": to_epoch_ms(now or datetime.now(UTC)),
                }
            )
            .eq("wallet_address", wallet_address)
            .execute()
        )

    async def search_network(
        self,
        min_trust_score: int | None = None,
        verified_only: bool = False,
        badge_ids: list[BadgeId] | None = None,
        limit: int = 50,
    ) -> list[MemberProfile]:
        """Search opted-in members.

        Every badge in `badge_ids` must be present (AND semantics).
        """
        try:
            query = (
                self._client.client.table(self.TABLE_NAME).select("*").eq("is_opted_in", True)
            )
            if min_trust_score:
                query = query.gte("trust_score", min_trust_score)
            if verified_only:
                query = query.eq("identity_state", IdentityState.VERIFIED.value)
            for badge_id in badge_ids or []:
                query = query.contains("active_badges", [{"id": BadgeId(badge_id).value}])
            result = await query.limit(limit).execute()
        except Exception as e:
            log.warning("network_search_failed", error=str(e))
            return []

        return [row_to_profile(row) for row in result.data or []]
