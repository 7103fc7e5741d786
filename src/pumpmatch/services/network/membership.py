"""Network membership: joining, matches, identity actions and search.

Only opted-in members are matchable. A computed match list is stored on
the member as a snapshot and reused while it is younger than
`match_snapshot_ttl_seconds`, so repeated requests cannot probe ranking
changes.
"""

from datetime import UTC, datetime, timedelta

import structlog

from pumpmatch.config.settings import Settings, get_settings
from pumpmatch.constants.matching import (
    DEV_ROLE_MIN_DIVERSITY,
    NETWORK_SEARCH_LIMIT,
    NFT_INTEREST_MIN_NFTS,
    SLEEPING_THRESHOLD_SECONDS,
    SOFT_COOLDOWN_SECONDS,
)
from pumpmatch.core.identity.state_machine import IdentityTransition, apply_transition
from pumpmatch.core.matching.engine import calculate_match_score
from pumpmatch.core.matching.ranking import build_match_profile, rank_matches
from pumpmatch.core.scoring.badges import materialize_badges
from pumpmatch.data.supabase.repositories.profile_repo import (
    ProfileRepository,
    profile_to_record,
)
from pumpmatch.models.badge import BadgeId
from pumpmatch.models.identity import IdentityState, MemberRole, SocialProof
from pumpmatch.models.match import MatchProfile
from pumpmatch.models.member import MemberProfile, MembershipResult
from pumpmatch.models.wallet import WalletAnalysis

log = structlog.get_logger(__name__)

NOT_A_MEMBER_MESSAGE = "User not found. Please join the network first."


def role_for_member(analysis: WalletAnalysis) -> MemberRole:
    """Stored role on join: Whale > Dev > Artist > Community."""
    if BadgeId.WHALE in analysis.badges:
        return MemberRole.WHALE
    if analysis.token_diversity > DEV_ROLE_MIN_DIVERSITY:
        return MemberRole.DEV
    if analysis.nft_count > NFT_INTEREST_MIN_NFTS:
        return MemberRole.ARTIST
    return MemberRole.COMMUNITY


class NetworkService:
    """Member-facing network operations over the profile store.

    Example:
        service = NetworkService(ProfileRepository(client))
        result = await service.join_network(address, "anon", analysis)
        matches = await service.get_network_matches(address, analysis)
    """

    def __init__(self, repository: ProfileRepository, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._repository = repository
        self._snapshot_ttl = timedelta(seconds=settings.match_snapshot_ttl_seconds)
        self._candidate_limit = settings.candidate_pool_limit

    async def join_network(
        self,
        address: str,
        username: str,
        analysis: WalletAnalysis,
        now: datetime | None = None,
    ) -> MembershipResult:
        """Opt a wallet in to the network, or refresh an existing membership.

        Existing members keep their join date, tags, endorsement count,
        identity state and match filters. A member active within the last
        hour is left unchanged; one asleep for more than 7 days rejoins with
        a full profile rebuild.
        """
        if analysis.intent is None:
            return MembershipResult(success=False, message="Intent is required to join the network")

        current = now or datetime.now(UTC)
        existing = await self._repository.get_profile(address)
        is_member = existing is not None and existing.is_opted_in

        if is_member and existing.last_active_at is not None:
            inactive_for = (current - existing.last_active_at).total_seconds()
            if inactive_for < SOFT_COOLDOWN_SECONDS:
                log.info(
                    "join_soft_cooldown",
                    wallet_address=address[:8] + "...",
                    inactive_seconds=int(inactive_for),
                )
                return MembershipResult(
                    success=True,
                    message="You are already an active member. Profile unchanged.",
                )
            if inactive_for > SLEEPING_THRESHOLD_SECONDS:
                log.info(
                    "join_hard_rejoin",
                    wallet_address=address[:8] + "...",
                    inactive_days=int(inactive_for // 86400),
                )

        profile = MemberProfile(
            id=existing.id if existing else "",
            address=address,
            username=username,
            role=role_for_member(analysis),
            trust_score=analysis.trust_score,
            tags=existing.tags if existing else [],
            intent=analysis.intent,
            social_proof=SocialProof(
                verified=analysis.system_score > 0,
                community_trusted=analysis.social_score > 0,
                endorsements=existing.social_proof.endorsements if existing else 0,
            ),
            active_badges=materialize_badges(analysis.badges),
            last_active_at=current,
            is_opted_in=True,
            joined_at=(existing.joined_at if existing else None) or current,
            identity_state=existing.identity_state if existing else IdentityState.GHOST,
            match_filters=existing.match_filters if existing else None,
        )

        try:
            await self._repository.upsert_profile(address, profile_to_record(profile), now=current)
        except Exception as e:
            return MembershipResult(success=False, message=f"Failed to join network: {e}")

        log.info("network_joined", wallet_address=address[:8] + "...", first_join=not is_member)
        return MembershipResult(
            success=True,
            message=(
                "Profile updated successfully."
                if is_member
                else "Successfully joined the network! Welcome to Pump Match."
            ),
            identity_state=profile.identity_state,
        )

    async def get_network_matches(
        self,
        address: str,
        analysis: WalletAnalysis,
        now: datetime | None = None,
    ) -> list[MatchProfile]:
        """Ranked matches for a registered member.

        Non-members get an empty list. A fresh stored snapshot is returned
        unchanged. Otherwise candidates are scored, reciprocity rejections
        dropped, the rest ranked and the snapshot rewritten (best-effort).
        """
        current = now or datetime.now(UTC)
        member = await self._repository.get_profile(address)
        if member is None or not member.is_opted_in:
            return []

        snapshot_at = member.last_match_snapshot_at
        if (
            member.cached_matches is not None
            and snapshot_at is not None
            and current - snapshot_at < self._snapshot_ttl
        ):
            log.debug(
                "match_snapshot_reused",
                wallet_address=address[:8] + "...",
                age_seconds=int((current - snapshot_at).total_seconds()),
            )
            return member.cached_matches

        candidates = await self._repository.find_candidates(
            address,
            limit=self._candidate_limit,
            active_since=current - timedelta(seconds=SLEEPING_THRESHOLD_SECONDS),
        )

        profiles: list[MatchProfile] = []
        rejected = 0
        for candidate in candidates:
            result = calculate_match_score(analysis, candidate, now=current)
            if result.reciprocity_rejected:
                rejected += 1
                continue
            profiles.append(build_match_profile(candidate, result))

        ranked = rank_matches(profiles)

        try:
            await self._repository.update_match_snapshot(address, ranked, now=current)
        except Exception as e:
            log.warning(
                "match_snapshot_write_failed",
                wallet_address=address[:8] + "...",
                error=str(e),
            )

        log.info(
            "network_matches_computed",
            wallet_address=address[:8] + "...",
            candidates=len(candidates),
            rejected=rejected,
            matches=len(ranked),
        )
        return ranked

    async def link_contact_channel(self, address: str, platform: str) -> MembershipResult:
        result = await self._transition(address, IdentityTransition.LINK_CONTACT)
        if result.success:
            result.message = (
                f"Contact channel ({platform}) linked! Your identity is now "
                f"{result.identity_state.value}."
            )
        return result

    async def remove_contact_channels(self, address: str) -> MembershipResult:
        result = await self._transition(address, IdentityTransition.REMOVE_ALL_CONTACTS)
        if result.success:
            result.message = (
                f"Contact channels removed. Your identity is now {result.identity_state.value}."
            )
        return result

    async def verify_identity(self, address: str) -> MembershipResult:
        result = await self._transition(address, IdentityTransition.PASS_VERIFICATION)
        if result.success:
            result.message = "Verification passed! Your identity is now VERIFIED."
        return result

    async def _transition(self, address: str, transition: IdentityTransition) -> MembershipResult:
        member = await self._repository.get_profile(address)
        if member is None:
            return MembershipResult(success=False, message=NOT_A_MEMBER_MESSAGE)

        new_state = apply_transition(member.identity_state, transition)
        if new_state != member.identity_state:
            try:
                await self._repository.upsert_profile(
                    address, {"identity_state": new_state.value}
                )
            except Exception as e:
                return MembershipResult(
                    success=False, message=f"Failed to update identity state: {e}"
                )
            log.info(
                "identity_state_changed",
                wallet_address=address[:8] + "...",
                transition=transition.value,
                from_state=member.identity_state.value,
                to_state=new_state.value,
            )

        return MembershipResult(success=True, message="", identity_state=new_state)

    async def search_network(
        self,
        min_trust_score: int | None = None,
        verified_only: bool = False,
        badge_ids: list[BadgeId] | None = None,
    ) -> list[MemberProfile]:
        return await self._repository.search_network(
            min_trust_score=min_trust_score,
            verified_only=verified_only,
            badge_ids=badge_ids,
            limit=NETWORK_SEARCH_LIMIT,
        )
