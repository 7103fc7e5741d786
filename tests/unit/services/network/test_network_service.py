"""Tests for NetworkService membership, matching and identity actions."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from pumpmatch.core.matching.engine import calculate_match_score
from pumpmatch.core.matching.ranking import build_match_profile
from pumpmatch.models.badge import BadgeId
from pumpmatch.models.identity import (
    IdentityState,
    MatchFilters,
    MemberRole,
    SocialProof,
    UserIntent,
)
from pumpmatch.services.network.membership import (
    NOT_A_MEMBER_MESSAGE,
    NetworkService,
    role_for_member,
)

WALLET = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def repository() -> MagicMock:
    mock = MagicMock()
    mock.get_profile = AsyncMock(return_value=None)
    mock.upsert_profile = AsyncMock(return_value={})
    mock.find_candidates = AsyncMock(return_value=[])
    mock.update_match_snapshot = AsyncMock()
    mock.search_network = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def service(repository, settings) -> NetworkService:
    return NetworkService(repository, settings)


class TestRoleForMember:
    """Tests for role_for_member."""

    def test_whale_badge_wins(self, analysis_factory) -> None:
        analysis = analysis_factory(badges=[BadgeId.WHALE], token_diversity=20, nft_count=9)

        assert role_for_member(analysis) == MemberRole.WHALE

    def test_dev_by_diversity(self, analysis_factory) -> None:
        assert role_for_member(analysis_factory(token_diversity=11)) == MemberRole.DEV

    def test_artist_by_nfts(self, analysis_factory) -> None:
        assert role_for_member(analysis_factory(nft_count=6)) == MemberRole.ARTIST

    def test_community_default(self, analysis_factory) -> None:
        assert role_for_member(analysis_factory()) == MemberRole.COMMUNITY


class TestJoinNetwork:
    """Tests for NetworkService.join_network."""

    @pytest.mark.asyncio
    async def test_intent_required(self, service, repository, analysis_factory) -> None:
        result = await service.join_network(WALLET, "anon", analysis_factory(intent=None))

        assert not result.success
        repository.upsert_profile.assert_not_called()

    @pytest.mark.asyncio
    async def test_first_join(self, service, repository, analysis_factory) -> None:
        """
        Given: A wallet with no profile
        When: Joining with an intent
        Then: An opted-in GHOST profile is written with joined_at = now
        """
        analysis = analysis_factory(
            address=WALLET,
            trust_score=72,
            intent=UserIntent.BUILD_SQUAD,
            badges=[BadgeId.DEV],
            token_diversity=11,
            system_score=5.0,
        )

        result = await service.join_network(WALLET, "builder", analysis, now=NOW)

        assert result.success
        assert result.message == "Successfully joined the network! Welcome to Pump Match."
        assert result.identity_state == IdentityState.GHOST
        address, record = repository.upsert_profile.await_args.args
        assert address == WALLET
        assert repository.upsert_profile.await_args.kwargs == {"now": NOW}
        assert record["username"] == "builder"
        assert record["level"] == "Dev"
        assert record["trust_score"] == 72
        assert record["intent"] == "BUILD_SQUAD"
        assert record["is_opted_in"] is True
        assert record["identity_state"] == "GHOST"
        assert record["joined_at"] == int(NOW.timestamp() * 1000)
        assert record["social_proof"] == {
            "verified": True,
            "communityTrusted": False,
            "endorsements": 0,
        }
        assert [badge["id"] for badge in record["active_badges"]] == ["dev"]

    @pytest.mark.asyncio
    async def test_analyzed_but_not_joined_is_first_join(
        self, service, repository, analysis_factory, member_factory
    ) -> None:
        repository.get_profile.return_value = member_factory(
            address=WALLET, is_opted_in=False, last_active_at=NOW - timedelta(minutes=1)
        )

        result = await service.join_network(
            WALLET, "anon", analysis_factory(intent=UserIntent.NETWORK), now=NOW
        )

        assert result.message == "Successfully joined the network! Welcome to Pump Match."
        repository.upsert_profile.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_soft_cooldown(
        self, service, repository, analysis_factory, member_factory
    ) -> None:
        repository.get_profile.return_value = member_factory(
            address=WALLET, last_active_at=NOW - timedelta(minutes=30)
        )

        result = await service.join_network(
            WALLET, "anon", analysis_factory(intent=UserIntent.NETWORK), now=NOW
        )

        assert result.success
        assert result.message == "You are already an active member. Profile unchanged."
        repository.upsert_profile.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejoin_preserves_member_state(
        self, service, repository, analysis_factory, member_factory
    ) -> None:
        """
        Given: A verified member last active 10 days ago
        When: Joining again
        Then: Join date, tags, endorsements, identity and filters survive
        """
        joined = NOW - timedelta(days=90)
        repository.get_profile.return_value = member_factory(
            id="user-7",
            address=WALLET,
            tags=["DeFi"],
            social_proof=SocialProof(endorsements=4),
            identity_state=IdentityState.VERIFIED,
            match_filters=MatchFilters(min_trust_score=40),
            joined_at=joined,
            last_active_at=NOW - timedelta(days=10),
        )

        result = await service.join_network(
            WALLET, "anon", analysis_factory(intent=UserIntent.HIRE_TALENT), now=NOW
        )

        assert result.success
        assert result.message == "Profile updated successfully."
        assert result.identity_state == IdentityState.VERIFIED
        _, record = repository.upsert_profile.await_args.args
        assert record["tags"] == ["DeFi"]
        assert record["joined_at"] == int(joined.timestamp() * 1000)
        assert record["social_proof"]["endorsements"] == 4
        assert record["identity_state"] == "VERIFIED"
        assert record["match_filters"] == {"minTrustScore": 40}

    @pytest.mark.asyncio
    async def test_store_failure(self, service, repository, analysis_factory) -> None:
        repository.upsert_profile.side_effect = RuntimeError("db down")

        result = await service.join_network(
            WALLET, "anon", analysis_factory(intent=UserIntent.NETWORK), now=NOW
        )

        assert not result.success
        assert result.message == "Failed to join network: db down"


class TestGetNetworkMatches:
    """Tests for NetworkService.get_network_matches."""

    @pytest.mark.asyncio
    async def test_non_member_gets_nothing(self, service, repository, analysis_factory) -> None:
        assert await service.get_network_matches(WALLET, analysis_factory(), now=NOW) == []
        repository.find_candidates.assert_not_called()

    @pytest.mark.asyncio
    async def test_scores_filters_and_ranks(
        self, service, repository, analysis_factory, member_factory
    ) -> None:
        """
        Given: Three candidates, one requiring trust 90
        When: Computing matches for a trust-50 member
        Then: The gated candidate is dropped and the rest are ranked
        """
        repository.get_profile.return_value = member_factory(address=WALLET)
        strong = member_factory(username="strong", trust_score=90, last_active_at=NOW)
        weak = member_factory(username="weak", trust_score=10, last_active_at=NOW)
        picky = member_factory(
            username="picky",
            trust_score=95,
            match_filters=MatchFilters(min_trust_score=90),
            last_active_at=NOW,
        )
        repository.find_candidates.return_value = [weak, picky, strong]

        matches = await service.get_network_matches(WALLET, analysis_factory(), now=NOW)

        assert [m.username for m in matches] == ["strong", "weak"]
        repository.find_candidates.assert_awaited_once_with(
            WALLET, limit=20, active_since=NOW - timedelta(days=7)
        )
        repository.update_match_snapshot.assert_awaited_once_with(WALLET, matches, now=NOW)

    @pytest.mark.asyncio
    async def test_fresh_snapshot_is_reused(
        self, service, repository, analysis_factory, member_factory
    ) -> None:
        candidate = member_factory(last_active_at=NOW)
        analysis = analysis_factory()
        cached = [build_match_profile(candidate, calculate_match_score(analysis, candidate))]
        repository.get_profile.return_value = member_factory(
            address=WALLET,
            cached_matches=cached,
            last_match_snapshot_at=NOW - timedelta(seconds=60),
        )

        matches = await service.get_network_matches(WALLET, analysis, now=NOW)

        assert matches == cached
        repository.find_candidates.assert_not_called()

    @pytest.mark.asyncio
    async def test_stale_snapshot_is_recomputed(
        self, service, repository, analysis_factory, member_factory
    ) -> None:
        repository.get_profile.return_value = member_factory(
            address=WALLET,
            cached_matches=[],
            last_match_snapshot_at=NOW - timedelta(seconds=301),
        )

        await service.get_network_matches(WALLET, analysis_factory(), now=NOW)

        repository.find_candidates.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_snapshot_write_failure_still_returns(
        self, service, repository, analysis_factory, member_factory
    ) -> None:
        repository.get_profile.return_value = member_factory(address=WALLET)
        repository.find_candidates.return_value = [member_factory(last_active_at=NOW)]
        repository.update_match_snapshot.side_effect = RuntimeError("db down")

        matches = await service.get_network_matches(WALLET, analysis_factory(), now=NOW)

        assert len(matches) == 1


class TestIdentityActions:
    """Tests for contact linking and verification."""

    @pytest.mark.asyncio
    async def test_link_contact(self, service, repository, member_factory) -> None:
        repository.get_profile.return_value = member_factory(address=WALLET)

        result = await service.link_contact_channel(WALLET, "telegram")

        assert result.success
        assert result.identity_state == IdentityState.REACHABLE
        assert "telegram" in result.message
        repository.upsert_profile.assert_awaited_once_with(
            WALLET, {"identity_state": "REACHABLE"}
        )

    @pytest.mark.asyncio
    async def test_remove_contacts_keeps_verified(
        self, service, repository, member_factory
    ) -> None:
        repository.get_profile.return_value = member_factory(
            address=WALLET, identity_state=IdentityState.VERIFIED
        )

        result = await service.remove_contact_channels(WALLET)

        assert result.success
        assert result.identity_state == IdentityState.VERIFIED
        repository.upsert_profile.assert_not_called()

    @pytest.mark.asyncio
    async def test_verify_identity(self, service, repository, member_factory) -> None:
        repository.get_profile.return_value = member_factory(
            address=WALLET, identity_state=IdentityState.REACHABLE
        )

        result = await service.verify_identity(WALLET)

        assert result.identity_state == IdentityState.VERIFIED
        assert result.message == "Verification passed! Your identity is now VERIFIED."

    @pytest.mark.asyncio
    async def test_unknown_member(self, service) -> None:
        result = await service.verify_identity(WALLET)

        assert not result.success
        assert result.message == NOT_A_MEMBER_MESSAGE


@pytest.mark.asyncio
async def test_search_network_delegates(service, repository) -> None:
    await service.search_network(min_trust_score=60, verified_only=True, badge_ids=[BadgeId.DEV])

    repository.search_network.assert_awaited_once_with(
        min_trust_score=60, verified_only=True, badge_ids=[BadgeId.DEV], limit=50
    )
