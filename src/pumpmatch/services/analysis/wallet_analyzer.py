"""Wallet analysis orchestration.

Flow for `analyze_wallet(address, intent)`:

1. Validate the address (the only raising path).
2. Return a cached analysis if present, with the caller's intent applied.
3. Fetch provider signals concurrently (each fails closed).
4. Extract pump stats, score, derive badges.
5. For registered members, reconcile `community_trusted` against the live
   endorsement count and carry a stored `governor` badge.
6. Persist {trust_score, level} best-effort, then memoize.
"""

import asyncio

import structlog

from pumpmatch.core.analysis.positions import PositionLifecycleExtractor
from pumpmatch.core.scoring.badges import (
    assign_badges,
    calculate_badge_scores,
    reconcile_community_badge,
    wallet_level,
)
from pumpmatch.core.scoring.trust_score import (
    age_bracket_score,
    calculate_trust_score,
    trust_label,
)
from pumpmatch.core.wallet.validator import require_valid_address
from pumpmatch.data.supabase.repositories.profile_repo import ProfileRepository
from pumpmatch.models.badge import BadgeId
from pumpmatch.models.identity import UserIntent
from pumpmatch.models.member import MemberProfile
from pumpmatch.models.wallet import WalletAnalysis, WalletSignals
from pumpmatch.services.cache.analysis_cache import AnalysisCache, NullAnalysisCache
from pumpmatch.services.helius.provider import OnChainDataProvider, count_token_diversity

log = structlog.get_logger(__name__)


class WalletAnalyzer:
    """Builds a WalletAnalysis from on-chain signals and the profile store.

    Example:
        analyzer = WalletAnalyzer(provider, repository, InMemoryAnalysisCache())
        analysis = await analyzer.analyze_wallet(address, intent=UserIntent.NETWORK)
    """

    def __init__(
        self,
        provider: OnChainDataProvider,
        repository: ProfileRepository | None = None,
        cache: AnalysisCache | None = None,
        extractor: PositionLifecycleExtractor | None = None,
    ) -> None:
        self._provider = provider
        self._repository = repository
        self._cache = cache or NullAnalysisCache()
        self._extractor = extractor or PositionLifecycleExtractor()

    async def collect_signals(self, address: str) -> WalletSignals:
        """Gather every provider signal for one wallet concurrently."""
        (
            sol_balance,
            assets,
            token_count,
            nft_count,
            activity,
            transactions,
        ) = await asyncio.gather(
            self._provider.get_sol_balance(address),
            self._provider.get_owned_assets(address),
            self._provider.get_fungible_count(address),
            self._provider.get_nft_count(address),
            self._provider.get_signature_activity(address),
            self._provider.get_transactions(address),
        )

        return WalletSignals(
            address=address,
            sol_balance=sol_balance,
            transaction_count=activity.transaction_count,
            token_count=token_count,
            nft_count=nft_count,
            token_diversity=count_token_diversity(assets),
            approx_wallet_age_days=activity.wallet_age.approx_age_days,
            pump_stats=self._extractor.extract(address, transactions),
        )

    async def analyze_wallet(
        self, address: str, intent: UserIntent | None = None
    ) -> WalletAnalysis:
        """Analyze a wallet.

        Args:
            address: Solana wallet address.
            intent: Declared intent, applied to the result (never cached).

        Returns:
            WalletAnalysis for the address.

        Raises:
            ValidationError: If the address is empty or malformed.
        """
        address = require_valid_address(address)

        cached = await self._cache_get(address)
        if cached is not None:
            log.debug("analysis_cache_hit", wallet_address=address[:8] + "...")
            return cached.model_copy(update={"intent": intent})

        signals = await self.collect_signals(address)
        breakdown = calculate_trust_score(
            signals.sol_balance,
            signals.transaction_count,
            signals.token_diversity,
            signals.pump_stats,
        )
        badges = assign_badges(
            signals.sol_balance,
            signals.transaction_count,
            signals.token_diversity,
            signals.pump_stats,
        )

        profile = await self._load_profile(address)
        is_registered = profile is not None and profile.is_opted_in
        if is_registered:
            assert profile is not None
            badges = await self._apply_stored_badges(address, badges, profile)

        system_score, social_score = calculate_badge_scores(badges)
        level = wallet_level(badges)

        analysis = WalletAnalysis(
            address=address,
            sol_balance=signals.sol_balance,
            token_count=signals.token_count,
            nft_count=signals.nft_count,
            asset_count=signals.asset_count,
            activity_count=signals.activity_count,
            transaction_count=signals.transaction_count,
            token_diversity=signals.token_diversity,
            approx_wallet_age_days=signals.approx_wallet_age_days,
            age_bracket_score=age_bracket_score(signals.approx_wallet_age_days),
            pump_stats=signals.pump_stats,
            score_breakdown=breakdown,
            trust_score=breakdown.total,
            score_label=trust_label(breakdown.total),
            level=level,
            badges=badges,
            system_score=system_score,
            social_score=social_score,
            is_registered=is_registered,
        )

        await self._persist(address, analysis)
        await self._cache_set(address, analysis)

        log.info(
            "wallet_analyzed",
            wallet_address=address[:8] + "...",
            trust_score=analysis.trust_score,
            badges=[badge.value for badge in badges],
            pump_stats=signals.pump_stats is not None,
        )
        return analysis.model_copy(update={"intent": intent})

    async def _load_profile(self, address: str) -> MemberProfile | None:
        if self._repository is None:
            return None
        return await self._repository.get_profile(address)

    async def _apply_stored_badges(
        self, address: str, badges: list[BadgeId], profile: MemberProfile
    ) -> list[BadgeId]:
        assert self._repository is not None
        endorsements = await self._repository.get_endorsement_count(address)
        badges = reconcile_community_badge(badges, endorsements)
        if any(badge.id == BadgeId.GOVERNOR for badge in profile.active_badges):
            badges.append(BadgeId.GOVERNOR)
        return badges

    async def _persist(self, address: str, analysis: WalletAnalysis) -> None:
        if self._repository is None:
            return
        try:
            # The level column doubles as a member's role once they join
            fields: dict[str, object] = {"trust_score": analysis.trust_score}
            if not analysis.is_registered:
                fields["level"] = analysis.level
            await self._repository.upsert_profile(address, fields)
        except Exception as e:
            log.warning(
                "analysis_persist_failed",
                wallet_address=address[:8] + "...",
                error=str(e),
            )

    async def _cache_get(self, address: str) -> WalletAnalysis | None:
        try:
            return await self._cache.get(address)
        except Exception as e:
            log.warning(
                "analysis_cache_read_failed", wallet_address=address[:8] + "...", error=str(e)
            )
            return None

    async def _cache_set(self, address: str, analysis: WalletAnalysis) -> None:
        try:
            await self._cache.set(address, analysis)
        except Exception as e:
            log.warning(
                "analysis_cache_write_failed", wallet_address=address[:8] + "...", error=str(e)
            )
