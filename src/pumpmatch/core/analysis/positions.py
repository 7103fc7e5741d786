"""Position-lifecycle extraction over the pump.fun token universe.

Rebuilds per-mint holding periods from a wallet's enhanced transaction
history and reduces them to three behavioral statistics:

- median hold time (closed holds plus ages of still-open positions)
- jeet score (step function of the median hold)
- rug-magnet score (share of touched mints left open for > 3 days)

The position map is local to each call; nothing is retained between
analyses because the whole transaction window is re-scanned every time.
"""

import statistics
import time
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from pumpmatch.constants.ecosystem import (
    DEAD_POSITION_AGE_SECONDS,
    JEET_SCORE_STEPS,
    MIN_MINTS_TOUCHED,
    PUMP_MINT_SUFFIX,
    PUMP_PROGRAM_ID,
    PUMP_SOURCE_TAG,
    ZERO_BALANCE_EPSILON,
)
from pumpmatch.core.numeric import round_half_up
from pumpmatch.models.pump import PumpStats
from pumpmatch.models.transaction import EnhancedTransaction

log = structlog.get_logger(__name__)


@dataclass
class Position:
    """Running holding state for one mint.

    Attributes:
        balance: Signed running token balance for the subject wallet.
        opened_at: Unix time the balance last crossed above zero, or None
            while the position is flat.
        in_universe: True once any transfer of this mint was attributed
            to the target ecosystem.
    """

    balance: float = 0.0
    opened_at: int | None = None
    in_universe: bool = False

    @property
    def is_open(self) -> bool:
        return self.opened_at is not None


def jeet_score_for(median_hold_seconds: float | None) -> int:
    """Map a median hold time to a 0-100 jeet score.

    Non-increasing in hold time. A missing median yields 0.
    """
    if median_hold_seconds is None:
        return 0
    for max_seconds, score in JEET_SCORE_STEPS:
        if median_hold_seconds <= max_seconds:
            return score
    return 0


def _snap_to_zero(value: float) -> float:
    return 0.0 if abs(value) < ZERO_BALANCE_EPSILON else value


class PositionLifecycleExtractor:
    """Reconstructs pump.fun positions for a single wallet.

    Example:
        extractor = PositionLifecycleExtractor()
        stats = extractor.extract(wallet_address, transactions)
        if stats is None:
            ...  # fewer than 3 ecosystem mints touched
    """

    def __init__(
        self,
        program_id: str = PUMP_PROGRAM_ID,
        source_tag: str = PUMP_SOURCE_TAG,
        mint_suffix: str = PUMP_MINT_SUFFIX,
    ) -> None:
        self.program_id = program_id
        self.source_tag = source_tag
        self.mint_suffix = mint_suffix

    def is_ecosystem_transaction(self, tx: EnhancedTransaction) -> bool:
        """True if the transaction originated in the target ecosystem."""
        return tx.source == self.source_tag or tx.touches_program(self.program_id)

    def extract(
        self,
        wallet_address: str,
        transactions: Iterable[EnhancedTransaction],
        now: int | None = None,
    ) -> PumpStats | None:
        """Compute pump statistics from a reverse-chronological history.

        Args:
            wallet_address: Subject wallet; transfer deltas are signed
                relative to it.
            transactions: Newest-first transactions, as Helius pages them.
            now: Current Unix time (defaults to wall clock).

        Returns:
            PumpStats, or None when fewer than 3 ecosystem mints were touched.
        """
        current_time = int(time.time()) if now is None else now
        positions: dict[str, Position] = {}
        universe: set[str] = set()
        holds: list[float] = []
        closed_positions = 0
        skipped_transfers = 0

        # Helius pages newest-first; replay oldest-first
        chronological = [
            (tx.timestamp, tx) for tx in reversed(list(transactions)) if tx.timestamp is not None
        ]

        for timestamp, tx in chronological:
            if self.is_ecosystem_transaction(tx):
                universe.update(t.mint for t in tx.token_transfers)

            for transfer in tx.token_transfers:
                mint = transfer.mint
                if mint not in universe and not mint.endswith(self.mint_suffix):
                    continue

                if transfer.amount is None:
                    skipped_transfers += 1
                    continue

                delta = 0.0
                if transfer.to_address == wallet_address:
                    delta += transfer.amount
                if transfer.from_address == wallet_address:
                    delta -= transfer.amount
                if delta == 0.0:
                    continue

                position = positions.setdefault(mint, Position())
                position.in_universe = True

                previous = position.balance
                position.balance = _snap_to_zero(previous + delta)

                if previous <= 0 and position.balance > 0:
                    position.opened_at = timestamp
                elif previous > 0 and position.balance <= 0:
                    if position.opened_at is not None:
                        holds.append(float(timestamp - position.opened_at))
                        closed_positions += 1
                    position.opened_at = None

        mints_touched = sum(1 for p in positions.values() if p.in_universe)
        if mints_touched < MIN_MINTS_TOUCHED:
            log.debug(
                "pump_stats_insufficient_sample",
                wallet_address=wallet_address[:8] + "...",
                mints_touched=mints_touched,
            )
            return None

        dead_mints = 0
        for position in positions.values():
            if not (position.in_universe and position.is_open):
                continue
            age = current_time - (position.opened_at or 0)
            holds.append(float(max(age, 0)))
            if age > DEAD_POSITION_AGE_SECONDS:
                dead_mints += 1

        median_hold = statistics.median(holds) if holds else None
        stats = PumpStats(
            mints_touched=mints_touched,
            closed_positions=closed_positions,
            median_hold_time_seconds=median_hold,
            jeet_score=jeet_score_for(median_hold),
            rug_magnet_score=round_half_up(100 * dead_mints / mints_touched),
        )

        log.debug(
            "pump_stats_extracted",
            wallet_address=wallet_address[:8] + "...",
            mints_touched=stats.mints_touched,
            closed_positions=stats.closed_positions,
            jeet_score=stats.jeet_score,
            rug_magnet_score=stats.rug_magnet_score,
            skipped_transfers=skipped_transfers,
        )
        return stats


def extract_pump_stats(
    wallet_address: str,
    transactions: Iterable[EnhancedTransaction],
    now: int | None = None,
) -> PumpStats | None:
    """Convenience wrapper using the default pump.fun universe."""
    return PositionLifecycleExtractor().extract(wallet_address, transactions, now=now)
