"""Tests for the trust score calculator."""

import math

import pytest

from pumpmatch.core.scoring.trust_score import (
    EXPLAIN_DIAMOND,
    EXPLAIN_FRESH_WALLET,
    EXPLAIN_JEET,
    EXPLAIN_RUG,
    EXPLAIN_STANDARD,
    EXPLAIN_TX_UNAVAILABLE,
    activity_score,
    age_bracket_score,
    balance_score,
    calculate_trust_score,
    diversity_score,
    jeet_penalty,
    trust_label,
)
from pumpmatch.models.pump import PumpStats


class TestComponentScores:
    """Tests for the individual score components."""

    @pytest.mark.parametrize("balance", [0, 0.1, 0.25, 1, 2.49, 5, 9.99, 10, 10.01, 500])
    def test_balance_score_formula(self, balance: float) -> None:
        assert balance_score(balance) == min(40, math.floor(4 * balance))

    def test_balance_score_monotonic(self) -> None:
        balances = [i * 0.37 for i in range(60)]
        scores = [balance_score(b) for b in balances]
        assert scores == sorted(scores)

    def test_balance_score_non_finite_is_zero(self) -> None:
        assert balance_score(float("nan")) == 0

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(-1, 0), (0, 0), (1, 2), (9, 2), (10, 7), (50, 15), (100, 22), (300, 30), (1000, 40)],
    )
    def test_activity_brackets(self, count: int, expected: int) -> None:
        assert activity_score(count) == expected

    @pytest.mark.parametrize(("diversity", "expected"), [(0, 0), (1, 4), (5, 20), (6, 20), (50, 20)])
    def test_diversity_saturates(self, diversity: int, expected: int) -> None:
        assert diversity_score(diversity) == expected

    def test_open_only_jeet_penalty_is_scaled(self) -> None:
        stats = PumpStats(mints_touched=3, closed_positions=0, jeet_score=100)
        closed = stats.model_copy(update={"closed_positions": 2})

        assert jeet_penalty(closed) == 30
        # round(30 * 0.35) = round(10.5) -> 11
        assert jeet_penalty(stats) == 11


class TestCalculateTrustScore:
    """Tests for calculate_trust_score."""

    def test_established_wallet_reaches_100(self) -> None:
        """
        Given: 15 SOL, 1200 transactions, diversity 12, no pump data
        When: Scoring
        Then: Every component is maxed and the total is 100
        """
        breakdown = calculate_trust_score(15, 1200, 12)

        assert breakdown.balance_score == 40
        assert breakdown.activity_score == 40
        assert breakdown.diversity_score == 20
        assert breakdown.penalty == 0
        assert breakdown.total == 100

    def test_fresh_wallet_scores_zero(self) -> None:
        """
        Given: 0.1 SOL, 2 transactions, no diversity
        When: Scoring
        Then: Fresh-wallet penalty drives the total to 0
        """
        breakdown = calculate_trust_score(0.1, 2, 0)

        assert breakdown.balance_score == 0
        assert breakdown.diversity_score == 0
        assert breakdown.penalty == 20
        assert breakdown.total == 0
        assert EXPLAIN_FRESH_WALLET in breakdown.explanation

    @pytest.mark.parametrize("balance", [0, 0.5, 3, 50])
    @pytest.mark.parametrize("diversity", [0, 2, 20])
    def test_unavailable_count_never_penalized(self, balance: float, diversity: int) -> None:
        breakdown = calculate_trust_score(balance, -1, diversity)

        assert breakdown.penalty == 0
        assert breakdown.activity_score == 0
        assert breakdown.explanation[0] == EXPLAIN_TX_UNAVAILABLE
        assert EXPLAIN_FRESH_WALLET not in breakdown.explanation

    def test_total_always_clamped(self) -> None:
        worst = PumpStats(mints_touched=10, closed_positions=5, jeet_score=100, rug_magnet_score=100)
        best = PumpStats(mints_touched=10, closed_positions=5, jeet_score=0, rug_magnet_score=0)

        for balance in (0, 1, 100):
            for count in (-1, 0, 3, 5000):
                for diversity in (0, 30):
                    for stats in (None, worst, best):
                        total = calculate_trust_score(balance, count, diversity, stats).total
                        assert 0 <= total <= 100

    def test_missing_pump_stats_skips_adjustments(self) -> None:
        breakdown = calculate_trust_score(5, 150, 3, None)

        assert breakdown.penalty == 0
        assert breakdown.diamond_bonus == 0
        assert breakdown.total == 20 + 22 + 12

    def test_jeet_and_rug_penalties_apply(self) -> None:
        stats = PumpStats(mints_touched=5, closed_positions=4, jeet_score=90, rug_magnet_score=40)

        breakdown = calculate_trust_score(5, 150, 3, stats)

        # jeet round(0.9 * 30) = 27, rug round(0.4 * 20) = 8
        assert breakdown.penalty == 35
        assert breakdown.total == 54 - 35
        assert EXPLAIN_JEET in breakdown.explanation
        assert EXPLAIN_RUG in breakdown.explanation

    def test_diamond_hands_bonus(self) -> None:
        stats = PumpStats(mints_touched=4, closed_positions=1, jeet_score=10, rug_magnet_score=39)

        breakdown = calculate_trust_score(2, 60, 2, stats)

        assert breakdown.diamond_bonus == 20
        assert EXPLAIN_DIAMOND in breakdown.explanation

    def test_diamond_hands_requires_rug_below_40(self) -> None:
        stats = PumpStats(mints_touched=4, closed_positions=1, jeet_score=10, rug_magnet_score=40)

        assert calculate_trust_score(2, 60, 2, stats).diamond_bonus == 0

    def test_standard_profile_fallback(self) -> None:
        breakdown = calculate_trust_score(1, 20, 1)

        assert breakdown.explanation == [EXPLAIN_STANDARD]

    def test_idempotent(self) -> None:
        stats = PumpStats(mints_touched=6, closed_positions=2, jeet_score=50, rug_magnet_score=17)

        assert calculate_trust_score(3.3, 420, 4, stats) == calculate_trust_score(
            3.3, 420, 4, stats
        )

    def test_explanation_text_joins_factors(self) -> None:
        breakdown = calculate_trust_score(15, 1200, 12)

        assert breakdown.explanation_text == " · ".join(breakdown.explanation)


class TestPresentationHelpers:
    """Tests for trust labels and wallet age brackets."""

    @pytest.mark.parametrize(
        ("score", "label"),
        [(100, "High Trust"), (80, "High Trust"), (79, "Medium Trust"), (50, "Medium Trust"),
         (49, "Low Trust"), (0, "Low Trust")],
    )
    def test_trust_label(self, score: int, label: str) -> None:
        assert trust_label(score) == label

    @pytest.mark.parametrize(
        ("days", "expected"),
        [(None, 0.0), (0, 0.0), (6, 0.0), (7, 0.5), (29, 0.5), (30, 1.0), (179, 1.0), (180, 2.0)],
    )
    def test_age_bracket_score(self, days: int | None, expected: float) -> None:
        assert age_bracket_score(days) == expected
