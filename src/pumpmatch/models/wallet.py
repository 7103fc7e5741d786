"""Wallet signal, score breakdown and analysis result models."""

from pydantic import BaseModel, Field

from pumpmatch.constants.scoring import TX_COUNT_UNAVAILABLE
from pumpmatch.models.badge import BadgeId
from pumpmatch.models.identity import UserIntent
from pumpmatch.models.pump import PumpStats


class WalletSignals(BaseModel):
    """Raw per-request signals gathered from the on-chain data provider.

    Never persisted; only the score and badges derived from it are.

    Attributes:
        address: Analyzed wallet.
        sol_balance: SOL balance (0 when the provider failed).
        transaction_count: Signature count, or -1 when unavailable.
        token_count: Fungible token count.
        nft_count: Non-fungible asset count.
        token_diversity: Distinct token ids on the first asset page.
        approx_wallet_age_days: Days since first detected activity.
        pump_stats: Position-lifecycle statistics, None if insufficient sample.
    """

    address: str
    sol_balance: float = Field(default=0.0, ge=0)
    transaction_count: int = Field(default=0, ge=TX_COUNT_UNAVAILABLE)
    token_count: int = Field(default=0, ge=0)
    nft_count: int = Field(default=0, ge=0)
    token_diversity: int = Field(default=0, ge=0)
    approx_wallet_age_days: int | None = None
    pump_stats: PumpStats | None = None

    @property
    def transaction_count_unavailable(self) -> bool:
        return self.transaction_count == TX_COUNT_UNAVAILABLE

    @property
    def asset_count(self) -> int:
        return self.token_count + self.nft_count

    @property
    def activity_count(self) -> int:
        return self.asset_count + max(self.transaction_count, 0)


class ScoreBreakdown(BaseModel):
    """Trust score components.

    Attributes:
        balance_score: 0-40.
        activity_score: 0-40.
        diversity_score: 0-20.
        penalty: Fresh-wallet penalty plus pump penalties.
        diamond_bonus: Diamond-hands bonus (0 or 20).
        total: Clamped to 0-100.
        explanation: Ordered, de-duplicated contributing factors.
    """

    balance_score: int = Field(ge=0, le=40)
    activity_score: int = Field(ge=0, le=40)
    diversity_score: int = Field(ge=0, le=20)
    penalty: int = Field(default=0, ge=0)
    diamond_bonus: int = Field(default=0, ge=0)
    total: int = Field(ge=0, le=100)
    explanation: list[str] = Field(default_factory=list)

    @property
    def explanation_text(self) -> str:
        return " · ".join(self.explanation)


class WalletAnalysis(BaseModel):
    """Full analysis for one wallet, as returned to callers and memoized."""

    address: str
    sol_balance: float = Field(ge=0)
    token_count: int = Field(ge=0)
    nft_count: int = Field(ge=0)
    asset_count: int = Field(ge=0)
    activity_count: int = Field(ge=0)
    transaction_count: int = Field(ge=TX_COUNT_UNAVAILABLE)
    token_diversity: int = Field(ge=0)
    approx_wallet_age_days: int | None = None
    age_bracket_score: float = 0.0
    pump_stats: PumpStats | None = None
    score_breakdown: ScoreBreakdown
    trust_score: int = Field(ge=0, le=100)
    score_label: str
    level: str
    badges: list[BadgeId] = Field(default_factory=list)
    system_score: float = 0.0
    social_score: float = 0.0
    intent: UserIntent | None = None
    is_registered: bool = False
