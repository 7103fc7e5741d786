"""Pump-behavior statistics derived from reconstructed positions."""

from pydantic import BaseModel, Field


class PumpStats(BaseModel):
    """Trading behavior inside the pump.fun token universe.

    Only produced when at least three ecosystem mints were touched;
    otherwise the extractor returns None and downstream scoring skips
    every pump adjustment.

    Attributes:
        mints_touched: Distinct ecosystem mints with at least one transfer.
        closed_positions: Positive-to-flat transitions observed.
        median_hold_time_seconds: Median over closed holds plus ages of
            still-open positions; None when no hold could be measured.
        jeet_score: 0-100, higher means faster exits.
        rug_magnet_score: 0-100, percentage of touched mints left open
            for more than three days.
    """

    mints_touched: int = Field(ge=3)
    closed_positions: int = Field(default=0, ge=0)
    median_hold_time_seconds: float | None = Field(default=None, ge=0)
    jeet_score: int = Field(default=0, ge=0, le=100)
    rug_magnet_score: int = Field(default=0, ge=0, le=100)
