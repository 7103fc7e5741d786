"""Enhanced transaction models parsed from the Helius REST API.

Helius returns transactions as loosely-typed JSON. These models keep only
what the position-lifecycle extractor needs: the signature, block time,
source tag, the set of invoked program ids and the token transfers.
"""

import math
from typing import Any

from pydantic import BaseModel, Field


def parse_amount(raw: Any) -> float | None:
    """Parse a transfer amount, returning None when unusable.

    Accepts ints, floats and numeric strings. Booleans, non-numeric strings,
    NaN and infinities all map to None so callers can skip the record.
    """
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def _optional_str(raw: Any) -> str | None:
    return raw if isinstance(raw, str) and raw else None


def parse_timestamp(raw: Any) -> int | None:
    """Block time as an int, None when missing or non-finite."""
    if isinstance(raw, bool) or not isinstance(raw, int | float):
        return None
    if not math.isfinite(raw):
        return None
    return int(raw)


def _dicts(raw: Any) -> list[dict[str, Any]]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


class TokenTransfer(BaseModel):
    """Single SPL token movement inside a transaction.

    Attributes:
        mint: Token mint address.
        from_address: Sending wallet (user account), if known.
        to_address: Receiving wallet (user account), if known.
        amount: UI token amount, None when missing or non-finite.
    """

    mint: str
    from_address: str | None = None
    to_address: str | None = None
    amount: float | None = None

    @classmethod
    def from_helius(cls, data: dict[str, Any]) -> "TokenTransfer":
        """Build from a Helius `tokenTransfers[]` entry."""
        return cls(
            mint=_optional_str(data.get("mint")) or "",
            from_address=_optional_str(data.get("fromUserAccount")),
            to_address=_optional_str(data.get("toUserAccount")),
            amount=parse_amount(data.get("tokenAmount")),
        )


class EnhancedTransaction(BaseModel):
    """Helius enhanced transaction reduced to position-relevant fields.

    Attributes:
        signature: Transaction signature, also the pagination cursor.
        timestamp: Block time (Unix seconds), None if Helius omitted it.
        source: Helius source tag (e.g. "PUMP_FUN", "RAYDIUM").
        program_ids: Every program invoked, including inner instructions.
        token_transfers: Token movements in instruction order.
    """

    signature: str
    timestamp: int | None = None
    source: str | None = None
    program_ids: frozenset[str] = Field(default_factory=frozenset)
    token_transfers: list[TokenTransfer] = Field(default_factory=list)

    def touches_program(self, program_id: str) -> bool:
        """Check whether the transaction invoked the given program."""
        return program_id in self.program_ids

    @classmethod
    def from_helius(cls, data: dict[str, Any]) -> "EnhancedTransaction":
        """Build from one item of `/v0/addresses/{address}/transactions`.

        Malformed pieces are dropped rather than rejected: non-object
        instructions and transfers are skipped, a non-finite timestamp
        becomes None and a non-string source is ignored.
        """
        program_ids: set[str] = set()
        for instruction in _dicts(data.get("instructions")):
            program_id = _optional_str(instruction.get("programId"))
            if program_id:
                program_ids.add(program_id)
            for inner in _dicts(instruction.get("innerInstructions")):
                inner_id = _optional_str(inner.get("programId"))
                if inner_id:
                    program_ids.add(inner_id)

        transfers = [
            TokenTransfer.from_helius(item)
            for item in _dicts(data.get("tokenTransfers"))
            if _optional_str(item.get("mint"))
        ]

        return cls(
            signature=_optional_str(data.get("signature")) or "",
            timestamp=parse_timestamp(data.get("timestamp")),
            source=_optional_str(data.get("source")),
            program_ids=frozenset(program_ids),
            token_transfers=transfers,
        )
