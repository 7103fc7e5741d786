"""Wallet address validation logic.

Format-only checks (base58 alphabet, 32-44 characters). Existence on
chain is not checked: an unknown but well-formed address simply analyzes
to an empty wallet.
"""

from pumpmatch.core.exceptions import ValidationError

# Solana base58 alphabet (excludes 0, O, I, l to avoid confusion)
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

SOLANA_ADDRESS_MIN_LENGTH = 32
SOLANA_ADDRESS_MAX_LENGTH = 44


def is_valid_solana_address(address: str | None) -> bool:
    """Validate Solana address format (base58).

    Example:
        >>> is_valid_solana_address("9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM")
        True
        >>> is_valid_solana_address("invalid_0OIl")
        False
    """
    if address is None or not isinstance(address, str):
        return False

    address = address.strip()
    if not address:
        return False

    if not (SOLANA_ADDRESS_MIN_LENGTH <= len(address) <= SOLANA_ADDRESS_MAX_LENGTH):
        return False

    return all(c in BASE58_ALPHABET for c in address)


def require_valid_address(address: str | None) -> str:
    """Return the stripped address or raise ValidationError."""
    if not is_valid_solana_address(address):
        raise ValidationError(f"Invalid Solana address: {address!r}")
    assert address is not None
    return address.strip()
