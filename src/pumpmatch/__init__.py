"""Pump Match reputation engine.

Trust scoring, badge derivation and match confidence for Solana wallets.
"""

__version__ = "1.0.0"
