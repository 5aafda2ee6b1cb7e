"""
Huissier - wallet-signature sign-in.

Users prove control of a Solana wallet by signing a challenge and receive
an opaque session credential from the identity backend.
"""

__version__ = "0.1.0"
