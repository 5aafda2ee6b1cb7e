"""
Wallet provider interface and a local keypair wallet.

A wallet either supports the structured Sign-In With Solana flow
(`sign_in`) or only raw message signing (`sign_message`). Callers check
once per attempt with `detect_capability()`.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from nacl.signing import SigningKey

from huissier.domain.exceptions import WalletCancelledError
from huissier.domain.value_objects.sign_in_challenge import SignInChallenge
from huissier.domain.value_objects.wallet_address import WalletAddress


class WalletCapability(str, Enum):
    """Signing flow a wallet supports."""

    SIGN_IN = "sign_in"
    SIGN_MESSAGE = "sign_message"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class WalletAccount:
    """Connected wallet account."""

    address: str


@dataclass(frozen=True)
class SignedMessage:
    """Raw detached signature over a message."""

    signature: bytes


@dataclass(frozen=True)
class SignInOutput:
    """Result of a structured sign-in: who signed what."""

    address: str
    signature: bytes
    signed_message: bytes


class WalletProvider(ABC):
    """
    External wallet collaborator.

    Implementations raise WalletCancelledError when the user rejects a
    request.
    """

    supports_sign_in: bool = False

    def is_available(self) -> bool:
        """True if the wallet can be used right now."""
        return True

    @abstractmethod
    async def connect(self) -> WalletAccount:
        """Connect and return the active account."""

    @abstractmethod
    async def sign_message(self, message: bytes) -> SignedMessage:
        """Sign raw message bytes."""

    async def sign_in(self, challenge: SignInChallenge) -> SignInOutput:
        """Sign structured challenge (only if supports_sign_in)."""
        raise NotImplementedError("Wallet does not support sign-in")


def detect_capability(wallet: Optional[WalletProvider]) -> WalletCapability:
    """
    Probe wallet for the richest supported signing flow.

    Args:
        wallet: Wallet provider or None

    Returns:
        WalletCapability
    """
    if wallet is None or not wallet.is_available():
        return WalletCapability.UNAVAILABLE
    if wallet.supports_sign_in:
        return WalletCapability.SIGN_IN
    return WalletCapability.SIGN_MESSAGE


class KeypairWallet(WalletProvider):
    """
    Wallet backed by a local Ed25519 signing key.

    Example:
        wallet = KeypairWallet.from_keypair_file("~/.config/solana/id.json")
        account = await wallet.connect()
    """

    def __init__(
        self,
        signing_key: SigningKey,
        supports_sign_in: bool = True,
        approve: bool = True,
    ):
        """
        Initialize wallet.

        Args:
            signing_key: PyNaCl signing key
            supports_sign_in: Offer the structured sign-in flow
            approve: False makes every signing request a user rejection
        """
        self.signing_key = signing_key
        self.supports_sign_in = supports_sign_in
        self.approve = approve
        self.address = WalletAddress.from_public_key(
            bytes(signing_key.verify_key)
        ).address

    @classmethod
    def generate(cls, **kwargs) -> "KeypairWallet":
        """Create wallet with a fresh random key."""
        return cls(SigningKey.generate(), **kwargs)

    @classmethod
    def from_seed(cls, seed: bytes, **kwargs) -> "KeypairWallet":
        """Create wallet from 32-byte seed."""
        return cls(SigningKey(bytes(seed)), **kwargs)

    @classmethod
    def from_keypair_file(
        cls, keypair_path: Union[str, Path], **kwargs
    ) -> "KeypairWallet":
        """
        Load Solana CLI keypair JSON file.

        Keypair JSON is an array of 64 bytes [secret_key + public_key];
        the first 32 bytes are the seed.
        """
        with open(Path(keypair_path).expanduser(), "r") as f:
            keypair_data = json.load(f)
        return cls.from_seed(bytes(keypair_data[:32]), **kwargs)

    async def connect(self) -> WalletAccount:
        return WalletAccount(address=self.address)

    async def sign_message(self, message: bytes) -> SignedMessage:
        self._check_approved()
        await asyncio.sleep(0)
        return SignedMessage(signature=self.signing_key.sign(message).signature)

    async def sign_in(self, challenge: SignInChallenge) -> SignInOutput:
        self._check_approved()
        message = challenge.to_message(self.address).encode("utf-8")
        signed = await self.sign_message(message)
        return SignInOutput(
            address=self.address,
            signature=signed.signature,
            signed_message=message,
        )

    def _check_approved(self) -> None:
        if not self.approve:
            raise WalletCancelledError("User rejected the request")
