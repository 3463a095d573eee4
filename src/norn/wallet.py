"""In-memory Ed25519 wallet for signing Norn transactions."""

from __future__ import annotations

import os

from .crypto.constants import ED25519_PRIVATE_KEY_SIZE
from .crypto.encryption import ed25519_to_x25519_public
from .crypto.hash import blake3_hash
from .crypto.hd import derive_keypair, mnemonic_to_seed
from .crypto.keys import (
    Hasher,
    ed25519_sign,
    public_key_from_private,
    public_key_to_address,
)
from .crypto.utils import address_to_hex, from_hex, to_hex
from .errors import InvalidLengthError


class Wallet:
    """Holds one Ed25519 keypair for the caller's session.

    The wallet never persists its key; storage belongs to the caller.

    Attributes:
        public_key: 32-byte public key.
        address: 20-byte address derived from the public key.
    """

    def __init__(self, private_key: bytes, *, hasher: Hasher = blake3_hash) -> None:
        if len(private_key) != ED25519_PRIVATE_KEY_SIZE:
            raise InvalidLengthError("private key", ED25519_PRIVATE_KEY_SIZE, len(private_key))
        self._private_key = bytes(private_key)
        self.public_key = public_key_from_private(self._private_key)
        self.address = public_key_to_address(self.public_key, hasher)

    @classmethod
    def from_private_key(cls, private_key: bytes, *, hasher: Hasher = blake3_hash) -> Wallet:
        """Create a wallet from a 32-byte private key."""
        return cls(private_key, hasher=hasher)

    @classmethod
    def from_private_key_hex(cls, private_key_hex: str) -> Wallet:
        """Create a wallet from a hex private key (``0x`` prefix optional)."""
        return cls(from_hex(private_key_hex))

    @classmethod
    def from_mnemonic(cls, mnemonic: str, passphrase: str = "", index: int = 0) -> Wallet:
        """Create the wallet at HD ``index`` for a BIP-39 phrase."""
        seed = mnemonic_to_seed(mnemonic, passphrase)
        return cls(derive_keypair(seed, index).private_key)

    @classmethod
    def generate(cls) -> Wallet:
        """Generate a new random wallet."""
        return cls(os.urandom(ED25519_PRIVATE_KEY_SIZE))

    @property
    def private_key(self) -> bytes:
        return self._private_key

    @property
    def public_key_hex(self) -> str:
        return to_hex(self.public_key)

    @property
    def address_hex(self) -> str:
        """Address as a ``0x``-prefixed hex string."""
        return address_to_hex(self.address)

    @property
    def x25519_public_key(self) -> bytes:
        """X25519 public key peers use to encrypt to this wallet."""
        return ed25519_to_x25519_public(self._private_key)

    def sign(self, message: bytes) -> bytes:
        """Sign a message. Returns a 64-byte signature."""
        return ed25519_sign(message, self._private_key)

    def __repr__(self) -> str:
        return f"Wallet(address={self.address_hex!r})"
