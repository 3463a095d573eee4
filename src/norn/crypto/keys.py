"""Ed25519 keypairs, signatures and address derivation for the Norn SDK."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from ..errors import InvalidLengthError, SignatureVerificationError
from .constants import (
    ADDRESS_OFFSET,
    ED25519_PRIVATE_KEY_SIZE,
    ED25519_PUBLIC_KEY_SIZE,
    ED25519_SIGNATURE_SIZE,
    HASH_SIZE,
)
from .hash import blake3_hash

Hasher = Callable[[bytes], bytes]


@dataclass(frozen=True)
class Keypair:
    """Ed25519 keypair.

    Attributes:
        private_key: The 32-byte private seed.
        public_key: The 32-byte public key.
    """

    private_key: bytes
    public_key: bytes

    def sign(self, message: bytes) -> bytes:
        """Sign a message. Returns a 64-byte signature."""
        return ed25519_sign(message, self.private_key)

    def __repr__(self) -> str:
        return f"Keypair(public_key={self.public_key.hex()!r})"


def _signing_key(private_key: bytes) -> Ed25519PrivateKey:
    if len(private_key) != ED25519_PRIVATE_KEY_SIZE:
        raise InvalidLengthError("private key", ED25519_PRIVATE_KEY_SIZE, len(private_key))
    return Ed25519PrivateKey.from_private_bytes(private_key)


def keypair_from_seed(seed: bytes) -> Keypair:
    """Build a keypair from a 32-byte Ed25519 seed.

    Raises:
        InvalidLengthError: If the seed is not 32 bytes.
    """
    return Keypair(private_key=bytes(seed), public_key=public_key_from_private(seed))


def generate_keypair() -> Keypair:
    """Generate a new random Ed25519 keypair."""
    return keypair_from_seed(os.urandom(ED25519_PRIVATE_KEY_SIZE))


def validate_keypair(keypair: Keypair) -> bool:
    """Check that a keypair has correct sizes and a matching public key."""
    if len(keypair.private_key) != ED25519_PRIVATE_KEY_SIZE:
        return False
    if len(keypair.public_key) != ED25519_PUBLIC_KEY_SIZE:
        return False
    return public_key_from_private(keypair.private_key) == keypair.public_key


def public_key_from_private(private_key: bytes) -> bytes:
    """Derive the 32-byte public key from a 32-byte private key."""
    return _signing_key(private_key).public_key().public_bytes_raw()


def ed25519_sign(message: bytes, private_key: bytes) -> bytes:
    """Sign a message with an Ed25519 private key. Returns a 64-byte signature."""
    return _signing_key(private_key).sign(message)


def ed25519_verify(signature: bytes, message: bytes, public_key: bytes) -> bool:
    """Verify an Ed25519 signature.

    Never raises: wrong lengths, keys that are not curve points, a tampered
    message or a foreign key all yield False.
    """
    if len(signature) != ED25519_SIGNATURE_SIZE or len(public_key) != ED25519_PUBLIC_KEY_SIZE:
        return False
    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(signature, message)
        return True
    except (InvalidSignature, ValueError):
        return False


def batch_verify(
    messages: Sequence[bytes],
    signatures: Sequence[bytes],
    public_keys: Sequence[bytes],
) -> None:
    """Verify several signatures at once.

    Args:
        messages: The signed messages.
        signatures: One signature per message.
        public_keys: One public key per message.

    Raises:
        SignatureVerificationError: On the first invalid entry, with its
            ``signer_index``. Mismatched input lengths report index 0.
    """
    if not (len(messages) == len(signatures) == len(public_keys)):
        raise SignatureVerificationError(
            f"Batch length mismatch: {len(messages)} messages, "
            f"{len(signatures)} signatures, {len(public_keys)} public keys",
            signer_index=0,
        )
    for i, (message, signature, public_key) in enumerate(
        zip(messages, signatures, public_keys)
    ):
        if not ed25519_verify(signature, message, public_key):
            raise SignatureVerificationError(
                f"Invalid signature at index {i}", signer_index=i
            )


def public_key_to_address(public_key: bytes, hasher: Hasher = blake3_hash) -> bytes:
    """Derive a 20-byte address from a 32-byte public key.

    The address is ``hash(public_key)[12:32]``; the hash runs over the full key
    before truncation.

    Args:
        public_key: The Ed25519 public key.
        hasher: Content hash to use. Defaults to BLAKE3.

    Returns:
        The 20-byte address.

    Raises:
        InvalidLengthError: If the public key is not 32 bytes.
    """
    if len(public_key) != ED25519_PUBLIC_KEY_SIZE:
        raise InvalidLengthError("public key", ED25519_PUBLIC_KEY_SIZE, len(public_key))
    return hasher(public_key)[ADDRESS_OFFSET:HASH_SIZE]
