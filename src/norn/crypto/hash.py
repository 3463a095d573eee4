"""BLAKE3 hashing for the Norn SDK."""

from __future__ import annotations

from collections.abc import Iterable

from blake3 import blake3


def blake3_hash(data: bytes) -> bytes:
    """Compute a BLAKE3 hash of the input. Returns 32 bytes."""
    return blake3(data).digest()


def blake3_kdf(context: str, key_material: bytes) -> bytes:
    """Derive a 32-byte key with BLAKE3 in derive-key mode.

    Args:
        context: Application-specific context string.
        key_material: Input key material.

    Returns:
        32 bytes of derived key.
    """
    return blake3(key_material, derive_key_context=context).digest()


def blake3_hash_multi(parts: Iterable[bytes]) -> bytes:
    """Hash the concatenation of several byte strings without joining them."""
    hasher = blake3()
    for part in parts:
        hasher.update(part)
    return hasher.digest()
