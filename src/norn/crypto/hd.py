"""BIP-39 seeds and SLIP-10 Ed25519 key derivation for the Norn SDK."""

from __future__ import annotations

import hashlib
import hmac
import unicodedata

from ..constants import NORN_COIN_TYPE
from ..errors import InvalidLengthError
from .keys import Keypair, keypair_from_seed

SEED_SIZE = 64
HARDENED_OFFSET = 0x80000000
_SLIP10_CURVE_KEY = b"ed25519 seed"
_PBKDF2_ROUNDS = 2048


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """Convert a BIP-39 mnemonic phrase to a 64-byte seed.

    Word-list validation is the caller's concern; any phrase is stretched.
    """
    normalized = unicodedata.normalize("NFKD", " ".join(mnemonic.split()))
    salt = unicodedata.normalize("NFKD", "mnemonic" + passphrase)
    return hashlib.pbkdf2_hmac(
        "sha512", normalized.encode("utf-8"), salt.encode("utf-8"), _PBKDF2_ROUNDS, dklen=SEED_SIZE
    )


def _hmac_sha512(key: bytes, data: bytes) -> tuple[bytes, bytes]:
    digest = hmac.new(key, data, hashlib.sha512).digest()
    return digest[:32], digest[32:]


def derive_private_key(seed: bytes, path: list[int]) -> bytes:
    """Derive an Ed25519 private key along a SLIP-10 path.

    Every path component is hardened, as SLIP-10 requires for Ed25519.

    Args:
        seed: The master seed.
        path: Path components without the hardened bit.

    Returns:
        The 32-byte private key.
    """
    key, chain_code = _hmac_sha512(_SLIP10_CURVE_KEY, seed)
    for index in path:
        data = b"\x00" + key + (index | HARDENED_OFFSET).to_bytes(4, "big")
        key, chain_code = _hmac_sha512(chain_code, data)
    return key


def derive_keypair(seed: bytes, index: int = 0) -> Keypair:
    """Derive the wallet keypair at ``m/44'/NORN'/0'/0'/index'``.

    Raises:
        InvalidLengthError: If the seed is not 64 bytes.
        ValueError: If the index is outside the non-hardened range.
    """
    if len(seed) != SEED_SIZE:
        raise InvalidLengthError("seed", SEED_SIZE, len(seed))
    if not 0 <= index < HARDENED_OFFSET:
        raise ValueError(f"Invalid derivation index: {index}")
    path = [44, NORN_COIN_TYPE, 0, 0, index]
    return keypair_from_seed(derive_private_key(seed, path))
