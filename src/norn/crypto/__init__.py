"""Cryptographic operations for the Norn SDK."""

from .constants import ADDRESS_SIZE, HASH_SIZE, TREE_DEPTH
from .encryption import (
    decrypt,
    derive_shared_secret,
    ed25519_to_x25519_public,
    ed25519_to_x25519_secret,
    encrypt,
    symmetric_decrypt,
    symmetric_encrypt,
)
from .hash import blake3_hash, blake3_hash_multi, blake3_kdf
from .hd import derive_keypair, mnemonic_to_seed
from .keys import (
    Keypair,
    batch_verify,
    ed25519_sign,
    ed25519_verify,
    generate_keypair,
    keypair_from_seed,
    public_key_from_private,
    public_key_to_address,
    validate_keypair,
)
from .utils import (
    address_to_hex,
    from_base64,
    from_hex,
    hex_to_address,
    to_base64,
    to_hex,
)

__all__ = [
    "ADDRESS_SIZE",
    "HASH_SIZE",
    "TREE_DEPTH",
    "Keypair",
    "address_to_hex",
    "batch_verify",
    "blake3_hash",
    "blake3_hash_multi",
    "blake3_kdf",
    "decrypt",
    "derive_keypair",
    "derive_shared_secret",
    "ed25519_sign",
    "ed25519_to_x25519_public",
    "ed25519_to_x25519_secret",
    "ed25519_verify",
    "encrypt",
    "from_base64",
    "from_hex",
    "generate_keypair",
    "hex_to_address",
    "keypair_from_seed",
    "mnemonic_to_seed",
    "public_key_from_private",
    "public_key_to_address",
    "symmetric_decrypt",
    "symmetric_encrypt",
    "to_base64",
    "to_hex",
    "validate_keypair",
]
