"""Sparse Merkle proof verification for the Norn SDK.

The ledger keeps balances in a 256-level sparse Merkle tree. Keys are read
most-significant bit first; ``siblings[d]`` is the sibling at depth ``d + 1``,
so ``siblings[0]`` sits just below the root. Empty subtrees hash to 32 zero
bytes and two empty children collapse to an empty parent.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Sequence

from .codec import BorshReader, BorshWriter
from .crypto.constants import HASH_SIZE, TREE_DEPTH
from .crypto.hash import blake3_hash
from .crypto.utils import from_hex, hex_to_address
from .errors import InvalidLengthError, MerkleProofError
from .types import MerkleProof

logger = logging.getLogger("norn")

EMPTY_HASH = bytes(HASH_SIZE)

_LEAF_PREFIX = b"\x00"
_INTERNAL_PREFIX = b"\x01"


def get_bit(key: bytes, depth: int) -> int:
    """Get the bit at ``depth`` of ``key`` (MSB first). Out of range is 0."""
    byte_index = depth // 8
    bit_index = 7 - (depth % 8)
    if byte_index < len(key):
        return (key[byte_index] >> bit_index) & 1
    return 0


def hash_leaf(key: bytes, value_hash: bytes) -> bytes:
    """Hash a leaf node: ``BLAKE3(0x00 || key || value_hash)``."""
    return blake3_hash(_LEAF_PREFIX + key + value_hash)


def hash_internal(left: bytes, right: bytes) -> bytes:
    """Hash an internal node: ``BLAKE3(0x01 || left || right)``."""
    return blake3_hash(_INTERNAL_PREFIX + left + right)


def smt_key(address: bytes, token_id: bytes) -> bytes:
    """Compute the tree key of a balance entry: ``BLAKE3(address || token_id)``."""
    return blake3_hash(address + token_id)


def encode_u128_le(value: int) -> bytes:
    """Encode an amount as 16 little-endian bytes."""
    w = BorshWriter()
    w.write_u128(value)
    return w.to_bytes()


def decode_u128_le(data: bytes) -> int:
    """Decode 16 little-endian bytes into an amount.

    Raises:
        InvalidLengthError: If ``data`` is not exactly 16 bytes.
    """
    if len(data) != 16:
        raise InvalidLengthError("u128 value", 16, len(data))
    return BorshReader(data).read_u128()


def compute_root(
    key: bytes,
    value: bytes,
    siblings: Sequence[bytes],
    depth: int = TREE_DEPTH,
) -> bytes:
    """Fold a leaf and its sibling path up to a root.

    Raises:
        MerkleProofError: If ``depth`` exceeds the key's bit width or the
            sibling list does not have ``depth`` entries.
    """
    if depth < 0 or depth > len(key) * 8:
        raise MerkleProofError(
            f"Tree depth {depth} exceeds key width of {len(key) * 8} bits"
        )
    if len(siblings) != depth:
        raise MerkleProofError(f"Expected {depth} siblings, got {len(siblings)}")

    current = EMPTY_HASH if not value else hash_leaf(key, blake3_hash(value))
    for level in range(depth - 1, -1, -1):
        sibling = siblings[level]
        if current == EMPTY_HASH and sibling == EMPTY_HASH:
            continue
        if get_bit(key, level) == 0:
            current = hash_internal(current, sibling)
        else:
            current = hash_internal(sibling, current)
    return current


def verify_state_proof(
    root: bytes,
    key: bytes,
    value: bytes,
    siblings: Sequence[bytes],
    depth: int = TREE_DEPTH,
) -> bool:
    """Verify a sparse Merkle proof.

    Args:
        root: The expected state root (32 bytes).
        key: The key being proved.
        value: Raw leaf value; empty for a non-inclusion proof.
        siblings: One sibling hash per level.
        depth: Tree depth. The ledger uses 256.

    Returns:
        True if the recomputed root equals ``root``. A sibling list of the
        wrong length is a failed proof, not an error.

    Raises:
        MerkleProofError: If ``depth`` exceeds the key's bit width.
    """
    if depth < 0 or depth > len(key) * 8:
        raise MerkleProofError(
            f"Tree depth {depth} exceeds key width of {len(key) * 8} bits"
        )
    if len(siblings) != depth:
        logger.debug("Merkle proof rejected: %d siblings for depth %d", len(siblings), depth)
        return False
    if any(len(sibling) != HASH_SIZE for sibling in siblings):
        logger.debug("Merkle proof rejected: malformed sibling hash")
        return False

    computed = compute_root(key, value, siblings, depth)
    if hmac.compare_digest(computed, root):
        return True
    logger.debug("Merkle proof rejected: root mismatch")
    return False


def verify_proof(root: bytes, proof: MerkleProof, depth: int = TREE_DEPTH) -> bool:
    """Verify a :class:`~norn.types.MerkleProof` against ``root``."""
    return verify_state_proof(root, proof.key, proof.value, proof.siblings, depth)


def proof_balance(proof: MerkleProof) -> int:
    """Decode the balance carried by an inclusion proof.

    Returns 0 for a non-inclusion proof.
    """
    if not proof.value:
        return 0
    return decode_u128_le(proof.value)


def verify_balance_proof(
    state_root: str,
    address: str,
    token_id: str,
    balance: int,
    proof: Sequence[str],
) -> bool:
    """Verify a balance proof as returned by the node's state-proof RPC.

    Args:
        state_root: Hex state root.
        address: Hex 20-byte address.
        token_id: Hex 32-byte token ID.
        balance: Expected balance (u128).
        proof: Hex sibling hashes.

    Returns:
        True if the proof shows ``balance`` for ``address``/``token_id``.

    Raises:
        InvalidHexError: If any hex input is malformed.
        InvalidLengthError: If the address, token ID or root has the wrong size.
    """
    root = from_hex(state_root)
    if len(root) != HASH_SIZE:
        raise InvalidLengthError("state root", HASH_SIZE, len(root))
    token = from_hex(token_id)
    if len(token) != HASH_SIZE:
        raise InvalidLengthError("token id", HASH_SIZE, len(token))
    key = smt_key(hex_to_address(address), token)
    siblings = [from_hex(h) for h in proof]
    return verify_state_proof(root, key, encode_u128_le(balance), siblings)
