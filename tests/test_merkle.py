"""Tests for sparse Merkle proof verification."""

import pytest

from norn.crypto import blake3_hash
from norn.errors import InvalidLengthError, MerkleProofError
from norn.merkle import (
    EMPTY_HASH,
    compute_root,
    decode_u128_le,
    encode_u128_le,
    get_bit,
    hash_internal,
    hash_leaf,
    proof_balance,
    smt_key,
    verify_balance_proof,
    verify_proof,
    verify_state_proof,
)
from norn.types import MerkleProof

ADDRESS = bytes(19) + b"\x01"
TOKEN = bytes(32)


class TestPrimitives:
    """Tests for bit access and node hashing."""

    def test_get_bit_msb_first(self) -> None:
        """Test that bit 0 is the most significant bit of byte 0."""
        key = bytes([0b10000001, 0b01000000])
        assert get_bit(key, 0) == 1
        assert get_bit(key, 1) == 0
        assert get_bit(key, 7) == 1
        assert get_bit(key, 9) == 1
        assert get_bit(key, 8) == 0

    def test_get_bit_out_of_range(self) -> None:
        """Test that bits past the key are 0."""
        assert get_bit(b"\xff", 8) == 0
        assert get_bit(b"", 0) == 0

    def test_domain_separation(self) -> None:
        """Test that leaf and internal hashes use different prefixes."""
        a = b"\x01" * 32
        b = b"\x02" * 32
        assert hash_leaf(a, b) == blake3_hash(b"\x00" + a + b)
        assert hash_internal(a, b) == blake3_hash(b"\x01" + a + b)
        assert hash_leaf(a, b) != hash_internal(a, b)

    def test_internal_order_matters(self) -> None:
        """Test that swapping children changes the hash."""
        a = b"\x01" * 32
        b = b"\x02" * 32
        assert hash_internal(a, b) != hash_internal(b, a)

    def test_smt_key(self) -> None:
        """Test the balance key derivation."""
        assert smt_key(ADDRESS, TOKEN) == blake3_hash(ADDRESS + TOKEN)

    def test_u128_helpers(self) -> None:
        """Test little-endian amount encoding."""
        assert encode_u128_le(1) == b"\x01" + bytes(15)
        assert decode_u128_le(encode_u128_le(123_456)) == 123_456
        with pytest.raises(InvalidLengthError):
            decode_u128_le(bytes(8))


class TestVerifyStateProof:
    """Tests for verify_state_proof."""

    def test_empty_tree(self) -> None:
        """Test non-inclusion in an empty tree."""
        key = b"\x42" * 32
        assert verify_state_proof(EMPTY_HASH, key, b"", [EMPTY_HASH] * 256)

    def test_empty_value_against_nonzero_root(self) -> None:
        """Test that non-inclusion fails against a populated root."""
        key = b"\x42" * 32
        assert not verify_state_proof(b"\x01" * 32, key, b"", [EMPTY_HASH] * 256)

    def test_single_entry(self) -> None:
        """Test inclusion of the only entry in a tree."""
        key = b"\x42" * 32
        siblings = [EMPTY_HASH] * 256
        root = compute_root(key, b"value", siblings)
        assert root != EMPTY_HASH
        assert verify_state_proof(root, key, b"value", siblings)
        assert not verify_state_proof(root, key, b"other", siblings)
        assert not verify_state_proof(root, b"\x43" * 32, b"value", siblings)

    def test_any_root_bit_flip_fails(self) -> None:
        """Test that flipping any single bit of a valid root fails."""
        key = b"\x42" * 32
        siblings = [EMPTY_HASH] * 256
        siblings[200] = b"\x09" * 32
        root = compute_root(key, b"value", siblings)
        assert verify_state_proof(root, key, b"value", siblings)
        for bit in range(256):
            flipped = bytearray(root)
            flipped[bit // 8] ^= 0x80 >> (bit % 8)
            assert not verify_state_proof(bytes(flipped), key, b"value", siblings)

    def test_any_value_bit_flip_fails(self) -> None:
        """Test that flipping any single bit of the leaf value fails at depth 1."""
        sibling = b"\x07" * 32
        value = b"\x00\x01\x02\x03"
        root = hash_internal(hash_leaf(b"\x00", blake3_hash(value)), sibling)
        assert verify_state_proof(root, b"\x00", value, [sibling], depth=1)
        for bit in range(len(value) * 8):
            flipped = bytearray(value)
            flipped[bit // 8] ^= 0x80 >> (bit % 8)
            assert not verify_state_proof(root, b"\x00", bytes(flipped), [sibling], depth=1)

    def test_tampered_sibling(self) -> None:
        """Test that changing any sibling breaks the proof."""
        key = b"\x42" * 32
        siblings = [EMPTY_HASH] * 256
        siblings[10] = b"\x09" * 32
        root = compute_root(key, b"value", siblings)
        assert verify_state_proof(root, key, b"value", siblings)
        tampered = list(siblings)
        tampered[10] = b"\x0a" * 32
        assert not verify_state_proof(root, key, b"value", tampered)

    def test_wrong_sibling_count(self) -> None:
        """Test that a short sibling list fails instead of raising."""
        key = b"\x42" * 32
        root = compute_root(key, b"value", [EMPTY_HASH] * 256)
        assert verify_state_proof(root, key, b"value", [EMPTY_HASH] * 255) is False

    def test_malformed_sibling(self) -> None:
        """Test that a short sibling hash fails."""
        key = b"\x42" * 32
        siblings = [EMPTY_HASH] * 256
        siblings[0] = b"\x01" * 31
        assert verify_state_proof(EMPTY_HASH, key, b"value", siblings) is False

    def test_depth_one_left(self) -> None:
        """Test that a 0 bit puts the current node on the left."""
        sibling = b"\x07" * 32
        leaf = hash_leaf(b"\x00", blake3_hash(b"v"))
        root = hash_internal(leaf, sibling)
        assert verify_state_proof(root, b"\x00", b"v", [sibling], depth=1)

    def test_depth_one_right(self) -> None:
        """Test that a 1 bit puts the current node on the right."""
        sibling = b"\x07" * 32
        leaf = hash_leaf(b"\x80", blake3_hash(b"v"))
        root = hash_internal(sibling, leaf)
        assert verify_state_proof(root, b"\x80", b"v", [sibling], depth=1)
        assert not verify_state_proof(hash_internal(leaf, sibling), b"\x80", b"v", [sibling], depth=1)

    def test_depth_zero(self) -> None:
        """Test that depth 0 compares the leaf hash with the root."""
        root = hash_leaf(b"\x01", blake3_hash(b"v"))
        assert verify_state_proof(root, b"\x01", b"v", [], depth=0)

    def test_depth_exceeds_key(self) -> None:
        """Test that a depth wider than the key raises."""
        with pytest.raises(MerkleProofError, match="exceeds key width"):
            verify_state_proof(EMPTY_HASH, b"\x00", b"", [EMPTY_HASH] * 9, depth=9)

    def test_compute_root_rejects_wrong_count(self) -> None:
        """Test that compute_root raises on a wrong sibling count."""
        with pytest.raises(MerkleProofError, match="Expected 256 siblings"):
            compute_root(b"\x00" * 32, b"v", [])

    def test_verify_proof_wrapper(self) -> None:
        """Test verification through a MerkleProof."""
        key = b"\x42" * 32
        siblings = [EMPTY_HASH] * 256
        proof = MerkleProof(key=key, value=b"value", siblings=siblings)
        assert verify_proof(compute_root(key, b"value", siblings), proof)


class TestBalanceProof:
    """Tests for balance proofs."""

    def test_valid_balance(self) -> None:
        """Test a balance proof built the way the node builds it."""
        key = smt_key(ADDRESS, TOKEN)
        siblings = [EMPTY_HASH] * 256
        siblings[255] = b"\x05" * 32
        root = compute_root(key, encode_u128_le(1000), siblings)
        hex_siblings = [s.hex() for s in siblings]

        assert verify_balance_proof(root.hex(), ADDRESS.hex(), TOKEN.hex(), 1000, hex_siblings)
        assert verify_balance_proof(
            "0x" + root.hex(), "0x" + ADDRESS.hex(), TOKEN.hex(), 1000, hex_siblings
        )
        assert not verify_balance_proof(root.hex(), ADDRESS.hex(), TOKEN.hex(), 999, hex_siblings)

    def test_rejects_bad_lengths(self) -> None:
        """Test that malformed roots and token IDs raise."""
        siblings = ["00" * 32] * 256
        with pytest.raises(InvalidLengthError, match="state root"):
            verify_balance_proof("00" * 31, ADDRESS.hex(), TOKEN.hex(), 1, siblings)
        with pytest.raises(InvalidLengthError, match="token id"):
            verify_balance_proof("00" * 32, ADDRESS.hex(), "00" * 31, 1, siblings)

    def test_proof_balance(self) -> None:
        """Test decoding the balance from a proof."""
        assert proof_balance(MerkleProof(key=bytes(32), value=encode_u128_le(77))) == 77
        assert proof_balance(MerkleProof(key=bytes(32), value=b"")) == 0
