"""Tests for crypto module."""

from unittest.mock import patch

import pytest

from norn.crypto import (
    Keypair,
    address_to_hex,
    batch_verify,
    blake3_hash,
    blake3_hash_multi,
    blake3_kdf,
    derive_keypair,
    ed25519_sign,
    ed25519_verify,
    from_base64,
    from_hex,
    generate_keypair,
    hex_to_address,
    keypair_from_seed,
    mnemonic_to_seed,
    public_key_from_private,
    public_key_to_address,
    to_base64,
    to_hex,
    validate_keypair,
)
from norn.crypto.constants import ADDRESS_SIZE, ED25519_SIGNATURE_SIZE, HASH_SIZE
from norn.crypto.hd import derive_private_key
from norn.errors import InvalidHexError, InvalidLengthError, SignatureVerificationError

# RFC 8032, section 7.1, test 1
RFC8032_SECRET = "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
RFC8032_PUBLIC = "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"
RFC8032_SIGNATURE = (
    "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e065224901555"
    "fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
)


class TestHex:
    """Tests for hex encoding/decoding."""

    def test_round_trip(self) -> None:
        """Test that encoding and decoding produces original data."""
        data = bytes(range(256))
        assert from_hex(to_hex(data)) == data

    def test_lowercase_output(self) -> None:
        """Test that hex output is lowercase without prefix."""
        assert to_hex(b"\xab\xcd") == "abcd"

    def test_accepts_0x_prefix(self) -> None:
        """Test that the 0x prefix is optional."""
        assert from_hex("0x0102") == b"\x01\x02"
        assert from_hex("0102") == b"\x01\x02"

    def test_accepts_uppercase(self) -> None:
        """Test that uppercase hex digits decode."""
        assert from_hex("ABCD") == b"\xab\xcd"

    def test_empty(self) -> None:
        """Test empty hex."""
        assert from_hex("") == b""
        assert from_hex("0x") == b""

    def test_rejects_odd_length(self) -> None:
        """Test that odd-length hex is rejected."""
        with pytest.raises(InvalidHexError, match="odd length"):
            from_hex("abc")

    def test_rejects_non_hex(self) -> None:
        """Test that non-hex characters are rejected."""
        with pytest.raises(InvalidHexError, match="non-hex"):
            from_hex("zz")
        with pytest.raises(InvalidHexError):
            from_hex("0x 1")

    def test_address_hex(self) -> None:
        """Test address rendering and parsing."""
        address = bytes(19) + b"\x01"
        rendered = address_to_hex(address)
        assert rendered == "0x" + "00" * 19 + "01"
        assert len(rendered) == 42
        assert hex_to_address(rendered) == address
        assert hex_to_address(rendered[2:]) == address

    def test_address_wrong_length(self) -> None:
        """Test that a 19-byte address is rejected."""
        with pytest.raises(InvalidLengthError, match="expected 20"):
            hex_to_address("00" * 19)


class TestBase64:
    """Tests for standard base64 encoding/decoding."""

    def test_to_base64(self) -> None:
        """Test standard base64 encoding."""
        assert to_base64(b"Hello, World!") == "SGVsbG8sIFdvcmxkIQ=="

    def test_from_base64(self) -> None:
        """Test standard base64 decoding."""
        assert from_base64("SGVsbG8sIFdvcmxkIQ==") == b"Hello, World!"

    def test_from_base64_invalid(self) -> None:
        """Test that invalid base64 raises ValueError."""
        with pytest.raises(ValueError, match="Invalid base64"):
            from_base64("!!!not-base64!!!")


class TestHash:
    """Tests for BLAKE3 hashing."""

    def test_empty_input(self) -> None:
        """Test the BLAKE3 digest of empty input."""
        digest = blake3_hash(b"")
        assert len(digest) == HASH_SIZE
        assert digest.hex() == "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262"

    def test_deterministic(self) -> None:
        """Test that the same input hashes the same."""
        assert blake3_hash(b"hello norn") == blake3_hash(b"hello norn")

    def test_different_inputs(self) -> None:
        """Test that different inputs hash differently."""
        assert blake3_hash(b"hello") != blake3_hash(b"world")

    def test_no_collisions_in_corpus(self) -> None:
        """Test that a small corpus has no collisions."""
        digests = {blake3_hash(i.to_bytes(4, "little")) for i in range(500)}
        assert len(digests) == 500

    def test_multi_matches_concatenation(self) -> None:
        """Test that multi-part hashing equals hashing the concatenation."""
        assert blake3_hash_multi([b"hello", b" ", b"world"]) == blake3_hash(b"hello world")

    def test_kdf(self) -> None:
        """Test BLAKE3 key derivation."""
        key = blake3_kdf("norn-test", b"key material")
        assert len(key) == 32
        assert key == blake3_kdf("norn-test", b"key material")
        assert key != blake3_kdf("norn-other", b"key material")
        assert key != blake3_hash(b"key material")


class TestSignatures:
    """Tests for Ed25519 signing and verification."""

    def test_rfc8032_vector(self) -> None:
        """Test RFC 8032 test vector 1."""
        secret = bytes.fromhex(RFC8032_SECRET)
        assert public_key_from_private(secret).hex() == RFC8032_PUBLIC
        assert ed25519_sign(b"", secret).hex() == RFC8032_SIGNATURE
        assert ed25519_verify(
            bytes.fromhex(RFC8032_SIGNATURE), b"", bytes.fromhex(RFC8032_PUBLIC)
        )

    def test_sign_verify_round_trip(self) -> None:
        """Test that a signature verifies."""
        kp = generate_keypair()
        sig = ed25519_sign(b"hello norn", kp.private_key)
        assert len(sig) == ED25519_SIGNATURE_SIZE
        assert ed25519_verify(sig, b"hello norn", kp.public_key) is True

    def test_tampered_signature(self) -> None:
        """Test that a corrupted signature fails."""
        kp = generate_keypair()
        sig = bytearray(ed25519_sign(b"hello norn", kp.private_key))
        sig[0] ^= 0xFF
        assert ed25519_verify(bytes(sig), b"hello norn", kp.public_key) is False

    def test_wrong_message(self) -> None:
        """Test that a different message fails."""
        kp = generate_keypair()
        sig = ed25519_sign(b"hello norn", kp.private_key)
        assert ed25519_verify(sig, b"wrong message", kp.public_key) is False

    def test_wrong_public_key(self) -> None:
        """Test that another key fails."""
        kp1 = generate_keypair()
        kp2 = generate_keypair()
        sig = ed25519_sign(b"hello norn", kp1.private_key)
        assert ed25519_verify(sig, b"hello norn", kp2.public_key) is False

    def test_malformed_inputs_return_false(self) -> None:
        """Test that wrong-length inputs return False instead of raising."""
        kp = generate_keypair()
        sig = ed25519_sign(b"m", kp.private_key)
        assert ed25519_verify(sig[:63], b"m", kp.public_key) is False
        assert ed25519_verify(sig, b"m", kp.public_key[:31]) is False
        assert ed25519_verify(b"", b"m", b"") is False

    def test_sign_rejects_short_key(self) -> None:
        """Test that signing with a short key raises."""
        with pytest.raises(InvalidLengthError, match="private key"):
            ed25519_sign(b"m", b"short")


class TestBatchVerify:
    """Tests for batch signature verification."""

    def test_all_valid(self) -> None:
        """Test that a valid batch passes."""
        kp1 = generate_keypair()
        kp2 = generate_keypair()
        batch_verify(
            [b"message one", b"message two"],
            [kp1.sign(b"message one"), kp2.sign(b"message two")],
            [kp1.public_key, kp2.public_key],
        )

    def test_empty_batch(self) -> None:
        """Test that an empty batch passes."""
        batch_verify([], [], [])

    def test_reports_failing_index(self) -> None:
        """Test that the first invalid entry is reported."""
        kp1 = generate_keypair()
        kp2 = generate_keypair()
        bad = bytearray(kp2.sign(b"message two"))
        bad[0] ^= 0xFF
        with pytest.raises(SignatureVerificationError) as exc_info:
            batch_verify(
                [b"message one", b"message two"],
                [kp1.sign(b"message one"), bytes(bad)],
                [kp1.public_key, kp2.public_key],
            )
        assert exc_info.value.signer_index == 1

    def test_length_mismatch(self) -> None:
        """Test that mismatched lengths fail at index 0."""
        kp = generate_keypair()
        with pytest.raises(SignatureVerificationError, match="length mismatch") as exc_info:
            batch_verify([b"a", b"b"], [kp.sign(b"a")], [kp.public_key])
        assert exc_info.value.signer_index == 0

    @patch("norn.crypto.keys.ed25519_verify")
    def test_uses_single_verification(self, mock_verify) -> None:
        """Test that each entry is checked in order."""
        mock_verify.side_effect = [True, True, False]
        with pytest.raises(SignatureVerificationError) as exc_info:
            batch_verify([b"a", b"b", b"c"], [b"s"] * 3, [b"k"] * 3)
        assert exc_info.value.signer_index == 2
        assert mock_verify.call_count == 3


class TestKeypair:
    """Tests for keypair generation and validation."""

    def test_from_seed_deterministic(self) -> None:
        """Test that the same seed gives the same keypair."""
        kp1 = keypair_from_seed(b"\x2a" * 32)
        kp2 = keypair_from_seed(b"\x2a" * 32)
        assert kp1.public_key == kp2.public_key

    def test_unique_keypairs(self) -> None:
        """Generate two keypairs and verify they are different."""
        kp1 = generate_keypair()
        kp2 = generate_keypair()
        assert kp1.public_key != kp2.public_key
        assert kp1.private_key != kp2.private_key

    def test_validate_keypair(self) -> None:
        """Test keypair validation."""
        assert validate_keypair(generate_keypair()) is True

    def test_validate_keypair_mismatched_public_key(self) -> None:
        """Test that a public key from another seed is invalid."""
        kp1 = generate_keypair()
        kp2 = generate_keypair()
        assert validate_keypair(Keypair(kp1.private_key, kp2.public_key)) is False

    def test_validate_keypair_wrong_sizes(self) -> None:
        """Test that wrong sizes are invalid."""
        kp = generate_keypair()
        assert validate_keypair(Keypair(b"short", kp.public_key)) is False
        assert validate_keypair(Keypair(kp.private_key, b"short")) is False

    def test_repr_hides_private_key(self) -> None:
        """Test that repr does not leak the private key."""
        kp = generate_keypair()
        assert kp.private_key.hex() not in repr(kp)


class TestAddress:
    """Tests for address derivation."""

    def test_is_truncated_hash(self) -> None:
        """Test that the address is the last 20 bytes of BLAKE3(pubkey)."""
        kp = generate_keypair()
        address = public_key_to_address(kp.public_key)
        assert len(address) == ADDRESS_SIZE
        assert address == blake3_hash(kp.public_key)[12:32]

    def test_deterministic(self) -> None:
        """Test that derivation is stable."""
        kp = generate_keypair()
        assert public_key_to_address(kp.public_key) == public_key_to_address(kp.public_key)

    def test_distinct_keys_distinct_addresses(self) -> None:
        """Test that different keys give different addresses."""
        addresses = {public_key_to_address(generate_keypair().public_key) for _ in range(50)}
        assert len(addresses) == 50

    def test_injected_hasher(self) -> None:
        """Test that the content hash can be supplied by the caller."""
        calls: list[bytes] = []

        def hasher(data: bytes) -> bytes:
            calls.append(data)
            return bytes(range(32))

        pk = bytes(32)
        assert public_key_to_address(pk, hasher) == bytes(range(12, 32))
        assert calls == [pk]

    def test_rejects_wrong_length(self) -> None:
        """Test that a short public key is rejected before hashing."""
        with pytest.raises(InvalidLengthError, match="public key"):
            public_key_to_address(bytes(31))


class TestHierarchicalDerivation:
    """Tests for BIP-39 seeds and SLIP-10 derivation."""

    MNEMONIC = (
        "abandon abandon abandon abandon abandon abandon "
        "abandon abandon abandon abandon abandon about"
    )

    def test_bip39_reference_seed(self) -> None:
        """Test the BIP-39 reference vector with passphrase TREZOR."""
        seed = mnemonic_to_seed(self.MNEMONIC, "TREZOR")
        assert seed.hex() == (
            "c55257c360c07c72029aebc1b53c05ed0362ada38ead3e3e9efa3708e5349553"
            "1f09a6987599d18264c1e1c92f2cf141630c7a3c4ab7c81b2f001698e7463b04"
        )

    def test_passphrase_changes_seed(self) -> None:
        """Test that a passphrase changes the seed."""
        assert mnemonic_to_seed(self.MNEMONIC) != mnemonic_to_seed(self.MNEMONIC, "password")

    def test_slip10_master_key(self) -> None:
        """Test the SLIP-10 Ed25519 master key for test vector 1."""
        seed = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
        assert derive_private_key(seed, []).hex() == (
            "2b4be7f19ee27bbf30c667b642d5f4aa69fd169872f8fc3059c08ebae2eb19e7"
        )

    def test_derive_deterministic(self) -> None:
        """Test that derivation is deterministic."""
        seed = mnemonic_to_seed(self.MNEMONIC)
        assert derive_keypair(seed, 0).public_key == derive_keypair(seed, 0).public_key

    def test_different_indices(self) -> None:
        """Test that indices give different keys."""
        seed = mnemonic_to_seed(self.MNEMONIC)
        assert derive_keypair(seed, 0).public_key != derive_keypair(seed, 1).public_key

    def test_default_index_is_zero(self) -> None:
        """Test that the default index is 0."""
        seed = mnemonic_to_seed(self.MNEMONIC)
        assert derive_keypair(seed).public_key == derive_keypair(seed, 0).public_key

    def test_rejects_short_seed(self) -> None:
        """Test that a seed must be 64 bytes."""
        with pytest.raises(InvalidLengthError, match="seed"):
            derive_keypair(bytes(32))

    def test_rejects_hardened_index(self) -> None:
        """Test that indices must be below the hardened offset."""
        with pytest.raises(ValueError, match="Invalid derivation index"):
            derive_keypair(bytes(64), 0x80000000)
