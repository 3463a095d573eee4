"""X25519 key agreement and XChaCha20-Poly1305 encryption for the Norn SDK.

Ed25519 signing keys are mapped one way onto X25519 keys with a BLAKE3 KDF,
so a wallet can receive encrypted messages without a second key.
"""

from __future__ import annotations

import os

from cryptography.hazmat.primitives.asymmetric.x25519 import (
    X25519PrivateKey,
    X25519PublicKey,
)
from nacl.bindings import (
    crypto_aead_xchacha20poly1305_ietf_decrypt,
    crypto_aead_xchacha20poly1305_ietf_encrypt,
)
from nacl.exceptions import CryptoError

from ..errors import DecryptionError, EncryptionError, InvalidLengthError
from ..types import EncryptedMessage, SymmetricEncryptedMessage
from .constants import (
    ED25519_PRIVATE_KEY_SIZE,
    KDF_CONTEXT_CHAT_DM,
    KDF_CONTEXT_ENCRYPTION,
    KDF_CONTEXT_X25519,
    X25519_KEY_SIZE,
    XCHACHA_KEY_SIZE,
    XCHACHA_NONCE_SIZE,
)
from .hash import blake3_kdf


def ed25519_to_x25519_secret(ed25519_private_key: bytes) -> bytes:
    """Derive an X25519 static secret from an Ed25519 private key.

    Raises:
        InvalidLengthError: If the private key is not 32 bytes.
    """
    if len(ed25519_private_key) != ED25519_PRIVATE_KEY_SIZE:
        raise InvalidLengthError(
            "private key", ED25519_PRIVATE_KEY_SIZE, len(ed25519_private_key)
        )
    return blake3_kdf(KDF_CONTEXT_X25519, ed25519_private_key)


def ed25519_to_x25519_public(ed25519_private_key: bytes) -> bytes:
    """Derive the X25519 public key that belongs to an Ed25519 private key."""
    secret = ed25519_to_x25519_secret(ed25519_private_key)
    return _x25519_public(secret)


def _x25519_public(secret: bytes) -> bytes:
    return X25519PrivateKey.from_private_bytes(secret).public_key().public_bytes_raw()


def _check_x25519_public(their_public: bytes) -> None:
    if len(their_public) != X25519_KEY_SIZE:
        raise InvalidLengthError("X25519 public key", X25519_KEY_SIZE, len(their_public))


def _diffie_hellman(secret: bytes, their_public: bytes) -> bytes:
    private = X25519PrivateKey.from_private_bytes(secret)
    # exchange() raises ValueError for low-order points
    return private.exchange(X25519PublicKey.from_public_bytes(their_public))


def derive_shared_secret(my_ed25519_private_key: bytes, their_x25519_public: bytes) -> bytes:
    """Derive a deterministic 32-byte DM key shared by two parties.

    ``derive_shared_secret(a_sk, x25519_pub(b_sk)) ==
    derive_shared_secret(b_sk, x25519_pub(a_sk))``.

    Args:
        my_ed25519_private_key: Our Ed25519 private key.
        their_x25519_public: The peer's X25519 public key.

    Returns:
        The shared symmetric key.

    Raises:
        InvalidLengthError: If a key has the wrong size.
        ValueError: If the peer key is a low-order point.
    """
    _check_x25519_public(their_x25519_public)
    my_secret = ed25519_to_x25519_secret(my_ed25519_private_key)
    shared = _diffie_hellman(my_secret, their_x25519_public)
    return blake3_kdf(KDF_CONTEXT_CHAT_DM, shared)


def symmetric_encrypt(key: bytes, plaintext: bytes) -> SymmetricEncryptedMessage:
    """Encrypt with a pre-shared key using XChaCha20-Poly1305.

    A fresh random 24-byte nonce is generated for each call.

    Raises:
        EncryptionError: If the key is malformed or encryption fails.
    """
    if len(key) != XCHACHA_KEY_SIZE:
        raise EncryptionError(f"Invalid key length: {len(key)}, expected {XCHACHA_KEY_SIZE}")
    nonce = os.urandom(XCHACHA_NONCE_SIZE)
    try:
        ciphertext = crypto_aead_xchacha20poly1305_ietf_encrypt(plaintext, None, nonce, key)
    except CryptoError as e:
        raise EncryptionError(f"Encryption failed: {e}") from e
    return SymmetricEncryptedMessage(nonce=nonce, ciphertext=ciphertext)


def symmetric_decrypt(key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    """Decrypt with a pre-shared key using XChaCha20-Poly1305.

    Raises:
        DecryptionError: On a wrong key, wrong nonce or tampered ciphertext.
    """
    if len(key) != XCHACHA_KEY_SIZE:
        raise DecryptionError(f"Invalid key length: {len(key)}, expected {XCHACHA_KEY_SIZE}")
    if len(nonce) != XCHACHA_NONCE_SIZE:
        raise DecryptionError(
            f"Invalid nonce length: {len(nonce)}, expected {XCHACHA_NONCE_SIZE}"
        )
    try:
        return crypto_aead_xchacha20poly1305_ietf_decrypt(ciphertext, None, nonce, key)
    except CryptoError as e:
        raise DecryptionError(f"Decryption failed: {e}") from e


def encrypt(recipient_x25519_public: bytes, plaintext: bytes) -> EncryptedMessage:
    """Encrypt a message for a recipient using an ephemeral X25519 key.

    Args:
        recipient_x25519_public: The recipient's X25519 public key.
        plaintext: The message to encrypt.

    Returns:
        The ephemeral public key, nonce and ciphertext.

    Raises:
        InvalidLengthError: If the recipient key is not 32 bytes.
        EncryptionError: If key agreement or encryption fails.
    """
    _check_x25519_public(recipient_x25519_public)
    ephemeral_secret = os.urandom(X25519_KEY_SIZE)
    try:
        shared = _diffie_hellman(ephemeral_secret, recipient_x25519_public)
    except ValueError as e:
        raise EncryptionError(f"Key agreement failed: {e}") from e
    key = blake3_kdf(KDF_CONTEXT_ENCRYPTION, shared)
    sealed = symmetric_encrypt(key, plaintext)
    return EncryptedMessage(
        ephemeral_pubkey=_x25519_public(ephemeral_secret),
        nonce=sealed.nonce,
        ciphertext=sealed.ciphertext,
    )


def decrypt(
    ed25519_private_key: bytes,
    ephemeral_pubkey: bytes,
    nonce: bytes,
    ciphertext: bytes,
) -> bytes:
    """Decrypt a message sent with :func:`encrypt`.

    Args:
        ed25519_private_key: The recipient's Ed25519 private key.
        ephemeral_pubkey: The sender's ephemeral X25519 public key.
        nonce: The 24-byte nonce.
        ciphertext: Ciphertext with the Poly1305 tag appended.

    Returns:
        The plaintext.

    Raises:
        InvalidLengthError: If a key is not 32 bytes.
        DecryptionError: If key agreement fails or the data does not authenticate.
    """
    _check_x25519_public(ephemeral_pubkey)
    secret = ed25519_to_x25519_secret(ed25519_private_key)
    try:
        shared = _diffie_hellman(secret, ephemeral_pubkey)
    except ValueError as e:
        raise DecryptionError(f"Key agreement failed: {e}") from e
    key = blake3_kdf(KDF_CONTEXT_ENCRYPTION, shared)
    return symmetric_decrypt(key, nonce, ciphertext)
