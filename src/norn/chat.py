"""Signed chat events and encrypted direct messages for the Norn SDK.

Event IDs hash the *text* of each field, not a borsh encoding:
``BLAKE3(pubkey_hex + str(created_at) + str(kind) + tags_json + content)``.
``tags_json`` must be byte-identical to JavaScript's ``JSON.stringify`` so
events round-trip with browser wallets.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence

from .crypto.encryption import derive_shared_secret, symmetric_decrypt, symmetric_encrypt
from .crypto.hash import blake3_hash_multi
from .crypto.keys import ed25519_sign, ed25519_verify, public_key_from_private
from .crypto.utils import from_base64, from_hex, to_base64, to_hex
from .errors import DecryptionError, InvalidHexError
from .types import ChatEvent, unix_now

logger = logging.getLogger("norn")

NONCE_TAG = "nonce"


_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


def _join_surrogate_pairs(s: str) -> str:
    # a pair given as two code points joins into one, as it would in UTF-16
    return s.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def _utf8(s: str) -> bytes:
    """Encode like ``TextEncoder``: lone surrogates become U+FFFD."""
    return _LONE_SURROGATE.sub("\ufffd", _join_surrogate_pairs(s)).encode("utf-8")


def _tags_json(tags: Sequence[Sequence[str]]) -> str:
    """Serialize tags like ``JSON.stringify``: compact, lone surrogates escaped."""
    text = json.dumps(
        [[_join_surrogate_pairs(value) for value in tag] for tag in tags],
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return _LONE_SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def compute_event_id(
    pubkey: str,
    created_at: int,
    kind: int,
    tags: Sequence[Sequence[str]],
    content: str,
) -> bytes:
    """Compute the raw 32-byte event ID over the textual fields.

    Never raises on text: lone surrogates hash the way a browser hashes them.
    """
    parts = (pubkey, str(created_at), str(kind), _tags_json(tags), content)
    return blake3_hash_multi(_utf8(part) for part in parts)


def create_chat_event(
    private_key: bytes,
    kind: int,
    content: str,
    tags: Sequence[Sequence[str]],
    created_at: int | None = None,
) -> ChatEvent:
    """Create and sign a chat event.

    Args:
        private_key: Author's Ed25519 private key.
        kind: Event kind.
        content: Plaintext or base64 ciphertext.
        tags: Nostr-style tags.
        created_at: Unix seconds; now when omitted.

    Returns:
        The signed event.
    """
    pubkey = to_hex(public_key_from_private(private_key))
    timestamp = unix_now() if created_at is None else created_at
    tag_list = [list(tag) for tag in tags]

    id_bytes = compute_event_id(pubkey, timestamp, kind, tag_list, content)
    sig = ed25519_sign(id_bytes, private_key)

    return ChatEvent(
        id=to_hex(id_bytes),
        pubkey=pubkey,
        created_at=timestamp,
        kind=kind,
        tags=tag_list,
        content=content,
        sig=to_hex(sig),
    )


def verify_chat_event(event: ChatEvent) -> bool:
    """Verify a chat event's ID and signature.

    Returns:
        True only if the ID matches the recomputed hash and the signature over
        the raw ID bytes verifies against ``event.pubkey``.
    """
    expected = to_hex(
        compute_event_id(event.pubkey, event.created_at, event.kind, event.tags, event.content)
    )
    if expected != event.id:
        logger.debug("Chat event %s rejected: id mismatch", event.id)
        return False

    try:
        id_bytes = from_hex(event.id)
        sig_bytes = from_hex(event.sig)
        pubkey_bytes = from_hex(event.pubkey)
    except InvalidHexError:
        logger.debug("Chat event %s rejected: malformed hex", event.id)
        return False

    if not ed25519_verify(sig_bytes, id_bytes, pubkey_bytes):
        logger.debug("Chat event %s rejected: bad signature", event.id)
        return False
    return True


def encrypt_dm_content(
    my_private_key: bytes,
    recipient_x25519_public: bytes,
    plaintext: str,
) -> tuple[str, list[list[str]]]:
    """Encrypt DM content for a recipient.

    Returns:
        ``(content, nonce_tags)``: base64 ciphertext and ``[["nonce", hex]]``,
        ready to pass to :func:`create_chat_event`.
    """
    key = derive_shared_secret(my_private_key, recipient_x25519_public)
    sealed = symmetric_encrypt(key, _utf8(plaintext))
    return to_base64(sealed.ciphertext), [[NONCE_TAG, to_hex(sealed.nonce)]]


def decrypt_dm_content(
    my_private_key: bytes,
    sender_x25519_public: bytes,
    content: str,
    nonce_hex: str,
) -> str:
    """Decrypt DM content from a sender.

    Raises:
        DecryptionError: If the content, nonce or either key is wrong or
            malformed.
    """
    try:
        ciphertext = from_base64(content)
        nonce = from_hex(nonce_hex)
    except ValueError as e:
        raise DecryptionError(f"Malformed DM content: {e}") from e

    try:
        key = derive_shared_secret(my_private_key, sender_x25519_public)
    except ValueError as e:
        raise DecryptionError(f"Key agreement failed: {e}") from e
    plaintext = symmetric_decrypt(key, nonce, ciphertext)
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecryptionError(f"Decrypted DM is not valid UTF-8: {e}") from e


def decrypt_dm_event(
    my_private_key: bytes,
    sender_x25519_public: bytes,
    event: ChatEvent,
) -> str:
    """Decrypt the content of a DM event using its ``nonce`` tag.

    Raises:
        DecryptionError: If the event has no nonce tag or fails to decrypt.
    """
    nonce_hex = event.tag_value(NONCE_TAG)
    if nonce_hex is None:
        raise DecryptionError(f"Event {event.id} has no nonce tag")
    return decrypt_dm_content(my_private_key, sender_x25519_public, event.content, nonce_hex)
