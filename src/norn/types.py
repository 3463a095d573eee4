"""Type definitions for the Norn SDK."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Union

from .constants import (
    DEFAULT_LOOM_MAX_PARTICIPANTS,
    DEFAULT_LOOM_MIN_PARTICIPANTS,
    NAME_REGISTRATION_FEE,
    NATIVE_TOKEN_ID,
)


def unix_now() -> int:
    """Current time in whole Unix seconds."""
    return int(time.time())


@dataclass
class BuilderConfig:
    """Configuration for transaction envelope builders.

    Attributes:
        clock: Returns the timestamp (Unix seconds) stamped on new transactions.
        native_token_id: Token ID used when a transfer names no token.
        name_registration_fee: Fee recorded in name registrations.
        loom_max_participants: ``max_participants`` of new loom configs.
        loom_min_participants: ``min_participants`` of new loom configs.
    """

    clock: Callable[[], int] = unix_now
    native_token_id: bytes = NATIVE_TOKEN_ID
    name_registration_fee: int = NAME_REGISTRATION_FEE
    loom_max_participants: int = DEFAULT_LOOM_MAX_PARTICIPANTS
    loom_min_participants: int = DEFAULT_LOOM_MIN_PARTICIPANTS


# Signing payloads, one per transaction kind


@dataclass(frozen=True)
class Transfer:
    """Fields signed for a transfer.

    Attributes:
        from_address: Sender address (20 bytes).
        to: Recipient address (20 bytes).
        token_id: Token ID (32 bytes).
        amount: Raw u128 amount.
        timestamp: Unix seconds (u64).
        memo: Optional memo bytes.
    """

    from_address: bytes
    to: bytes
    token_id: bytes
    amount: int
    timestamp: int
    memo: bytes | None = None


@dataclass(frozen=True)
class NameRegistration:
    """Fields signed for a name registration."""

    name: str
    owner: bytes
    timestamp: int
    fee_paid: int


@dataclass(frozen=True)
class TokenDefinition:
    """Fields signed for a token definition."""

    name: str
    symbol: str
    decimals: int
    max_supply: int
    initial_supply: int
    creator: bytes
    timestamp: int


@dataclass(frozen=True)
class TokenMint:
    """Fields signed for a token mint."""

    token_id: bytes
    to: bytes
    amount: int
    authority: bytes
    timestamp: int


@dataclass(frozen=True)
class TokenBurn:
    """Fields signed for a token burn."""

    token_id: bytes
    burner: bytes
    amount: int
    timestamp: int


@dataclass(frozen=True)
class LoomDeployment:
    """Fields signed for a loom deployment.

    Attributes:
        name: Loom name.
        operator: Operator's Ed25519 public key (32 bytes, not an address).
        timestamp: Unix seconds (u64).
    """

    name: str
    operator: bytes
    timestamp: int


SigningPayload = Union[
    Transfer, NameRegistration, TokenDefinition, TokenMint, TokenBurn, LoomDeployment
]


@dataclass(frozen=True)
class BeforeState:
    """Sender thread state committed to by a transfer knot.

    Attributes:
        version: Thread version (u64).
        state_hash: Hex-encoded 32-byte state hash.
    """

    version: int = 0
    state_hash: str | None = None


@dataclass(frozen=True)
class EncryptedMessage:
    """Result of ephemeral-key encryption.

    Attributes:
        ephemeral_pubkey: Ephemeral X25519 public key (32 bytes).
        nonce: XChaCha20-Poly1305 nonce (24 bytes).
        ciphertext: Ciphertext with the authentication tag appended.
    """

    ephemeral_pubkey: bytes
    nonce: bytes
    ciphertext: bytes


@dataclass(frozen=True)
class SymmetricEncryptedMessage:
    """Result of symmetric encryption under a shared key."""

    nonce: bytes
    ciphertext: bytes


@dataclass
class MerkleProof:
    """Sparse Merkle proof of inclusion or non-inclusion.

    Attributes:
        key: The 32-byte key being proved.
        value: Leaf value; empty for non-inclusion.
        siblings: Sibling hashes, ``siblings[0]`` just below the root.
    """

    key: bytes
    value: bytes
    siblings: list[bytes] = field(default_factory=list)


@dataclass
class ChatEvent:
    """Signed, content-addressed chat event.

    Attributes:
        id: Hex BLAKE3 hash of [pubkey, created_at, kind, tags_json, content].
        pubkey: Author's Ed25519 public key (hex).
        created_at: Unix timestamp in seconds.
        kind: Event kind (30000=profile, 30001=DM, 30002=channel create,
            30003=channel message).
        tags: Nostr-style tags.
        content: Plaintext or base64 ciphertext.
        sig: Hex Ed25519 signature over the raw id bytes.
    """

    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: list[list[str]]
    content: str
    sig: str

    def tag_value(self, name: str) -> str | None:
        """Return the first value of the tag called ``name``, if any."""
        for tag in self.tags:
            if len(tag) >= 2 and tag[0] == name:
                return tag[1]
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape."""
        return {
            "id": self.id,
            "pubkey": self.pubkey,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
            "sig": self.sig,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatEvent:
        """Build an event from its wire shape.

        Raises:
            KeyError: If a field is missing.
        """
        return cls(
            id=data["id"],
            pubkey=data["pubkey"],
            created_at=int(data["created_at"]),
            kind=int(data["kind"]),
            tags=[[str(v) for v in tag] for tag in data["tags"]],
            content=data["content"],
            sig=data["sig"],
        )
