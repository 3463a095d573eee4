"""Signing data for each Norn transaction kind.

Each function returns the exact preimage the ledger node rebuilds and checks
the signature against. Layouts differ per kind on purpose: name, symbol and
loom-name fields are written as raw UTF-8 with no length prefix, while a
transfer memo keeps its u32 prefix. The node expects these layouts as they
are, so they must not be normalized.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .codec import BorshWriter
from .crypto.constants import ADDRESS_SIZE, ED25519_PUBLIC_KEY_SIZE, HASH_SIZE
from .types import (
    LoomDeployment,
    NameRegistration,
    SigningPayload,
    TokenBurn,
    TokenDefinition,
    TokenMint,
    Transfer,
)


def transfer_signing_data(params: Transfer) -> bytes:
    """Signing data for a transfer.

    Layout: from[20] · to[20] · token_id[32] · amount u128 · timestamp u64
    · memo (u32 length + bytes, only when present).
    """
    w = BorshWriter()
    w.write_fixed_bytes(params.from_address, ADDRESS_SIZE, "from address")
    w.write_fixed_bytes(params.to, ADDRESS_SIZE, "to address")
    w.write_fixed_bytes(params.token_id, HASH_SIZE, "token id")
    w.write_u128(params.amount)
    w.write_u64(params.timestamp)
    if params.memo is not None:
        w.write_bytes(params.memo)
    return w.to_bytes()


def name_registration_signing_data(params: NameRegistration) -> bytes:
    """Signing data for a name registration.

    Layout: name (raw UTF-8) · owner[20] · timestamp u64 · fee_paid u128.
    """
    w = BorshWriter()
    w.write_fixed_bytes(params.name.encode("utf-8"))
    w.write_fixed_bytes(params.owner, ADDRESS_SIZE, "owner address")
    w.write_u64(params.timestamp)
    w.write_u128(params.fee_paid)
    return w.to_bytes()


def token_definition_signing_data(params: TokenDefinition) -> bytes:
    """Signing data for a token definition.

    Layout: name (raw) · symbol (raw) · decimals u8 · max_supply u128
    · initial_supply u128 · creator[20] · timestamp u64.
    """
    w = BorshWriter()
    w.write_fixed_bytes(params.name.encode("utf-8"))
    w.write_fixed_bytes(params.symbol.encode("utf-8"))
    w.write_u8(params.decimals)
    w.write_u128(params.max_supply)
    w.write_u128(params.initial_supply)
    w.write_fixed_bytes(params.creator, ADDRESS_SIZE, "creator address")
    w.write_u64(params.timestamp)
    return w.to_bytes()


def token_mint_signing_data(params: TokenMint) -> bytes:
    """Signing data for a token mint.

    Layout: token_id[32] · to[20] · amount u128 · authority[20] · timestamp u64.
    """
    w = BorshWriter()
    w.write_fixed_bytes(params.token_id, HASH_SIZE, "token id")
    w.write_fixed_bytes(params.to, ADDRESS_SIZE, "to address")
    w.write_u128(params.amount)
    w.write_fixed_bytes(params.authority, ADDRESS_SIZE, "authority address")
    w.write_u64(params.timestamp)
    return w.to_bytes()


def token_burn_signing_data(params: TokenBurn) -> bytes:
    """Signing data for a token burn.

    Layout: token_id[32] · burner[20] · amount u128 · timestamp u64.
    """
    w = BorshWriter()
    w.write_fixed_bytes(params.token_id, HASH_SIZE, "token id")
    w.write_fixed_bytes(params.burner, ADDRESS_SIZE, "burner address")
    w.write_u128(params.amount)
    w.write_u64(params.timestamp)
    return w.to_bytes()


def loom_deploy_signing_data(params: LoomDeployment) -> bytes:
    """Signing data for a loom deployment.

    Layout: name (raw) · operator public key[32] · timestamp u64.
    """
    w = BorshWriter()
    w.write_fixed_bytes(params.name.encode("utf-8"))
    w.write_fixed_bytes(params.operator, ED25519_PUBLIC_KEY_SIZE, "operator public key")
    w.write_u64(params.timestamp)
    return w.to_bytes()


_BUILDERS: dict[type, Callable[[Any], bytes]] = {
    Transfer: transfer_signing_data,
    NameRegistration: name_registration_signing_data,
    TokenDefinition: token_definition_signing_data,
    TokenMint: token_mint_signing_data,
    TokenBurn: token_burn_signing_data,
    LoomDeployment: loom_deploy_signing_data,
}


def signing_data(payload: SigningPayload) -> bytes:
    """Build the signing data for any transaction kind.

    Raises:
        TypeError: If the payload is not a known transaction kind.
    """
    builder = _BUILDERS.get(type(payload))
    if builder is None:
        raise TypeError(f"Unsupported signing payload: {type(payload).__name__}")
    return builder(payload)
