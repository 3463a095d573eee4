"""Transaction envelope builders for the Norn SDK.

Each builder signs the kind's signing data with a :class:`~norn.wallet.Wallet`
and returns the hex-encoded borsh struct the node accepts, ready to hand to a
transport.
"""

from __future__ import annotations

import logging
import re

from .codec import BorshWriter
from .constants import (
    KNOT_PAYLOAD_TRANSFER,
    KNOT_TYPE_TRANSFER,
    MAX_U128,
    NORN_DECIMALS,
)
from .crypto.constants import HASH_SIZE
from .crypto.hash import blake3_hash
from .crypto.utils import from_hex, hex_to_address, to_hex
from .errors import AmountError, InvalidLengthError
from .signing import (
    loom_deploy_signing_data,
    name_registration_signing_data,
    token_burn_signing_data,
    token_definition_signing_data,
    token_mint_signing_data,
)
from .types import (
    BeforeState,
    BuilderConfig,
    LoomDeployment,
    NameRegistration,
    TokenBurn,
    TokenDefinition,
    TokenMint,
)
from .wallet import Wallet

logger = logging.getLogger("norn")

_AMOUNT_PATTERN = re.compile(r"^([0-9]*)(?:\.([0-9]*))?$")


def parse_amount(amount: str, decimals: int = NORN_DECIMALS) -> int:
    """Parse a human amount (e.g. ``"1.5"``) into raw u128 units.

    Fraction digits beyond ``decimals`` are truncated.

    Raises:
        AmountError: If the text is not a non-negative decimal or exceeds u128.
    """
    match = _AMOUNT_PATTERN.match(amount.strip())
    if match is None or amount.strip() in ("", "."):
        raise AmountError(f"Invalid amount: {amount!r}")
    whole = int(match.group(1) or "0")
    frac = (match.group(2) or "")[:decimals].ljust(decimals, "0")
    result = whole * 10**decimals + int(frac or "0")
    if result > MAX_U128:
        raise AmountError("Amount exceeds maximum u128 value")
    return result


def format_amount(amount: int, decimals: int = NORN_DECIMALS) -> str:
    """Format raw units as a human amount, e.g. ``1500000000000 -> "1.5"``."""
    whole, frac = divmod(amount, 10**decimals)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") or "0"
    return f"{whole}.{frac_str}"


def _token_id(token_id: str | None, config: BuilderConfig) -> bytes:
    if token_id is None:
        return config.native_token_id
    data = from_hex(token_id)
    if len(data) != HASH_SIZE:
        raise InvalidLengthError("token id", HASH_SIZE, len(data))
    return data


def build_transfer(
    wallet: Wallet,
    to: str,
    amount: int,
    token_id: str | None = None,
    memo: str | None = None,
    before_state: BeforeState | None = None,
    config: BuilderConfig | None = None,
) -> str:
    """Build and sign a transfer knot.

    The knot id is BLAKE3 over the body (knot type through payload); the
    wallet signs the id.

    Args:
        wallet: Sending wallet.
        to: Recipient address as hex.
        amount: Raw u128 amount.
        token_id: Hex token ID; the native token when omitted.
        memo: Optional UTF-8 memo. An empty memo is omitted.
        before_state: Sender thread state; zero version and hash when omitted.
        config: Builder configuration.

    Returns:
        Hex-encoded borsh ``Knot``.
    """
    config = config or BuilderConfig()
    recipient = hex_to_address(to)
    token = _token_id(token_id, config)
    timestamp = config.clock()
    memo_bytes = memo.encode("utf-8") if memo else None
    state = before_state or BeforeState()
    state_hash = from_hex(state.state_hash) if state.state_hash else bytes(HASH_SIZE)

    body = BorshWriter()
    body.write_u8(KNOT_TYPE_TRANSFER)
    body.write_u64(timestamp)
    # expiry: Option<u64> = None
    body.write_u8(0)
    # before_states: one entry for the sender
    body.write_u32(1)
    body.write_fixed_bytes(wallet.address)
    body.write_fixed_bytes(wallet.public_key)
    body.write_u64(state.version)
    body.write_fixed_bytes(state_hash, HASH_SIZE, "state hash")
    # after_states: empty
    body.write_u32(0)
    body.write_u8(KNOT_PAYLOAD_TRANSFER)
    body.write_fixed_bytes(token)
    body.write_u128(amount)
    body.write_fixed_bytes(wallet.address)
    body.write_fixed_bytes(recipient)
    body.write_option_bytes(memo_bytes)
    body_bytes = body.to_bytes()

    knot_id = blake3_hash(body_bytes)
    signature = wallet.sign(knot_id)

    w = BorshWriter()
    w.write_fixed_bytes(knot_id)
    w.write_fixed_bytes(body_bytes)
    w.write_u32(1)
    w.write_fixed_bytes(signature)
    logger.debug("Built transfer knot %s from %s", to_hex(knot_id), wallet.address_hex)
    return to_hex(w.to_bytes())


def build_name_registration(
    wallet: Wallet, name: str, config: BuilderConfig | None = None
) -> str:
    """Build and sign a name registration.

    Layout: name String · owner[20] · pubkey[32] · timestamp u64 · fee u128 · sig[64].
    """
    config = config or BuilderConfig()
    params = NameRegistration(
        name=name,
        owner=wallet.address,
        timestamp=config.clock(),
        fee_paid=config.name_registration_fee,
    )
    signature = wallet.sign(name_registration_signing_data(params))

    w = BorshWriter()
    w.write_string(params.name)
    w.write_fixed_bytes(params.owner)
    w.write_fixed_bytes(wallet.public_key)
    w.write_u64(params.timestamp)
    w.write_u128(params.fee_paid)
    w.write_fixed_bytes(signature)
    logger.debug("Built name registration for %r", name)
    return to_hex(w.to_bytes())


def build_token_definition(
    wallet: Wallet,
    name: str,
    symbol: str,
    decimals: int,
    max_supply: int,
    initial_supply: int = 0,
    config: BuilderConfig | None = None,
) -> str:
    """Build and sign a token definition.

    The token ID is not part of the struct; the node computes it.

    Layout: name String · symbol String · decimals u8 · max_supply u128
    · initial_supply u128 · creator[20] · creator_pubkey[32] · timestamp u64
    · signature[64].
    """
    config = config or BuilderConfig()
    params = TokenDefinition(
        name=name,
        symbol=symbol,
        decimals=decimals,
        max_supply=max_supply,
        initial_supply=initial_supply,
        creator=wallet.address,
        timestamp=config.clock(),
    )
    signature = wallet.sign(token_definition_signing_data(params))

    w = BorshWriter()
    w.write_string(params.name)
    w.write_string(params.symbol)
    w.write_u8(params.decimals)
    w.write_u128(params.max_supply)
    w.write_u128(params.initial_supply)
    w.write_fixed_bytes(params.creator)
    w.write_fixed_bytes(wallet.public_key)
    w.write_u64(params.timestamp)
    w.write_fixed_bytes(signature)
    logger.debug("Built token definition %s (%s)", name, symbol)
    return to_hex(w.to_bytes())


def build_token_mint(
    wallet: Wallet,
    token_id: str,
    to: str,
    amount: int,
    config: BuilderConfig | None = None,
) -> str:
    """Build and sign a token mint.

    Layout: token_id[32] · to[20] · amount u128 · authority[20]
    · authority_pubkey[32] · timestamp u64 · signature[64].
    """
    config = config or BuilderConfig()
    params = TokenMint(
        token_id=from_hex(token_id),
        to=hex_to_address(to),
        amount=amount,
        authority=wallet.address,
        timestamp=config.clock(),
    )
    signature = wallet.sign(token_mint_signing_data(params))

    w = BorshWriter()
    w.write_fixed_bytes(params.token_id)
    w.write_fixed_bytes(params.to)
    w.write_u128(params.amount)
    w.write_fixed_bytes(params.authority)
    w.write_fixed_bytes(wallet.public_key)
    w.write_u64(params.timestamp)
    w.write_fixed_bytes(signature)
    return to_hex(w.to_bytes())


def build_token_burn(
    wallet: Wallet,
    token_id: str,
    amount: int,
    config: BuilderConfig | None = None,
) -> str:
    """Build and sign a token burn.

    The struct puts the burner's public key before the amount, unlike the
    signing data.

    Layout: token_id[32] · burner[20] · burner_pubkey[32] · amount u128
    · timestamp u64 · signature[64].
    """
    config = config or BuilderConfig()
    params = TokenBurn(
        token_id=from_hex(token_id),
        burner=wallet.address,
        amount=amount,
        timestamp=config.clock(),
    )
    signature = wallet.sign(token_burn_signing_data(params))

    w = BorshWriter()
    w.write_fixed_bytes(params.token_id)
    w.write_fixed_bytes(params.burner)
    w.write_fixed_bytes(wallet.public_key)
    w.write_u128(params.amount)
    w.write_u64(params.timestamp)
    w.write_fixed_bytes(signature)
    return to_hex(w.to_bytes())


def build_loom_registration(
    wallet: Wallet, name: str, config: BuilderConfig | None = None
) -> str:
    """Build and sign a loom registration (deployment).

    Layout: LoomConfig { loom_id[32], name String, max_participants u64,
    min_participants u64, accepted_tokens Vec<[u8;32]>, config_data Vec<u8> }
    · operator[32] · timestamp u64 · signature[64].

    The loom ID is zero; consensus assigns it.
    """
    config = config or BuilderConfig()
    params = LoomDeployment(name=name, operator=wallet.public_key, timestamp=config.clock())
    signature = wallet.sign(loom_deploy_signing_data(params))

    w = BorshWriter()
    w.write_fixed_bytes(bytes(HASH_SIZE))
    w.write_string(params.name)
    # usize fields are serialized as u64
    w.write_u64(config.loom_max_participants)
    w.write_u64(config.loom_min_participants)
    w.write_u32(1)
    w.write_fixed_bytes(config.native_token_id)
    w.write_bytes(b"")
    w.write_fixed_bytes(params.operator)
    w.write_u64(params.timestamp)
    w.write_fixed_bytes(signature)
    logger.debug("Built loom registration for %r", name)
    return to_hex(w.to_bytes())
