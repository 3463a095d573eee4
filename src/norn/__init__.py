"""Norn Python SDK.

Client-side cryptography for the Norn ledger: borsh encoding, transaction
signing, light-client state proofs and end-to-end encrypted chat.

Example:
    ```python
    from norn import Wallet, build_transfer, parse_amount, verify_balance_proof

    wallet = Wallet.generate()
    knot_hex = build_transfer(
        wallet,
        to="0x" + "02" * 20,
        amount=parse_amount("1.5"),
    )
    # Submit knot_hex with your RPC transport, then check a balance proof:
    ok = verify_balance_proof(state_root, wallet.address_hex, token_id, balance, proof)
    ```
"""

from .builders import (
    build_loom_registration,
    build_name_registration,
    build_token_burn,
    build_token_definition,
    build_token_mint,
    build_transfer,
    format_amount,
    parse_amount,
)
from .chat import (
    create_chat_event,
    decrypt_dm_content,
    decrypt_dm_event,
    encrypt_dm_content,
    verify_chat_event,
)
from .codec import BorshReader, BorshWriter
from .constants import NATIVE_TOKEN_ID, NORN_DECIMALS, ONE_NORN
from .crypto import (
    address_to_hex,
    blake3_hash,
    derive_shared_secret,
    ed25519_sign,
    ed25519_to_x25519_public,
    ed25519_verify,
    from_hex,
    hex_to_address,
    public_key_from_private,
    public_key_to_address,
    symmetric_decrypt,
    symmetric_encrypt,
    to_hex,
)
from .errors import (
    AmountError,
    BufferUnderflowError,
    CodecError,
    DecryptionError,
    EncryptionError,
    InvalidHexError,
    InvalidLengthError,
    MerkleProofError,
    NornError,
    SignatureVerificationError,
    ValueOutOfRangeError,
)
from .merkle import verify_balance_proof, verify_proof, verify_state_proof
from .results import (
    LoomFailure,
    LoomResult,
    LoomSuccess,
    ResultKind,
    SubmitAccepted,
    SubmitRejected,
    SubmitResult,
    parse_loom_result,
    parse_submit_result,
)
from .signing import signing_data
from .types import (
    BeforeState,
    BuilderConfig,
    ChatEvent,
    EncryptedMessage,
    LoomDeployment,
    MerkleProof,
    NameRegistration,
    SigningPayload,
    SymmetricEncryptedMessage,
    TokenBurn,
    TokenDefinition,
    TokenMint,
    Transfer,
)
from .wallet import Wallet

__version__ = "0.1.0"

__all__ = [
    # Wallet
    "Wallet",
    # Codec
    "BorshReader",
    "BorshWriter",
    # Builders
    "build_loom_registration",
    "build_name_registration",
    "build_token_burn",
    "build_token_definition",
    "build_token_mint",
    "build_transfer",
    "format_amount",
    "parse_amount",
    "signing_data",
    # Crypto
    "address_to_hex",
    "blake3_hash",
    "derive_shared_secret",
    "ed25519_sign",
    "ed25519_to_x25519_public",
    "ed25519_verify",
    "from_hex",
    "hex_to_address",
    "public_key_from_private",
    "public_key_to_address",
    "symmetric_decrypt",
    "symmetric_encrypt",
    "to_hex",
    # Merkle
    "verify_balance_proof",
    "verify_proof",
    "verify_state_proof",
    # Chat
    "create_chat_event",
    "decrypt_dm_content",
    "decrypt_dm_event",
    "encrypt_dm_content",
    "verify_chat_event",
    # Results
    "LoomFailure",
    "LoomResult",
    "LoomSuccess",
    "ResultKind",
    "SubmitAccepted",
    "SubmitRejected",
    "SubmitResult",
    "parse_loom_result",
    "parse_submit_result",
    # Types
    "BeforeState",
    "BuilderConfig",
    "ChatEvent",
    "EncryptedMessage",
    "LoomDeployment",
    "MerkleProof",
    "NameRegistration",
    "SigningPayload",
    "SymmetricEncryptedMessage",
    "TokenBurn",
    "TokenDefinition",
    "TokenMint",
    "Transfer",
    # Constants
    "NATIVE_TOKEN_ID",
    "NORN_DECIMALS",
    "ONE_NORN",
    # Errors
    "AmountError",
    "BufferUnderflowError",
    "CodecError",
    "DecryptionError",
    "EncryptionError",
    "InvalidHexError",
    "InvalidLengthError",
    "MerkleProofError",
    "NornError",
    "SignatureVerificationError",
    "ValueOutOfRangeError",
]
