"""Error hierarchy for the Norn SDK."""

from __future__ import annotations


class NornError(Exception):
    """Base exception for all Norn SDK errors."""

    pass


class CodecError(NornError):
    """Borsh encoding or decoding failure."""

    pass


class BufferUnderflowError(CodecError):
    """Reader asked for more bytes than remain in the buffer.

    Attributes:
        needed: Number of bytes requested.
        offset: Reader offset at the time of the request.
        remaining: Number of bytes left after the offset.
    """

    def __init__(self, needed: int, offset: int, remaining: int) -> None:
        self.needed = needed
        self.offset = offset
        self.remaining = remaining
        super().__init__(
            f"Buffer underflow: need {needed} bytes at offset {offset}, "
            f"but only {remaining} remaining"
        )


class ValueOutOfRangeError(CodecError, ValueError):
    """Integer does not fit the target wire width."""

    pass


class InvalidHexError(NornError, ValueError):
    """Malformed hex string (odd length or non-hex characters)."""

    pass


class InvalidLengthError(NornError, ValueError):
    """Fixed-width field has the wrong number of bytes.

    Attributes:
        field: Name of the offending field.
        expected: Required length in bytes.
        actual: Length that was supplied.
    """

    def __init__(self, field: str, expected: int, actual: int) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(f"Invalid {field} length: {actual} bytes, expected {expected}")


class AmountError(NornError, ValueError):
    """Human-readable amount could not be converted to a u128."""

    pass


class SignatureVerificationError(NornError):
    """Signature verification failure.

    Attributes:
        signer_index: Position of the first failing signature in a batch.
    """

    def __init__(self, message: str, signer_index: int = 0) -> None:
        self.signer_index = signer_index
        super().__init__(message)


class EncryptionError(NornError):
    """Cryptographic encryption failure."""

    pass


class DecryptionError(NornError):
    """Cryptographic decryption failure (wrong key or tampered data)."""

    pass


class MerkleProofError(NornError):
    """Merkle proof request violates a precondition."""

    pass
