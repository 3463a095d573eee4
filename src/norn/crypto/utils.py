"""Hex and base64 encoding utilities for the Norn SDK."""

from __future__ import annotations

import base64
import binascii
import re

from ..errors import InvalidHexError, InvalidLengthError
from .constants import ADDRESS_SIZE

_HEX_PATTERN = re.compile(r"[0-9a-fA-F]*")


def to_hex(data: bytes) -> str:
    """Encode bytes as lowercase hex without a prefix.

    Args:
        data: The bytes to encode.

    Returns:
        Lowercase hex string.
    """
    return data.hex()


def from_hex(s: str) -> bytes:
    """Decode a hex string to bytes.

    An optional ``0x`` prefix is stripped first.

    Args:
        s: The hex string to decode.

    Returns:
        The decoded bytes.

    Raises:
        InvalidHexError: If the string has odd length or non-hex characters.
    """
    clean = s[2:] if s.startswith(("0x", "0X")) else s
    if len(clean) % 2 != 0:
        raise InvalidHexError("Invalid hex: odd length")
    if not _HEX_PATTERN.fullmatch(clean):
        raise InvalidHexError("Invalid hex: contains non-hex characters")
    return bytes.fromhex(clean)


def address_to_hex(address: bytes) -> str:
    """Render a 20-byte address as a ``0x``-prefixed hex string."""
    return "0x" + to_hex(address)


def hex_to_address(s: str) -> bytes:
    """Parse a hex address (with or without ``0x``) into 20 bytes.

    Raises:
        InvalidHexError: If the string is not valid hex.
        InvalidLengthError: If the decoded value is not 20 bytes.
    """
    data = from_hex(s)
    if len(data) != ADDRESS_SIZE:
        raise InvalidLengthError("address", ADDRESS_SIZE, len(data))
    return data


def to_base64(data: bytes) -> str:
    """Encode bytes to standard base64.

    Args:
        data: The bytes to encode.

    Returns:
        Standard base64 string with padding.
    """
    return base64.b64encode(data).decode("ascii")


def from_base64(s: str) -> bytes:
    """Decode standard base64 string to bytes.

    Args:
        s: The base64 string to decode.

    Returns:
        The decoded bytes.

    Raises:
        ValueError: If the string is not valid base64.
    """
    try:
        return base64.b64decode(s, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64: {e}") from e
