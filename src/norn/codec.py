"""Borsh serialization for Norn transaction types.

Wire format:
    - u8/u32/u64/u128: little-endian fixed width
    - Vec<u8>: u32 length prefix + raw bytes
    - String: u32 length prefix + UTF-8 bytes
    - [u8; N]: raw N bytes (no length prefix)
    - Option<T>: u8 (0=None, 1=Some) + T if Some
"""

from __future__ import annotations

from .errors import BufferUnderflowError, CodecError, InvalidLengthError, ValueOutOfRangeError


def _encode_uint(value: int, width: int, type_name: str) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{type_name} value must be an int, got {type(value).__name__}")
    if value < 0 or value >= 1 << (8 * width):
        raise ValueOutOfRangeError(f"Value {value} does not fit in {type_name}")
    return value.to_bytes(width, "little")


class BorshWriter:
    """Accumulates bytes for borsh serialization."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def write_u8(self, value: int) -> None:
        self._buffer += _encode_uint(value, 1, "u8")

    def write_u32(self, value: int) -> None:
        self._buffer += _encode_uint(value, 4, "u32")

    def write_u64(self, value: int) -> None:
        self._buffer += _encode_uint(value, 8, "u64")

    def write_u128(self, value: int) -> None:
        self._buffer += _encode_uint(value, 16, "u128")

    def write_fixed_bytes(self, data: bytes, size: int | None = None, field: str = "bytes") -> None:
        """Append raw bytes with no length prefix.

        Args:
            data: The bytes to append.
            size: If given, ``data`` must be exactly this long.
            field: Field name used in the error message.

        Raises:
            InvalidLengthError: If ``size`` is given and does not match.
        """
        if size is not None and len(data) != size:
            raise InvalidLengthError(field, size, len(data))
        self._buffer += data

    def write_bytes(self, data: bytes) -> None:
        """Append a u32 length prefix followed by the bytes."""
        self.write_u32(len(data))
        self._buffer += data

    def write_string(self, s: str) -> None:
        self.write_bytes(s.encode("utf-8"))

    def write_option_bytes(self, data: bytes | None) -> None:
        if data is None:
            self.write_u8(0)
        else:
            self.write_u8(1)
            self.write_bytes(data)

    def to_bytes(self) -> bytes:
        """Return an immutable copy of the accumulated bytes."""
        return bytes(self._buffer)


class BorshReader:
    """Cursor over an immutable byte sequence for borsh deserialization.

    Every read advances the offset; a read that would run past the end raises
    :class:`BufferUnderflowError` and leaves the offset unchanged.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _take(self, n: int) -> bytes:
        if n < 0:
            raise CodecError(f"Cannot read a negative number of bytes: {n}")
        if n > self.remaining():
            raise BufferUnderflowError(n, self._offset, self.remaining())
        chunk = self._data[self._offset : self._offset + n]
        self._offset += n
        return chunk

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u32(self) -> int:
        return int.from_bytes(self._take(4), "little")

    def read_u64(self) -> int:
        return int.from_bytes(self._take(8), "little")

    def read_u128(self) -> int:
        return int.from_bytes(self._take(16), "little")

    def read_fixed_bytes(self, length: int) -> bytes:
        return self._take(length)

    def read_bytes(self) -> bytes:
        """Read a u32 length prefix and then that many bytes.

        The offset is restored if the payload is truncated.
        """
        start = self._offset
        length = self.read_u32()
        try:
            return self._take(length)
        except BufferUnderflowError:
            self._offset = start
            raise

    def read_string(self) -> str:
        """Read a length-prefixed UTF-8 string.

        Raises:
            CodecError: If the bytes are not valid UTF-8.
        """
        data = self.read_bytes()
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CodecError(f"Invalid UTF-8 in string: {e}") from e

    def read_option_bytes(self) -> bytes | None:
        """Read an Option<Vec<u8>>.

        Raises:
            CodecError: If the discriminant is neither 0 nor 1.
        """
        start = self._offset
        flag = self.read_u8()
        if flag == 0:
            return None
        if flag != 1:
            self._offset = start
            raise CodecError(f"Invalid option discriminant: {flag}")
        try:
            return self.read_bytes()
        except BufferUnderflowError:
            self._offset = start
            raise
