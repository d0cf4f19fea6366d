"""Fixed-capacity byte buffer with SSH-style length-prefixed fields."""

from __future__ import annotations

import struct

_INT32 = struct.Struct(">I")


class BufferFullError(Exception):
    """Raised when a write does not fit in the remaining capacity."""


class BufferUnderrunError(Exception):
    """Raised when a read needs more bytes than remain in the buffer."""


class Buffer:
    """A byte area of fixed capacity with a read/write position.

    Writes and reads both advance the same position. Integers are stored
    big-endian; strings and blobs are stored as a 32-bit length followed by
    the bytes themselves.
    """

    def __init__(self, size: int = 0) -> None:
        if size < 0:
            raise ValueError("buffer size must not be negative")
        self._data = bytearray(size)
        self._pos = 0

    @classmethod
    def from_data(cls, data: bytes) -> "Buffer":
        """Create a buffer holding a copy of ``data``, positioned at the start."""
        buf = cls()
        buf.set_data(data)
        return buf

    @property
    def pos(self) -> int:
        """Current read/write position."""
        return self._pos

    @property
    def capacity(self) -> int:
        """Total size of the buffer in bytes."""
        return len(self._data)

    def set_data(self, data: bytes) -> None:
        """Replace the contents with a copy of ``data`` and rewind."""
        self._data = bytearray(data)
        self._pos = 0

    def resize(self, size: int) -> None:
        """Change the capacity, keeping existing bytes and clamping the position."""
        if size < 0:
            raise ValueError("buffer size must not be negative")
        if size <= len(self._data):
            del self._data[size:]
        else:
            self._data.extend(bytes(size - len(self._data)))
        self._pos = min(self._pos, size)

    def seek(self, pos: int) -> None:
        """Move the position; it may not go past the capacity."""
        if pos < 0 or pos > len(self._data):
            raise ValueError(f"position {pos} outside buffer of {len(self._data)} bytes")
        self._pos = pos

    def fits(self, size: int) -> bool:
        """Whether ``size`` more bytes fit after the current position."""
        return self._pos + size <= len(self._data)

    def _require_room(self, size: int) -> None:
        if not self.fits(size):
            raise BufferFullError(
                f"need {size} bytes at {self._pos}, capacity {len(self._data)}"
            )

    def _require_available(self, size: int) -> None:
        if not self.fits(size):
            raise BufferUnderrunError(
                f"need {size} bytes at {self._pos}, only {len(self._data) - self._pos} left"
            )

    def put_byte(self, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value out of range: {value}")
        self._require_room(1)
        self._data[self._pos] = value
        self._pos += 1

    def get_byte(self) -> int:
        self._require_available(1)
        value = self._data[self._pos]
        self._pos += 1
        return value

    def put_bytes(self, data: bytes) -> None:
        self._require_room(len(data))
        self._data[self._pos:self._pos + len(data)] = data
        self._pos += len(data)

    def put_int32(self, value: int) -> None:
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"uint32 value out of range: {value}")
        self._require_room(_INT32.size)
        _INT32.pack_into(self._data, self._pos, value)
        self._pos += _INT32.size

    def get_int32(self) -> int:
        self._require_available(_INT32.size)
        (value,) = _INT32.unpack_from(self._data, self._pos)
        self._pos += _INT32.size
        return value

    def _put_prefixed(self, data: bytes) -> None:
        self._require_room(_INT32.size + len(data))
        self.put_int32(len(data))
        self.put_bytes(data)

    def _get_prefixed(self) -> bytes:
        start = self._pos
        length = self.get_int32()
        if not self.fits(length):
            self._pos = start
            raise BufferUnderrunError(
                f"field of {length} bytes exceeds remaining {len(self._data) - self._pos}"
            )
        value = bytes(self._data[self._pos:self._pos + length])
        self._pos += length
        return value

    def put_string(self, data: bytes) -> None:
        """Store a length-prefixed string."""
        self._put_prefixed(data)

    def get_string(self) -> bytes:
        """Read a length-prefixed string; on failure the position is unchanged."""
        return self._get_prefixed()

    def put_blob(self, data: bytes) -> None:
        """Store a length-prefixed byte array."""
        self._put_prefixed(data)

    def get_blob(self) -> bytes:
        """Read a length-prefixed byte array; on failure the position is unchanged."""
        return self._get_prefixed()

    def getvalue(self) -> bytes:
        """Bytes from the start of the buffer up to the current position."""
        return bytes(self._data[:self._pos])