"""
Minimal BCS (Binary Canonical Serialization) codec.

Only the primitives needed to read ordered-map nodes and to encode dynamic
field names: uleb128 lengths, little-endian unsigned integers, bool, utf-8
strings and vectors.
"""
from __future__ import annotations

from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")

_MAX_ULEB128_U32 = 2**32 - 1


class BcsError(ValueError):
    """Raised when bytes do not match the expected layout."""
    pass


class BcsReader:
    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read_bytes(self, n: int) -> bytes:
        if n < 0 or self._pos + n > len(self._data):
            raise BcsError(f"unexpected end of input: wanted {n} bytes, {self.remaining} left")
        out = self._data[self._pos:self._pos + n]
        self._pos += n
        return out

    def _read_uint(self, width: int) -> int:
        return int.from_bytes(self.read_bytes(width), "little")

    def read_u8(self) -> int:
        return self._read_uint(1)

    def read_u32(self) -> int:
        return self._read_uint(4)

    def read_u64(self) -> int:
        return self._read_uint(8)

    def read_u128(self) -> int:
        return self._read_uint(16)

    def read_bool(self) -> bool:
        b = self.read_u8()
        if b not in (0, 1):
            raise BcsError(f"invalid bool byte {b}")
        return b == 1

    def read_uleb128(self) -> int:
        value = 0
        shift = 0
        while True:
            byte = self.read_u8()
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                # Canonical form: no redundant trailing zero groups.
                if byte == 0 and shift > 0:
                    raise BcsError("non-canonical uleb128")
                break
            shift += 7
            if shift > 28:
                raise BcsError("uleb128 overflows u32")
        if value > _MAX_ULEB128_U32:
            raise BcsError("uleb128 overflows u32")
        return value

    def read_vec(self, read_item: Callable[["BcsReader"], T]) -> List[T]:
        n = self.read_uleb128()
        # Every element takes at least one byte; reject lengths that cannot fit.
        if n > self.remaining:
            raise BcsError(f"vector length {n} exceeds remaining {self.remaining} bytes")
        return [read_item(self) for _ in range(n)]

    def read_str(self) -> str:
        n = self.read_uleb128()
        raw = self.read_bytes(n)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise BcsError(f"invalid utf-8 string: {e}") from e

    def finish(self) -> None:
        if self.remaining:
            raise BcsError(f"{self.remaining} trailing bytes")


class BcsWriter:
    def __init__(self) -> None:
        self._buf = bytearray()

    def to_bytes(self) -> bytes:
        return bytes(self._buf)

    def _write_uint(self, value: int, width: int) -> "BcsWriter":
        if value < 0 or value >= 1 << (8 * width):
            raise BcsError(f"{value} does not fit in u{8 * width}")
        self._buf += int(value).to_bytes(width, "little")
        return self

    def write_u8(self, value: int) -> "BcsWriter":
        return self._write_uint(value, 1)

    def write_u64(self, value: int) -> "BcsWriter":
        return self._write_uint(value, 8)

    def write_u128(self, value: int) -> "BcsWriter":
        return self._write_uint(value, 16)

    def write_bool(self, value: bool) -> "BcsWriter":
        return self.write_u8(1 if value else 0)

    def write_uleb128(self, value: int) -> "BcsWriter":
        if value < 0 or value > _MAX_ULEB128_U32:
            raise BcsError(f"{value} is not a valid uleb128 length")
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                self._buf.append(byte | 0x80)
            else:
                self._buf.append(byte)
                return self

    def write_str(self, value: str) -> "BcsWriter":
        raw = value.encode("utf-8")
        self.write_uleb128(len(raw))
        self._buf += raw
        return self

    def write_vec(self, items: Sequence[T], write_item: Callable[["BcsWriter", T], None]) -> "BcsWriter":
        self.write_uleb128(len(items))
        for item in items:
            write_item(self, item)
        return self
