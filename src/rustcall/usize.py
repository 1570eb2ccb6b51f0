"""Integer type matching the native ``usize`` / ``size_t``."""

from __future__ import annotations

import ctypes
import struct

from rustcall.errors import InternalError

# usize values may be cast to and from pointers on the native side, so they are
# always written in native byte order rather than the big-endian order used for
# other serialized integers.
_FORMATS = {4: "=I", 8: "=Q"}


def _format(size: int) -> str:
    fmt = _FORMATS.get(size)
    if fmt is None:
        raise InternalError(f"Invalid SIZE_T_SIZE: {size}")
    return fmt


class USize(int):
    size = ctypes.sizeof(ctypes.c_size_t)

    def __new__(cls, value: int = 0) -> "USize":
        limit = 1 << (8 * cls.size)
        if value < 0 or value >= limit:
            raise OverflowError(f"{value} does not fit in a {cls.size}-byte usize")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"USize({int(self)})"

    @classmethod
    def max_value(cls) -> int:
        return (1 << (8 * cls.size)) - 1

    def write_to_buffer(self, buf: bytearray) -> None:
        buf.extend(struct.pack(_format(self.size), int(self)))

    @classmethod
    def read_from_buffer(
        cls, buf: bytes | bytearray | memoryview, offset: int = 0
    ) -> tuple["USize", int]:
        fmt = _format(cls.size)
        end = offset + cls.size
        if end > len(buf):
            raise ValueError(
                f"Need {cls.size} bytes at offset {offset}, buffer has {len(buf)}"
            )
        (value,) = struct.unpack_from(fmt, buf, offset)
        return cls(value), end
