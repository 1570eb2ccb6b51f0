"""Map handles to objects.

Native code that needs an opaque pointer to a Python object gets a handle from
a ``HandleMap`` instead. ctypes cannot hand out a stable reference that keeps
the object alive from the native side, so the map holds the reference and the
native side only ever sees a pointer-sized integer.

The map does not own its objects beyond keeping them reachable; removing an
entry only stops the native side from finding it.
"""

from __future__ import annotations

import logging
import threading
from typing import Generic, TypeVar

from rustcall.usize import USize

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HandleMap(Generic[T]):
    def __init__(self, bits: int | None = None) -> None:
        width = 8 * USize.size
        if bits is None:
            bits = width
        if bits <= 0 or bits > width:
            raise ValueError(f"bits must be in 1..{width}")
        self._lock = threading.Lock()
        self._map: dict[int, T] = {}
        self._modulus = 1 << bits
        # Counter width follows size_t. If it ever wraps, the first handles
        # minted are assumed to have been removed long before.
        self._counter = 0

    @property
    def size(self) -> int:
        return len(self._map)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, handle: object) -> bool:
        with self._lock:
            return handle in self._map

    def insert(self, obj: T) -> USize:
        with self._lock:
            handle = USize(self._counter)
            self._counter = (self._counter + 1) % self._modulus
            if handle in self._map:
                logger.warning("handle %d reused while still live", handle)
            self._map[handle] = obj
        return handle

    def get(self, handle: int) -> T | None:
        with self._lock:
            return self._map.get(handle)

    def remove(self, handle: int) -> T | None:
        with self._lock:
            return self._map.pop(handle, None)
