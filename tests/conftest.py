from __future__ import annotations

from collections.abc import Iterator

import pytest

from rustcall.buffer import LocalAllocator, use_allocator


@pytest.fixture
def allocator() -> Iterator[LocalAllocator]:
    local = LocalAllocator()
    with use_allocator(local):
        yield local
