from __future__ import annotations

import logging
import threading

import pytest

from rustcall.handles import HandleMap
from rustcall.usize import USize


def test_handle_map_scenario() -> None:
    handles: HandleMap[str] = HandleMap()
    x = handles.insert("X")
    y = handles.insert("Y")
    assert (x, y) == (0, 1)
    assert isinstance(x, USize)
    assert handles.remove(0) == "X"
    assert handles.get(0) is None
    assert handles.get(1) == "Y"
    assert handles.size == 1


def test_handles_strictly_increase() -> None:
    handles: HandleMap[object] = HandleMap()
    a, b, c = (handles.insert(object()) for _ in range(3))
    assert a < b < c


def test_remove_unknown_handle() -> None:
    handles: HandleMap[str] = HandleMap()
    assert handles.remove(42) is None
    h = handles.insert("once")
    assert handles.remove(h) == "once"
    assert handles.remove(h) is None
    assert h not in handles


def test_removal_does_not_destroy_object() -> None:
    handles: HandleMap[list[int]] = HandleMap()
    obj = [1, 2, 3]
    h = handles.insert(obj)
    assert handles.remove(h) is obj
    assert obj == [1, 2, 3]


def test_counter_wraps() -> None:
    handles: HandleMap[int] = HandleMap(bits=2)
    minted = [handles.insert(i) for i in range(4)]
    assert minted == [0, 1, 2, 3]
    for h in minted:
        handles.remove(h)
    assert handles.insert(99) == 0


def test_wrap_collision_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    handles: HandleMap[str] = HandleMap(bits=1)
    handles.insert("a")
    handles.insert("b")
    with caplog.at_level(logging.WARNING, logger="rustcall.handles"):
        h = handles.insert("c")
    assert h == 0
    assert handles.get(0) == "c"
    assert "reused while still live" in caplog.text


def test_invalid_width() -> None:
    with pytest.raises(ValueError):
        HandleMap(bits=0)
    with pytest.raises(ValueError):
        HandleMap(bits=8 * USize.size + 1)


def test_concurrent_insert_get_remove() -> None:
    handles: HandleMap[tuple[int, int]] = HandleMap()
    errors: list[BaseException] = []
    minted: list[int] = []
    lock = threading.Lock()

    def worker(idx: int) -> None:
        try:
            mine = []
            for n in range(500):
                obj = (idx, n)
                h = handles.insert(obj)
                assert handles.get(h) == obj
                mine.append(h)
            for h in mine[::2]:
                assert handles.remove(h) is not None
                assert handles.get(h) is None
            with lock:
                minted.extend(mine)
        except BaseException as exc:
            with lock:
                errors.append(exc)

    threads = [threading.Thread(target=worker, args=(idx,)) for idx in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert not errors
    assert len(set(minted)) == len(minted) == 8 * 500
    assert handles.size == 8 * 250
