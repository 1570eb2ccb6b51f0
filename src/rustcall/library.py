"""Locate, open and bind the native library that backs generated bindings."""

from __future__ import annotations

import ctypes
import logging
import platform
import threading
from pathlib import Path
from typing import Any

from rustcall import config
from rustcall.buffer import BufferAllocator, ForeignBytes, RustBuffer, set_allocator
from rustcall.errors import InternalError, LibraryLoadError
from rustcall.invoke import rust_call
from rustcall.status import CallStatus

logger = logging.getLogger(__name__)

_LIBRARIES: dict[Path, "NativeLibrary"] = {}
_LIBRARIES_LOCK = threading.Lock()


def library_filename(name: str) -> str:
    system = platform.system()
    if system == "Darwin":
        return f"lib{name}.dylib"
    if system == "Windows":
        return f"{name}.dll"
    return f"lib{name}.so"


def find_library(name: str) -> Path | None:
    env_path = config.library_path()
    if env_path is not None:
        return env_path
    filename = library_filename(name)
    search = [config.library_dir(), Path(__file__).resolve().parent]
    for directory in search:
        if directory is None:
            continue
        candidate = directory / filename
        if candidate.exists():
            return candidate
    return None


def _bind_required(
    lib: ctypes.CDLL, name: str, argtypes: list[Any], restype: Any
) -> Any:
    func = getattr(lib, name, None)
    if func is None:
        raise LibraryLoadError(f"Native library is missing symbol '{name}'")
    func.argtypes = argtypes
    func.restype = restype
    return func


def _bind_optional(
    lib: ctypes.CDLL, name: str, argtypes: list[Any], restype: Any
) -> Any | None:
    func = getattr(lib, name, None)
    if func is None:
        return None
    func.argtypes = argtypes
    func.restype = restype
    return func


class NativeLibrary:
    def __init__(self, lib: ctypes.CDLL, prefix: str) -> None:
        status_ptr = ctypes.POINTER(CallStatus)
        self.lib = lib
        self.prefix = prefix
        self.rustbuffer_from_bytes = _bind_required(
            lib, f"{prefix}_rustbuffer_from_bytes", [ForeignBytes, status_ptr], RustBuffer
        )
        self.rustbuffer_free = _bind_required(
            lib, f"{prefix}_rustbuffer_free", [RustBuffer, status_ptr], None
        )
        self.contract_version = _bind_optional(
            lib, f"{prefix}_uniffi_contract_version", [], ctypes.c_uint32
        )

    def check_contract_version(self, expected: int) -> None:
        if self.contract_version is None:
            raise InternalError("Native library does not report a contract version")
        actual = int(self.contract_version())
        if actual != expected:
            raise InternalError(
                f"Contract version mismatch: bindings expect {expected}, "
                f"native library reports {actual}"
            )

    def allocator(self) -> "NativeAllocator":
        return NativeAllocator(self)


class NativeAllocator(BufferAllocator):
    def __init__(self, library: NativeLibrary) -> None:
        self._library = library

    def alloc(self, data: bytes) -> RustBuffer:
        size = len(data)
        block = (ctypes.c_uint8 * max(size, 1)).from_buffer_copy(data or b"\0")
        foreign = ForeignBytes(size, ctypes.cast(block, ctypes.POINTER(ctypes.c_uint8)))
        return rust_call(self._library.rustbuffer_from_bytes, foreign)

    def free(self, buf: RustBuffer) -> None:
        rust_call(self._library.rustbuffer_free, buf)


def _open(path: Path) -> ctypes.CDLL:
    try:
        return ctypes.CDLL(str(path))
    except OSError as exc:
        raise LibraryLoadError(f"Failed to open native library {path}") from exc


def load_library(
    name: str, *, prefix: str | None = None, install: bool = True
) -> NativeLibrary | None:
    path = find_library(name)
    if path is None:
        return None
    with _LIBRARIES_LOCK:
        library = _LIBRARIES.get(path)
        if library is None:
            library = NativeLibrary(_open(path), prefix or f"ffi_{name}")
            _LIBRARIES[path] = library
            logger.info("loaded native library %s", path)
    if install:
        set_allocator(library.allocator())
    return library
