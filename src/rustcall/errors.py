from __future__ import annotations


class RustCallError(Exception):
    """Base error for rustcall runtime failures."""


class InternalError(RustCallError):
    """Native call failed in a way the generated bindings did not expect."""


class PanicError(InternalError):
    """Native side panicked during the call."""


class BufferReleaseError(RustCallError):
    """Buffer was released twice or never allocated by this allocator."""


class LibraryLoadError(RustCallError):
    """Native library could not be opened or bound."""
