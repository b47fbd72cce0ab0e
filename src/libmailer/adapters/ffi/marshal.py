"""Marshaling helpers for the C-compatible binding.

Strings arrive as ``(address, length)`` pairs of UTF-8 bytes. String arrays
arrive as the address of a ``char*`` array plus an item count, where each
item is NUL-terminated. Values handed back to the caller live in
:class:`OwnedMemory` until the caller releases them.
"""

from __future__ import annotations

import ctypes


class CMailerConfig(ctypes.Structure):
    """C view of :class:`~libmailer.adapters.config.model.MailerConfig`."""

    _fields_ = [
        ("host", ctypes.c_char_p),
        ("port", ctypes.c_int),
        ("username", ctypes.c_char_p),
        ("password", ctypes.c_char_p),
        ("from_address", ctypes.c_char_p),
    ]


class MailerResult(ctypes.Structure):
    """Outcome of a fallible call.

    ``error_code`` is 0 on success and ``value`` then points at the payload
    (or is NULL for calls without one). On failure ``error_message`` holds a
    NUL-terminated UTF-8 description.
    """

    _fields_ = [
        ("value", ctypes.c_void_p),
        ("error_code", ctypes.c_int),
        ("error_message", ctypes.c_char_p),
    ]


def read_string(address: int | None, length: int) -> str:
    """Decode *length* UTF-8 bytes at *address*; NULL reads as ``""``."""
    if not address or length <= 0:
        return ""
    return ctypes.string_at(address, length).decode("utf-8", errors="replace")


def read_string_array(address: int | None, count: int) -> list[str]:
    """Decode *count* NUL-terminated strings from a ``char*`` array.

    NULL entries read as empty strings.
    """
    if not address or count <= 0:
        return []
    items = (ctypes.c_void_p * count).from_address(address)
    return [ctypes.string_at(item).decode("utf-8", errors="replace") if item else "" for item in items]


def encode(text: str) -> bytes:
    """Encode *text* for a ``char*`` field."""
    return text.encode("utf-8", errors="replace")


class OwnedMemory:
    """Keeps buffers alive until the foreign caller releases them.

    Each allocation is keyed by its address. Dependent objects (a result's
    payload) are stored alongside their owner and freed together.

    Example:
        >>> memory = OwnedMemory()
        >>> address = memory.string("hello")
        >>> ctypes.string_at(address)
        b'hello'
        >>> memory.release(address)
        >>> len(memory)
        0
        >>> memory.release(0)
    """

    def __init__(self) -> None:
        self._owned: dict[int, tuple[object, ...]] = {}

    def __len__(self) -> int:
        return len(self._owned)

    def keep(self, obj: ctypes.Structure | ctypes.Array[ctypes.c_char], *dependents: object) -> int:
        """Register *obj* (and anything it points at) and return its address."""
        address = ctypes.addressof(obj)
        self._owned[address] = (obj, *dependents)
        return address

    def string(self, text: str) -> int:
        """Allocate a NUL-terminated copy of *text* and return its address."""
        return self.keep(ctypes.create_string_buffer(encode(text)))

    def owns(self, address: int | None) -> bool:
        """Return True when *address* is a live allocation."""
        return bool(address) and address in self._owned

    def release(self, address: int | None) -> None:
        """Free the allocation at *address*.

        NULL is a no-op. Unknown addresses (already released or never
        allocated here) are ignored.
        """
        if not address:
            return
        self._owned.pop(address, None)


__all__ = [
    "CMailerConfig",
    "MailerResult",
    "OwnedMemory",
    "encode",
    "read_string",
    "read_string_array",
]
