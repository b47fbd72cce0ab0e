"""Foreign binding adapter - C-compatible entry points over ctypes.

Contents:
    * :class:`.binding.ForeignBinding` - Primitive-typed operations and release functions
    * :func:`.binding.build_function_table` - CFUNCTYPE callbacks for a C host
    * :mod:`.marshal` - Result structs, string decoding, ownership tracking
"""

from __future__ import annotations

from .binding import ForeignBinding, ForeignFunction, build_function_table
from .marshal import CMailerConfig, MailerResult

__all__ = [
    "CMailerConfig",
    "ForeignBinding",
    "ForeignFunction",
    "MailerResult",
    "build_function_table",
]
