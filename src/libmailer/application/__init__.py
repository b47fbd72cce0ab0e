"""Application layer - use cases and port definitions.

Contents:
    * :mod:`.ports` - Callable Protocol definitions for adapter functions
    * :mod:`.sending` - Structured and raw message sending use cases
"""

from __future__ import annotations

from .ports import (
    Dialer,
    InitLogging,
    LoadConfig,
    LoadConfigFromPath,
    SendMail,
    SendRawEml,
)
from .sending import compose_message, read_raw_message, send_mail, send_raw_eml

__all__ = [
    # Ports
    "Dialer",
    "InitLogging",
    "LoadConfig",
    "LoadConfigFromPath",
    "SendMail",
    "SendRawEml",
    # Use cases
    "compose_message",
    "read_raw_message",
    "send_mail",
    "send_raw_eml",
]
