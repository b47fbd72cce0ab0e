"""In-memory adapter implementations for testing.

Provides lightweight implementations of the application ports that operate
entirely in memory -- no filesystem, no SMTP, no logging framework.

Contents:
    * :mod:`.config` - In-memory credential loaders
    * :mod:`.email` - In-memory dialer (DialerSpy class)
    * :mod:`.logging` - In-memory logging initializer (LoggingInitRecorder)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import make_config_from_path_loader, make_config_loader
from .email import DialerSpy, DialRecord
from .logging import LoggingInitRecorder

# Static conformance assertions
if TYPE_CHECKING:
    from libmailer.application.ports import Dialer, InitLogging

    _assert_dialer: Dialer = DialerSpy()
    _assert_init_logging: InitLogging = LoggingInitRecorder()

__all__ = [
    "DialRecord",
    "DialerSpy",
    "LoggingInitRecorder",
    "make_config_from_path_loader",
    "make_config_loader",
]
