"""Adapters layer - infrastructure and framework integrations.

Contains adapter implementations that connect the application to external
systems (configuration files, SMTP, logging, foreign callers).

Contents:
    * :mod:`.config` - Credentials loading and layered runtime settings
    * :mod:`.email` - SMTP delivery and MIME rendering
    * :mod:`.logging` - Logging setup with lib_log_rich
    * :mod:`.memory` - In-memory adapters for tests
    * :mod:`.ffi` - C-compatible binding over ctypes
"""

from __future__ import annotations

__all__: list[str] = []
