"""Application ports: callable Protocol definitions for adapter functions.

Each Protocol class defines a ``__call__`` method whose signature matches the
corresponding adapter function or callable object. Implementations satisfy
these protocols through structural subtyping (PEP 544).

System Role:
    Sits between domain and adapters. Infrastructure types (``Config``,
    ``MailerConfig``) are imported under ``TYPE_CHECKING`` only, so the
    application layer never imports adapters at runtime.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from ..domain.message import OutgoingMessage

if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.config.model import MailerConfig


class Dialer(Protocol):
    """Open an authenticated SMTP connection and transmit one message."""

    def __call__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        message: OutgoingMessage,
    ) -> None: ...


class LoadConfig(Protocol):
    """Load credentials from the default location."""

    def __call__(self) -> MailerConfig: ...


class LoadConfigFromPath(Protocol):
    """Load credentials from an explicit JSON file."""

    def __call__(self, path: str | Path) -> MailerConfig: ...


class SendMail(Protocol):
    """Compose and send a structured message."""

    def __call__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        from_address: str,
        to: str,
        subject: str,
        body: str,
        cc: Sequence[str] = ...,
        bcc: Sequence[str] = ...,
        attachments: Sequence[str | Path] = ...,
    ) -> None: ...


class SendRawEml(Protocol):
    """Send a pre-formatted message file."""

    def __call__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        path: str | Path,
    ) -> None: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


__all__ = [
    "Dialer",
    "InitLogging",
    "LoadConfig",
    "LoadConfigFromPath",
    "SendMail",
    "SendRawEml",
]
