"""Domain layer - pure logic with no I/O or framework dependencies.

Contents:
    * :mod:`.addresses` - RFC 5322 address parsing and formatting
    * :mod:`.message` - Outgoing message value object and body-kind heuristics
    * :mod:`.enums` - Domain enumerations (BodyKind, ResolverPreference, ErrorCode)
    * :mod:`.errors` - Domain exception types
"""

from __future__ import annotations

from .addresses import format_address, parse_address
from .enums import BodyKind, ErrorCode, ResolverPreference
from .errors import (
    AttachmentNotFoundError,
    ConfigNotFoundError,
    HomeDirectoryError,
    InvalidAddressError,
    InvalidFormatError,
    MailerError,
    MessageNotFoundError,
    NotFoundError,
    TransportError,
)
from .message import OutgoingMessage, body_kind_from_content_type, detect_body_kind

__all__ = [
    # Addresses
    "format_address",
    "parse_address",
    # Message
    "OutgoingMessage",
    "body_kind_from_content_type",
    "detect_body_kind",
    # Enums
    "BodyKind",
    "ErrorCode",
    "ResolverPreference",
    # Errors
    "AttachmentNotFoundError",
    "ConfigNotFoundError",
    "HomeDirectoryError",
    "InvalidAddressError",
    "InvalidFormatError",
    "MailerError",
    "MessageNotFoundError",
    "NotFoundError",
    "TransportError",
]
