"""Public package surface for composing and dispatching email over SMTP.

This module routes imports through the architectural layers:
- Domain exports: address parsing/formatting, message model, error types
- Adapter exports: credentials loading and models
- Composition exports: wired services (the host's init step)
"""

from __future__ import annotations

# Adapter exports
from .adapters.config import (
    MailerConfig,
    RuntimeSettings,
    default_config_path,
    load_config,
    load_config_from_path,
)

# Composition exports (wired adapters)
from .composition import MailerServices, build_production, build_testing, init_logging

# Domain exports
from .domain import (
    AttachmentNotFoundError,
    BodyKind,
    ConfigNotFoundError,
    ErrorCode,
    HomeDirectoryError,
    InvalidAddressError,
    InvalidFormatError,
    MailerError,
    MessageNotFoundError,
    NotFoundError,
    OutgoingMessage,
    ResolverPreference,
    TransportError,
    format_address,
    parse_address,
)

__all__ = [
    # Addresses
    "format_address",
    "parse_address",
    # Configuration
    "MailerConfig",
    "RuntimeSettings",
    "default_config_path",
    "load_config",
    "load_config_from_path",
    # Composition
    "MailerServices",
    "build_production",
    "build_testing",
    "init_logging",
    # Model
    "BodyKind",
    "ErrorCode",
    "OutgoingMessage",
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
