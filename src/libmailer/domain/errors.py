"""Domain-specific exceptions for typed error handling at boundaries.

Every error carries an :class:`~libmailer.domain.enums.ErrorCode` so the
foreign binding can report it without a native exception object.
"""

from __future__ import annotations

from pathlib import Path

from .enums import ErrorCode


class MailerError(Exception):
    """Base class for every failure raised by libmailer.

    Example:
        >>> MailerError("boom").code
        <ErrorCode.INTERNAL: 99>
    """

    code: ErrorCode = ErrorCode.INTERNAL


class NotFoundError(MailerError):
    """A configuration or message file is missing or unreadable."""

    code = ErrorCode.NOT_FOUND


class ConfigNotFoundError(NotFoundError):
    """The credentials file could not be read.

    Example:
        >>> err = ConfigNotFoundError("config file not found at /tmp/nope.json")
        >>> err.code
        <ErrorCode.NOT_FOUND: 1>
    """


class MessageNotFoundError(NotFoundError):
    """The raw message (EML) file could not be opened."""


class InvalidFormatError(MailerError):
    """Configuration JSON or a raw message is structurally invalid."""

    code = ErrorCode.INVALID_FORMAT


class InvalidAddressError(MailerError, ValueError):
    """An address failed both the strict and the permissive parse.

    Inherits from ValueError so plain ``except ValueError`` handlers catch it.

    Example:
        >>> isinstance(InvalidAddressError("not-an-email"), ValueError)
        True
    """

    code = ErrorCode.INVALID_ADDRESS


class AttachmentNotFoundError(MailerError):
    """A declared attachment path does not exist.

    Example:
        >>> err = AttachmentNotFoundError("/tmp/missing.pdf")
        >>> str(err)
        'attachment not found: /tmp/missing.pdf'
        >>> err.path.name
        'missing.pdf'
    """

    code = ErrorCode.ATTACHMENT_NOT_FOUND

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"attachment not found: {path}")


class TransportError(MailerError):
    """The SMTP collaborator failed (DNS, connect, TLS, auth, or rejection)."""

    code = ErrorCode.TRANSPORT


class HomeDirectoryError(MailerError):
    """The user's home directory could not be determined."""

    code = ErrorCode.HOME_DIRECTORY


__all__ = [
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
