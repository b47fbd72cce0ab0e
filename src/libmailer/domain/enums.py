"""Type-safe domain enums for body kinds, resolver preference, and error codes."""

from __future__ import annotations

from enum import Enum, IntEnum


class BodyKind(str, Enum):
    """MIME type of a single-part message body.

    Inherits from str so the value can be handed straight to MIME helpers.

    Attributes:
        PLAIN: ``text/plain`` body.
        HTML: ``text/html`` body.

    Example:
        >>> BodyKind.HTML.value
        'text/html'
        >>> BodyKind.PLAIN.subtype
        'plain'
    """

    PLAIN = "text/plain"
    HTML = "text/html"

    @property
    def subtype(self) -> str:
        """Return the MIME subtype (``plain`` or ``html``)."""
        return self.value.split("/", 1)[1]


class ResolverPreference(str, Enum):
    """How the SMTP dialer resolves the server host name.

    Attributes:
        IN_PROCESS: The dialer resolves the host itself before dialing and
            reports resolution failures on their own.
        SYSTEM: Resolution is left to the socket layer while connecting.

    Example:
        >>> ResolverPreference("system") is ResolverPreference.SYSTEM
        True
    """

    IN_PROCESS = "in_process"
    SYSTEM = "system"


class ErrorCode(IntEnum):
    """Numeric error codes reported across the foreign binding.

    Example:
        >>> int(ErrorCode.OK)
        0
        >>> ErrorCode.ATTACHMENT_NOT_FOUND.name
        'ATTACHMENT_NOT_FOUND'
    """

    OK = 0
    NOT_FOUND = 1
    INVALID_FORMAT = 2
    INVALID_ADDRESS = 3
    ATTACHMENT_NOT_FOUND = 4
    TRANSPORT = 5
    HOME_DIRECTORY = 6
    INTERNAL = 99


__all__ = [
    "BodyKind",
    "ErrorCode",
    "ResolverPreference",
]
