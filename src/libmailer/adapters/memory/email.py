"""In-memory dialer for testing.

Provides a Dialer that satisfies the same Protocol as the SMTP adapter but
opens no connections.

Contents:
    * :class:`DialerSpy` - Captures dial calls for test assertions.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...domain.message import OutgoingMessage


@dataclass(frozen=True, slots=True)
class DialRecord:
    """One captured dial call."""

    host: str
    port: int
    username: str
    password: str
    message: OutgoingMessage


def _empty_dial_list() -> list[DialRecord]:
    """Create an empty typed list for dial records."""
    return []


@dataclass
class DialerSpy:
    """Captures dial operations for test assertions.

    Each test should create its own DialerSpy instance to avoid cross-test
    pollution.

    Attributes:
        dialed: Captured dial calls in order.
        raise_exception: When set, each call records and then raises it.

    Example:
        >>> spy = DialerSpy()
        >>> spy(host="smtp.test", port=25, username="", password="", message=OutgoingMessage(body="hi"))
        >>> spy.last.message.body
        'hi'
    """

    dialed: list[DialRecord] = field(default_factory=_empty_dial_list)
    raise_exception: Exception | None = None

    def __call__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        message: OutgoingMessage,
    ) -> None:
        """Record the call, then raise ``raise_exception`` when set."""
        self.dialed.append(
            DialRecord(host=host, port=port, username=username, password=password, message=message)
        )
        if self.raise_exception is not None:
            raise self.raise_exception

    @property
    def last(self) -> DialRecord:
        """Return the most recent dial record.

        Raises:
            IndexError: When nothing has been dialed.
        """
        return self.dialed[-1]

    def clear(self) -> None:
        """Reset captured data for next test."""
        self.dialed.clear()
        self.raise_exception = None


__all__ = [
    "DialRecord",
    "DialerSpy",
]
