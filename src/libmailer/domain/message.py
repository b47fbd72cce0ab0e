"""Outgoing message value object and body-kind heuristics.

The two heuristics differ on purpose. Structured sends inspect the body
text, raw sends inspect the ``Content-Type`` header.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .enums import BodyKind

_HTML_MARKERS = ("<html", "<HTML")


def detect_body_kind(body: str) -> BodyKind:
    """Classify a composed body by a case-sensitive ``<html``/``<HTML`` marker.

    Example:
        >>> detect_body_kind("<html>hi</html>")
        <BodyKind.HTML: 'text/html'>
        >>> detect_body_kind("hello")
        <BodyKind.PLAIN: 'text/plain'>
        >>> detect_body_kind("<Html>mixed case stays plain</Html>")
        <BodyKind.PLAIN: 'text/plain'>
    """
    if any(marker in body for marker in _HTML_MARKERS):
        return BodyKind.HTML
    return BodyKind.PLAIN


def body_kind_from_content_type(content_type: str | None) -> BodyKind:
    """Classify a raw message by a ``text/html`` substring in its Content-Type.

    Example:
        >>> body_kind_from_content_type('text/html; charset="utf-8"')
        <BodyKind.HTML: 'text/html'>
        >>> body_kind_from_content_type(None)
        <BodyKind.PLAIN: 'text/plain'>
    """
    if content_type and "text/html" in content_type:
        return BodyKind.HTML
    return BodyKind.PLAIN


def _empty_headers() -> tuple[tuple[str, str], ...]:
    return ()


@dataclass(frozen=True, slots=True)
class OutgoingMessage:
    """A message ready to hand to a dialer.

    Attributes:
        headers: Ordered ``(name, value)`` pairs. Repeated names are kept.
        body: Message body text. For preformatted messages this is a UTF-8
            view of *raw_body*, kept for inspection only.
        body_kind: Plain text or HTML.
        attachments: Files to attach, already checked for existence.
        preformatted: True when the body is already in transfer form (raw EML)
            and *raw_body* must be written out untouched.
        raw_body: Exact body bytes of a preformatted message.
    """

    headers: tuple[tuple[str, str], ...] = field(default_factory=_empty_headers)
    body: str = ""
    body_kind: BodyKind = BodyKind.PLAIN
    attachments: tuple[Path, ...] = ()
    preformatted: bool = False
    raw_body: bytes = b""

    def header_values(self, name: str) -> list[str]:
        """Return every value stored under *name* (case-insensitive).

        Example:
            >>> msg = OutgoingMessage(headers=(("Received", "a"), ("received", "b")))
            >>> msg.header_values("RECEIVED")
            ['a', 'b']
        """
        wanted = name.lower()
        return [value for key, value in self.headers if key.lower() == wanted]

    def has_header(self, name: str) -> bool:
        """Return True when at least one header named *name* is present."""
        return bool(self.header_values(name))


def build_headers(pairs: Sequence[tuple[str, str]]) -> tuple[tuple[str, str], ...]:
    """Freeze header pairs into the tuple form stored on :class:`OutgoingMessage`."""
    return tuple((str(key), str(value)) for key, value in pairs)


__all__ = [
    "OutgoingMessage",
    "body_kind_from_content_type",
    "build_headers",
    "detect_body_kind",
]
