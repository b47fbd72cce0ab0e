"""Use cases that compose messages and hand them to a dialer.

Contents:
    * :func:`send_mail` - structured message (subject, body, Cc/Bcc, attachments)
    * :func:`send_raw_eml` - pre-formatted RFC 5322 message file

Both functions take the :class:`~libmailer.application.ports.Dialer` as an
argument; the composition root binds the production or in-memory dialer.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from email import errors as email_errors
from email import policy
from email.parser import BytesParser
from pathlib import Path

from ..domain.addresses import format_address
from ..domain.errors import AttachmentNotFoundError, InvalidFormatError, MessageNotFoundError
from ..domain.message import (
    OutgoingMessage,
    body_kind_from_content_type,
    build_headers,
    detect_body_kind,
)
from .ports import Dialer

# Defects that mean the header block itself is malformed.
_STRUCTURAL_DEFECTS = (
    email_errors.MissingHeaderBodySeparatorDefect,
    email_errors.FirstHeaderLineIsContinuationDefect,
)

# First empty line; everything after it is the body.
_HEADER_BODY_SEPARATOR = re.compile(rb"\r?\n\r?\n")


def _body_bytes(data: bytes) -> bytes:
    """Return the bytes after the header block, or nothing when there is no body."""
    match = _HEADER_BODY_SEPARATOR.search(data)
    return data[match.end() :] if match else b""


def _verify_attachments(attachments: Sequence[str | Path]) -> tuple[Path, ...]:
    """Return attachment paths, failing on the first one that is not a file."""
    verified: list[Path] = []
    for attachment in attachments:
        path = Path(attachment)
        if not path.is_file():
            raise AttachmentNotFoundError(attachment)
        verified.append(path)
    return tuple(verified)


def compose_message(
    *,
    from_address: str,
    to: str,
    subject: str,
    body: str,
    cc: Sequence[str] = (),
    bcc: Sequence[str] = (),
    attachments: Sequence[str | Path] = (),
) -> OutgoingMessage:
    """Build the outgoing message for a structured send.

    From and To are formatted best-effort and never block sending. Cc and
    Bcc become one header each, and only when their lists are non-empty.

    Raises:
        AttachmentNotFoundError: On the first attachment that does not exist.

    Example:
        >>> msg = compose_message(from_address="a@b.com", to="Bob <bob@b.com>", subject="Hi", body="hello")
        >>> msg.header_values("To")
        ['Bob <bob@b.com>']
        >>> msg.has_header("Cc")
        False
        >>> msg.body_kind.value
        'text/plain'
    """
    verified = _verify_attachments(attachments)

    pairs: list[tuple[str, str]] = [
        ("From", format_address(from_address)),
        ("To", format_address(to)),
    ]
    if cc:
        pairs.append(("Cc", ", ".join(format_address(addr) for addr in cc)))
    if bcc:
        pairs.append(("Bcc", ", ".join(format_address(addr) for addr in bcc)))
    pairs.append(("Subject", subject))

    return OutgoingMessage(
        headers=build_headers(pairs),
        body=body,
        body_kind=detect_body_kind(body),
        attachments=verified,
    )


def send_mail(
    *,
    dialer: Dialer,
    host: str,
    port: int,
    username: str,
    password: str,
    from_address: str,
    to: str,
    subject: str,
    body: str,
    cc: Sequence[str] = (),
    bcc: Sequence[str] = (),
    attachments: Sequence[str | Path] = (),
) -> None:
    """Compose a structured message and deliver it through *dialer*.

    Attachments are checked before the dialer is touched, so a missing file
    means no connection attempt at all.

    Raises:
        AttachmentNotFoundError: A declared attachment does not exist.
        TransportError: The dialer failed to deliver the message.
    """
    message = compose_message(
        from_address=from_address,
        to=to,
        subject=subject,
        body=body,
        cc=cc,
        bcc=bcc,
        attachments=attachments,
    )
    dialer(host=host, port=port, username=username, password=password, message=message)


def read_raw_message(path: str | Path) -> OutgoingMessage:
    """Read an EML file into an outgoing message with headers copied verbatim.

    Every header is kept in source order, repeated names included. The body
    is cut from the file bytes after the first blank line and carried as
    ``raw_body`` without any charset decoding, so 8-bit and multipart bodies
    reach the wire byte for byte. Its kind is taken from ``Content-Type``.

    Raises:
        MessageNotFoundError: The file cannot be opened or read.
        InvalidFormatError: The header block is not valid RFC 5322.
    """
    source = Path(path)
    try:
        with source.open("rb") as fh:
            data = fh.read()
    except OSError as exc:
        raise MessageNotFoundError(f"cannot open EML file {source}: {exc}") from exc

    parsed = BytesParser(policy=policy.default).parsebytes(data, headersonly=True)
    malformed = [defect for defect in parsed.defects if isinstance(defect, _STRUCTURAL_DEFECTS)]
    if malformed:
        raise InvalidFormatError(f"invalid EML file format {source}: {malformed[0]!r}")
    if not parsed.keys():
        raise InvalidFormatError(f"invalid EML file format {source}: no header block")

    raw_body = _body_bytes(data)

    return OutgoingMessage(
        headers=build_headers([(name, str(value)) for name, value in parsed.items()]),
        body=raw_body.decode("utf-8", errors="replace"),
        body_kind=body_kind_from_content_type(parsed.get("Content-Type")),
        preformatted=True,
        raw_body=raw_body,
    )


def send_raw_eml(
    *,
    dialer: Dialer,
    host: str,
    port: int,
    username: str,
    password: str,
    path: str | Path,
) -> None:
    """Send a pre-formatted message file through *dialer*.

    Raises:
        MessageNotFoundError: The file cannot be opened.
        InvalidFormatError: The file is not a valid RFC 5322 message.
        TransportError: The dialer failed to deliver the message.
    """
    message = read_raw_message(path)
    dialer(host=host, port=port, username=username, password=password, message=message)


__all__ = [
    "compose_message",
    "read_raw_message",
    "send_mail",
    "send_raw_eml",
]
