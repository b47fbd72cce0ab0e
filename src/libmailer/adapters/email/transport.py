"""SMTP transport: MIME rendering, envelopes, and the production dialer.

Provides :class:`SmtpDialer`, the smtplib-backed implementation of the
:class:`~libmailer.application.ports.Dialer` port, :func:`render_message`,
which turns an :class:`~libmailer.domain.message.OutgoingMessage` into an
:class:`email.message.EmailMessage`, and :func:`build_envelope`, which
derives the SMTP sender, recipients, and wire bytes.
"""

from __future__ import annotations

import copy
import logging
import mimetypes
import re
import smtplib
import socket
import ssl
from dataclasses import dataclass
from email.generator import BytesGenerator
from email.message import EmailMessage
from email.policy import EmailPolicy
from email.policy import default as default_policy
from email.utils import getaddresses
from io import BytesIO

from libmailer.domain.enums import ResolverPreference
from libmailer.domain.errors import AttachmentNotFoundError, TransportError
from libmailer.domain.message import OutgoingMessage

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465

# Any line ending; normalized to CRLF on the wire.
_LINE_BREAK = re.compile(rb"\r\n|\r|\n")

# Keywords that may indicate sensitive data in exception messages
_SENSITIVE_KEYWORDS = frozenset(
    {
        "password",
        "credential",
        "auth",
        "secret",
        "token",
        "login",
    }
)


class _VerbatimPolicy(EmailPolicy):
    """EmailPolicy that lifts per-header count limits.

    Raw messages are copied header by header, so repeated single-instance
    headers (two ``To`` lines, say) must survive the copy.
    """

    def header_max_count(self, name: str) -> int | None:
        return None


_VERBATIM_POLICY = _VerbatimPolicy()


def _sanitize_exception_message(exc: Exception) -> str:
    """Sanitize exception message to prevent credential exposure.

    Returns a generic message when the original exception text contains
    keywords suggesting sensitive data (passwords, credentials, tokens).
    The full exception is preserved in the chain for DEBUG-level logging.

    Example:
        >>> class FakeExc(Exception): pass
        >>> _sanitize_exception_message(FakeExc("Connection refused"))
        'Connection refused'
        >>> _sanitize_exception_message(FakeExc("535 Authentication failed"))
        'SMTP server rejected the credentials or session.'
    """
    message = str(exc)
    if any(keyword in message.lower() for keyword in _SENSITIVE_KEYWORDS):
        return "SMTP server rejected the credentials or session."
    return message or type(exc).__name__


def _attachment_type(filename: str) -> tuple[str, str]:
    """Guess ``(maintype, subtype)`` from the file extension.

    Example:
        >>> _attachment_type("report.pdf")
        ('application', 'pdf')
        >>> _attachment_type("blob.unknownext")
        ('application', 'octet-stream')
    """
    guessed, _ = mimetypes.guess_type(filename)
    maintype, _, subtype = (guessed or "application/octet-stream").partition("/")
    return maintype, subtype


def render_message(message: OutgoingMessage) -> EmailMessage:
    """Render *message* into a MIME message.

    Preformatted (raw) messages yield their header block only, copied in
    order; a ``Content-Type`` is added only when the source had none. Their
    body bytes never pass through the email package and are appended by
    :func:`build_envelope`. Composed messages get an encoded body and one
    MIME part per attachment.

    Raises:
        AttachmentNotFoundError: An attachment disappeared before it was read.
        ValueError: A header value cannot be represented (e.g. embedded newline).
    """
    if message.preformatted:
        mime = EmailMessage(policy=_VERBATIM_POLICY)
        for name, value in message.headers:
            mime[name] = value
        if "Content-Type" not in mime:
            mime["Content-Type"] = f'{message.body_kind.value}; charset="utf-8"'
        return mime

    mime = EmailMessage(policy=default_policy)
    for name, value in message.headers:
        mime[name] = value
    mime.set_content(message.body, subtype=message.body_kind.subtype)

    for path in message.attachments:
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise AttachmentNotFoundError(path) from exc
        maintype, subtype = _attachment_type(path.name)
        mime.add_attachment(data, maintype=maintype, subtype=subtype, filename=path.name)
    return mime


def _addresses(mime: EmailMessage, *names: str) -> list[str]:
    """Bare addresses from every instance of the named headers, in order."""
    values = [str(value) for name in names for value in mime.get_all(name, [])]
    return [address for _, address in getaddresses(values) if address]


def envelope_recipients(mime: EmailMessage) -> tuple[str, ...]:
    """Every address in every ``To``, ``Cc``, and ``Bcc`` header.

    ``Resent-*`` headers play no part; a redirected raw message still goes
    to its original recipients.

    Example:
        >>> mime = EmailMessage(policy=_VERBATIM_POLICY)
        >>> mime["To"] = "a@example.com"
        >>> mime["To"] = "B <b@example.com>, c@example.com"
        >>> mime["Bcc"] = "d@example.com"
        >>> envelope_recipients(mime)
        ('a@example.com', 'b@example.com', 'c@example.com', 'd@example.com')
    """
    return tuple(_addresses(mime, "To", "Cc", "Bcc"))


def envelope_sender(mime: EmailMessage) -> str:
    """The ``Sender`` address when present, otherwise the first ``From`` address."""
    for name in ("Sender", "From"):
        found = _addresses(mime, name)
        if found:
            return found[0]
    return ""


@dataclass(frozen=True, slots=True)
class Envelope:
    """What goes over the wire: ``MAIL FROM``, ``RCPT TO``, and ``DATA``.

    Attributes:
        sender: Reverse path.
        recipients: Forward paths, Bcc addresses included.
        data: The message with CRLF line endings and no ``Bcc`` header.
        mail_options: ESMTP options for ``MAIL FROM``; ``SMTPUTF8`` when an
            address is not ASCII.
    """

    sender: str
    recipients: tuple[str, ...]
    data: bytes
    mail_options: tuple[str, ...] = ()


def _flatten_headers(mime: EmailMessage, policy: EmailPolicy) -> bytes:
    """Fold each header except ``Bcc`` and close the block with an empty line."""
    lines = [policy.fold_binary(name, value) for name, value in mime.raw_items() if name.lower() != "bcc"]
    return b"".join(lines) + b"\r\n"


def build_envelope(message: OutgoingMessage) -> Envelope:
    """Render *message* and derive its SMTP envelope.

    Raw bodies are appended exactly as read, with only their line endings
    normalized to CRLF.

    Raises:
        AttachmentNotFoundError: An attachment disappeared before it was read.
        ValueError: A header value cannot be represented.
    """
    mime = render_message(message)
    recipients = envelope_recipients(mime)
    sender = envelope_sender(mime)

    if message.preformatted:
        wire_policy = _VERBATIM_POLICY.clone(linesep="\r\n")
        body = message.raw_body or message.body.encode("utf-8")
        data = _flatten_headers(mime, wire_policy) + _LINE_BREAK.sub(b"\r\n", body)
        return Envelope(sender=sender, recipients=recipients, data=data)

    international = not all(address.isascii() for address in (sender, *recipients))
    wire = copy.copy(mime)
    del wire["Bcc"]
    buffer = BytesIO()
    BytesGenerator(buffer, policy=wire.policy.clone(utf8=international)).flatten(wire, linesep="\r\n")
    return Envelope(
        sender=sender,
        recipients=recipients,
        data=buffer.getvalue(),
        mail_options=("SMTPUTF8", "BODY=8BITMIME") if international else (),
    )


@dataclass(frozen=True, slots=True)
class SmtpDialer:
    """Dial an SMTP server, authenticate, and transmit one message.

    Each call opens and closes its own connection. Port 465 uses implicit
    TLS, and every other port upgrades with STARTTLS when the server offers it.
    Login happens only when a username is given.

    Attributes:
        resolver: Whether the host is resolved in-process before dialing.
        timeout: Socket timeout in seconds.
    """

    resolver: ResolverPreference = ResolverPreference.IN_PROCESS
    timeout: float = 30.0

    def __call__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        message: OutgoingMessage,
    ) -> None:
        """Deliver *message* to ``host:port``.

        The envelope is fully built (attachments read) before any network
        activity, so a rendering failure never leaves a half-sent message.

        Raises:
            AttachmentNotFoundError: An attachment vanished before it was read.
            TransportError: Rendering, resolution, connection, TLS,
                authentication, or submission failed.
        """
        try:
            envelope = build_envelope(message)
        except ValueError as exc:
            raise TransportError(f"cannot compose message for {host}:{port}: {exc}") from exc

        self._resolve(host, port)

        logger.info(
            "Sending email",
            extra={
                "smtp_host": host,
                "smtp_port": port,
                "preformatted": message.preformatted,
                "attachment_count": len(message.attachments),
                "recipient_count": len(envelope.recipients),
            },
        )

        try:
            with self._connect(host, port) as smtp:
                if port != IMPLICIT_TLS_PORT:
                    smtp.ehlo()
                    if smtp.has_extn("starttls"):
                        smtp.starttls(context=ssl.create_default_context())
                        smtp.ehlo()
                if username:
                    smtp.login(username, password)
                smtp.sendmail(envelope.sender, list(envelope.recipients), envelope.data, list(envelope.mail_options))
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            logger.debug("SMTP delivery failed", exc_info=True)
            raise TransportError(f"SMTP delivery to {host}:{port} failed: {_sanitize_exception_message(exc)}") from exc

        logger.info("Email sent successfully", extra={"smtp_host": host, "smtp_port": port})

    def _resolve(self, host: str, port: int) -> None:
        """Resolve *host* in-process when that preference is active."""
        if self.resolver is not ResolverPreference.IN_PROCESS:
            return
        try:
            socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError) as exc:
            raise TransportError(f"cannot resolve SMTP host {host}: {exc}") from exc

    def _connect(self, host: str, port: int) -> smtplib.SMTP:
        """Open the SMTP session, with implicit TLS on port 465."""
        if port == IMPLICIT_TLS_PORT:
            return smtplib.SMTP_SSL(host, port, timeout=self.timeout, context=ssl.create_default_context())
        return smtplib.SMTP(host, port, timeout=self.timeout)


__all__ = [
    "IMPLICIT_TLS_PORT",
    "Envelope",
    "SmtpDialer",
    "build_envelope",
    "envelope_recipients",
    "envelope_sender",
    "render_message",
]
