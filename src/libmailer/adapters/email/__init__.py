"""Email adapter - SMTP delivery via smtplib.

Contents:
    * :class:`.transport.SmtpDialer` - Production Dialer implementation
    * :func:`.transport.render_message` - OutgoingMessage to MIME rendering
    * :func:`.transport.build_envelope` - sender, recipients, and wire bytes
"""

from __future__ import annotations

from .transport import Envelope, SmtpDialer, build_envelope, render_message

__all__ = [
    "Envelope",
    "SmtpDialer",
    "build_envelope",
    "render_message",
]
