"""Structured and raw send use cases, exercised through the in-memory dialer."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from libmailer.adapters.config.model import MailerConfig
from libmailer.adapters.memory import DialerSpy
from libmailer.application.sending import compose_message, read_raw_message
from libmailer.composition import MailerServices
from libmailer.domain.enums import BodyKind
from libmailer.domain.errors import (
    AttachmentNotFoundError,
    InvalidFormatError,
    MessageNotFoundError,
    NotFoundError,
    TransportError,
)

_SERVER = {"host": "smtp.example.com", "port": 587, "username": "user", "password": "pw"}


def _send(services: MailerServices, **overrides: object) -> None:
    arguments: dict[str, object] = {
        **_SERVER,
        "from_address": "Sender <sender@example.com>",
        "to": "rcpt@example.com",
        "subject": "Status",
        "body": "all good",
    }
    arguments.update(overrides)
    services.send_mail(**arguments)  # type: ignore[arg-type]


# ======================== structured send ========================


@pytest.mark.os_agnostic
def test_send_passes_server_details_to_dialer(testing_services: MailerServices, dialer_spy: DialerSpy) -> None:
    """Host, port, and credentials reach the dialer unchanged."""
    _send(testing_services)

    record = dialer_spy.last
    assert (record.host, record.port, record.username, record.password) == ("smtp.example.com", 587, "user", "pw")


@pytest.mark.os_agnostic
def test_send_sets_from_to_subject_in_order(testing_services: MailerServices, dialer_spy: DialerSpy) -> None:
    """From, To, then Subject when no Cc or Bcc is given."""
    _send(testing_services)

    headers = dialer_spy.last.message.headers
    assert [name for name, _ in headers] == ["From", "To", "Subject"]
    assert dialer_spy.last.message.header_values("From") == ["Sender <sender@example.com>"]
    assert dialer_spy.last.message.header_values("Subject") == ["Status"]


@pytest.mark.os_agnostic
def test_empty_cc_list_means_no_cc_header(testing_services: MailerServices, dialer_spy: DialerSpy) -> None:
    """An empty Cc list never produces an empty header."""
    _send(testing_services, cc=[], bcc=[])

    assert not dialer_spy.last.message.has_header("Cc")
    assert not dialer_spy.last.message.has_header("Bcc")


@pytest.mark.os_agnostic
def test_single_cc_yields_one_header_value(testing_services: MailerServices, dialer_spy: DialerSpy) -> None:
    """One Cc recipient gives exactly one Cc header."""
    _send(testing_services, cc=["x@y.com"])

    assert dialer_spy.last.message.header_values("Cc") == ["x@y.com"]


@pytest.mark.os_agnostic
def test_multiple_cc_are_joined_in_one_header(testing_services: MailerServices, dialer_spy: DialerSpy) -> None:
    """Several recipients share a single comma-separated header."""
    _send(testing_services, cc=["a@x.com", "Bee <b@x.com>"])

    assert dialer_spy.last.message.header_values("Cc") == ["a@x.com, Bee <b@x.com>"]


@pytest.mark.os_agnostic
def test_bcc_is_carried_as_header(testing_services: MailerServices, dialer_spy: DialerSpy) -> None:
    """Bcc recipients are formatted like Cc."""
    _send(testing_services, bcc=["hidden@x.com"])

    assert dialer_spy.last.message.header_values("Bcc") == ["hidden@x.com"]


@pytest.mark.os_agnostic
def test_unparseable_recipient_does_not_block_sending(testing_services: MailerServices, dialer_spy: DialerSpy) -> None:
    """Formatting is best-effort, so garbage passes through as written."""
    _send(testing_services, to="not an address<<")

    assert dialer_spy.last.message.header_values("To") == ["not an address<<"]


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("body", "kind"),
    [
        ("<html><body>hi</body></html>", BodyKind.HTML),
        ("<HTML>LOUD</HTML>", BodyKind.HTML),
        ("<Html>mixed</Html>", BodyKind.PLAIN),
        ("just words", BodyKind.PLAIN),
    ],
)
def test_body_kind_follows_html_marker(
    testing_services: MailerServices,
    dialer_spy: DialerSpy,
    body: str,
    kind: BodyKind,
) -> None:
    """Only lowercase or uppercase ``<html`` switches to HTML."""
    _send(testing_services, body=body)

    assert dialer_spy.last.message.body_kind is kind


@pytest.mark.os_agnostic
def test_missing_attachment_aborts_before_dialing(
    testing_services: MailerServices, dialer_spy: DialerSpy, tmp_path: Path
) -> None:
    """A missing file raises and no connection is attempted."""
    present = tmp_path / "present.txt"
    present.write_text("data", encoding="utf-8")
    missing = tmp_path / "missing.pdf"

    with pytest.raises(AttachmentNotFoundError) as excinfo:
        _send(testing_services, attachments=[str(present), str(missing)])

    assert excinfo.value.path == missing
    assert "missing.pdf" in str(excinfo.value)
    assert dialer_spy.dialed == []


@pytest.mark.os_agnostic
def test_directory_is_not_an_attachment(testing_services: MailerServices, tmp_path: Path) -> None:
    """Only regular files can be attached."""
    with pytest.raises(AttachmentNotFoundError):
        _send(testing_services, attachments=[str(tmp_path)])


@pytest.mark.os_agnostic
def test_existing_attachments_are_passed_in_order(
    testing_services: MailerServices, dialer_spy: DialerSpy, tmp_path: Path
) -> None:
    """Attachments reach the dialer as paths in declaration order."""
    first = tmp_path / "a.txt"
    second = tmp_path / "b.csv"
    first.write_text("a", encoding="utf-8")
    second.write_text("b", encoding="utf-8")

    _send(testing_services, attachments=[first, str(second)])

    assert dialer_spy.last.message.attachments == (first, second)


@pytest.mark.os_agnostic
def test_dialer_failure_propagates(testing_services: MailerServices, dialer_spy: DialerSpy) -> None:
    """Transport errors surface to the caller unchanged."""
    dialer_spy.raise_exception = TransportError("connection refused")

    with pytest.raises(TransportError, match="connection refused"):
        _send(testing_services)


@pytest.mark.os_agnostic
def test_composed_message_is_not_preformatted() -> None:
    """Structured messages are rendered by the transport."""
    message = compose_message(from_address="a@b.com", to="c@d.com", subject="s", body="b")

    assert message.preformatted is False
    assert message.attachments == ()


@pytest.mark.os_agnostic
def test_send_with_config_uses_loaded_credentials(testing_services: MailerServices, dialer_spy: DialerSpy) -> None:
    """The convenience wrapper fills server and sender from a MailerConfig."""
    config = MailerConfig.model_validate(
        {"host": "mx.test", "port": 2525, "username": "u", "password": "p", "from": "me@test.org"}
    )

    testing_services.send_with_config(config, to="you@test.org", subject="Hi", body="hello", cc=["c@test.org"])

    record = dialer_spy.last
    assert (record.host, record.port, record.username, record.password) == ("mx.test", 2525, "u", "p")
    assert record.message.header_values("From") == ["me@test.org"]
    assert record.message.header_values("Cc") == ["c@test.org"]


# ======================== raw EML send ========================


@pytest.mark.os_agnostic
def test_raw_send_copies_headers_in_order_with_repeats(
    testing_services: MailerServices, dialer_spy: DialerSpy, write_eml: Callable[..., Path]
) -> None:
    """Every header is copied, repeated names included."""
    testing_services.send_raw_eml(**_SERVER, path=write_eml())

    message = dialer_spy.last.message
    assert [name for name, _ in message.headers] == ["From", "To", "Subject", "X-Trace", "X-Trace", "Content-Type"]
    assert message.header_values("X-Trace") == ["first", "second"]
    assert message.header_values("Subject") == ["Quarterly report"]


@pytest.mark.os_agnostic
def test_raw_send_keeps_body_and_marks_preformatted(
    testing_services: MailerServices, dialer_spy: DialerSpy, write_eml: Callable[..., Path]
) -> None:
    """The body is passed on as read and flagged for verbatim output."""
    testing_services.send_raw_eml(**_SERVER, path=write_eml())

    message = dialer_spy.last.message
    assert message.preformatted is True
    assert message.body == "<html><body><p>Numbers are up.</p></body></html>\n"


@pytest.mark.os_agnostic
def test_raw_body_kind_comes_from_content_type(write_eml: Callable[..., Path]) -> None:
    """Content-Type decides HTML versus plain, not the body text."""
    html_eml = write_eml()
    plain_eml = write_eml("From: a@b.com\nTo: c@d.com\nSubject: x\n\n<html>not checked</html>\n", name="plain.eml")

    assert read_raw_message(html_eml).body_kind is BodyKind.HTML
    assert read_raw_message(plain_eml).body_kind is BodyKind.PLAIN


@pytest.mark.os_agnostic
def test_raw_message_without_body_is_accepted(write_eml: Callable[..., Path]) -> None:
    """A header block with nothing after it is still a message."""
    message = read_raw_message(write_eml("From: a@b.com\nTo: c@d.com\n"))

    assert message.body == ""
    assert message.raw_body == b""
    assert message.header_values("To") == ["c@d.com"]


@pytest.mark.os_agnostic
def test_raw_8bit_body_is_kept_as_bytes(write_eml: Callable[..., Path]) -> None:
    """Body bytes that are not ASCII survive without charset decoding."""
    body = "héllo wörld\n".encode()
    header = b"From: a@b.com\nTo: c@d.com\nContent-Type: text/plain; charset=utf-8\n\n"
    message = read_raw_message(write_eml(header + body))

    assert message.raw_body == body
    assert message.body == "héllo wörld\n"


@pytest.mark.os_agnostic
def test_raw_body_in_unknown_charset_is_kept_exactly(write_eml: Callable[..., Path]) -> None:
    """Latin-1 bytes are carried as read even though they are not UTF-8."""
    message = read_raw_message(write_eml(b"From: a@b.com\r\nTo: c@d.com\r\n\r\nna\xefve\r\n"))

    assert message.raw_body == b"na\xefve\r\n"


@pytest.mark.os_agnostic
def test_raw_multipart_body_is_kept_as_bytes(write_eml: Callable[..., Path]) -> None:
    """Multipart bodies are not split or decoded on read."""
    body = b"--B\nContent-Type: text/plain; charset=utf-8\n\nGr\xc3\xbc\xc3\x9fe\n--B--\n"
    message = read_raw_message(
        write_eml(b'From: a@b.com\nTo: c@d.com\nContent-Type: multipart/mixed; boundary="B"\n\n' + body)
    )

    assert message.raw_body == body


@pytest.mark.os_agnostic
def test_missing_eml_is_not_found(
    testing_services: MailerServices, dialer_spy: DialerSpy, tmp_path: Path
) -> None:
    """A nonexistent file raises MessageNotFoundError without dialing."""
    with pytest.raises(MessageNotFoundError, match="cannot open EML file"):
        testing_services.send_raw_eml(**_SERVER, path=tmp_path / "absent.eml")

    assert dialer_spy.dialed == []


@pytest.mark.os_agnostic
def test_missing_eml_is_a_not_found_error(tmp_path: Path) -> None:
    """Callers can catch the shared NotFound category."""
    with pytest.raises(NotFoundError):
        read_raw_message(tmp_path / "absent.eml")


@pytest.mark.os_agnostic
def test_malformed_header_block_is_invalid_format(write_eml: Callable[..., Path]) -> None:
    """Text that is not a header block is rejected."""
    with pytest.raises(InvalidFormatError, match="invalid EML file format"):
        read_raw_message(write_eml("this is not a header\n\nbody\n"))


@pytest.mark.os_agnostic
def test_leading_continuation_line_is_invalid_format(write_eml: Callable[..., Path]) -> None:
    """A message cannot start with a folded continuation line."""
    with pytest.raises(InvalidFormatError):
        read_raw_message(write_eml(" folded: value\nFrom: a@b.com\n\nbody\n"))


@pytest.mark.os_agnostic
def test_empty_eml_is_invalid_format(write_eml: Callable[..., Path]) -> None:
    """An empty file has no header block."""
    with pytest.raises(InvalidFormatError):
        read_raw_message(write_eml(""))
