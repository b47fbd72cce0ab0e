"""RFC 5322 address parsing and canonical formatting.

Two entry points with different failure contracts:

* :func:`parse_address` is partial. It gates further action on a valid
  address and raises :class:`InvalidAddressError` otherwise.
* :func:`format_address` is total. It is used while building headers and
  falls back to the input unchanged when strict parsing fails.
"""

from __future__ import annotations

from email import policy
from email.errors import HeaderParseError
from email.headerregistry import Address

from .errors import InvalidAddressError


def _parse_mailbox(addr: str) -> Address | None:
    """Return the single mailbox in *addr*, or None when strict parsing fails.

    Strict means: exactly one mailbox outside any group, a non-empty local
    part and domain, and no defects recorded by the header parser.
    """
    try:
        header = policy.default.header_factory("To", addr)
    except (HeaderParseError, IndexError, ValueError):
        return None
    if header.defects or len(header.groups) != 1:
        return None
    group = header.groups[0]
    if group.display_name is not None or len(group.addresses) != 1:
        return None
    mailbox = group.addresses[0]
    if not mailbox.username or not mailbox.domain:
        return None
    return mailbox


def parse_address(addr: str) -> str:
    """Return the bare addr-spec contained in *addr*.

    Args:
        addr: Address in ``Name <local@domain>`` or ``local@domain`` form.
            Surrounding whitespace is ignored.

    Returns:
        The addr-spec (``local@domain``). When the strict parser rejects the
        input but it contains ``@`` and no ``<``, the stripped input is
        returned as-is.

    Raises:
        InvalidAddressError: Empty input, or input rejected by both the strict
            parser and the permissive fallback.

    Example:
        >>> parse_address("Jane Doe <jane@example.com>")
        'jane@example.com'
        >>> parse_address("  jane@example.com ")
        'jane@example.com'
        >>> parse_address("not-an-email")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        InvalidAddressError: invalid email address format: not-an-email
    """
    addr = addr.strip()
    if not addr:
        raise InvalidAddressError("empty email address")

    mailbox = _parse_mailbox(addr)
    if mailbox is not None:
        return mailbox.addr_spec

    # Bare addresses the strict parser rejects for unrelated reasons.
    if "@" in addr and "<" not in addr:
        return addr
    raise InvalidAddressError(f"invalid email address format: {addr}")


def format_address(addr: str) -> str:
    """Return the canonical header form of *addr*, or *addr* unchanged.

    Example:
        >>> format_address("Jane Doe <jane@example.com>")
        'Jane Doe <jane@example.com>'
        >>> format_address("jane@example.com")
        'jane@example.com'
        >>> format_address("garbage<<<")
        'garbage<<<'
    """
    mailbox = _parse_mailbox(addr)
    if mailbox is None:
        return addr
    return str(mailbox)


__all__ = [
    "format_address",
    "parse_address",
]
