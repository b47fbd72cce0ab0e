"""C-compatible binding over the mailer services.

Every argument is an integer or an address, every fallible call returns the
address of a :class:`~.marshal.MailerResult`, and every value handed out has
exactly one release function:

============================  ==========================  =====================
function                      returns                     release with
============================  ==========================  =====================
``mailer_load_config``        ``MailerResult*`` (config)  ``mailer_result_free``
``mailer_parse_address``      ``MailerResult*`` (char*)   ``mailer_result_free``
``mailer_format_address``     ``char*``                   ``mailer_string_free``
``mailer_send``               ``MailerResult*``           ``mailer_result_free``
``mailer_send_raw``           ``MailerResult*``           ``mailer_result_free``
============================  ==========================  =====================

A result owns its payload, so releasing the result releases the payload too.
Both release functions accept NULL. Releasing twice, or never, is undefined
behaviour for the caller.

A C host embedding CPython builds the services once (the explicit init
step), wraps them in :class:`ForeignBinding`, and takes raw function
pointers from :func:`build_function_table`.
"""

from __future__ import annotations

import ctypes
import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from libmailer.composition import MailerServices
from libmailer.domain.addresses import format_address, parse_address
from libmailer.domain.enums import ErrorCode
from libmailer.domain.errors import MailerError

from .marshal import CMailerConfig, MailerResult, OwnedMemory, encode, read_string, read_string_array

logger = logging.getLogger(__name__)

_c_ptr = ctypes.c_void_p
_c_len = ctypes.c_size_t

# name -> (restype, argtypes)
_SIGNATURES: dict[str, tuple[Any, tuple[Any, ...]]] = {
    "mailer_load_config": (_c_ptr, (_c_ptr, _c_len)),
    "mailer_parse_address": (_c_ptr, (_c_ptr, _c_len)),
    "mailer_format_address": (_c_ptr, (_c_ptr, _c_len)),
    "mailer_send": (
        _c_ptr,
        (
            _c_ptr, _c_len,  # host
            ctypes.c_int,  # port
            _c_ptr, _c_len,  # username
            _c_ptr, _c_len,  # password
            _c_ptr, _c_len,  # from
            _c_ptr, _c_len,  # to
            _c_ptr, _c_len,  # subject
            _c_ptr, _c_len,  # body
            _c_ptr, _c_len,  # cc[]
            _c_ptr, _c_len,  # bcc[]
            _c_ptr, _c_len,  # attachments[]
        ),
    ),  # fmt: skip
    "mailer_send_raw": (
        _c_ptr,
        (
            _c_ptr, _c_len,  # host
            ctypes.c_int,  # port
            _c_ptr, _c_len,  # username
            _c_ptr, _c_len,  # password
            _c_ptr, _c_len,  # path
        ),
    ),  # fmt: skip
    "mailer_result_free": (None, (_c_ptr,)),
    "mailer_string_free": (None, (_c_ptr,)),
}

_RESULT_FUNCTIONS = frozenset({"mailer_load_config", "mailer_parse_address", "mailer_send", "mailer_send_raw"})


class ForeignBinding:
    """Exposes the four mailer operations with primitive-typed signatures.

    Methods can be called directly from Python with integer addresses, or
    through the callbacks produced by :func:`build_function_table`.
    """

    def __init__(self, services: MailerServices) -> None:
        self._services = services
        self._memory = OwnedMemory()

    @property
    def live_allocations(self) -> int:
        """Number of values handed out and not yet released."""
        return len(self._memory)

    def _success(self, payload: ctypes.Structure | ctypes.Array[ctypes.c_char] | None = None) -> int:
        result = MailerResult(
            value=ctypes.addressof(payload) if payload is not None else None,
            error_code=int(ErrorCode.OK),
            error_message=None,
        )
        return self._memory.keep(result, payload)

    def _failure(self, code: ErrorCode, message: str) -> int:
        result = MailerResult(value=None, error_code=int(code), error_message=encode(message))
        return self._memory.keep(result)

    def _from_error(self, exc: MailerError) -> int:
        return self._failure(exc.code, str(exc))

    def mailer_load_config(self, path_ptr: int | None, path_len: int) -> int:
        """Load credentials from *path*, or from the default location when NULL."""
        try:
            if path_ptr:
                config = self._services.load_config_from_path(read_string(path_ptr, path_len))
            else:
                config = self._services.load_config()
        except MailerError as exc:
            return self._from_error(exc)
        payload = CMailerConfig(
            host=encode(config.host),
            port=config.port,
            username=encode(config.username),
            password=encode(config.password),
            from_address=encode(config.from_address),
        )
        return self._success(payload)

    def mailer_parse_address(self, addr_ptr: int | None, addr_len: int) -> int:
        """Parse an address; the payload is the bare addr-spec."""
        try:
            parsed = parse_address(read_string(addr_ptr, addr_len))
        except MailerError as exc:
            return self._from_error(exc)
        return self._success(ctypes.create_string_buffer(encode(parsed)))

    def mailer_format_address(self, addr_ptr: int | None, addr_len: int) -> int:
        """Format an address; never fails. Release with ``mailer_string_free``."""
        return self._memory.string(format_address(read_string(addr_ptr, addr_len)))

    def mailer_send(
        self,
        host_ptr: int | None,
        host_len: int,
        port: int,
        username_ptr: int | None,
        username_len: int,
        password_ptr: int | None,
        password_len: int,
        from_ptr: int | None,
        from_len: int,
        to_ptr: int | None,
        to_len: int,
        subject_ptr: int | None,
        subject_len: int,
        body_ptr: int | None,
        body_len: int,
        cc_ptr: int | None,
        cc_count: int,
        bcc_ptr: int | None,
        bcc_count: int,
        attachments_ptr: int | None,
        attachments_count: int,
    ) -> int:
        """Send a structured message."""
        try:
            self._services.send_mail(
                host=read_string(host_ptr, host_len),
                port=port,
                username=read_string(username_ptr, username_len),
                password=read_string(password_ptr, password_len),
                from_address=read_string(from_ptr, from_len),
                to=read_string(to_ptr, to_len),
                subject=read_string(subject_ptr, subject_len),
                body=read_string(body_ptr, body_len),
                cc=read_string_array(cc_ptr, cc_count),
                bcc=read_string_array(bcc_ptr, bcc_count),
                attachments=read_string_array(attachments_ptr, attachments_count),
            )
        except MailerError as exc:
            return self._from_error(exc)
        return self._success()

    def mailer_send_raw(
        self,
        host_ptr: int | None,
        host_len: int,
        port: int,
        username_ptr: int | None,
        username_len: int,
        password_ptr: int | None,
        password_len: int,
        path_ptr: int | None,
        path_len: int,
    ) -> int:
        """Send a pre-formatted EML file."""
        try:
            self._services.send_raw_eml(
                host=read_string(host_ptr, host_len),
                port=port,
                username=read_string(username_ptr, username_len),
                password=read_string(password_ptr, password_len),
                path=read_string(path_ptr, path_len),
            )
        except MailerError as exc:
            return self._from_error(exc)
        return self._success()

    def mailer_result_free(self, result_ptr: int | None) -> None:
        """Release a result and the payload it owns. NULL is a no-op."""
        self._memory.release(result_ptr)

    def mailer_string_free(self, string_ptr: int | None) -> None:
        """Release a string from ``mailer_format_address``. NULL is a no-op."""
        self._memory.release(string_ptr)

    def guarded(self, name: str) -> Callable[..., Any]:
        """Return method *name* wrapped so no exception crosses the boundary.

        Unexpected errors are logged; result-returning functions report them
        as ``ErrorCode.INTERNAL``, the rest return NULL.
        """
        func: Callable[..., Any] = getattr(self, name)
        returns_result = name in _RESULT_FUNCTIONS

        @functools.wraps(func)
        def call(*args: Any) -> Any:
            try:
                return func(*args)
            except Exception as exc:
                logger.exception("Unhandled error in %s", name)
                if returns_result:
                    return self._failure(ErrorCode.INTERNAL, f"{name}: {exc}")
                return None

        return call


@dataclass(frozen=True, slots=True)
class ForeignFunction:
    """A C-callable entry point and its raw function pointer."""

    name: str
    callback: Any
    address: int


def build_function_table(binding: ForeignBinding) -> dict[str, ForeignFunction]:
    """Create C function pointers for every binding entry point.

    The returned table must outlive every C call through its pointers;
    dropping it frees the trampolines.

    Example:
        >>> from libmailer.composition import build_testing
        >>> table = build_function_table(ForeignBinding(build_testing()))
        >>> sorted(table)[:2]
        ['mailer_format_address', 'mailer_load_config']
        >>> table["mailer_result_free"].address > 0
        True
    """
    table: dict[str, ForeignFunction] = {}
    for name, (restype, argtypes) in _SIGNATURES.items():
        prototype = ctypes.CFUNCTYPE(restype, *argtypes)
        callback = prototype(binding.guarded(name))
        address = ctypes.cast(callback, ctypes.c_void_p).value or 0
        table[name] = ForeignFunction(name=name, callback=callback, address=address)
    return table


__all__ = [
    "ForeignBinding",
    "ForeignFunction",
    "build_function_table",
]
