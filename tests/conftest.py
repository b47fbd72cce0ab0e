"""Shared pytest fixtures for libmailer tests.

Centralizes test infrastructure:
- All shared fixtures live here
- Tests import fixtures implicitly via pytest's conftest discovery
- Fixtures use descriptive names that read as plain English
"""

from __future__ import annotations

import ctypes
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import orjson
import pytest

from libmailer.adapters.config.loader import get_runtime_config
from libmailer.adapters.memory import DialerSpy
from libmailer.composition import MailerServices, build_testing

SAMPLE_CONFIG: dict[str, Any] = {
    "host": "smtp.example.com",
    "port": 587,
    "username": "mailer-user",
    "password": "s3cret",
    "from": "Mailer Bot <bot@example.com>",
}

HTML_EML = (
    "From: Alice <alice@example.com>\n"
    "To: bob@example.com\n"
    "Subject: Quarterly report\n"
    "X-Trace: first\n"
    "X-Trace: second\n"
    "Content-Type: text/html; charset=utf-8\n"
    "\n"
    "<html><body><p>Numbers are up.</p></body></html>\n"
)


@pytest.fixture
def dialer_spy() -> DialerSpy:
    """Provide a fresh DialerSpy per test."""
    return DialerSpy()


@pytest.fixture
def testing_services(dialer_spy: DialerSpy) -> MailerServices:
    """Provide in-memory services whose dialer is ``dialer_spy``."""
    return build_testing(spy=dialer_spy)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Write a JSON credentials file and return its path.

    Example:
        def test_x(write_config):
            path = write_config({"host": "smtp.test"})
    """

    def _write(payload: object = None, *, raw: bytes | None = None, name: str = "config.json") -> Path:
        path = tmp_path / name
        path.write_bytes(raw if raw is not None else orjson.dumps(SAMPLE_CONFIG if payload is None else payload))
        return path

    return _write


@pytest.fixture
def write_eml(tmp_path: Path) -> Callable[..., Path]:
    """Write an EML file and return its path; bytes are written unchanged."""

    def _write(content: str | bytes = HTML_EML, *, name: str = "message.eml") -> Path:
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def c_string() -> Iterator[Callable[[str], tuple[int, int]]]:
    """Allocate UTF-8 C strings kept alive for the duration of the test.

    Returns ``(address, length)`` for each string.
    """
    buffers: list[Any] = []

    def _alloc(text: str) -> tuple[int, int]:
        data = text.encode("utf-8")
        buffer = ctypes.create_string_buffer(data)
        buffers.append(buffer)
        return ctypes.addressof(buffer), len(data)

    yield _alloc
    buffers.clear()


@pytest.fixture
def c_string_array() -> Iterator[Callable[[list[str]], tuple[int, int]]]:
    """Allocate a ``char*`` array kept alive for the duration of the test.

    Returns ``(address, count)``; an empty list yields ``(0, 0)``.
    """
    keep: list[Any] = []

    def _alloc(items: list[str]) -> tuple[int, int]:
        if not items:
            return 0, 0
        buffers = [ctypes.create_string_buffer(item.encode("utf-8")) for item in items]
        array = (ctypes.c_void_p * len(items))(*(ctypes.addressof(buffer) for buffer in buffers))
        keep.extend(buffers)
        keep.append(array)
        return ctypes.addressof(array), len(items)

    yield _alloc
    keep.clear()


@pytest.fixture
def clear_runtime_config_cache() -> Iterator[None]:
    """Clear the layered runtime configuration cache before and after a test."""
    get_runtime_config.cache_clear()
    yield
    get_runtime_config.cache_clear()
