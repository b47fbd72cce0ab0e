"""Domain enum tests: member values, string equality, and exhaustive member counts."""

from __future__ import annotations

import pytest

from libmailer.domain.enums import BodyKind, ErrorCode, ResolverPreference

# ======================== BodyKind ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("member", "content_type", "subtype"),
    [
        (BodyKind.PLAIN, "text/plain", "plain"),
        (BodyKind.HTML, "text/html", "html"),
    ],
)
def test_body_kind_values_and_subtypes(member: BodyKind, content_type: str, subtype: str) -> None:
    """Each BodyKind carries its MIME type and subtype."""
    assert member == content_type
    assert member.subtype == subtype


@pytest.mark.os_agnostic
def test_body_kind_member_count() -> None:
    """BodyKind must have exactly 2 members."""
    assert len(BodyKind) == 2


# ======================== ResolverPreference ========================


@pytest.mark.os_agnostic
def test_resolver_preference_parses_config_strings() -> None:
    """Config values map onto the enum."""
    assert ResolverPreference("in_process") is ResolverPreference.IN_PROCESS
    assert ResolverPreference("system") is ResolverPreference.SYSTEM
    assert len(ResolverPreference) == 2


# ======================== ErrorCode ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("member", "value"),
    [
        (ErrorCode.OK, 0),
        (ErrorCode.NOT_FOUND, 1),
        (ErrorCode.INVALID_FORMAT, 2),
        (ErrorCode.INVALID_ADDRESS, 3),
        (ErrorCode.ATTACHMENT_NOT_FOUND, 4),
        (ErrorCode.TRANSPORT, 5),
        (ErrorCode.HOME_DIRECTORY, 6),
        (ErrorCode.INTERNAL, 99),
    ],
)
def test_error_code_values_are_stable(member: ErrorCode, value: int) -> None:
    """Numeric codes are part of the foreign interface and never change."""
    assert int(member) == value


@pytest.mark.os_agnostic
def test_error_codes_are_unique() -> None:
    """No two categories share a code."""
    assert len({int(member) for member in ErrorCode}) == len(ErrorCode)
