"""Static package metadata and layered-configuration identifiers."""

from __future__ import annotations

name = "libmailer"
title = "Compose and dispatch email over SMTP, with a C-compatible binding"
version = "1.0.0"
homepage = "https://github.com/libmailer/libmailer"
author = "libmailer contributors"

# Identifiers handed to lib_layered_config. They decide the platform-specific
# directories searched for runtime settings (e.g. ~/.config/libmailer on Linux).
LAYEREDCONF_VENDOR = "libmailer"
LAYEREDCONF_APP = "libmailer"
LAYEREDCONF_SLUG = "libmailer"


def info_lines() -> list[str]:
    """Return human-readable metadata lines.

    Example:
        >>> info_lines()[0]
        'Info for libmailer:'
    """
    fields = (
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
    )
    pad = max(len(label) for label, _ in fields)
    return [f"Info for {name}:"] + [f"    {label.ljust(pad)} = {value}" for label, value in fields]


__all__ = [
    "LAYEREDCONF_APP",
    "LAYEREDCONF_SLUG",
    "LAYEREDCONF_VENDOR",
    "author",
    "homepage",
    "info_lines",
    "name",
    "title",
    "version",
]
