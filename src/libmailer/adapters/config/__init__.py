"""Configuration adapter - credentials file and layered runtime settings.

Contents:
    * :mod:`.model` - MailerConfig and RuntimeSettings Pydantic models
    * :mod:`.loader` - JSON credentials loader and lib_layered_config reader
"""

from __future__ import annotations

from .loader import (
    default_config_path,
    get_runtime_config,
    load_config,
    load_config_from_path,
    load_runtime_settings,
)
from .model import MailerConfig, RuntimeSettings

__all__ = [
    "MailerConfig",
    "RuntimeSettings",
    "default_config_path",
    "get_runtime_config",
    "load_config",
    "load_config_from_path",
    "load_runtime_settings",
]
