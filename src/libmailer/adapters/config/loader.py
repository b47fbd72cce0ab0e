"""Configuration loaders: JSON credentials and layered runtime settings.

Two independent sources are read here:

* the SMTP credentials file (``~/.config/mailer/config.json`` by default),
  decoded with orjson and validated by :class:`MailerConfig`;
* the process runtime settings, read through lib_layered_config from the
  bundled ``defaultconfig.toml`` and any app, host, user, dotenv, or
  environment overrides.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

import orjson
from lib_layered_config import Config, read_config
from pydantic import ValidationError

from libmailer import __init__conf__
from libmailer.domain.errors import ConfigNotFoundError, HomeDirectoryError, InvalidFormatError

from .model import MailerConfig, RuntimeSettings

DEFAULT_CONFIG_RELATIVE_PATH = Path(".config") / "mailer" / "config.json"


def default_config_path() -> Path:
    """Return ``<home>/.config/mailer/config.json``.

    Raises:
        HomeDirectoryError: When the home directory cannot be determined.
    """
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise HomeDirectoryError(f"cannot determine home directory: {exc}") from exc
    return home / DEFAULT_CONFIG_RELATIVE_PATH


def load_config_from_path(path: str | Path) -> MailerConfig:
    """Load SMTP credentials from a JSON file.

    Args:
        path: Location of the JSON document.

    Returns:
        Immutable credentials with the values exactly as written.

    Raises:
        ConfigNotFoundError: The file is missing or unreadable.
        InvalidFormatError: The file is not a JSON object with correctly
            typed fields.

    Example:
        >>> load_config_from_path("/nonexistent/config.json")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ConfigNotFoundError: config file not found at /nonexistent/config.json
    """
    config_path = Path(path)
    try:
        data = config_path.read_bytes()
    except OSError as exc:
        raise ConfigNotFoundError(f"config file not found at {config_path}: {exc}") from exc

    try:
        raw: Any = orjson.loads(data)
    except orjson.JSONDecodeError as exc:
        raise InvalidFormatError(f"invalid config file {config_path}: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise InvalidFormatError(f"invalid config file {config_path}: expected a JSON object")

    try:
        return MailerConfig.model_validate(cast("Mapping[str, Any]", raw))
    except ValidationError as exc:
        raise InvalidFormatError(f"invalid config file {config_path}: {exc}") from exc


def load_config() -> MailerConfig:
    """Load SMTP credentials from the default location.

    Raises:
        HomeDirectoryError: The home directory cannot be determined.
        ConfigNotFoundError: The default file is missing or unreadable.
        InvalidFormatError: The default file is not valid configuration JSON.
    """
    return load_config_from_path(default_config_path())


@lru_cache(maxsize=1)
def get_default_runtime_config_path() -> Path:
    """Return the path to the bundled runtime defaults.

    Example:
        >>> path = get_default_runtime_config_path()
        >>> path.name
        'defaultconfig.toml'
        >>> path.exists()
        True
    """
    return Path(__file__).parent / "defaultconfig.toml"


# Loaded once per start_dir and cached for the process lifetime.
@lru_cache(maxsize=4)
def get_runtime_config(*, start_dir: str | None = None) -> Config:
    """Load layered runtime configuration with package defaults.

    Precedence: defaults, then app, host, user, dotenv, and env. The vendor,
    app, and slug identifiers from ``__init__conf__`` decide the
    platform-specific directories.

    Args:
        start_dir: Directory that seeds ``.env`` discovery. Defaults to the
            current working directory when None.

    Returns:
        Immutable configuration object with provenance tracking.
    """
    return read_config(
        vendor=__init__conf__.LAYEREDCONF_VENDOR,
        app=__init__conf__.LAYEREDCONF_APP,
        slug=__init__conf__.LAYEREDCONF_SLUG,
        profile=None,
        default_file=get_default_runtime_config_path(),
        start_dir=start_dir,
    )


def load_runtime_settings(config: Config) -> RuntimeSettings:
    """Build :class:`RuntimeSettings` from the ``[mailer]`` section.

    Example:
        >>> from lib_layered_config import Config
        >>> load_runtime_settings(Config({"mailer": {"resolver": "system"}}, {})).resolver
        <ResolverPreference.SYSTEM: 'system'>
        >>> load_runtime_settings(Config({}, {})).timeout
        30.0
    """
    section: object = config.get("mailer", default={})
    return RuntimeSettings.model_validate(cast("dict[str, object]", section) if section else {})


__all__ = [
    "DEFAULT_CONFIG_RELATIVE_PATH",
    "default_config_path",
    "get_default_runtime_config_path",
    "get_runtime_config",
    "load_config",
    "load_config_from_path",
    "load_runtime_settings",
]
