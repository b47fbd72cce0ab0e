"""In-memory configuration adapters for testing.

Provide credential loaders that satisfy the same Protocols as the production
loaders without touching the filesystem.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from ...domain.errors import ConfigNotFoundError
from ..config.model import MailerConfig


def make_config_loader(config: MailerConfig | None = None) -> Callable[[], MailerConfig]:
    """Return a LoadConfig implementation that yields *config*.

    Example:
        >>> load = make_config_loader(MailerConfig(host="smtp.test"))
        >>> load().host
        'smtp.test'
    """
    fixed = config if config is not None else MailerConfig()

    def load_config_in_memory() -> MailerConfig:
        return fixed

    return load_config_in_memory


def make_config_from_path_loader(
    configs: dict[str, MailerConfig] | None = None,
) -> Callable[[str | Path], MailerConfig]:
    """Return a LoadConfigFromPath implementation backed by a dict.

    Unknown paths raise the same ConfigNotFoundError as the real loader.
    """
    table = {str(Path(key)): value for key, value in (configs or {}).items()}

    def load_config_from_path_in_memory(path: str | Path) -> MailerConfig:
        try:
            return table[str(Path(path))]
        except KeyError:
            raise ConfigNotFoundError(f"config file not found at {path}") from None

    return load_config_from_path_in_memory


__all__ = [
    "make_config_from_path_loader",
    "make_config_loader",
]
