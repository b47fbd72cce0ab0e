"""Configuration models: SMTP credentials and process runtime settings.

Provides the MailerConfig Pydantic model for the JSON credentials file and
the RuntimeSettings model consumed once by the composition root.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from libmailer.domain.enums import ResolverPreference

# Keys of the credentials document, matched without regard to case.
_JSON_KEYS = frozenset({"host", "port", "username", "password", "from"})


class MailerConfig(BaseModel):
    """SMTP credentials loaded from ``config.json``.

    Values are taken exactly as written. Keys match without regard to case,
    and when two keys differ only in case the later one wins. Missing keys
    and ``null`` values fall back to empty values, unknown keys are ignored,
    and no cross-field checks are made (the port range is not validated).

    Example:
        >>> config = MailerConfig.model_validate(
        ...     {"host": "smtp.example.com", "port": 587, "from": "me@example.com"}
        ... )
        >>> config.from_address
        'me@example.com'
        >>> config.port
        587
        >>> MailerConfig.model_validate({"Host": "smtp.example.com", "port": None}).port
        0
    """

    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True, extra="ignore")

    host: str = ""
    port: int = 0
    username: str = ""
    password: str = ""
    from_address: str = Field(default="", alias="from")

    @model_validator(mode="before")
    @classmethod
    def _fold_json_keys(cls, data: Any) -> Any:
        """Lower-case known keys and drop ``null`` values so defaults apply."""
        if not isinstance(data, dict):
            return data
        folded: dict[Any, Any] = {}
        for key, value in data.items():
            name = key.lower() if isinstance(key, str) and key.lower() in _JSON_KEYS else key
            if value is None:
                continue
            folded[name] = value
        return folded

    def __repr__(self) -> str:
        """Return string representation with the password redacted.

        Example:
            >>> config = MailerConfig(host="smtp.example.com", password="secret123")
            >>> "secret123" in repr(config)
            False
            >>> "[REDACTED]" in repr(config)
            True
        """
        fields: list[str] = []
        for name, value in self:
            if name == "password" and value:
                fields.append(f"{name}='[REDACTED]'")
            else:
                fields.append(f"{name}={value!r}")
        return f"MailerConfig({', '.join(fields)})"


class RuntimeSettings(BaseModel):
    """Process-wide settings applied once when services are built.

    Example:
        >>> RuntimeSettings().resolver
        <ResolverPreference.IN_PROCESS: 'in_process'>
        >>> RuntimeSettings(resolver="system", timeout=5).timeout
        5.0
    """

    model_config = ConfigDict(frozen=True)

    resolver: ResolverPreference = ResolverPreference.IN_PROCESS
    timeout: float = 30.0

    @field_validator("timeout")
    @classmethod
    def _require_positive_timeout(cls, v: float) -> float:
        """Reject zero and negative socket timeouts."""
        if v <= 0:
            raise ValueError(f"timeout must be positive, got {v}")
        return v


__all__ = [
    "MailerConfig",
    "RuntimeSettings",
]
