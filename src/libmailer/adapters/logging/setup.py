"""Bridge the library's stdlib loggers to lib_log_rich.

libmailer modules only call ``logging.getLogger(__name__)``. Hosts that want
structured console output call :func:`init_logging` once at startup with the
layered configuration; the ``[lib_log_rich]`` section decides how the runtime
is set up.
"""

from __future__ import annotations

from typing import Any

import lib_log_rich.config
import lib_log_rich.runtime
from lib_layered_config import Config
from pydantic import BaseModel, ConfigDict

from libmailer import __init__conf__

LOGGING_SECTION = "lib_log_rich"


class LoggingSection(BaseModel):
    """The ``[lib_log_rich]`` table.

    ``service`` and ``environment`` are interpreted here; every other key is
    kept as an extra and handed to ``RuntimeConfig`` as-is.

    Example:
        >>> section = LoggingSection.model_validate({"environment": "dev", "console_level": "DEBUG"})
        >>> section.service_name
        'libmailer'
        >>> section.passthrough()
        {'console_level': 'DEBUG'}
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    service: str | None = None
    environment: str = "prod"

    @property
    def service_name(self) -> str:
        """Configured service name, or the package name when unset."""
        return self.service or __init__conf__.name

    def passthrough(self) -> dict[str, Any]:
        """Keys lib_log_rich understands but this model does not declare."""
        return dict(self.model_extra or {})

    def runtime_config(self) -> lib_log_rich.runtime.RuntimeConfig:
        return lib_log_rich.runtime.RuntimeConfig(
            service=self.service_name,
            environment=self.environment,
            **self.passthrough(),
        )


def read_logging_section(config: Config) -> LoggingSection:
    """Validate the ``[lib_log_rich]`` section; a missing section means defaults."""
    raw: Any = config.get(LOGGING_SECTION, default={})
    return LoggingSection.model_validate(raw or {})


def init_logging(config: Config) -> None:
    """Start the lib_log_rich runtime and attach stdlib logging to it.

    Only the first call in a process has an effect, so hosts and embedded
    callers may both call it without coordinating.

    Example:
        >>> init_logging(Config({LOGGING_SECTION: {"environment": "test"}}, {}))  # doctest: +SKIP
    """
    if lib_log_rich.runtime.is_initialised():
        return
    lib_log_rich.config.enable_dotenv()
    lib_log_rich.runtime.init(read_logging_section(config).runtime_config())
    lib_log_rich.runtime.attach_std_logging()


__all__ = [
    "LOGGING_SECTION",
    "LoggingSection",
    "init_logging",
    "read_logging_section",
]
