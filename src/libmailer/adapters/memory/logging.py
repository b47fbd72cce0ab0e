"""In-memory logging initializer for testing.

Records each initialization request instead of starting the lib_log_rich
runtime, so tests can assert that a host asked for logging without any
handlers being installed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lib_layered_config import Config


def _empty_config_list() -> list[Config]:
    return []


@dataclass
class LoggingInitRecorder:
    """Satisfies the InitLogging port by remembering the configs it received.

    Example:
        >>> recorder = LoggingInitRecorder()
        >>> recorder(Config({}, {}))
        >>> recorder.initialised
        True
    """

    configs: list[Config] = field(default_factory=_empty_config_list)

    def __call__(self, config: Config) -> None:
        self.configs.append(config)

    @property
    def initialised(self) -> bool:
        return bool(self.configs)


__all__ = ["LoggingInitRecorder"]
