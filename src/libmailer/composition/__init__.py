"""Composition root wiring adapters to application ports.

Building the services is the host's one-time initialization step: the
runtime settings (resolver preference, timeout) are consumed here and baked
into the dialer, so no process-wide state is mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

from ..adapters.config.loader import (
    get_runtime_config,
    load_config,
    load_config_from_path,
    load_runtime_settings,
)
from ..adapters.config.model import MailerConfig, RuntimeSettings
from ..adapters.email.transport import SmtpDialer
from ..adapters.logging.setup import init_logging
from ..application.sending import send_mail, send_raw_eml

# Static conformance assertions: pyright checks each adapter against its Protocol.
if TYPE_CHECKING:
    from ..adapters.memory.email import DialerSpy
    from ..application.ports import (
        Dialer,
        InitLogging,
        LoadConfig,
        LoadConfigFromPath,
        SendMail,
        SendRawEml,
    )

    _assert_dialer: Dialer = SmtpDialer()
    _assert_load_config: LoadConfig = load_config
    _assert_load_config_from_path: LoadConfigFromPath = load_config_from_path
    _assert_init_logging: InitLogging = init_logging


@dataclass(frozen=True, slots=True)
class MailerServices:
    """Frozen container holding the wired public operations."""

    settings: RuntimeSettings
    dialer: Dialer
    load_config: LoadConfig
    load_config_from_path: LoadConfigFromPath
    send_mail: SendMail
    send_raw_eml: SendRawEml

    def send_with_config(
        self,
        config: MailerConfig,
        *,
        to: str,
        subject: str,
        body: str,
        cc: Sequence[str] = (),
        bcc: Sequence[str] = (),
        attachments: Sequence[str | Path] = (),
    ) -> None:
        """Send a structured message using the server and sender in *config*."""
        self.send_mail(
            host=config.host,
            port=config.port,
            username=config.username,
            password=config.password,
            from_address=config.from_address,
            to=to,
            subject=subject,
            body=body,
            cc=cc,
            bcc=bcc,
            attachments=attachments,
        )


def _wire(
    settings: RuntimeSettings,
    dialer: Dialer,
    *,
    load: LoadConfig,
    load_from_path: LoadConfigFromPath,
) -> MailerServices:
    return MailerServices(
        settings=settings,
        dialer=dialer,
        load_config=load,
        load_config_from_path=load_from_path,
        send_mail=partial(send_mail, dialer=dialer),
        send_raw_eml=partial(send_raw_eml, dialer=dialer),
    )


def build_production(settings: RuntimeSettings | None = None) -> MailerServices:
    """Wire production adapters into a MailerServices container.

    Args:
        settings: Runtime settings to apply. When None, they are read once
            from the layered configuration (``[mailer]`` section).

    Returns:
        MailerServices backed by the smtplib dialer and the JSON loaders.
    """
    resolved = settings if settings is not None else load_runtime_settings(get_runtime_config())
    dialer = SmtpDialer(resolver=resolved.resolver, timeout=resolved.timeout)
    return _wire(resolved, dialer, load=load_config, load_from_path=load_config_from_path)


def build_testing(
    *,
    spy: DialerSpy | None = None,
    config: MailerConfig | None = None,
    settings: RuntimeSettings | None = None,
) -> MailerServices:
    """Wire in-memory adapters into a MailerServices container.

    Args:
        spy: Optional DialerSpy for capturing deliveries. A fresh one is
            created when None; reach it through ``services.dialer``.
        config: Credentials returned by ``load_config``. Defaults to an
            empty MailerConfig.
        settings: Runtime settings recorded on the container.

    Returns:
        MailerServices container with in-memory adapters.
    """
    from ..adapters.memory import DialerSpy, make_config_from_path_loader, make_config_loader

    dialer = spy if spy is not None else DialerSpy()
    return _wire(
        settings if settings is not None else RuntimeSettings(),
        dialer,
        load=make_config_loader(config),
        load_from_path=make_config_from_path_loader(),
    )


__all__ = [
    "MailerServices",
    "build_production",
    "build_testing",
    "init_logging",
]
