"""SMTP transport with a Protocol interface and a lazily created process-wide instance."""

import logging
import smtplib
import ssl
import threading
from dataclasses import dataclass
from email.errors import MessageError
from email.message import Message
from typing import Protocol

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """Raised when a notification email cannot be delivered."""

    pass


@dataclass(frozen=True)
class EmailConfig:
    host: str
    port: int
    secure: bool  # implicit TLS (port 465)
    user: str
    password: str
    sender: str
    recipient: str
    timeout: float = 15.0


class MailTransport(Protocol):
    """Mail transport interface."""

    def send(self, msg: Message) -> None: ...


class SmtpTransport:
    """SMTP-backed transport. Opens one connection per message."""

    def __init__(self, config: EmailConfig) -> None:
        self._config = config

    def _connect(self) -> smtplib.SMTP:
        cfg = self._config
        if cfg.secure:
            return smtplib.SMTP_SSL(cfg.host, cfg.port, timeout=cfg.timeout, context=ssl.create_default_context())
        return smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout)

    def send(self, msg: Message) -> None:
        cfg = self._config
        try:
            with self._connect() as server:
                server.ehlo()
                if not cfg.secure and server.has_extn("starttls"):
                    server.starttls(context=ssl.create_default_context())
                    server.ehlo()
                server.login(cfg.user, cfg.password)
                server.send_message(msg)
        except (smtplib.SMTPException, MessageError, OSError) as exc:
            raise NotificationError(f"SMTP send via {cfg.host}:{cfg.port} failed: {exc}") from exc


_transport: MailTransport | None = None
_transport_lock = threading.Lock()


def get_transport(config: EmailConfig) -> MailTransport:
    """Return the shared transport, creating it on first use."""
    global _transport
    if _transport is None:
        with _transport_lock:
            if _transport is None:
                _transport = SmtpTransport(config)
                logger.info("SMTP transport created for %s:%d (tls=%s)", config.host, config.port, config.secure)
    return _transport


def reset_transport() -> None:
    """Drop the shared transport so the next send rebuilds it from current config."""
    global _transport
    with _transport_lock:
        _transport = None
