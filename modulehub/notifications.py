"""Delivery of account activation messages."""

import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage

from modulehub.core.config import Settings

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Sends the activation link to a newly registered user."""

    @abstractmethod
    def send_activation(self, email: str, name: str, link: str) -> None:
        ...


class LoggingNotifier(Notifier):
    """Development notifier that writes the link to the log instead of mailing it."""

    def send_activation(self, email: str, name: str, link: str) -> None:
        logger.info("Activation link for %s: %s", email, link)


class SmtpNotifier(Notifier):
    def __init__(self, host: str, port: int, sender: str, timeout: float) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._timeout = timeout

    def build_message(self, email: str, name: str, link: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = "Activate your account"
        message["From"] = self._sender
        message["To"] = email
        message.set_content(
            f"Hello {name},\n\n"
            f"Please confirm your email address by visiting the link below:\n\n"
            f"{link}\n"
        )
        return message

    def send_activation(self, email: str, name: str, link: str) -> None:
        message = self.build_message(email, name, link)
        with smtplib.SMTP(host=self._host, port=self._port, timeout=self._timeout) as connection:
            connection.send_message(message)


def build_notifier(settings: Settings) -> Notifier:
    if settings.smtp_host:
        return SmtpNotifier(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.smtp_sender,
            timeout=settings.smtp_timeout_seconds,
        )
    return LoggingNotifier()


def deliver_activation(notifier: Notifier, email: str, name: str, link: str) -> None:
    """Send an activation message without letting a failure reach the caller.

    Runs after the registration response, when the user row is already
    committed.
    """
    try:
        notifier.send_activation(email, name, link)
    except Exception:
        logger.exception("Failed to deliver activation message to %s", email)
