"""Outbound notifications (welcome mail for newly invited admins).

``build_notifier`` picks SMTP delivery when ``MAIL_SERVER`` is configured and a
logging notifier otherwise. Delivery failures are returned, never raised.
"""
from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any, Dict, Mapping, Optional

from flask import current_app

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    error: Optional[str] = None


def render_welcome(payload: Mapping[str, Any], app_url: str):
    role = 'Super Admin' if payload.get('role') == 'super-admin' else 'Admin'
    subject = 'Welcome to Admin Dashboard - Your Account is Ready!'
    body = (
        f"Welcome, {payload.get('name')}!\n\n"
        f"You have been invited by {payload.get('invited_by') or 'Admin'} to join as {role}.\n"
        f"Sign in with {payload.get('email')} at {app_url.rstrip('/')}/login\n\n"
        "Please change your password after first login.\n"
    )
    return subject, body


class LogNotifier:
    """Writes notifications to the log instead of sending them."""

    def notify(self, kind: str, payload: Dict[str, Any]) -> NotificationResult:
        logger.info('notification %s for %s (mail delivery not configured)', kind, payload.get('email'))
        return NotificationResult(success=True)


class SmtpNotifier:
    def __init__(self, server: str, port: int = 587, username: Optional[str] = None,
                 password: Optional[str] = None, sender: str = 'no-reply@localhost',
                 app_url: str = 'http://localhost:3000', timeout: float = 10.0):
        self.server = server
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.app_url = app_url
        self.timeout = timeout

    def _message(self, kind: str, payload: Dict[str, Any]) -> EmailMessage:
        if kind != 'welcome':
            raise ValueError(f'unknown notification kind {kind}')
        subject, body = render_welcome(payload, self.app_url)
        msg = EmailMessage()
        msg['From'] = f'Admin Dashboard <{self.sender}>'
        msg['To'] = payload['email']
        msg['Subject'] = subject
        msg.set_content(body)
        return msg

    def notify(self, kind: str, payload: Dict[str, Any]) -> NotificationResult:
        try:
            msg = self._message(kind, payload)
            with smtplib.SMTP(self.server, self.port, timeout=self.timeout) as smtp:
                smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or '')
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError, ValueError, KeyError) as exc:
            logger.warning('notification %s to %s failed: %s', kind, payload.get('email'), exc)
            return NotificationResult(success=False, error=str(exc))
        logger.info('notification %s sent to %s', kind, payload.get('email'))
        return NotificationResult(success=True)


def build_notifier(config: Mapping[str, Any]):
    server = config.get('MAIL_SERVER')
    if not server:
        return LogNotifier()
    return SmtpNotifier(
        server,
        port=int(config.get('MAIL_PORT') or 587),
        username=config.get('MAIL_USERNAME'),
        password=config.get('MAIL_PASSWORD'),
        sender=config.get('MAIL_SENDER') or 'no-reply@localhost',
        app_url=config.get('APP_URL') or 'http://localhost:3000',
    )


def get_notifier():
    return current_app.extensions['notifier']
