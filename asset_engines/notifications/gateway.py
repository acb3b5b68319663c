"""Messaging collaborators: who to notify and how to deliver."""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import List, Optional, Protocol
from uuid import uuid4

from asset_engines.common.identity import RequestContext
from asset_engines.config import runtime_config
from asset_engines.notifications.models import DeliveryResult, NotificationPayload

logger = logging.getLogger(__name__)


class MessagingGateway(Protocol):
    def recipients(self, ctx: RequestContext) -> List[str]: ...
    def send_notification(self, payload: NotificationPayload) -> DeliveryResult: ...


class InMemoryMessagingGateway:
    """Keeps sent payloads in an outbox; used in dev and tests."""

    def __init__(self, recipients: Optional[List[str]] = None, fail_with: Optional[str] = None) -> None:
        self._recipients = recipients
        self.fail_with = fail_with
        self.outbox: List[NotificationPayload] = []

    def recipients(self, ctx: RequestContext) -> List[str]:
        if self._recipients is not None:
            return list(self._recipients)
        return runtime_config.get_notify_recipients()

    def send_notification(self, payload: NotificationPayload) -> DeliveryResult:
        if self.fail_with:
            return DeliveryResult(success=False, message=self.fail_with)
        self.outbox.append(payload)
        return DeliveryResult(success=True, message="queued", notification_id=uuid4().hex)


class SmtpMessagingGateway:
    def __init__(self, settings: Optional[dict] = None, sender: Optional[str] = None) -> None:
        self._settings = settings or runtime_config.get_smtp_settings()
        self._sender = sender or runtime_config.get_notify_sender()

    def recipients(self, ctx: RequestContext) -> List[str]:
        return runtime_config.get_notify_recipients()

    def send_notification(self, payload: NotificationPayload) -> DeliveryResult:
        creds = self._settings
        if not creds.get("host") or not self._sender:
            return DeliveryResult(success=False, message="SMTP host/sender not configured")
        if not payload.recipients:
            return DeliveryResult(success=False, message="No recipients configured")

        msg = EmailMessage()
        msg.set_content(payload.body)
        msg["Subject"] = payload.subject
        msg["From"] = self._sender
        msg["To"] = ", ".join(payload.recipients)

        try:
            with smtplib.SMTP(creds["host"], creds["port"]) as server:
                server.starttls()
                if creds.get("user") and creds.get("password"):
                    server.login(creds["user"], creds["password"])
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            return DeliveryResult(success=False, message=f"SMTP delivery failed: {exc}")
        return DeliveryResult(success=True, message=f"sent to {len(payload.recipients)} recipient(s)")


def default_gateway() -> MessagingGateway:
    if runtime_config.get_notify_backend() == "smtp":
        return SmtpMessagingGateway()
    return InMemoryMessagingGateway()
