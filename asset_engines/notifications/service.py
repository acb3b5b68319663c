from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from asset_engines.common.errors import ExternalDeliveryError, ValidationError
from asset_engines.common.identity import RequestContext
from asset_engines.config import runtime_config
from asset_engines.notifications.gateway import MessagingGateway, default_gateway
from asset_engines.notifications.models import DeliveryResult, NotificationPayload

logger = logging.getLogger(__name__)


def location_reference(ctx: RequestContext, row_reference: int) -> str:
    base = runtime_config.get_sheet_url()
    if base:
        return f"{base}#row={row_reference}"
    return f"{ctx.tenant_id}/{ctx.env}/{ctx.project_id}#row={row_reference}"


class NotificationService:
    """Composes and sends the Requires Attention notice."""

    def __init__(self, gateway: Optional[MessagingGateway] = None) -> None:
        self.gateway = gateway or default_gateway()

    def compose_attention_notice(
        self,
        ctx: RequestContext,
        record: Dict[str, Any],
        row_reference: int,
        comment: str,
    ) -> NotificationPayload:
        text = (comment or "").strip()
        if not text:
            raise ValidationError("A comment is required for Requires Attention", details={"field": "comment"})
        asset_id = str(record.get("id") or "")
        asset_name = str(record.get("asset_name") or "")
        link = location_reference(ctx, row_reference)
        body = (
            f"Asset {asset_id} ({asset_name}) requires attention.\n\n"
            f"Area: {record.get('area') or '-'}\n"
            f"Venue: {record.get('venue') or '-'}\n"
            f"Location: {record.get('location') or '-'}\n"
            f"Row: {link}\n\n"
            f"Comment:\n{text}\n"
        )
        return NotificationPayload(
            asset_id=asset_id,
            asset_name=asset_name,
            area=str(record.get("area") or ""),
            venue=str(record.get("venue") or ""),
            location=str(record.get("location") or ""),
            row_reference=row_reference,
            location_reference=link,
            comment=text,
            recipients=self.gateway.recipients(ctx),
            subject=f"[Requires Attention] {asset_id} - {asset_name}",
            body=body,
        )

    def send(self, payload: NotificationPayload) -> DeliveryResult:
        try:
            result = self.gateway.send_notification(payload)
        except Exception as exc:
            logger.warning("Notification for %s raised: %s", payload.asset_id, exc)
            raise ExternalDeliveryError(f"Notification delivery failed: {exc}") from exc
        if not result.success:
            logger.warning("Notification for %s not delivered: %s", payload.asset_id, result.message)
            raise ExternalDeliveryError(
                f"Notification delivery failed: {result.message}",
                details={"asset_id": payload.asset_id},
            )
        logger.info("Attention notice sent for %s", payload.asset_id)
        return result


_default_service: Optional[NotificationService] = None


def get_notification_service() -> NotificationService:
    global _default_service
    if _default_service is None:
        _default_service = NotificationService()
    return _default_service


def set_notification_service(service: NotificationService) -> None:
    global _default_service
    _default_service = service
