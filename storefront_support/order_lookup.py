# storefront_support/order_lookup.py
"""
Order Lookup

Resolves an IdentifierCandidate to an OrderSummary through the commerce
gateway, and derives the summary (status label, tracking info) from the
raw order record.

Lookups are best-effort: any failure is logged and reported as "no
summary", so the reply is never blocked by the commerce backend.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from .identifier_extractor import IdentifierCandidate
from .models import OrderSummary

logger = logging.getLogger(__name__)


def _created_at(fulfillment: Dict[str, Any]) -> Tuple[int, Optional[datetime]]:
    """
    Sort key: undated records first, dated ones by absolute time.
    """
    raw = fulfillment.get("created_at")
    if not raw:
        return (0, None)
    try:
        parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return (0, None)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (1, parsed)


def extract_tracking(order: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """
    Tracking number and carrier from the most recently created fulfillment
    that carries one.
    """
    fulfillments = [f for f in order.get("fulfillments") or [] if isinstance(f, dict)]
    # Stable sort keeps the API order for records without created_at.
    fulfillments.sort(key=_created_at)
    for fulfillment in reversed(fulfillments):
        number = fulfillment.get("tracking_number")
        if not number:
            numbers = fulfillment.get("tracking_numbers") or []
            number = numbers[0] if numbers else None
        if number:
            return number, fulfillment.get("tracking_company")
    return None, None


def derive_status(order: Dict[str, Any], tracking_number: Optional[str]) -> str:
    fulfillment_status = order.get("fulfillment_status")
    if order.get("cancelled_at"):
        return "cancelled"
    if fulfillment_status == "fulfilled":
        return "shipped"
    if fulfillment_status == "partial":
        return "partially shipped"
    if fulfillment_status == "restocked":
        return "restocked"
    if fulfillment_status is None and tracking_number:
        return "shipped"
    return "processing"


def summarize_order(order: Dict[str, Any], tracking_url_template: str) -> OrderSummary:
    tracking_number, carrier = extract_tracking(order)
    tracking_url = (
        tracking_url_template.format(tracking_number=tracking_number) if tracking_number else None
    )
    customer = order.get("customer") or {}
    billing = order.get("billing_address") or {}

    summary = OrderSummary(
        id=order.get("id"),
        name=order.get("name"),
        email=order.get("email") or customer.get("email"),
        phone=order.get("phone") or customer.get("phone") or billing.get("phone"),
        created_at=order.get("created_at"),
        financial_status=order.get("financial_status"),
        fulfillment_status=order.get("fulfillment_status"),
        status=derive_status(order, tracking_number),
        tracking_number=tracking_number,
        tracking_url=tracking_url,
        tracking_carrier=carrier,
    )
    logger.info(
        "Order summary: name=%s status=%s tracking=%s url=%s",
        summary.name,
        summary.status,
        summary.tracking_number,
        summary.tracking_url,
    )
    return summary


class OrderLookup:
    """
    Wraps a commerce backend exposing find_by_order_number / find_by_email /
    find_by_tax_id (see ShopifyGateway).
    """

    def __init__(self, backend, tracking_url_template: str) -> None:
        self.backend = backend
        self.tracking_url_template = tracking_url_template

    async def lookup(self, candidate: IdentifierCandidate) -> Optional[OrderSummary]:
        try:
            order = await self._find(candidate)
        except Exception:
            logger.exception("Order lookup failed for %s %r", candidate.kind, candidate.value)
            return None

        if not order:
            logger.info("No order for %s %r", candidate.kind, candidate.value)
            return None
        return summarize_order(order, self.tracking_url_template)

    async def _find(self, candidate: IdentifierCandidate) -> Optional[Dict[str, Any]]:
        if candidate.kind == "order_number":
            return await self.backend.find_by_order_number(candidate.value)
        if candidate.kind == "email":
            orders = await self.backend.find_by_email(candidate.value)
            return orders[0] if orders else None
        if candidate.kind == "tax_id":
            return await self.backend.find_by_tax_id(candidate.value)
        return None
