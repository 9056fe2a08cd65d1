# storefront_support/commerce_gateway.py
"""
Commerce Gateway

Encapsulates all calls to the store's admin API (Shopify):
- find_by_order_number
- find_by_email
- find_by_tax_id (CPF / CNPJ, by scanning recent orders)

Keeping this separate lets you:
- Swap out the commerce backend later.
- Centralize error handling and timeouts.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx

from .identifier_extractor import only_digits

logger = logging.getLogger(__name__)

RawOrder = Dict[str, Any]

TAX_ID_ATTRIBUTE_KEYS = {"cpf", "cnpj", "documento", "document", "tax_id", "doc", "cpf/cnpj"}

SCAN_FIELDS = (
    "id,name,created_at,email,customer,financial_status,fulfillment_status,"
    "fulfillments,phone,billing_address,shipping_address,note,note_attributes,tags"
)


class CommerceGatewayError(Exception):
    """The commerce backend answered with an error status."""


class ShopifyGateway:
    def __init__(
        self,
        store_url: str,
        api_token: str,
        api_version: str = "2024-10",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 20.0,
    ) -> None:
        self.configured = bool(store_url and api_token)
        if not self.configured:
            logger.error("Shopify is not configured; set SHOPIFY_STORE_URL and SHOPIFY_API_TOKEN")
        base_url = f"{store_url.rstrip('/')}/admin/api/{api_version}" if self.configured else ""
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "X-Shopify-Access-Token": api_token,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_orders(self, params: Dict[str, Any]) -> List[RawOrder]:
        if not self.configured:
            return []

        query = {"status": "any"}
        query.update({k: v for k, v in params.items() if v not in (None, "")})
        resp = await self._client.get("/orders.json", params=query)
        if resp.is_error:
            raise CommerceGatewayError(
                f"Shopify GET /orders.json failed {resp.status_code}: {resp.text}"
            )
        return resp.json().get("orders") or []

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------
    async def find_by_order_number(self, number: str) -> Optional[RawOrder]:
        name = f"#{str(number).lstrip('#')}"
        orders = await self._get_orders({"name": name, "limit": 1})
        if orders:
            logger.info("Order found by number %s", name)
            return orders[0]
        logger.info("No order found by number %s", name)
        return None

    async def find_by_email(self, email: str, limit: int = 5) -> List[RawOrder]:
        orders = await self._get_orders({"email": email, "limit": limit})
        logger.info("Found %d orders by email %s", len(orders), email)
        return orders

    async def find_by_tax_id(self, raw: str, days: int = 120, limit: int = 250) -> Optional[RawOrder]:
        """
        CPF (11 digits) or CNPJ (14 digits). The admin API cannot filter on
        it, so recent orders are scanned for the digits.
        """
        digits = only_digits(raw)
        if len(digits) == 11:
            label = "CPF"
        elif len(digits) == 14:
            label = "CNPJ"
        else:
            return None

        created_at_min = (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()
        orders = await self._get_orders(
            {
                "created_at_min": created_at_min,
                "order": "created_at desc",
                "limit": limit,
                "fields": SCAN_FIELDS,
            }
        )

        for order in orders:
            where = match_tax_id(order, digits)
            if where:
                logger.info("Order %s found by %s in %s", order.get("name"), label, where)
                return order

        logger.info("No order found by %s %s", label, digits)
        return None


def match_tax_id(order: RawOrder, digits: str) -> Optional[str]:
    """
    Return which part of the order mentions the tax ID digits, or None.
    """

    def contains(text: Any) -> bool:
        return bool(text) and digits in only_digits(str(text))

    for attr in order.get("note_attributes") or []:
        key = str(attr.get("name") or "").lower()
        if key in TAX_ID_ATTRIBUTE_KEYS and contains(attr.get("value")):
            return "note_attributes"

    tags = order.get("tags")
    if isinstance(tags, list):
        tags = " ".join(str(t) for t in tags)
    if contains(tags):
        return "tags"

    billing = order.get("billing_address") or {}
    shipping = order.get("shipping_address") or {}
    address_parts = [
        billing.get("company"), billing.get("address1"), billing.get("address2"),
        shipping.get("company"), shipping.get("address1"), shipping.get("address2"),
        billing.get("name"), shipping.get("name"),
    ]
    if contains(" ".join(str(p) for p in address_parts if p)):
        return "address"

    if contains(order.get("note")):
        return "note"

    if contains(json.dumps(order, default=str)):
        return "full scan"

    return None
