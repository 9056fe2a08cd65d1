# storefront_support/channel_gateway.py
"""
Channel Gateway

Outbound side of the messaging channel. The bridge process that owns the
messaging connection (pairing, reconnects) exposes:
- POST {bridge}/send    {"conversation_id", "text"}
- POST {bridge}/typing  {"conversation_id", "typing": bool}

Inbound events arrive the other way, on the app's /inbound route.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx


class ChannelSendError(Exception):
    """The bridge did not accept an outbound call."""


class ChannelAdapter:
    """
    Interface the agent core talks to.
    """

    async def send_text(self, conversation_id: str, text: str) -> None:
        raise NotImplementedError

    async def set_typing(self, conversation_id: str, typing: bool) -> None:
        raise NotImplementedError


class HttpChannelGateway(ChannelAdapter):
    def __init__(
        self,
        bridge_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self.bridge_url = bridge_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def _post(self, path: str, payload: Dict[str, Any]) -> None:
        if not self.bridge_url:
            raise ChannelSendError("CHANNEL_BRIDGE_URL is not configured")
        try:
            resp = await self._client.post(f"{self.bridge_url}{path}", json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise ChannelSendError(f"POST {path} failed: {exc}") from exc

    async def send_text(self, conversation_id: str, text: str) -> None:
        await self._post("/send", {"conversation_id": conversation_id, "text": text})

    async def set_typing(self, conversation_id: str, typing: bool) -> None:
        await self._post("/typing", {"conversation_id": conversation_id, "typing": typing})

    async def aclose(self) -> None:
        await self._client.aclose()
