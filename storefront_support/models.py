# storefront_support/models.py
"""
Pydantic models for the inbound channel payload, the HTTP responses and
internal structures that need to be serialized (e.g., OrderSummary).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class InboundMessage(BaseModel):
    """
    One inbound message event posted by the channel bridge.

    Media (audio / image) arrives base64-encoded and is turned into text
    before it reaches the aggregator.
    """
    conversation_id: str = Field(..., description="Stable chat identifier from the channel")
    sender_display_name: Optional[str] = Field(None, description="Contact name, if known")
    body_text: str = Field("", description="Message text")
    media_type: Optional[str] = Field(None, description="e.g. 'chat', 'audio', 'ptt', 'image'")
    media_data: Optional[str] = Field(None, description="Base64 media payload")
    media_mime: Optional[str] = None


class InboundAck(BaseModel):
    """
    Immediate answer to the channel bridge. The reply itself is sent
    later, through the channel gateway, once the debounce window closes.
    """
    accepted: bool
    buffered: int = 0


class OrderSummary(BaseModel):
    """
    Compact, read-only view of a commerce order used as reply context.
    """
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[str] = None
    financial_status: Optional[str] = None
    fulfillment_status: Optional[str] = None
    status: str
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None
    tracking_carrier: Optional[str] = None


class SessionSnapshot(BaseModel):
    """
    Lightweight snapshot of a conversation, returned for debugging.
    """
    conversation_id: str
    display_name: Optional[str]
    greeted: bool
    pending_messages: int
    history_length: int
    last_order_summary: Optional[OrderSummary]
    last_active_at: datetime

    @classmethod
    def from_session(cls, session) -> "SessionSnapshot":
        return cls(
            conversation_id=session.conversation_id,
            display_name=session.display_name,
            greeted=session.greeted,
            pending_messages=len(session.pending_buffer),
            history_length=len(session.history),
            last_order_summary=session.last_order_summary,
            last_active_at=session.last_active_at,
        )
