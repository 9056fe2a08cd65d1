# storefront_support/session_context.py
"""
Session

Everything we remember about one conversation:
- Identity (conversation_id, display name).
- Short-term memory (bounded message history).
- Aggregation state (pending buffer, debounce timer).
- Sticky order context (last successful order summary).
- Lifecycle (greeted flag, last activity timestamp).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Literal, Optional

from .debounce import DebounceTimer
from .models import OrderSummary


Role = Literal["user", "agent"]


@dataclass
class Message:
    """
    One message in the short-term history.
    """
    role: Role
    text: str
    timestamp: datetime


@dataclass
class Session:
    conversation_id: str
    history: List[Message] = field(default_factory=list)
    display_name: Optional[str] = None
    greeted: bool = False
    pending_buffer: List[str] = field(default_factory=list)
    debounce: DebounceTimer = field(default_factory=DebounceTimer)
    last_order_summary: Optional[OrderSummary] = None
    last_active_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    # Serializes response cycles of this conversation.
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    @property
    def busy(self) -> bool:
        """
        True while a flush is scheduled or a response cycle is running.
        """
        return self.debounce.armed or self.lock.locked()

    def touch(self, now: Optional[datetime] = None) -> None:
        self.last_active_at = now or datetime.now(timezone.utc)

    def set_display_name(self, contact_name: Optional[str]) -> None:
        """
        Keep the first name of the first contact name we see; never overwrite.
        """
        if self.display_name or not contact_name:
            return
        parts = contact_name.split()
        if parts:
            self.display_name = parts[0]

    def append_exchange(
        self, user_text: str, agent_text: str, max_turns: int, timestamp: Optional[datetime] = None
    ) -> None:
        """
        Record one user turn and the agent's full answer, keeping only the
        most recent `max_turns` exchanges.
        """
        ts = timestamp or datetime.now(timezone.utc)
        self.history.append(Message(role="user", text=user_text, timestamp=ts))
        self.history.append(Message(role="agent", text=agent_text, timestamp=ts))
        limit = max_turns * 2
        if len(self.history) > limit:
            self.history = self.history[-limit:]

    def mark_greeted(self) -> None:
        self.greeted = True
