# storefront_support/agent_core.py
"""
AgentCore

This is the main "brain" of the support agent.

Responsibilities:
- Accept inbound channel events, turn media into text and hand the text to
  the MessageAggregator.
- On every flushed turn:
  - Look for an order number / email / tax ID in the text.
  - Resolve it through OrderLookup and cache the summary on the session
    (sticky: a failed lookup keeps the previous summary).
  - Compose the reply with ResponseComposer.
  - Send each chunk through the channel, paced like a human typing.
  - Mark the session greeted and active.

Nothing raised while answering escapes this module: the customer gets an
apology instead and the conversation loop keeps running.

This module does NOT:
- Deal with HTTP / FastAPI directly (that happens in app.py).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from . import prompts
from .aggregator import MessageAggregator
from .channel_gateway import ChannelAdapter
from .identifier_extractor import extract_identifier
from .media_interpreter import MediaInterpreter
from .memory_store import MemoryStore
from .models import InboundAck, InboundMessage, OrderSummary
from .order_lookup import OrderLookup
from .response_composer import ResponseComposer
from .session_context import Session

logger = logging.getLogger(__name__)


class AgentCore:
    """
    The core conversation engine.

    You typically create this once at startup and reuse it for all events.
    """

    def __init__(
        self,
        memory_store: MemoryStore,
        order_lookup: OrderLookup,
        composer: ResponseComposer,
        channel: ChannelAdapter,
        media_interpreter: Optional[MediaInterpreter] = None,
        *,
        first_window: float = 25.0,
        followup_window: float = 10.0,
        typing_delay: float = 1.5,
        chunk_delay: float = 1.0,
    ) -> None:
        self.memory_store = memory_store
        self.order_lookup = order_lookup
        self.composer = composer
        self.channel = channel
        self.media_interpreter = media_interpreter
        self.typing_delay = typing_delay
        self.chunk_delay = chunk_delay
        self.aggregator = MessageAggregator(
            memory_store,
            self.run_turn,
            first_window=first_window,
            followup_window=followup_window,
        )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------
    async def handle_inbound(self, event: InboundMessage) -> InboundAck:
        """
        Entry point for one inbound channel event. Returns as soon as the
        message is buffered; the reply follows after the debounce window.
        """
        try:
            text = await self._event_text(event)
        except Exception:
            logger.exception("Could not interpret inbound message from %s", event.conversation_id)
            await self._send(event.conversation_id, prompts.GENERIC_APOLOGY)
            return InboundAck(accepted=False)

        if not text:
            return InboundAck(accepted=False)

        session = self.memory_store.get_or_create(event.conversation_id)
        session.set_display_name(event.sender_display_name)
        self.aggregator.receive(event.conversation_id, text)
        return InboundAck(accepted=True, buffered=len(session.pending_buffer))

    async def run_turn(self, session: Session, turn_text: str) -> None:
        """
        One full response cycle. Cycles of the same conversation never overlap.
        """
        async with session.lock:
            try:
                await self._respond(session, turn_text)
            except Exception:
                logger.exception("Unhandled error while answering %s", session.conversation_id)
                await self._send(session.conversation_id, prompts.GENERIC_APOLOGY)
            finally:
                session.mark_greeted()
                session.touch()
                await self._set_typing(session.conversation_id, False)

    async def shutdown(self) -> None:
        await self.aggregator.cancel_all()

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------
    async def _event_text(self, event: InboundMessage) -> str:
        if self.media_interpreter is not None and self.media_interpreter.handles(event):
            return await self.media_interpreter.to_text(event)
        return (event.body_text or "").strip()

    async def _respond(self, session: Session, turn_text: str) -> None:
        is_first_turn = not session.greeted
        conversation_id = session.conversation_id

        if is_first_turn:
            await self._set_typing(conversation_id, True)
        else:
            await asyncio.sleep(self.typing_delay)
            await self._set_typing(conversation_id, True)
            await asyncio.sleep(self.typing_delay)

        order_summary = await self._resolve_order(session, turn_text)
        replies = await self.composer.compose(session, turn_text, order_summary, is_first_turn)

        for part in replies:
            await self._send(conversation_id, part)
            await asyncio.sleep(self.chunk_delay)

    async def _resolve_order(self, session: Session, turn_text: str) -> Optional[OrderSummary]:
        """
        Fresh lookup when the turn mentions an identifier; otherwise (or on
        failure) the summary remembered from an earlier turn.
        """
        candidate = extract_identifier(turn_text)
        if candidate is not None:
            summary = await self.order_lookup.lookup(candidate)
            if summary is not None:
                session.last_order_summary = summary
        return session.last_order_summary

    async def _send(self, conversation_id: str, text: str) -> None:
        try:
            await self.channel.send_text(conversation_id, text)
        except Exception:
            logger.exception("Failed to send message to %s", conversation_id)

    async def _set_typing(self, conversation_id: str, typing: bool) -> None:
        try:
            await self.channel.set_typing(conversation_id, typing)
        except Exception:
            logger.warning("Typing indicator update failed for %s", conversation_id, exc_info=True)
