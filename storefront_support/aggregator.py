# storefront_support/aggregator.py
"""
Message Aggregator

Coalesces bursts of inbound messages into one turn per conversation.

Per session:
  Idle       -- message -->  Buffering (buffer += text, timer armed)
  Buffering  -- message -->  Buffering (buffer += text, timer re-armed)
  Buffering  -- timer   -->  Flushing  (buffer swapped out, joined with "\n",
                                        on_turn(session, text) awaited)
  Flushing   -- done    -->  Idle, or Buffering if messages arrived meanwhile

The first turn of a session waits longer, since first contact often comes
in several quick fragments.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Set

from .memory_store import MemoryStore
from .session_context import Session

logger = logging.getLogger(__name__)

TurnHandler = Callable[[Session, str], Awaitable[None]]


class MessageAggregator:
    def __init__(
        self,
        memory_store: MemoryStore,
        on_turn: TurnHandler,
        first_window: float = 25.0,
        followup_window: float = 10.0,
    ) -> None:
        self.memory_store = memory_store
        self.on_turn = on_turn
        self.first_window = first_window
        self.followup_window = followup_window
        self._tasks: Set[asyncio.Task] = set()

    def window_for(self, session: Session) -> float:
        return self.followup_window if session.greeted else self.first_window

    def receive(self, conversation_id: str, text: str) -> Session:
        """
        Buffer one message and (re)arm the session's flush timer.
        """
        session = self.memory_store.get_or_create(conversation_id)
        session.pending_buffer.append(text)
        task = session.debounce.arm(self.window_for(session), lambda: self._flush(session))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return session

    async def _flush(self, session: Session) -> None:
        texts, session.pending_buffer = session.pending_buffer, []
        if not texts:
            return
        turn_text = "\n".join(texts)
        logger.info(
            "Flushing %d message(s) for %s", len(texts), session.conversation_id
        )
        await self.on_turn(session, turn_text)

    async def drain(self) -> None:
        """
        Wait until every scheduled flush has fired and finished.
        """
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
