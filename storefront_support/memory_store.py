# storefront_support/memory_store.py
"""
MemoryStore

A very simple in-memory store for Session objects, keyed by the
channel-provided conversation identifier.

All mutation happens on the event loop thread, so a plain dict is enough.
Sessions are not persistent across restarts.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from .session_context import Session

logger = logging.getLogger(__name__)


class MemoryStore:
    """
    In-memory dictionary-based session store with an idle reaper.
    """

    def __init__(self) -> None:
        self._store: Dict[str, Session] = {}
        self._reaper: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._store

    def get(self, conversation_id: str) -> Optional[Session]:
        return self._store.get(conversation_id)

    def get_or_create(self, conversation_id: str) -> Session:
        """
        Return the session for this conversation, creating an empty one on
        first contact.
        """
        session = self._store.get(conversation_id)
        if session is None:
            session = Session(conversation_id=conversation_id)
            self._store[conversation_id] = session
        return session

    def sweep(self, idle_threshold_minutes: float, now: Optional[datetime] = None) -> List[str]:
        """
        Remove sessions idle for longer than the threshold. Sessions with a
        scheduled flush or a running response cycle are left alone.

        Returns the removed conversation ids.
        """
        now = now or datetime.now(timezone.utc)
        threshold = timedelta(minutes=idle_threshold_minutes)
        to_delete = []
        for conversation_id, session in self._store.items():
            if session.busy:
                continue
            idle = now - session.last_active_at
            if idle > threshold:
                to_delete.append((conversation_id, idle))
        for conversation_id, idle in to_delete:
            self._store.pop(conversation_id, None)
            logger.info(
                "Reaped idle session %s (%.1f min without activity)",
                conversation_id,
                idle.total_seconds() / 60,
            )
        return [conversation_id for conversation_id, _ in to_delete]

    # -------------------------------------------------------------------------
    # Periodic reaping
    # -------------------------------------------------------------------------
    def start_reaper(self, interval_minutes: float, idle_threshold_minutes: float) -> asyncio.Task:
        if self._reaper is None or self._reaper.done():
            self._reaper = asyncio.get_running_loop().create_task(
                self._reap_forever(interval_minutes * 60, idle_threshold_minutes)
            )
        return self._reaper

    async def stop_reaper(self) -> None:
        reaper, self._reaper = self._reaper, None
        if reaper is None:
            return
        reaper.cancel()
        try:
            await reaper
        except asyncio.CancelledError:
            pass

    async def _reap_forever(self, interval_seconds: float, idle_threshold_minutes: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            self.sweep(idle_threshold_minutes)
