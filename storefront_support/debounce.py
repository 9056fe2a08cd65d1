# storefront_support/debounce.py
"""
DebounceTimer

One re-armable scheduled flush per conversation.

- arm()    : schedule the callback after `delay` seconds, cancelling any
             flush that has not fired yet.
- cancel() : drop the pending flush (no-op once it has fired).
- armed    : True while a flush is scheduled and has not fired.

Once the delay has elapsed the timer detaches from the running task, so a
later arm()/cancel() can never interrupt a flush that is already running.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

FlushCallback = Callable[[], Awaitable[None]]


class DebounceTimer:
    def __init__(self) -> None:
        self._task: Optional[asyncio.Task] = None

    @property
    def armed(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self, delay: float, callback: FlushCallback) -> asyncio.Task:
        """
        (Re)schedule the flush. Must be called from inside the event loop.
        """
        self.cancel()
        task = asyncio.get_running_loop().create_task(self._run(delay, callback))
        self._task = task
        return task

    def cancel(self) -> bool:
        task, self._task = self._task, None
        if task is None or task.done():
            return False
        task.cancel()
        return True

    async def _run(self, delay: float, callback: FlushCallback) -> None:
        await asyncio.sleep(delay)
        if self._task is asyncio.current_task():
            self._task = None
        await callback()
