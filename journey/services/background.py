"""
Journey Backend — Detached Background Tasks
============================================

What:  Runs fire-and-forget coroutines (the owner confirmation email) outside
       the request that scheduled them.
Why:   FastAPI handlers are cancelled with their request; a task created with
       asyncio.create_task is not. The dispatcher keeps a strong reference to
       each task until it finishes, logs any failure, and lets the lifespan
       wait for stragglers on shutdown.

Failure policy:
    A detached task never raises into anyone. Its exception is logged once,
    here, and dropped. No retries.
"""

import asyncio
import logging
from typing import Coroutine, Set

logger = logging.getLogger(__name__)


class BackgroundDispatcher:
    """Tracks detached tasks for one application instance."""

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine, name: str) -> asyncio.Task:
        """Schedule `coro` on the running loop and return immediately."""
        task = asyncio.create_task(self._run(coro, name), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, coro: Coroutine, name: str) -> None:
        try:
            await coro
        except asyncio.CancelledError:
            logger.warning("Background task %s was cancelled", name)
            raise
        except Exception:
            logger.error("Background task %s failed", name, exc_info=True)

    async def drain(self, timeout: float) -> None:
        """
        Wait up to `timeout` seconds for pending tasks, then cancel the rest.

        Called from the lifespan before the database pool is disposed, so an
        email in flight can still read its trip.
        """
        if not self._tasks:
            return

        pending_tasks = set(self._tasks)
        logger.info("Waiting up to %.1fs for %d background task(s)", timeout, len(pending_tasks))
        _, still_running = await asyncio.wait(pending_tasks, timeout=timeout)

        for task in still_running:
            task.cancel()
        if still_running:
            logger.warning("Cancelled %d background task(s) at shutdown", len(still_running))
            await asyncio.gather(*still_running, return_exceptions=True)
