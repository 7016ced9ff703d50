from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Continuation = Callable[[str], Awaitable[None]]


class SessionTimers:
    """Delayed continuations keyed by (session_id, label).

    - A continuation receives only the session id and must re-resolve the
      session itself; the session may have been torn down meanwhile.
    - One pending timer per key; scheduling an existing key is a no-op.
    - Failures are logged and stay inside the task so one session can't
      disturb another.
    """

    def __init__(self) -> None:
        self._tasks: dict[tuple[str, str], asyncio.Task[None]] = {}

    def schedule(self, session_id: str, label: str, delay: float, callback: Continuation) -> bool:
        key = (session_id, label)
        if key in self._tasks:
            logger.debug("timer skip session=%s label=%s already scheduled", session_id, label)
            return False

        task = asyncio.get_running_loop().create_task(self._run(key, delay, callback))
        self._tasks[key] = task
        logger.debug("timer set session=%s label=%s delay=%.2fs", session_id, label, delay)
        return True

    async def _run(self, key: tuple[str, str], delay: float, callback: Continuation) -> None:
        session_id, label = key
        try:
            await asyncio.sleep(delay)
            # Free the key before running so the continuation may schedule the same label again.
            self._tasks.pop(key, None)
            await callback(session_id)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("timer failed session=%s label=%s", session_id, label)
        finally:
            if self._tasks.get(key) is asyncio.current_task():
                self._tasks.pop(key, None)

    def is_scheduled(self, session_id: str, label: str) -> bool:
        return (session_id, label) in self._tasks

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self, *, max_rounds: int = 1000) -> None:
        """Wait until no continuation is pending, including ones scheduled while waiting."""

        for _ in range(max_rounds):
            tasks = list(self._tasks.values())
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)
        raise RuntimeError("timers did not settle")

    def cancel_all(self) -> None:
        for task in self._tasks.values():
            task.cancel()
        self._tasks.clear()
