"""Single-slot scheduled callback owned by a room."""
import asyncio
from typing import Any, Awaitable, Callable, Optional

from src.logging_config import get_logger

logger = get_logger(__name__)


class RoomTimer:
    """
    Holds at most one pending callback.

    Starting a new callback cancels the previous one. When the delay elapses the
    slot is released before the callback runs, so the callback may start the next
    timer itself.
    """

    def __init__(self) -> None:
        self._task: Optional[asyncio.Task] = None
        self.label: Optional[str] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(
        self,
        delay: float,
        callback: Callable[..., Awaitable[Any]],
        *args: Any,
        label: Optional[str] = None,
    ) -> None:
        self.cancel()
        self.label = label
        self._task = asyncio.create_task(self._run(delay, callback, args))

    def cancel(self) -> None:
        if self._task is not None:
            if self._task is not asyncio.current_task():
                self._task.cancel()
            self._task = None
        self.label = None

    async def _run(self, delay: float, callback, args) -> None:
        await asyncio.sleep(delay)
        self._task = None
        self.label = None
        try:
            await callback(*args)
        except Exception as e:
            logger.exception(f"❌ Timer callback {getattr(callback, '__name__', callback)} failed: {e}")
