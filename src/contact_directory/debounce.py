from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Collapse bursts of calls into one call of ``fn`` after ``delay`` seconds.

    Each call cancels the pending timer, so only the arguments of the last
    call in a burst reach ``fn``. Coroutine results are run as tasks on the
    loop. Must be called from within a running event loop.
    """

    def __init__(self, fn: Callable[..., Any], delay: float = 0.35) -> None:
        self.fn = fn
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._fired: asyncio.Future | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        if self._fired is None or self._fired.done():
            self._fired = loop.create_future()
        self._handle = loop.call_later(self.delay, self._fire, args, kwargs)

    def _fire(self, args: tuple, kwargs: dict) -> None:
        self._handle = None
        fired, self._fired = self._fired, None
        try:
            result = self.fn(*args, **kwargs)
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
        finally:
            if fired is not None and not fired.done():
                fired.set_result(None)

    def cancel(self) -> None:
        """Drop the pending call, if any. In-flight tasks keep running."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._fired is not None and not self._fired.done():
            self._fired.cancel()
        self._fired = None

    async def wait(self) -> None:
        """Wait for the pending call to fire and for every task it started."""
        fired = self._fired
        if fired is not None:
            try:
                await asyncio.shield(fired)
            except asyncio.CancelledError:
                # a cancelled timer settles the wait; our own cancellation does not
                if not fired.cancelled():
                    raise
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Teardown: cancel the pending timer and any in-flight tasks."""
        self.cancel()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug("Debouncer closed (%d task(s) cancelled)", len(tasks))
