from __future__ import annotations

import asyncio
from typing import Callable, List, Optional

from .logs import log
from .models import ProgressState

ProgressCallback = Callable[[ProgressState], None]


class ProgressTracker:
    """Observable ProgressState for one pipeline run.

    Every transition is pushed to the subscribed callbacks and, when given,
    onto an ``asyncio.Queue`` consumed by the UI side. Advisory only.
    """

    def __init__(self, queue: Optional[asyncio.Queue] = None, quiet: bool = False):
        self.quiet = quiet
        self._state = ProgressState()
        self._subscribers: List[ProgressCallback] = []
        self._queue = queue

    @property
    def state(self) -> ProgressState:
        return self._state

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, state: ProgressState) -> None:
        self._state = state
        # subscribers are advisory: a failing one must not stop the batch
        for cb in list(self._subscribers):
            try:
                cb(state)
            except Exception as e:
                log(f"progress subscriber failed at {state.current}/{state.total}: {e!r}", self.quiet)
        if self._queue is not None:
            try:
                self._queue.put_nowait(state)
            except asyncio.QueueFull:
                log(f"progress queue full, dropped {state.current}/{state.total}", self.quiet)

    def start(self, total: int) -> None:
        self._publish(ProgressState(0, total))

    def advance(self) -> None:
        cur = self._state
        if cur.current >= cur.total:
            raise RuntimeError(f"progress already complete ({cur.current}/{cur.total})")
        self._publish(ProgressState(cur.current + 1, cur.total))

    def reset(self) -> None:
        self._publish(ProgressState())
