from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from .config import MIN_DISPLAY_SECONDS
from .selection import EmptySelectionError, SelectionState, select_random

logger = logging.getLogger(__name__)


class RotationScheduler:
    def __init__(self, state: SelectionState, files: Sequence[str], display_seconds: int) -> None:
        self._state = state
        self._files = tuple(files)
        self._display_seconds = display_seconds
        self._task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval(self) -> int:
        return max(MIN_DISPLAY_SECONDS, self._display_seconds)

    def start(self) -> None:
        if self._task is None:
            self._running = True
            self.tick()
            self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    def tick(self) -> str | None:
        try:
            image = select_random(self._files)
        except EmptySelectionError as exc:
            logger.warning("no image to display: %s", exc)
            return None

        self._state.set(image)
        logger.info("displaying image: %s", image)
        return image

    async def _loop(self) -> None:
        while self._running:
            await asyncio.sleep(self.interval)
            self.tick()
