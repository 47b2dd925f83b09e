"""Tick scheduling: one advance per frame, then a render step."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

from .simulation import ProximityEvent, ProximityHandler, World, log_proximity

logger = logging.getLogger(__name__)

RenderCallback = Callable[[dict, List[ProximityEvent]], Awaitable[None]]


# Wall-clock epoch of the monotonic origin, fixed at import
_EPOCH_MS = time.time() * 1000.0 - time.monotonic() * 1000.0


def wall_clock_ms() -> float:
    """Milliseconds since the epoch, steady against system clock changes."""
    return _EPOCH_MS + time.monotonic() * 1000.0


class TickScheduler:
    """
    Drives ``World.advance`` at most once per distinct timestamp.

    Actor motion accumulates, so replaying a tick with the same ``now`` would
    move every shark and fish twice. ``tick`` refuses timestamps that do not
    move past the previous one.
    """

    def __init__(
        self,
        world: World,
        on_proximity: Optional[ProximityHandler] = log_proximity,
        clock: Callable[[], float] = wall_clock_ms,
    ):
        self.world = world
        self.on_proximity = on_proximity
        self.clock = clock
        self.lock = asyncio.Lock()
        self.skipped = 0

    def tick(self, now: float) -> Optional[List[ProximityEvent]]:
        """Advance once for ``now``; ``None`` if the tick was skipped."""
        last = self.world.last_now
        if last is not None and not now > last:
            self.skipped += 1
            logger.debug("Skipping tick: now=%r does not follow %r", now, last)
            return None
        return self.world.advance(now, self.on_proximity)

    async def run(
        self,
        render: RenderCallback,
        interval: float,
        max_ticks: Optional[int] = None,
    ) -> int:
        """
        Tick, render, sleep; repeat until cancelled or ``max_ticks`` rendered.

        The state snapshot is taken under ``lock`` together with the tick;
        rendering happens outside it.

        Returns:
            Number of frames rendered
        """
        logger.info("Tick loop started (interval=%.4fs)", interval)
        rendered = 0
        try:
            while max_ticks is None or rendered < max_ticks:
                async with self.lock:
                    events = self.tick(self.clock())
                    state = self.world.get_state() if events is not None else None

                if state is not None:
                    await render(state, events)
                    rendered += 1

                await asyncio.sleep(interval)
        finally:
            logger.info("Tick loop stopped after %d frames", rendered)
        return rendered
