"""Ring the alarm a bounded number of times."""

import asyncio
from typing import Awaitable, Callable

from logger import logger


class AlarmSequencer:
    """Plays the audio sink `rings` times, `interval` seconds apart.

    The sink's play() may block, so each ring runs in a worker thread and the
    event loop (and with it the poller) keeps going. A failed ring is logged
    and the sequence carries on; there is no rollback.
    """

    def __init__(
        self,
        sink,
        interval: float,
        sleep: Callable[[float], Awaitable] = asyncio.sleep
    ):
        self.sink = sink
        self.interval = interval
        self._sleep = sleep

    async def play_sequence(self, rings: int) -> int:
        """Play the alarm `rings` times.

        Returns:
            Number of rings the sink reported as played
        """
        if rings < 1:
            raise ValueError(f"rings must be >= 1, got {rings}")

        logger.info(f"Playing alarm {rings} time(s)")
        played = 0

        for ring in range(1, rings + 1):
            try:
                if await asyncio.to_thread(self.sink.play):
                    played += 1
                else:
                    logger.warning(f"Alarm ring {ring}/{rings} failed: sink unavailable")
            except Exception as e:
                logger.error(f"Alarm ring {ring}/{rings} failed: {e}")

            if ring < rings:
                await self._sleep(self.interval)

        if played < rings:
            logger.warning(f"Alarm sequence degraded: {played}/{rings} rings played")
        return played
