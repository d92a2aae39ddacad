"""Periodic driver: resolve the due set and feed it to the dispatch state machine."""

import asyncio
import time
from datetime import datetime
from typing import Callable, Optional

from logger import logger
from .dispatch import DispatchStateMachine
from .resolver import DueSetResolver


class ReminderPoller:
    """One tier's poll loop body.

    The scheduler calls tick() on a fixed interval. A tick snapshots the
    clock, reads the due set (off the event loop), and drives each reminder;
    alarm/notification/SMS work is left running in the background. A tick
    that finds the previous one still running is skipped, not queued.
    No failure inside a tick escapes it.
    """

    def __init__(
        self,
        resolver: DueSetResolver,
        machine: DispatchStateMachine,
        clock: Callable[[], datetime] = datetime.now,
        name: str = "reminders"
    ):
        self.resolver = resolver
        self.machine = machine
        self.clock = clock
        self.name = name

        self._ticking = False
        self.ticks = 0
        self.failed_ticks = 0
        self.skipped_ticks = 0
        self.last_tick_at_epoch: Optional[float] = None

    async def tick(self) -> int:
        """Run one poll cycle.

        Returns:
            Number of reminders announced by this tick
        """
        if self._ticking:
            self.skipped_ticks += 1
            logger.warning(f"[{self.name}] Previous tick still running, skipping")
            return 0

        self._ticking = True
        try:
            self.ticks += 1
            self.last_tick_at_epoch = time.time()
            try:
                now = self.clock()
                due = await asyncio.to_thread(self.resolver.find_due, now)
            except Exception as e:
                self.failed_ticks += 1
                logger.error(f"[{self.name}] Resolving due reminders failed, skipping tick: {e}")
                return 0

            announced = 0
            for reminder in due:
                try:
                    if self.machine.drive(reminder):
                        announced += 1
                except Exception as e:
                    logger.error(f"[{self.name}] Dispatch failed for reminder {reminder.id}: {e}")

            self.machine.retain(due)

            if announced:
                logger.info(f"[{self.name}] Announced {announced} reminder(s)")
            return announced
        finally:
            self._ticking = False

    def get_status(self) -> dict[str, object]:
        return {
            "name": self.name,
            "policy": self.resolver.policy.value,
            "ticks": self.ticks,
            "failed_ticks": self.failed_ticks,
            "skipped_ticks": self.skipped_ticks,
            "last_tick_at_epoch": self.last_tick_at_epoch,
            "background_tasks": self.machine.pending_tasks,
        }
