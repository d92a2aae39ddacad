"""Dispatch state machine: announce each due reminder once, SMS at most once.

States:
- Announce (process-local, per activation): PENDING -> ANNOUNCED.
  An activation is one due moment of a reminder, keyed by (id, due_at), so a
  rescheduled reminder is announced again. The announced set lives and dies
  with the process; after a restart a reminder still inside its match window
  is announced again.
- SMS (durable, per reminder): NOT_SENT -> SENT, backed by the store's
  sms_sent flag. Read the flag, send only if false, persist only on success.

Transitions:
- PENDING -> ANNOUNCED: first tick that sees the activation due. Fans out to
  the alarm, the desktop notification and the SMS channel as background tasks.
- ANNOUNCED, SMS not delivered: later ticks that still see the activation due
  retry the SMS only. Alarm and notification never repeat.
- Each successful tick passes its due set to retain(). Activations missing
  from it can no longer become due, so their keys are dropped and the sets
  stay bounded by the reminders currently due.

Ticks run one at a time on the event loop and drive() has no await between
the membership check and the insert, so no per-id lock is needed. Parallel
ticks would need one.
"""

import asyncio
from typing import Iterable, Optional

from logger import logger
from .alarm import AlarmSequencer
from .models import AnnounceState, Reminder, SmsOutcome, SmsState
from .notifier import NotificationDispatcher


class DispatchStateMachine:
    """Drives due reminders through announce and SMS states for one tier."""

    def __init__(
        self,
        store,
        notifier: NotificationDispatcher,
        alarm: Optional[AlarmSequencer] = None,
        name: str = "dispatch"
    ):
        """
        Args:
            store: get_sms_sent(id) / set_sms_sent(id, True) backend
            notifier: Notification and SMS fan-out
            alarm: Alarm sequencer, or None when audio is disabled
            name: Tier name for logging and task names
        """
        self.store = store
        self.notifier = notifier
        self.alarm = alarm
        self.name = name

        self._announced: set[tuple] = set()
        self._sms_in_flight: set[tuple] = set()
        self._sms_delivered: set[tuple] = set()
        self._tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Announce
    # ------------------------------------------------------------------

    def announce_state(self, reminder: Reminder) -> AnnounceState:
        if reminder.activation_key in self._announced:
            return AnnounceState.ANNOUNCED
        return AnnounceState.PENDING

    def drive(self, reminder: Reminder) -> bool:
        """Advance a due reminder. Must be called from the event loop.

        Returns:
            True if this call announced the reminder
        """
        key = reminder.activation_key
        announcing = key not in self._announced
        if announcing:
            self._announced.add(key)
            logger.info(f"[{self.name}] Time up: reminder {reminder.id} '{reminder.title}'")

            if self.alarm is not None:
                rings = max(1, reminder.repeat_count or 1)
                self._spawn(self.alarm.play_sequence(rings), f"alarm-{reminder.id}")
            if self.notifier.notification_sink is not None:
                self._spawn(self.notifier.local_alert(reminder), f"notify-{reminder.id}")

        if self.notifier.sms_enabled and reminder.phone and self._claim_sms(key) is None:
            self._spawn(self._run_sms(reminder), f"sms-{reminder.id}")

        return announcing

    def retain(self, due: Iterable[Reminder]) -> None:
        """Forget activations that are not in the current due set."""
        keys = {reminder.activation_key for reminder in due}
        self._announced &= keys
        self._sms_delivered &= keys

    # ------------------------------------------------------------------
    # SMS
    # ------------------------------------------------------------------

    def sms_state(self, reminder: Reminder) -> SmsState:
        """Durable SMS state as currently recorded in the store."""
        if self.store.get_sms_sent(reminder.id):
            return SmsState.SENT
        return SmsState.NOT_SENT

    def _claim_sms(self, key: tuple) -> Optional[SmsOutcome]:
        """Enter the per-activation SMS critical section.

        Returns None when claimed, else the reason the caller must skip.
        """
        if key in self._sms_in_flight:
            return SmsOutcome.IN_FLIGHT
        if key in self._sms_delivered:
            return SmsOutcome.SKIPPED_ALREADY_SENT
        self._sms_in_flight.add(key)
        return None

    async def deliver_sms(self, reminder: Reminder) -> SmsOutcome:
        """Run one read-check-send-write pass for a reminder's SMS."""
        if not self.notifier.sms_enabled:
            return SmsOutcome.DISABLED
        if not reminder.phone:
            return SmsOutcome.SKIPPED_NO_PHONE

        blocked = self._claim_sms(reminder.activation_key)
        if blocked is not None:
            return blocked
        return await self._run_sms(reminder)

    async def _run_sms(self, reminder: Reminder) -> SmsOutcome:
        """Body of the SMS critical section; the caller has claimed it."""
        key = reminder.activation_key
        try:
            try:
                already_sent = await asyncio.to_thread(self.store.get_sms_sent, reminder.id)
            except Exception as e:
                logger.error(f"[{self.name}] Cannot read SMS state for reminder {reminder.id}: {e}")
                return SmsOutcome.FAILED

            if already_sent:
                self._sms_delivered.add(key)
                logger.debug(f"[{self.name}] SMS for reminder {reminder.id} already sent, skipping")
                return SmsOutcome.SKIPPED_ALREADY_SENT

            if not await self.notifier.send_sms(reminder):
                # sms_sent stays false; a later tick retries while still due
                return SmsOutcome.FAILED

            self._sms_delivered.add(key)

            try:
                await asyncio.to_thread(self.store.set_sms_sent, reminder.id, True)
            except Exception as e:
                logger.error(
                    f"[{self.name}] SMS for reminder {reminder.id} was sent but could not be "
                    f"recorded ({e}); it may be sent again after a restart"
                )
                return SmsOutcome.SENT_UNRECORDED

            return SmsOutcome.SENT
        finally:
            self._sms_in_flight.discard(key)

    # ------------------------------------------------------------------
    # Background tasks
    # ------------------------------------------------------------------

    def _spawn(self, coro, label: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=f"{self.name}:{label}")
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background task {task.get_name()} failed: {exc!r}")

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for all background alarm/notification/SMS work to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
