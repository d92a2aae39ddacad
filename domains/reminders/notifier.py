"""Desktop notification and SMS delivery for due reminders.

Each channel is one attempt per due activation; the ring count only applies
to the alarm. Channels fail independently: a failure is logged and reported
to the caller, never raised into a sibling channel.
"""

import asyncio
import inspect
from typing import Callable, Optional

from logger import logger
from utils import mask_phone, sanitize_log
from . import config
from .models import Reminder


class NotificationDispatcher:
    """Formats and hands off alerts to the notification sink and SMS gateway."""

    def __init__(
        self,
        notification_sink=None,
        gateway=None,
        launcher: Optional[Callable[[], object]] = None,
        title_template: str = config.NOTIFICATION_TITLE,
    ):
        """
        Args:
            notification_sink: notify(title, body, on_activate) -> bool, or None to disable
            gateway: send_sms(to, body) -> bool, or None to disable SMS
            launcher: No-arg callback opening the app when a notification is clicked
            title_template: Notification title; may use {title}
        """
        self.notification_sink = notification_sink
        self.gateway = gateway
        self.launcher = launcher
        self.title_template = title_template

    @property
    def sms_enabled(self) -> bool:
        return self.gateway is not None

    def notification_message(self, reminder: Reminder) -> tuple[str, str]:
        return (
            self.title_template.format(title=reminder.title),
            config.NOTIFICATION_BODY.format(title=reminder.title),
        )

    @staticmethod
    def sms_message(reminder: Reminder) -> str:
        return config.SMS_BODY.format(title=reminder.title)

    def _open_app(self) -> None:
        """Follow-up for a clicked notification. Fire-and-forget."""
        logger.info("Notification clicked, opening app")
        try:
            self.launcher()
        except Exception as e:
            logger.error(f"Failed to open app from notification: {e}")

    async def local_alert(self, reminder: Reminder) -> bool:
        """Show the desktop notification for a due reminder.

        Returns:
            True if the sink accepted the notification
        """
        if self.notification_sink is None:
            return False

        title, body = self.notification_message(reminder)
        on_activate = self._open_app if self.launcher is not None else None

        try:
            if inspect.iscoroutinefunction(self.notification_sink.notify):
                shown = await self.notification_sink.notify(title, body, on_activate)
            else:
                shown = await asyncio.to_thread(self.notification_sink.notify, title, body, on_activate)
        except Exception as e:
            logger.error(f"Notification failed for reminder {reminder.id}: {sanitize_log(str(e))}")
            return False

        if not shown:
            logger.warning(f"Notification sink rejected reminder {reminder.id}")
        return bool(shown)

    async def send_sms(self, reminder: Reminder) -> bool:
        """Send the SMS for a reminder. Transport only; no state is touched.

        Returns:
            True if the gateway reported success
        """
        if self.gateway is None or not reminder.phone:
            return False

        try:
            sent = await asyncio.to_thread(self.gateway.send_sms, reminder.phone, self.sms_message(reminder))
        except Exception as e:
            logger.error(f"SMS to {mask_phone(reminder.phone)} failed for reminder {reminder.id}: {sanitize_log(str(e))}")
            return False

        if sent:
            logger.info(f"SMS sent to {mask_phone(reminder.phone)} for reminder {reminder.id}")
        else:
            logger.warning(f"SMS to {mask_phone(reminder.phone)} failed for reminder {reminder.id}")
        return bool(sent)
