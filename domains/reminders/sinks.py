"""Concrete output channels: alarm audio, desktop notifications, SMS, app launcher.

Audio and SMS sinks are synchronous and may block; the dispatch core runs
them in worker threads. The desktop notification sink is a coroutine on the
event loop. They report failure by returning False rather than raising.
"""

import threading
import webbrowser
from pathlib import Path
from typing import Callable, Optional

from logger import logger
from utils import mask_phone, sanitize_log
from . import config


class PygameAudioSink:
    """Plays the alarm file once per call through pygame's mixer."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._sound = None
        self._lock = threading.Lock()

    def _load(self):
        import pygame

        if not pygame.mixer.get_init():
            pygame.mixer.init()
        return pygame.mixer.Sound(str(self.path))

    def play(self) -> bool:
        """Start one ring. Does not wait for playback to finish."""
        if not self.path.exists():
            logger.warning(f"Alarm file not found: {self.path}")
            return False

        try:
            with self._lock:
                if self._sound is None:
                    self._sound = self._load()
                self._sound.play()
            return True
        except Exception as e:
            logger.error(f"Audio error: {e}")
            return False


class DesktopNotificationSink:
    """Desktop notification via desktop-notifier.

    notify() is a coroutine and must run on the service's event loop; click
    callbacks are delivered on that loop for as long as it keeps running.
    """

    def __init__(self, app_name: str = "Chronicle", timeout: int = config.NOTIFICATION_TIMEOUT):
        self.app_name = app_name
        self.timeout = timeout
        self._notifier = None

    def _get_notifier(self):
        if self._notifier is None:
            from desktop_notifier import DesktopNotifier
            self._notifier = DesktopNotifier(app_name=self.app_name)
        return self._notifier

    async def notify(self, title: str, body: str, on_activate: Optional[Callable[[], None]] = None) -> bool:
        try:
            await self._get_notifier().send(
                title=title,
                message=body,
                on_clicked=on_activate,
                timeout=self.timeout,
            )
            return True
        except Exception as e:
            logger.error(f"Desktop notification error: {e}")
            return False


class TwilioGateway:
    """SMS via the Twilio REST API."""

    def __init__(self, account_sid: Optional[str], auth_token: Optional[str], from_number: Optional[str]):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self._client = None

    @property
    def is_configured(self) -> bool:
        """Check if Twilio credentials are configured."""
        return all([self.account_sid, self.auth_token, self.from_number])

    def _get_client(self):
        if self._client is None:
            from twilio.rest import Client as TwilioClient
            self._client = TwilioClient(self.account_sid, self.auth_token)
        return self._client

    def send_sms(self, to: str, body: str) -> bool:
        if not self.is_configured:
            logger.warning("Twilio credentials not configured - skipping SMS")
            return False

        try:
            message = self._get_client().messages.create(
                body=body,
                from_=self.from_number,
                to=to
            )
            logger.debug(f"Twilio accepted SMS to {mask_phone(to)}: {message.sid}")
            return True
        except Exception as e:
            logger.error(f"Twilio error sending to {mask_phone(to)}: {sanitize_log(str(e))}")
            return False


def browser_launcher(url: str) -> Callable[[], bool]:
    """No-arg callback that opens the app in the default browser."""
    def launch() -> bool:
        return webbrowser.open(url)
    return launch
