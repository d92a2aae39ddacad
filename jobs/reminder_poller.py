"""Reminder poller jobs.

One interval job per enabled tier:
- client: every 5s, window matching, alarm rings 3s apart, no SMS
- server: every 60s, exact-minute matching, alarm rings 1s apart, SMS

Tiers may run side by side in one process. Each keeps its own announced
set; they share only the durable sms_sent flag.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from logger import logger
from config import ALARM_PATH, APP_URL, TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE
from domains.reminders import config
from domains.reminders import (
    AlarmSequencer,
    DispatchStateMachine,
    DueSetResolver,
    MatchPolicy,
    NotificationDispatcher,
    ReminderPoller,
    get_store,
)
from domains.reminders.sinks import (
    DesktopNotificationSink,
    PygameAudioSink,
    TwilioGateway,
    browser_launcher,
)


@dataclass
class TierSettings:
    """Polling and channel settings for one deployment tier."""
    name: str
    policy: MatchPolicy
    poll_interval: int
    ring_interval: float
    window: timedelta = timedelta(seconds=60)
    sms_enabled: bool = False
    notification_title: str = config.NOTIFICATION_TITLE


def tier_settings(name: str) -> TierSettings:
    """Settings for a named tier from the reminders config."""
    if name == "client":
        return TierSettings(
            name="client",
            policy=MatchPolicy.WINDOW,
            poll_interval=config.CLIENT_POLL_INTERVAL,
            ring_interval=config.CLIENT_RING_INTERVAL,
            window=timedelta(seconds=config.CLIENT_WINDOW_SECONDS),
            sms_enabled=config.CLIENT_SMS_ENABLED,
            notification_title=config.CLIENT_NOTIFICATION_TITLE,
        )
    if name == "server":
        return TierSettings(
            name="server",
            policy=MatchPolicy.EXACT_MINUTE,
            poll_interval=config.SERVER_POLL_INTERVAL,
            ring_interval=config.SERVER_RING_INTERVAL,
            sms_enabled=config.SERVER_SMS_ENABLED,
        )
    raise ValueError(f"Unknown reminder tier: {name!r} (expected 'client' or 'server')")


def build_poller(
    settings: TierSettings,
    store=None,
    audio_sink=None,
    notification_sink=None,
    gateway=None,
    launcher=None,
) -> ReminderPoller:
    """Wire resolver, channels and state machine for one tier.

    Sinks left as None are built from config, unless the channel is switched
    off there.
    """
    store = store or get_store()

    if audio_sink is None and config.ENABLE_AUDIO:
        audio_sink = PygameAudioSink(ALARM_PATH)
    if notification_sink is None and config.ENABLE_DESKTOP_NOTIFICATIONS:
        notification_sink = DesktopNotificationSink()
        launcher = launcher or browser_launcher(APP_URL)
    if gateway is None and settings.sms_enabled and config.ENABLE_SMS:
        gateway = TwilioGateway(TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE)
    if not settings.sms_enabled:
        gateway = None

    alarm = AlarmSequencer(audio_sink, settings.ring_interval) if audio_sink is not None else None
    notifier = NotificationDispatcher(
        notification_sink=notification_sink,
        gateway=gateway,
        launcher=launcher,
        title_template=settings.notification_title,
    )
    machine = DispatchStateMachine(store, notifier, alarm=alarm, name=settings.name)
    resolver = DueSetResolver(store, settings.policy, window=settings.window)

    return ReminderPoller(resolver, machine, name=settings.name)


def register_reminder_pollers(
    scheduler: AsyncIOScheduler,
    tiers: Optional[list[str]] = None,
    store=None,
) -> list[ReminderPoller]:
    """Register one poller job per tier with the scheduler.

    Args:
        scheduler: APScheduler instance
        tiers: Tier names; defaults to the configured ENABLED_TIERS
        store: Reminder store; defaults to the process-wide store

    Returns:
        The registered pollers, in tier order
    """
    pollers = []
    for name in tiers or config.ENABLED_TIERS:
        settings = tier_settings(name)
        poller = build_poller(settings, store=store)

        scheduler.add_job(
            poller.tick,
            'interval',
            seconds=settings.poll_interval,
            id=f"reminder_poller_{settings.name}",
            name=f"Reminder poller ({settings.name})",
            max_instances=1,  # Overlapping ticks are skipped
            coalesce=True,    # Missed runs collapse into one
            replace_existing=True,
        )
        logger.info(
            f"Registered {settings.name} reminder poller "
            f"(every {settings.poll_interval}s, {settings.policy.value} matching)"
        )
        pollers.append(poller)

    return pollers
