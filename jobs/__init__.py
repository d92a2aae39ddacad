"""Scheduled jobs."""

from .reminder_poller import register_reminder_pollers, build_poller, tier_settings, TierSettings

__all__ = [
    "register_reminder_pollers",
    "build_poller",
    "tier_settings",
    "TierSettings",
]
