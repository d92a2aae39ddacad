"""Reminder domain configuration - polling tiers, channels and message templates."""

import os


def _parse_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on", "y")


# Tiers to run in this process ("client", "server" or both)
ENABLED_TIERS = [
    tier.strip().lower()
    for tier in os.environ.get("CHRONICLE_TIERS", "server").split(",")
    if tier.strip()
]

# Client tier - frequent polling, window matching (mirrors the browser poller)
CLIENT_POLL_INTERVAL = int(os.environ.get("CHRONICLE_CLIENT_POLL_SECONDS", 5))
CLIENT_WINDOW_SECONDS = int(os.environ.get("CHRONICLE_CLIENT_WINDOW_SECONDS", 60))
CLIENT_RING_INTERVAL = float(os.environ.get("CHRONICLE_CLIENT_RING_INTERVAL", 3.0))
CLIENT_SMS_ENABLED = False

# Server tier - coarse polling, exact-minute matching
SERVER_POLL_INTERVAL = int(os.environ.get("CHRONICLE_SERVER_POLL_SECONDS", 60))
SERVER_RING_INTERVAL = float(os.environ.get("CHRONICLE_SERVER_RING_INTERVAL", 1.0))
SERVER_SMS_ENABLED = True

# Channel switches
ENABLE_AUDIO = _parse_bool("ENABLE_AUDIO", True)
ENABLE_DESKTOP_NOTIFICATIONS = _parse_bool("ENABLE_DESKTOP_NOTIFICATIONS", True)
ENABLE_SMS = _parse_bool("ENABLE_SMS", True)

# Message templates
NOTIFICATION_TITLE = "🔔 Chronicle Alarm"
CLIENT_NOTIFICATION_TITLE = "🔔 Due: {title}"
NOTIFICATION_BODY = "Click to open: {title}"
SMS_BODY = "REMINDER: {title}"

# Desktop notification display time (seconds)
NOTIFICATION_TIMEOUT = 10

# Repeat count used when a note has none
DEFAULT_REPEAT_COUNT = 1
