"""Utility modules for Chronicle reminders."""

from .log_sanitizer import sanitize_log, mask_phone

__all__ = ["sanitize_log", "mask_phone"]
