"""Log sanitizer - masks SMS destinations and credentials in log messages.

Reminder notes carry phone numbers and the SMS gateway carries Twilio
credentials; neither should land in the log files verbatim.
"""

import re
from typing import Optional

# Patterns to detect and redact sensitive data
SENSITIVE_PATTERNS = [
    # Twilio account SIDs
    (r'\bAC[0-9a-f]{32}\b', '[TWILIO_SID]'),

    # Credentials in key=value format
    (r'(password|secret|token|auth_token|api_key|auth)["\s:=]+[^\s,}"\']{8,}',
     r'\1=[REDACTED]'),

    # E.164 numbers (+15551234567)
    (r'\+\d{8,15}\b', '[PHONE]'),

    # US phone numbers
    (r'\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b', '[PHONE]'),
]

# Compiled patterns for efficiency
_COMPILED_PATTERNS = [(re.compile(p, re.IGNORECASE), r) for p, r in SENSITIVE_PATTERNS]


def sanitize_log(text: str) -> str:
    """Remove sensitive data from text for safe logging.

    Args:
        text: The text to sanitize

    Returns:
        Sanitized text with sensitive data replaced by placeholders
    """
    if not text:
        return text

    result = text
    for pattern, replacement in _COMPILED_PATTERNS:
        result = pattern.sub(replacement, result)

    return result


def mask_phone(phone: Optional[str]) -> str:
    """Mask a phone number down to its last two digits.

    Keeps enough to tell destinations apart in the logs.
    """
    if not phone:
        return "<none>"

    digits = re.sub(r'\D', '', phone)
    if len(digits) <= 2:
        return "**"
    return "*" * (len(digits) - 2) + digits[-2:]
