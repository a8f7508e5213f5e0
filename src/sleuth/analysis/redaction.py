"""Best-effort redaction of likely-sensitive substrings in free text.

This is a defense-in-depth control for log lines and error ``details``. It is
lossy and heuristic: it does not guarantee that every secret is removed.
Structured error records are never passed through it.
"""

from __future__ import annotations

import re

REDACTED = "[REDACTED]"
TRUNCATION_MARKER = "... [truncated]"

LOG_MAX_LENGTH = 200
DETAILS_MAX_LENGTH = 500

# Applied in this order.
_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"[a-zA-Z0-9]{32,}"),  # API keys / opaque tokens
    re.compile(r"[\w.-]+@[\w.-]+\.\w+"),  # email addresses
    re.compile(r"[a-zA-Z][a-zA-Z0-9+.-]*://[^/\s]*:[^@\s]+@"),  # scheme://user:pass@
    re.compile(r"eyJ[a-zA-Z0-9_-]+\.eyJ[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+"),  # signed bearer tokens
)


def redact(text: str | None, max_length: int = LOG_MAX_LENGTH) -> str:
    """Mask sensitive patterns, then cap the length.

    Idempotent: text that already went through ``redact`` with the same
    ``max_length`` comes back unchanged.
    """
    if not text:
        return ""

    sanitized = text
    for pattern in _PATTERNS:
        sanitized = pattern.sub(REDACTED, sanitized)

    if sanitized.endswith(TRUNCATION_MARKER) and len(sanitized) - len(TRUNCATION_MARKER) <= max_length:
        return sanitized
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + TRUNCATION_MARKER
    return sanitized
