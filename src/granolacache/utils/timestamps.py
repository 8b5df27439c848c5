"""Timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def parse_epoch_ms(value: Optional[str]) -> Optional[int]:
    """Parse an ISO-8601 timestamp into epoch milliseconds.

    Naive timestamps are taken to be UTC. Returns ``None`` for absent or
    unparseable values.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)
