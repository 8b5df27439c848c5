"""Map raw cache documents onto the stable ``Document`` shape."""

from __future__ import annotations

import time
from typing import Any, List, Optional

from granolacache.config import DEFAULT_LIMIT
from granolacache.models import Document, RawDocument, RawState
from granolacache.utils.timestamps import parse_epoch_ms

UNTITLED = "Untitled Meeting"
UNKNOWN_PARTICIPANT = "Unknown"


def resolve_limit(limit: Any, default: int = DEFAULT_LIMIT) -> int:
    """Return ``limit`` if it is a positive integer, otherwise ``default``.

    Integral floats and numeric strings are accepted; anything else is
    silently replaced rather than treated as an error.
    """
    if isinstance(limit, bool):
        return default
    if isinstance(limit, str):
        try:
            limit = int(limit.strip())
        except ValueError:
            return default
    if isinstance(limit, float):
        if not limit.is_integer():
            return default
        limit = int(limit)
    if isinstance(limit, int) and limit > 0:
        return limit
    return default


def normalize_document(
    raw: RawDocument, state: RawState, *, now_ms: int, undated_policy: str = "now"
) -> Document:
    created_at = parse_epoch_ms(raw.created_at)
    if created_at is None:
        created_at = now_ms if undated_policy == "now" else 0
    return Document(
        id=raw.id or "",
        title=raw.title or UNTITLED,
        created_at=created_at,
        participants=[p.name or p.email or UNKNOWN_PARTICIPANT for p in raw.people or []],
        has_transcript=state.has_transcript(raw.id or ""),
    )


def normalize_documents(
    state: RawState,
    limit: Any = None,
    *,
    now_ms: Optional[int] = None,
    undated_policy: str = "now",
    default_limit: int = DEFAULT_LIMIT,
) -> List[Document]:
    """Normalize, filter, sort (newest first) and truncate the cache documents."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)

    documents = [
        normalize_document(raw, state, now_ms=now_ms, undated_policy=undated_policy)
        for raw in state.documents.values()
        if raw.id and not raw.is_deleted
    ]
    documents.sort(key=lambda doc: doc.created_at, reverse=True)
    return documents[: resolve_limit(limit, default_limit)]
