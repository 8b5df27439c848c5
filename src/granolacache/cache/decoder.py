"""Decoder for Granola's double-encoded cache file.

The file is a JSON object ``{"cache": "<JSON string>"}``; the inner string
decodes to ``{"state": {"documents": {...}, "transcripts": {...}}}``.
Decoding is all-or-nothing: any deviation raises ``MalformedCacheError``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from granolacache.errors import MalformedCacheError
from granolacache.models import RawDocument, RawSegment, RawState

LOGGER = logging.getLogger(__name__)


def _load_json(text: str, stage: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise MalformedCacheError(f"Invalid JSON in {stage}: {exc}") from exc


def _require_mapping(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedCacheError(f"Expected {what} to be an object, got {type(value).__name__}")
    return value


def _optional_mapping(container: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = container.get(key)
    if value is None:
        return {}
    return _require_mapping(value, f"state.{key}")


def unwrap_envelope(data: bytes | str) -> Dict[str, Any]:
    """Return the inner ``state`` object from raw cache file content."""
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedCacheError(f"Cache file is not valid UTF-8: {exc}") from exc

    outer = _require_mapping(_load_json(data, "cache envelope"), "cache envelope")
    payload = outer.get("cache")
    if not isinstance(payload, str):
        raise MalformedCacheError('Cache envelope missing "cache" string field')

    inner = _require_mapping(_load_json(payload, "cache payload"), "cache payload")
    state = inner.get("state")
    if state is None:
        raise MalformedCacheError('Cache payload missing "state" field')
    return _require_mapping(state, "state")


def decode_cache(data: bytes | str) -> RawState:
    """Decode cache file content into a ``RawState``."""
    state = unwrap_envelope(data)
    raw_documents = _optional_mapping(state, "documents")
    raw_transcripts = _optional_mapping(state, "transcripts")

    documents: Dict[str, RawDocument] = {}
    for key, record in raw_documents.items():
        if isinstance(record, dict):
            documents[key] = RawDocument.from_mapping(record)

    transcripts: Dict[str, List[RawSegment]] = {}
    for key, segments in raw_transcripts.items():
        if isinstance(segments, list):
            transcripts[key] = [RawSegment.from_mapping(segment) for segment in segments]

    LOGGER.debug(
        "Decoded cache with %d documents and %d transcripts", len(documents), len(transcripts)
    )
    return RawState(documents=documents, transcripts=transcripts)
