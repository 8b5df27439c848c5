"""Query API over the Granola cache."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from granolacache.cache.loader import CacheLoader
from granolacache.config import AppConfig
from granolacache.documents.normalizer import normalize_documents
from granolacache.documents.transcripts import extract_transcript
from granolacache.errors import ErrorKind
from granolacache.models import Document, Failure, QueryResult, Success, Transcript

LOGGER = logging.getLogger(__name__)


class MeetingLibrary:
    """High-level API to list meetings and fetch their transcripts.

    Each instance owns its own ``CacheLoader``, so independent instances never
    share snapshots. Failures are returned as ``Failure`` values; no exception
    escapes either operation.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        *,
        loader: Optional[CacheLoader] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if loader is None:
            config = config or AppConfig()
            loader = CacheLoader(config, clock=clock) if clock else CacheLoader(config)
        self.loader = loader
        self.config = loader.config

    async def list_recent_documents(self, limit: Any = None) -> QueryResult[List[Document]]:
        """Return the most recent non-deleted documents, newest first."""
        try:
            loaded = await self.loader.ensure_fresh()
            if isinstance(loaded, Failure):
                return loaded
            documents = normalize_documents(
                loaded.data,
                limit,
                now_ms=self.loader.now_ms(),
                undated_policy=self.config.undated_policy,
                default_limit=self.config.default_limit,
            )
        except Exception as exc:
            LOGGER.exception("Listing Granola documents failed: %s", exc)
            return Failure(ErrorKind.CACHE_PARSE_ERROR)
        return Success(documents, cache_age_ms=loaded.cache_age_ms)

    get_documents = list_recent_documents

    async def get_transcript(self, document_id: Any) -> QueryResult[Transcript]:
        """Return the plain-text transcript of one document."""
        if not isinstance(document_id, str) or not document_id.strip():
            return Failure(ErrorKind.CACHE_NOT_FOUND)
        try:
            loaded = await self.loader.ensure_fresh()
            if isinstance(loaded, Failure):
                return loaded
            result = extract_transcript(loaded.data, document_id)
        except Exception as exc:
            LOGGER.exception("Fetching transcript for %s failed: %s", document_id, exc)
            return Failure(ErrorKind.CACHE_PARSE_ERROR)
        if isinstance(result, Failure):
            return result
        return Success(result.data, cache_age_ms=loaded.cache_age_ms)
