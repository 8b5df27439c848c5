"""Cache loader: freshness checks and single-flight reloads of the cache file."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional

from granolacache.cache.decoder import decode_cache
from granolacache.config import AppConfig
from granolacache.errors import ErrorKind, MalformedCacheError
from granolacache.models import Failure, LoadedCache, QueryResult, RawState, Success

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class LoaderStats:
    checks: int = 0
    hits: int = 0
    reads: int = 0
    decodes: int = 0
    failures: int = 0


class CacheLoader:
    """Owns the in-memory snapshot of the cache file.

    ``ensure_fresh`` re-reads the file only when its modification time differs
    from the one recorded with the held snapshot. Concurrent callers share a
    single in-flight load instead of each stating, reading and decoding the
    file on their own.
    """

    def __init__(self, config: AppConfig, *, clock: Callable[[], float] = time.time) -> None:
        self.config = config
        self.stats = LoaderStats()
        self._clock = clock
        self._snapshot: Optional[LoadedCache] = None
        self._last_error: Optional[ErrorKind] = None
        self._inflight: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def has_snapshot(self) -> bool:
        return self._snapshot is not None

    @property
    def last_error(self) -> Optional[ErrorKind]:
        return self._last_error

    def reset(self) -> None:
        """Forget the held snapshot, error state and counters.

        A load still in flight is detached: its callers get its outcome, but
        it no longer updates this loader.
        """
        self._generation += 1
        self._inflight = None
        self._snapshot = None
        self._last_error = None
        self.stats = LoaderStats()

    async def ensure_fresh(self) -> QueryResult[RawState]:
        """Return a snapshot no older than the file on disk, or a failure."""
        task = self._inflight
        if task is None or task.done():
            task = asyncio.get_running_loop().create_task(self._load())
            self._inflight = task
            task.add_done_callback(self._settle)
        else:
            LOGGER.debug("Joining in-flight cache load")
        return await asyncio.shield(task)

    def _settle(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None
        if not task.cancelled() and task.exception() is not None:
            LOGGER.error("Cache load crashed: %s", task.exception())

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _age_ms(self, mtime_ns: int) -> int:
        return max(0, self.now_ms() - mtime_ns // 1_000_000)

    def _fail(self, kind: ErrorKind, *, generation: int, clear: bool = True) -> Failure:
        if generation != self._generation:
            return Failure(kind)
        self.stats.failures += 1
        self._last_error = kind
        if clear:
            self._snapshot = None
        return Failure(kind)

    async def _load(self) -> QueryResult[RawState]:
        generation = self._generation
        stats = self.stats
        stats.checks += 1
        vendor_path = self.config.vendor_path()
        if not await asyncio.to_thread(vendor_path.exists):
            LOGGER.debug("Granola data directory not found: %s", vendor_path)
            # A failed install check leaves a previously loaded snapshot alone.
            return self._fail(ErrorKind.NOT_INSTALLED, generation=generation, clear=False)

        cache_path = self.config.cache_path()
        try:
            stat = await asyncio.to_thread(cache_path.stat)
        except OSError:
            LOGGER.debug("Granola cache file not found: %s", cache_path)
            return self._fail(ErrorKind.CACHE_NOT_FOUND, generation=generation)

        snapshot = self._snapshot
        if snapshot is not None and snapshot.source_mtime_ns == stat.st_mtime_ns:
            stats.hits += 1
            return Success(snapshot.state, cache_age_ms=self._age_ms(stat.st_mtime_ns))

        stats.reads += 1
        try:
            data = await asyncio.to_thread(cache_path.read_bytes)
        except FileNotFoundError:
            LOGGER.debug("Granola cache file disappeared before it could be read: %s", cache_path)
            return self._fail(ErrorKind.CACHE_NOT_FOUND, generation=generation)
        except OSError as exc:
            LOGGER.error("Unable to read Granola cache %s: %s", cache_path, exc)
            return self._fail(ErrorKind.CACHE_PARSE_ERROR, generation=generation)

        stats.decodes += 1
        try:
            state = decode_cache(data)
        except MalformedCacheError as exc:
            LOGGER.error("Failed to parse Granola cache %s: %s", cache_path, exc)
            return self._fail(ErrorKind.CACHE_PARSE_ERROR, generation=generation)
        except Exception as exc:
            LOGGER.exception("Unexpected error decoding Granola cache %s: %s", cache_path, exc)
            return self._fail(ErrorKind.CACHE_PARSE_ERROR, generation=generation)

        if generation != self._generation:
            LOGGER.debug("Loader was reset during load; discarding decoded cache")
            return Success(state, cache_age_ms=self._age_ms(stat.st_mtime_ns))

        self._snapshot = LoadedCache(
            state=state, source_mtime_ns=stat.st_mtime_ns, loaded_at_ms=self.now_ms()
        )
        self._last_error = None
        LOGGER.info(
            "Loaded Granola cache from %s (%d documents, %d bytes)",
            cache_path,
            len(state.documents),
            len(data),
        )
        return Success(state, cache_age_ms=self._age_ms(stat.st_mtime_ns))

    def cache_info(self) -> Dict[str, Any]:
        """Describe the loader state without exposing the snapshot itself."""
        snapshot = self._snapshot
        if snapshot is not None:
            state = "loaded"
        elif self._last_error is not None:
            state = "errored"
        else:
            state = "absent"
        return {
            "path": str(self.config.cache_path()),
            "vendor_path": str(self.config.vendor_path()),
            "state": state,
            "source_mtime_ns": snapshot.source_mtime_ns if snapshot else None,
            "loaded_at_ms": snapshot.loaded_at_ms if snapshot else None,
            "document_count": len(snapshot.state.documents) if snapshot else 0,
            "last_error": self._last_error.value if self._last_error else None,
            "stats": asdict(self.stats),
        }
