"""Shared fixtures for granola-cache tests."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from granolacache.config import AppConfig

# 2024-01-01T00:00:00Z
BASE_EPOCH_S = 1_704_067_200


def build_cache_bytes(
    documents: Optional[Dict[str, Any]] = None,
    transcripts: Optional[Dict[str, List[Dict[str, Any]]]] = None,
) -> bytes:
    """Build the double-encoded cache envelope Granola writes."""
    state: Dict[str, Any] = {}
    if documents is not None:
        state["documents"] = documents
    if transcripts is not None:
        state["transcripts"] = transcripts
    inner = json.dumps({"state": state})
    return json.dumps({"cache": inner}).encode("utf-8")


class FakeClock:
    """Callable clock returning epoch seconds, advanced by hand."""

    def __init__(self, now: float = BASE_EPOCH_S) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    """Config rooted in a temporary app-data directory with Granola installed."""
    app_data = tmp_path / "appdata"
    (app_data / "Granola").mkdir(parents=True)
    return AppConfig(app_data_dir=app_data)


@pytest.fixture
def write_cache(config: AppConfig) -> Callable[..., Path]:
    """Write a cache file and pin its modification time (epoch seconds)."""

    def _write(
        documents: Optional[Dict[str, Any]] = None,
        transcripts: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        *,
        mtime: int = BASE_EPOCH_S,
        raw: Optional[bytes] = None,
    ) -> Path:
        path = config.cache_path()
        path.write_bytes(raw if raw is not None else build_cache_bytes(documents, transcripts))
        os.utime(path, ns=(mtime * 1_000_000_000, mtime * 1_000_000_000))
        return path

    return _write
