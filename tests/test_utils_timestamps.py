"""Tests for timestamp helpers."""

from __future__ import annotations

import pytest

from granolacache.utils.timestamps import parse_epoch_ms


class TestParseEpochMs:
    """Test parse_epoch_ms function."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2024-01-01T00:00:00Z", 1_704_067_200_000),
            ("2024-01-01T00:00:00.250Z", 1_704_067_200_250),
            ("2024-01-01T01:00:00+01:00", 1_704_067_200_000),
            ("2024-01-01T00:00:00", 1_704_067_200_000),
            ("2024-01-01", 1_704_067_200_000),
            ("  2024-01-01T00:00:00z  ", 1_704_067_200_000),
        ],
    )
    def test_valid_timestamps(self, value: str, expected: int) -> None:
        """Should parse ISO-8601 values, treating naive ones as UTC."""
        assert parse_epoch_ms(value) == expected

    @pytest.mark.parametrize("value", [None, "", "yesterday", "2024-13-45T00:00:00Z"])
    def test_invalid_timestamps(self, value) -> None:
        """Should return None for absent or unparseable values."""
        assert parse_epoch_ms(value) is None
