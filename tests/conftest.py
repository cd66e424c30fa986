"""Shared pytest configuration for flowaudit."""

from __future__ import annotations
from collections.abc import Iterator
import pytest
from flowaudit import config


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    """Drop cached settings so environment changes never leak across tests."""
    yield
    config._load_settings.cache_clear()
