from __future__ import annotations

import pytest

from app.core.config import get_settings
from tests.factories import FakeTMDb


@pytest.fixture(autouse=True)
def reset_env(monkeypatch):
    monkeypatch.setenv("TMDB_API_KEY", "test-key")
    for name in ("CATALOG_MODE", "CATALOG_MAX_PAGES", "CATALOG_MIN_VOTE_COUNT", "TMDB_BASE_URL", "TMDB_IMAGE_BASE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_tmdb() -> FakeTMDb:
    return FakeTMDb()
