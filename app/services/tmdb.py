"""Thin wrapper around the TMDb API used as the catalog's upstream."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from app.core.config import get_settings


logger = logging.getLogger(__name__)


class TMDbError(Exception):
    """Base exception for TMDb-related failures."""


class ConfigurationError(TMDbError):
    """Raised when the client is used without an API key."""


class UpstreamError(TMDbError):
    """Raised when TMDb answers with a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"TMDb {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class TMDbClient:
    """Simple TMDb HTTP client using API key auth."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        default_language: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.tmdb_api_key
        self.base_url = (base_url or settings.tmdb_base_url).rstrip("/")
        self.default_language = default_language or settings.tmdb_language
        self.timeout = timeout if timeout is not None else settings.tmdb_timeout
        self._transport = transport

    def call(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """GET ``path`` with ``params`` and return the decoded JSON body."""

        if not (self.api_key or "").strip():
            raise ConfigurationError("TMDB_API_KEY is not configured")
        url = f"{self.base_url}{path}"
        query: dict[str, Any] = {"api_key": self.api_key}
        if params:
            query.update(
                {k: _encode(v) for k, v in params.items() if v is not None and v != ""}
            )
        logger.debug("TMDb GET %s params=%s", path, {k: v for k, v in query.items() if k != "api_key"})
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = client.get(url, params=query, headers={"accept": "application/json"})
            except httpx.HTTPError as exc:
                raise TMDbError(f"TMDb request to {path} failed: {exc}") from exc
            if not response.is_success:
                raise UpstreamError(response.status_code, response.text)
        try:
            return response.json()
        except ValueError as exc:
            raise TMDbError(f"TMDb returned non-JSON response for {path}") from exc

    def discover_movies(self, **params: Any) -> dict[str, Any]:
        return self.call("/discover/movie", {"language": self.default_language, **params})

    def search_movies(self, *, query: str, page: int = 1, **params: Any) -> dict[str, Any]:
        return self.call(
            "/search/movie",
            {
                "language": self.default_language,
                "query": query,
                "page": page,
                "include_adult": False,
                **params,
            },
        )

    def movie_details(self, tmdb_id: str | int) -> dict[str, Any]:
        return self.call(f"/movie/{tmdb_id}", {"language": self.default_language})

    def movie_videos(self, tmdb_id: str | int) -> dict[str, Any]:
        return self.call(f"/movie/{tmdb_id}/videos", {"language": self.default_language})


def _encode(value: Any) -> Any:
    # TMDb expects lowercase booleans.
    if isinstance(value, bool):
        return "true" if value else "false"
    return value
