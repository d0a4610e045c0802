"""Catalog resolution: turn catalog browses and item lookups into TMDb calls.

Two listing strategies exist. ``BulkPrefetchStrategy`` mirrors the shipped
add-on: it ignores the caller's cursor, pulls several rating-sorted discover
pages and returns one globally re-sorted batch. ``LivePaginatedStrategy``
maps ``skip``/``limit`` onto a single upstream page and honours the search,
genre and sort filters.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Protocol

from app.core.config import Settings, get_settings
from app.services import catalogs
from app.services.models import (
    CatalogSpec,
    DetailResult,
    ListingQuery,
    ListingResult,
    MoviePreview,
    Trailer,
    UpstreamPage,
)
from app.services.normalize import (
    rating_value,
    release_year,
    select_trailer,
    strip_prefix,
    to_detail,
    to_preview,
    unavailable_detail,
)
from app.services.tmdb import TMDbClient, TMDbError


logger = logging.getLogger(__name__)

# TMDb refuses page numbers above this.
MAX_UPSTREAM_PAGE = 500


class ListingStrategy(Protocol):
    def fetch(self, client: TMDbClient, catalog: CatalogSpec, query: ListingQuery) -> list[MoviePreview]:
        ...


def _previews(records: list[dict[str, Any]]) -> list[MoviePreview]:
    previews = (to_preview(record) for record in records)
    return [preview for preview in previews if preview is not None]


def sort_by_rating(previews: list[MoviePreview]) -> list[MoviePreview]:
    """Highest rating first; unrated rows count as zero."""

    return sorted(previews, key=rating_value, reverse=True)


class BulkPrefetchStrategy:
    """Fetch up to ``max_pages`` discover pages and merge them."""

    def __init__(self, *, max_pages: int = 10, min_vote_count: int = 500) -> None:
        self.max_pages = max_pages
        self.min_vote_count = min_vote_count

    def fetch(self, client: TMDbClient, catalog: CatalogSpec, query: ListingQuery) -> list[MoviePreview]:
        merged: list[dict[str, Any]] = []
        for page in self.pages(client, catalog):
            if page.is_empty:
                logger.debug("Catalog %s exhausted at page %d", catalog.id, page.number)
                break
            merged.extend(page.results)
        # Per-page ordering drifts across pages, so re-sort the whole batch.
        return sort_by_rating(_previews(merged))

    def pages(self, client: TMDbClient, catalog: CatalogSpec) -> Iterator[UpstreamPage]:
        """Fetch pages lazily so the caller can stop at the first empty one."""

        for number in range(1, self.max_pages + 1):
            payload = client.discover_movies(**self.params(catalog, number))
            yield UpstreamPage(number=number, results=list(payload.get("results") or []))

    def params(self, catalog: CatalogSpec, page: int) -> dict[str, Any]:
        return {
            "include_adult": False,
            "sort_by": "vote_average.desc",
            "page": page,
            "primary_release_date.gte": catalog.gte.isoformat(),
            "primary_release_date.lte": catalog.lte.isoformat(),
            "vote_count.gte": self.min_vote_count,
        }


class LivePaginatedStrategy:
    """Serve exactly one upstream page per request."""

    def __init__(self, *, default_limit: int = 50, max_limit: int = 100, min_vote_count: int = 500) -> None:
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.min_vote_count = min_vote_count

    def page_for(self, skip: int, limit: int | None) -> int:
        if not limit or limit < 1:
            limit = self.default_limit
        limit = min(limit, self.max_limit)
        return max(skip, 0) // limit + 1

    def fetch(self, client: TMDbClient, catalog: CatalogSpec, query: ListingQuery) -> list[MoviePreview]:
        page = self.page_for(query.skip, query.limit)
        if page > MAX_UPSTREAM_PAGE:
            logger.info("Catalog %s page %d is beyond TMDb's last page", catalog.id, page)
            return []

        genre = catalogs.genre_id(query.genre)
        if query.genre and genre is None:
            logger.info("Ignoring unknown genre filter %r", query.genre)

        if query.search:
            payload = client.search_movies(query=query.search, page=page)
            records = self._filter_search(payload.get("results") or [], catalog, genre)
        else:
            payload = client.discover_movies(**self.discover_params(catalog, query, page, genre))
            records = payload.get("results") or []
        return _previews(records)

    def discover_params(
        self,
        catalog: CatalogSpec,
        query: ListingQuery,
        page: int,
        genre: int | None,
    ) -> dict[str, Any]:
        sort_by = catalogs.sort_key(query.sort)
        params: dict[str, Any] = {
            "include_adult": False,
            "sort_by": sort_by,
            "page": page,
            "primary_release_date.gte": catalog.gte.isoformat(),
            "primary_release_date.lte": catalog.lte.isoformat(),
            "with_genres": genre,
        }
        if sort_by == catalogs.SORT_KEYS["rating"]:
            params["vote_count.gte"] = self.min_vote_count
        return params

    @staticmethod
    def _filter_search(
        records: list[dict[str, Any]],
        catalog: CatalogSpec,
        genre: int | None,
    ) -> list[dict[str, Any]]:
        # /search/movie cannot filter by date or genre upstream.
        kept = []
        for record in records:
            if not catalog.contains_year(release_year(record.get("release_date"))):
                continue
            if genre is not None and genre not in (record.get("genre_ids") or []):
                continue
            kept.append(record)
        return kept


def build_strategy(settings: Settings | None = None) -> ListingStrategy:
    settings = settings or get_settings()
    if settings.catalog_mode == "live":
        return LivePaginatedStrategy(min_vote_count=settings.catalog_min_vote_count)
    return BulkPrefetchStrategy(
        max_pages=settings.catalog_max_pages,
        min_vote_count=settings.catalog_min_vote_count,
    )


class CatalogResolver:
    """Entry point for catalog listings and item details. Never raises."""

    def __init__(
        self,
        *,
        client: TMDbClient | None = None,
        strategy: ListingStrategy | None = None,
    ) -> None:
        self.client = client or TMDbClient()
        self.strategy = strategy or build_strategy()

    def list_catalog(self, catalog_id: str, query: ListingQuery | None = None) -> ListingResult:
        catalog = catalogs.get_catalog(catalog_id)
        if catalog is None:
            logger.info("Unknown catalog requested: %s", catalog_id)
            return ListingResult()
        query = query or ListingQuery()
        try:
            items = self.strategy.fetch(self.client, catalog, query)
        except TMDbError as exc:
            logger.warning("Catalog %s failed: %s", catalog_id, exc)
            return ListingResult.failed(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while resolving catalog %s", catalog_id)
            return ListingResult.failed(str(exc))
        return ListingResult(items=tuple(items))

    def get_detail(self, item_id: str) -> DetailResult:
        try:
            tmdb_id = strip_prefix(item_id).strip()
            if not tmdb_id.isdigit():
                raise ValueError(f"Malformed item id: {item_id!r}")
            movie = self.client.movie_details(tmdb_id)
            detail = to_detail(movie, trailer=self._trailer(tmdb_id))
            if detail is None:
                raise ValueError(f"TMDb record {tmdb_id} has no title")
        except Exception as exc:
            logger.error("Meta error for %s: %s", item_id, exc)
            return DetailResult(detail=unavailable_detail(item_id), degraded=True, error=str(exc))
        return DetailResult(detail=detail)

    def _trailer(self, tmdb_id: str) -> Trailer | None:
        """Best-effort trailer lookup; any failure means no trailer."""

        try:
            payload = self.client.movie_videos(tmdb_id)
            results = payload.get("results") if isinstance(payload, dict) else None
            return select_trailer(results if isinstance(results, list) else [])
        except Exception as exc:
            logger.info("No trailers for %s: %s", tmdb_id, exc)
            return None
