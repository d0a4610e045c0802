"""Shared dataclasses for service layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class CatalogSpec:
    """A named catalog backed by a closed release-date window."""

    id: str
    name: str
    gte: date
    lte: date

    def __post_init__(self) -> None:
        if self.gte > self.lte:
            raise ValueError(f"Catalog {self.id!r} has an empty date window")

    def contains_year(self, year: int | None) -> bool:
        if year is None:
            return False
        return self.gte.year <= year <= self.lte.year

    def overlaps(self, other: CatalogSpec) -> bool:
        return self.gte <= other.lte and other.gte <= self.lte


@dataclass(frozen=True, slots=True)
class ListingQuery:
    """Caller-supplied filters for one catalog browse."""

    search: str | None = None
    genre: str | None = None
    sort: str | None = None
    skip: int = 0
    limit: int | None = None

    @classmethod
    def from_extra(cls, extra: Mapping[str, Any] | None) -> ListingQuery:
        """Build a query from the add-on protocol's ``extra`` pairs."""

        if not extra:
            return cls()
        skip = _parse_int(extra.get("skip"))
        return cls(
            search=_clean(extra.get("search")),
            genre=_clean(extra.get("genre")),
            sort=_clean(extra.get("sort")),
            skip=max(skip, 0) if skip is not None else 0,
            limit=_parse_int(extra.get("limit")),
        )


@dataclass(frozen=True, slots=True)
class MoviePreview:
    """Normalized listing row."""

    id: str
    name: str
    poster: str | None = None
    background: str | None = None
    release_info: str = ""
    description: str | None = None
    rating: str | None = None
    type: str = "movie"


@dataclass(frozen=True, slots=True)
class Trailer:
    source: str
    name: str | None = None
    site: str = "YouTube"
    type: str = "Trailer"


@dataclass(frozen=True, slots=True)
class MovieDetail:
    """Full record for a single item; degraded records carry only id and name."""

    id: str
    name: str
    poster: str | None = None
    background: str | None = None
    release_info: str | None = None
    description: str | None = None
    rating: str | None = None
    runtime: str | None = None
    genres: tuple[str, ...] = ()
    trailer: Trailer | None = None
    type: str = "movie"


@dataclass(frozen=True, slots=True)
class ListingResult:
    items: tuple[MoviePreview, ...] = ()
    degraded: bool = False
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> ListingResult:
        return cls(items=(), degraded=True, error=error)


@dataclass(frozen=True, slots=True)
class DetailResult:
    detail: MovieDetail
    degraded: bool = False
    error: str | None = None


@dataclass(frozen=True, slots=True)
class UpstreamPage:
    """One fetched batch of raw upstream records."""

    number: int
    results: list[dict[str, Any]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.results


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None
