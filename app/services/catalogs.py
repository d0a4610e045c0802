"""Fixed catalog definitions and the lookup tables used to build TMDb queries."""

from __future__ import annotations

from datetime import date
from types import MappingProxyType
from typing import Mapping

from app.services.models import CatalogSpec


CATALOGS: tuple[CatalogSpec, ...] = (
    CatalogSpec(
        id="eighties",
        name="1980s Movies",
        gte=date(1980, 1, 1),
        lte=date(1989, 12, 31),
    ),
    CatalogSpec(
        id="nineties",
        name="1990s Movies",
        gte=date(1990, 1, 1),
        lte=date(1999, 12, 31),
    ),
    CatalogSpec(
        id="two_thousands",
        name="2000s–2010 Movies",
        gte=date(2000, 1, 1),
        lte=date(2010, 12, 31),
    ),
)

_CATALOGS_BY_ID: Mapping[str, CatalogSpec] = MappingProxyType({spec.id: spec for spec in CATALOGS})

# TMDb movie genre ids (/genre/movie/list).
GENRE_IDS: Mapping[str, int] = MappingProxyType(
    {
        "action": 28,
        "adventure": 12,
        "animation": 16,
        "comedy": 35,
        "crime": 80,
        "documentary": 99,
        "drama": 18,
        "family": 10751,
        "fantasy": 14,
        "history": 36,
        "horror": 27,
        "music": 10402,
        "mystery": 9648,
        "romance": 10749,
        "science fiction": 878,
        "sci-fi": 878,
        "thriller": 53,
        "war": 10752,
        "western": 37,
    }
)

DEFAULT_SORT = "popularity"

SORT_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "popularity": "popularity.desc",
        "rating": "vote_average.desc",
        "release": "primary_release_date.desc",
    }
)


def get_catalog(catalog_id: str) -> CatalogSpec | None:
    return _CATALOGS_BY_ID.get(catalog_id)


def genre_id(label: str | None) -> int | None:
    """Map a genre label to TMDb's numeric id; unknown labels yield ``None``."""

    if not label:
        return None
    return GENRE_IDS.get(label.strip().lower())


def sort_key(preference: str | None) -> str:
    if preference:
        mapped = SORT_KEYS.get(preference.strip().lower())
        if mapped:
            return mapped
    return SORT_KEYS[DEFAULT_SORT]


def genre_options() -> list[str]:
    """Display labels offered to clients, one per distinct genre id."""

    seen: set[int] = set()
    options: list[str] = []
    for label, gid in GENRE_IDS.items():
        if gid in seen:
            continue
        seen.add(gid)
        options.append(label.title())
    return options
