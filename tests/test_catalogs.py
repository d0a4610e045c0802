from datetime import date
from itertools import combinations

import pytest

from app.services import catalogs
from app.services.models import CatalogSpec, ListingQuery


def test_catalog_windows_are_closed_and_disjoint():
    for spec in catalogs.CATALOGS:
        assert spec.gte <= spec.lte
    for first, second in combinations(catalogs.CATALOGS, 2):
        assert not first.overlaps(second)


def test_get_catalog_known_and_unknown():
    nineties = catalogs.get_catalog("nineties")
    assert nineties is not None
    assert nineties.gte == date(1990, 1, 1)
    assert nineties.lte == date(1999, 12, 31)
    assert catalogs.get_catalog("seventies") is None


def test_catalog_spec_rejects_inverted_window():
    with pytest.raises(ValueError):
        CatalogSpec(id="broken", name="Broken", gte=date(2000, 1, 1), lte=date(1990, 1, 1))


def test_contains_year_is_inclusive():
    spec = catalogs.get_catalog("two_thousands")
    assert spec.contains_year(2000)
    assert spec.contains_year(2010)
    assert not spec.contains_year(2011)
    assert not spec.contains_year(None)


@pytest.mark.parametrize(
    "label, expected",
    [("horror", 27), ("Horror", 27), (" Science Fiction ", 878), ("sci-fi", 878), ("noir", None), (None, None)],
)
def test_genre_id_lookup(label, expected):
    assert catalogs.genre_id(label) == expected


@pytest.mark.parametrize(
    "preference, expected",
    [
        (None, "popularity.desc"),
        ("rating", "vote_average.desc"),
        ("RELEASE", "primary_release_date.desc"),
        ("alphabetical", "popularity.desc"),
    ],
)
def test_sort_key_lookup(preference, expected):
    assert catalogs.sort_key(preference) == expected


def test_genre_options_are_unique_per_genre_id():
    options = catalogs.genre_options()
    assert "Horror" in options
    assert "Science Fiction" in options
    assert "Sci-Fi" not in options


def test_listing_query_from_extra():
    query = ListingQuery.from_extra({"search": "  alien ", "genre": "Horror", "skip": "40", "limit": "junk"})
    assert query.search == "alien"
    assert query.genre == "Horror"
    assert query.skip == 40
    assert query.limit is None
    assert ListingQuery.from_extra(None) == ListingQuery()
    assert ListingQuery.from_extra({"skip": "-5"}).skip == 0
