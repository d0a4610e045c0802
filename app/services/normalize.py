"""Reshape raw TMDb records into catalog rows and detail records."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from app.core.config import get_settings
from app.services.models import MovieDetail, MoviePreview, Trailer


ID_PREFIX = "tmdb:"
POSTER_SIZE = "w500"
BACKGROUND_SIZE = "w780"
UNAVAILABLE_NAME = "Unavailable"


def prefixed_id(raw_id: Any) -> str:
    return f"{ID_PREFIX}{raw_id}"


def strip_prefix(item_id: str) -> str:
    if item_id.startswith(ID_PREFIX):
        return item_id[len(ID_PREFIX):]
    return item_id


def image_url(path: str | None, size: str = POSTER_SIZE, *, base: str | None = None) -> str | None:
    if not path:
        return None
    base = (base or get_settings().tmdb_image_base).rstrip("/")
    return f"{base}/{size}{path}"


def format_rating(value: Any) -> str | None:
    """One fractional digit, or ``None`` when TMDb never rated the title."""

    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not number:
        return None
    return f"{number:.1f}"


def rating_value(preview: MoviePreview) -> float:
    return float(preview.rating) if preview.rating else 0.0


def release_year(raw: str | None) -> int | None:
    if not raw or len(raw) < 4 or not raw[:4].isdigit():
        return None
    return int(raw[:4])


def to_preview(raw: Mapping[str, Any], *, image_base: str | None = None) -> MoviePreview | None:
    title = raw.get("title")
    if not title:
        return None
    return MoviePreview(
        id=prefixed_id(raw.get("id")),
        name=title,
        poster=image_url(raw.get("poster_path"), POSTER_SIZE, base=image_base),
        background=image_url(raw.get("backdrop_path"), BACKGROUND_SIZE, base=image_base),
        release_info=(raw.get("release_date") or "")[:4],
        description=raw.get("overview"),
        rating=format_rating(raw.get("vote_average")),
    )


def select_trailer(videos: Iterable[Any]) -> Trailer | None:
    """First YouTube trailer in upstream order.

    Non-mapping entries and entries without a ``key`` are skipped.
    """

    for video in videos:
        if not isinstance(video, Mapping):
            continue
        if video.get("type") == "Trailer" and video.get("site") == "YouTube" and video.get("key"):
            return Trailer(source=str(video["key"]), name=video.get("name"), site="YouTube")
    return None


def to_detail(
    raw: Mapping[str, Any],
    *,
    trailer: Trailer | None = None,
    image_base: str | None = None,
) -> MovieDetail | None:
    preview = to_preview(raw, image_base=image_base)
    if preview is None:
        return None
    runtime = raw.get("runtime")
    return MovieDetail(
        id=preview.id,
        name=preview.name,
        poster=preview.poster,
        background=preview.background,
        release_info=preview.release_info,
        description=preview.description,
        rating=preview.rating,
        runtime=f"{runtime} min" if runtime else None,
        genres=tuple(g["name"] for g in raw.get("genres") or [] if g.get("name")),
        trailer=trailer,
    )


def unavailable_detail(item_id: str) -> MovieDetail:
    return MovieDetail(id=item_id, name=UNAVAILABLE_NAME)
