"""Add-on manifest describing the catalogs this service exposes."""

from __future__ import annotations

from typing import Any

from app.core.config import Settings, get_settings
from app.services import catalogs
from app.services.normalize import ID_PREFIX


ADDON_ID = "org.josh.classics_90s_2010s"
ADDON_VERSION = "1.3.0"
ADDON_NAME = "90s–2010 (By Decade)"
ADDON_DESCRIPTION = (
    "Curated catalogs split by decade: 1980s, 1990s and 2000s–2010. "
    "Metadata only; pair with your favorite streaming add-ons."
)


def build_manifest(settings: Settings | None = None) -> dict[str, Any]:
    settings = settings or get_settings()
    live = settings.catalog_mode == "live"
    return {
        "id": ADDON_ID,
        "version": ADDON_VERSION,
        "name": ADDON_NAME,
        "description": ADDON_DESCRIPTION,
        "types": ["movie"],
        "resources": ["catalog", "meta"],
        "idPrefixes": [ID_PREFIX],
        "catalogs": [_catalog_entry(spec.id, spec.name, live=live) for spec in catalogs.CATALOGS],
    }


def _catalog_entry(catalog_id: str, name: str, *, live: bool) -> dict[str, Any]:
    entry: dict[str, Any] = {"type": "movie", "id": catalog_id, "name": name}
    if not live:
        return entry
    entry["extra"] = [
        {"name": "search", "isRequired": False},
        {"name": "genre", "isRequired": False, "options": catalogs.genre_options()},
        {"name": "sort", "isRequired": False, "options": list(catalogs.SORT_KEYS)},
        {"name": "skip", "isRequired": False},
    ]
    entry["extraSupported"] = [extra["name"] for extra in entry["extra"]]
    return entry
