"""FastAPI entrypoint exposing the decade catalogs over the add-on protocol."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any
from urllib.parse import parse_qsl

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ConfigDict, Field

from app.core.config import check_credentials, get_settings
from app.core.logging_config import configure_logging
from app.services.manifest import build_manifest
from app.services.models import ListingQuery, MovieDetail, MoviePreview
from app.services.resolver import CatalogResolver


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Configure logging and report whether TMDb credentials are present."""

    settings = get_settings()
    configure_logging(settings.log_level)
    credentials = check_credentials(settings)
    if credentials.present:
        logger.info(credentials.message)
    else:
        logger.warning(credentials.message)
    yield


app = FastAPI(title="Decade Catalog Add-on", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_resolver() -> CatalogResolver:
    return CatalogResolver()


class TrailerResponse(BaseModel):
    source: str
    type: str = "Trailer"
    name: str | None = None
    site: str = "YouTube"


class MetaPreviewResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str = "movie"
    name: str
    poster: str | None = None
    background: str | None = None
    release_info: str | None = Field(default=None, alias="releaseInfo")
    description: str | None = None
    imdb_rating: str | None = Field(default=None, alias="imdbRating")


class MetaResponse(MetaPreviewResponse):
    runtime: str | None = None
    genres: list[str] | None = None
    trailers: list[TrailerResponse] | None = None


class CatalogResponse(BaseModel):
    metas: list[MetaPreviewResponse]


class MetaEnvelope(BaseModel):
    meta: MetaResponse


@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    return RedirectResponse(url="/manifest.json")


@app.get("/manifest.json")
def manifest() -> dict[str, Any]:
    return build_manifest()


@app.get("/health")
def health() -> dict[str, Any]:
    return {"status": "ok", "tmdb_credentials": check_credentials().present}


@app.get(
    "/catalog/{content_type}/{catalog_id}.json",
    response_model=CatalogResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
)
def catalog(
    content_type: str,
    catalog_id: str,
    resolver: CatalogResolver = Depends(get_resolver),
) -> CatalogResponse:
    return _catalog_response(resolver, content_type, catalog_id, ListingQuery())


@app.get(
    "/catalog/{content_type}/{catalog_id}/{extra}.json",
    response_model=CatalogResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
)
def catalog_with_extra(
    request: Request,
    content_type: str,
    catalog_id: str,
    extra: str,
    resolver: CatalogResolver = Depends(get_resolver),
) -> CatalogResponse:
    query = ListingQuery.from_extra(parse_extra(_raw_extra(request, extra)))
    return _catalog_response(resolver, content_type, catalog_id, query)


@app.get(
    "/meta/{content_type}/{item_id}.json",
    response_model=MetaEnvelope,
    response_model_exclude_none=True,
    response_model_by_alias=True,
)
def meta(
    content_type: str,
    item_id: str,
    resolver: CatalogResolver = Depends(get_resolver),
) -> MetaEnvelope:
    if content_type != "movie":
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unsupported type: {content_type}",
        )
    result = resolver.get_detail(item_id)
    return MetaEnvelope(meta=_detail_to_response(result.detail))


def parse_extra(raw: str) -> dict[str, str]:
    """Parse a still-encoded ``genre=Horror&search=Tom%20%26%20Jerry`` segment."""

    return dict(parse_qsl(raw, keep_blank_values=False))


def _raw_extra(request: Request, decoded: str) -> str:
    # The path parameter is already percent-decoded, so an encoded "&" or "+"
    # inside a value is indistinguishable from a separator there.
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return decoded
    segment = raw_path.decode("latin-1").rsplit("/", 1)[-1]
    return segment.removesuffix(".json")


def _catalog_response(
    resolver: CatalogResolver,
    content_type: str,
    catalog_id: str,
    query: ListingQuery,
) -> CatalogResponse:
    if content_type != "movie":
        return CatalogResponse(metas=[])
    result = resolver.list_catalog(catalog_id, query)
    return CatalogResponse(metas=[_preview_to_response(item) for item in result.items])


def _preview_to_response(preview: MoviePreview) -> MetaPreviewResponse:
    return MetaPreviewResponse(
        id=preview.id,
        type=preview.type,
        name=preview.name,
        poster=preview.poster,
        background=preview.background,
        release_info=preview.release_info,
        description=preview.description,
        imdb_rating=preview.rating,
    )


def _detail_to_response(detail: MovieDetail) -> MetaResponse:
    trailers = None
    if detail.trailer:
        trailers = [
            TrailerResponse(
                source=detail.trailer.source,
                type=detail.trailer.type,
                name=detail.trailer.name,
                site=detail.trailer.site,
            )
        ]
    return MetaResponse(
        id=detail.id,
        type=detail.type,
        name=detail.name,
        poster=detail.poster,
        background=detail.background,
        release_info=detail.release_info,
        description=detail.description,
        imdb_rating=detail.rating,
        runtime=detail.runtime,
        genres=list(detail.genres) or None,
        trailers=trailers,
    )
