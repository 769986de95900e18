"""Artists — paginated list, read, create, update, delete.

Invariants:
    - Bodies validated by the schema-driven Validator before the handler runs
    - List failures in the datastore answer 500 with diagnostic text, never raise
    - Unknown ids answer 404 via ResourceNotFoundError
"""

import logging

from fastapi import APIRouter, Depends

from harmonia.api.dependencies import (
    PageQuery, get_environment, page_query, validate_body,
)
from harmonia.api.envelope import ApiResponse, diagnostic_text, get_api
from harmonia.config import Environment
from harmonia.core.errors import QueryError, ResourceNotFoundError
from harmonia.infrastructure.datastore import SQLDatastore, get_datastore
from harmonia.models.artist import Artist
from harmonia.schemas.artist import artist_create_schema, artist_update_schema
from harmonia.services.pagination import paginate
from harmonia.services.resource_queries import artist_filter

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/artists", tags=["artists"])

_FIELD_MAP = {"name": "name", "genres": "genres", "originYear": "origin_year"}


@router.get("")
async def list_artists(
    query: PageQuery = Depends(page_query),
    datastore: SQLDatastore = Depends(get_datastore),
    environment: Environment = Depends(get_environment),
    api: ApiResponse = Depends(get_api),
):
    try:
        result = await paginate(
            datastore, artist_filter(query.aggregate), query.limit, query.page,
        )
    except QueryError as e:
        return api.send(
            diagnostic_text(e, environment), api.codes.INTERNAL_SERVER_ERROR,
        )
    return api.send(
        [artist.to_dict() for artist in result.items],
        api.codes.OK,
        result.meta.to_dict(),
    )


@router.get("/{artist_id}")
async def read_artist(
    artist_id: int,
    datastore: SQLDatastore = Depends(get_datastore),
    api: ApiResponse = Depends(get_api),
):
    async with datastore.session() as db:
        artist = await db.get(Artist, artist_id)
        if artist is None:
            raise ResourceNotFoundError("Artist", str(artist_id))
        return api.send(artist.to_dict(), api.codes.OK)


@router.post("")
async def create_artist(
    body: dict = Depends(validate_body(artist_create_schema)),
    datastore: SQLDatastore = Depends(get_datastore),
    api: ApiResponse = Depends(get_api),
):
    async with datastore.session() as db:
        artist = Artist(**{_FIELD_MAP[k]: v for k, v in body.items()})
        db.add(artist)
        await db.commit()
        await db.refresh(artist)
        logger.info(f"Artist created: {artist.id}")
        return api.send(artist.to_dict(), api.codes.CREATED)


@router.put("/{artist_id}")
async def update_artist(
    artist_id: int,
    body: dict = Depends(validate_body(artist_update_schema)),
    datastore: SQLDatastore = Depends(get_datastore),
    api: ApiResponse = Depends(get_api),
):
    async with datastore.session() as db:
        artist = await db.get(Artist, artist_id)
        if artist is None:
            raise ResourceNotFoundError("Artist", str(artist_id))
        for key, value in body.items():
            setattr(artist, _FIELD_MAP[key], value)
        await db.commit()
        await db.refresh(artist)
        return api.send(artist.to_dict(), api.codes.OK)


@router.delete("/{artist_id}")
async def delete_artist(
    artist_id: int,
    datastore: SQLDatastore = Depends(get_datastore),
    api: ApiResponse = Depends(get_api),
):
    async with datastore.session() as db:
        artist = await db.get(Artist, artist_id)
        if artist is None:
            raise ResourceNotFoundError("Artist", str(artist_id))
        await db.delete(artist)
        await db.commit()
        return api.send({"id": artist_id}, api.codes.OK)
