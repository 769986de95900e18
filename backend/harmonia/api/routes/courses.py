"""Courses — paginated list, read, create, update, delete.

Invariants:
    - Bodies validated by the schema-driven Validator before the handler runs
    - artistId must reference an existing artist (404 otherwise)
    - List failures in the datastore answer 500 with diagnostic text
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from harmonia.api.dependencies import (
    PageQuery, get_environment, page_query, validate_body,
)
from harmonia.api.envelope import ApiResponse, diagnostic_text, get_api
from harmonia.config import Environment
from harmonia.core.errors import QueryError, ResourceNotFoundError
from harmonia.infrastructure.datastore import SQLDatastore, get_datastore
from harmonia.models.artist import Artist
from harmonia.models.course import Course
from harmonia.schemas.course import course_create_schema, course_update_schema
from harmonia.services.pagination import paginate
from harmonia.services.resource_queries import course_filter

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/courses", tags=["courses"])

_FIELD_MAP = {
    "title": "title",
    "description": "description",
    "level": "level",
    "artistId": "artist_id",
}


async def _ensure_artist(db: AsyncSession, body: dict) -> None:
    artist_id = body.get("artistId")
    if artist_id is not None and await db.get(Artist, artist_id) is None:
        raise ResourceNotFoundError("Artist", str(artist_id))


@router.get("")
async def list_courses(
    query: PageQuery = Depends(page_query),
    datastore: SQLDatastore = Depends(get_datastore),
    environment: Environment = Depends(get_environment),
    api: ApiResponse = Depends(get_api),
):
    try:
        result = await paginate(
            datastore, course_filter(query.aggregate), query.limit, query.page,
        )
    except QueryError as e:
        return api.send(
            diagnostic_text(e, environment), api.codes.INTERNAL_SERVER_ERROR,
        )
    return api.send(
        [course.to_dict() for course in result.items],
        api.codes.OK,
        result.meta.to_dict(),
    )


@router.get("/{course_id}")
async def read_course(
    course_id: int,
    datastore: SQLDatastore = Depends(get_datastore),
    api: ApiResponse = Depends(get_api),
):
    async with datastore.session() as db:
        course = await db.get(Course, course_id)
        if course is None:
            raise ResourceNotFoundError("Course", str(course_id))
        return api.send(course.to_dict(), api.codes.OK)


@router.post("")
async def create_course(
    body: dict = Depends(validate_body(course_create_schema)),
    datastore: SQLDatastore = Depends(get_datastore),
    api: ApiResponse = Depends(get_api),
):
    async with datastore.session() as db:
        await _ensure_artist(db, body)
        course = Course(**{_FIELD_MAP[k]: v for k, v in body.items()})
        db.add(course)
        await db.commit()
        await db.refresh(course)
        logger.info(f"Course created: {course.id}")
        return api.send(course.to_dict(), api.codes.CREATED)


@router.put("/{course_id}")
async def update_course(
    course_id: int,
    body: dict = Depends(validate_body(course_update_schema)),
    datastore: SQLDatastore = Depends(get_datastore),
    api: ApiResponse = Depends(get_api),
):
    async with datastore.session() as db:
        course = await db.get(Course, course_id)
        if course is None:
            raise ResourceNotFoundError("Course", str(course_id))
        await _ensure_artist(db, body)
        for key, value in body.items():
            setattr(course, _FIELD_MAP[key], value)
        await db.commit()
        await db.refresh(course)
        return api.send(course.to_dict(), api.codes.OK)


@router.delete("/{course_id}")
async def delete_course(
    course_id: int,
    datastore: SQLDatastore = Depends(get_datastore),
    api: ApiResponse = Depends(get_api),
):
    async with datastore.session() as db:
        course = await db.get(Course, course_id)
        if course is None:
            raise ResourceNotFoundError("Course", str(course_id))
        await db.delete(course)
        await db.commit()
        return api.send({"id": course_id}, api.codes.OK)
