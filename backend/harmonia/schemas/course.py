"""Course Schemas — create/update body rules.

Invariants:
    - title: string, 3-120 chars; level: one of CourseLevel values
    - artistId, when given, is a positive integer
"""

from annotated_types import Ge, MaxLen, MinLen

from harmonia.core.domain_types import CourseLevel
from harmonia.core.validation import Field, Kind, Schema

TITLE_MAX_LENGTH = 120


def _fields(required: bool) -> dict[str, Field]:
    return {
        "title": Field(
            Kind.STRING, (MinLen(3), MaxLen(TITLE_MAX_LENGTH)), required=required,
        ),
        "description": Field(Kind.STRING, (MaxLen(5_000),)),
        "level": Field(
            Kind.STRING, choices=tuple(level.value for level in CourseLevel),
        ),
        "artistId": Field(Kind.INTEGER, (Ge(1),)),
    }


def course_create_schema() -> Schema:
    return Schema(_fields(required=True))


def course_update_schema() -> Schema:
    return Schema(_fields(required=False))
