"""Artist Schemas — create/update body rules.

Invariants:
    - name: string, max 50 chars
    - genres: array of strings, at least 1 item
    - originYear: integer between 1500 and the current year (evaluated per request)
    - Create requires name and genres; update accepts any subset
"""

from datetime import date

from annotated_types import Ge, Le, MaxLen, MinLen

from harmonia.core.validation import Field, Kind, Schema

NAME_MAX_LENGTH = 50
EARLIEST_ORIGIN_YEAR = 1500


def _fields(required: bool) -> dict[str, Field]:
    return {
        "name": Field(
            Kind.STRING, (MinLen(1), MaxLen(NAME_MAX_LENGTH)), required=required,
        ),
        "genres": Field(
            Kind.ARRAY, (MinLen(1),), required=required,
            items=Field(Kind.STRING, (MinLen(1),)),
        ),
        "originYear": Field(
            Kind.INTEGER,
            (Ge(EARLIEST_ORIGIN_YEAR), Le(date.today().year)),
        ),
    }


def artist_create_schema() -> Schema:
    return Schema(_fields(required=True))


def artist_update_schema() -> Schema:
    return Schema(_fields(required=False))
