"""Page Query Schema — ?aggregate=<json>&limit=<n>&page=<n> on collection reads.

Invariants:
    - limit: integer 1..MAX_PAGE_LIMIT, default DEFAULT_PAGE_LIMIT
    - page: integer >= 1, default 1
    - aggregate: JSON object text (decoded); absent means "all records"
    - These bounds are the only place limit/page are checked; the pagination
      engine trusts its inputs
"""

from annotated_types import Ge, Le

from harmonia.core.validation import Field, Kind, Schema

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


def page_query_schema() -> Schema:
    return Schema({
        "aggregate": Field(Kind.JSON, default={}),
        "limit": Field(
            Kind.INTEGER, (Ge(1), Le(MAX_PAGE_LIMIT)),
            default=DEFAULT_PAGE_LIMIT,
        ),
        "page": Field(Kind.INTEGER, (Ge(1),), default=1),
    })
