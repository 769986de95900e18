"""Pagination Engine — bounded collection reads against the Datastore collaborator.

Invariants:
    - skip = (page - 1) * limit; page_count = ceil(total / limit)
    - Page past the last one returns zero items, never an error
    - No validation or clamping of limit/page here (page query schema does it);
      out-of-range values reaching the engine get whatever the datastore does
    - Any datastore failure surfaces as QueryError chained to the cause
    - Never touches the response; handlers translate QueryError to a 500 envelope

Design Decisions:
    - count and fetch issued concurrently and NOT in one transaction: a write
      landing between them can make meta.totalCount disagree with items by a
      small margin. Accepted relaxation (approximate pagination), no locking
    - No own deadline: calls inherit whatever the transport imposes per request
"""

import asyncio
import logging
from typing import Any

from harmonia.core.errors import QueryError
from harmonia.core.pagination import PageRequest, PageResult, build_page_result
from harmonia.core.repository_protocols import Datastore

logger = logging.getLogger(__name__)


async def paginate(
    datastore: Datastore, filter: Any, limit: int, page: int,
) -> PageResult:
    """Read one page of records matching `filter`."""
    request = PageRequest(filter=filter, limit=limit, page=page)
    try:
        total_count, items = await asyncio.gather(
            datastore.count_matching(request.filter),
            datastore.fetch(request.filter, request.skip, request.limit),
        )
    except QueryError:
        raise
    except Exception as e:
        logger.error(f"Paginated read failed (page={page}, limit={limit}): {e}")
        raise QueryError(f"Paginated read failed: {e}", cause=e) from e
    return build_page_result(items, total_count, page, limit)
