"""Response Envelope — the uniform {status, data, meta?} shape of every API response.

Invariants:
    - StatusCode is the closed vocabulary; handlers never emit raw numeric codes
    - `meta` key present only when a meta object is given
    - build_envelope is pure: a fresh dict per call, nothing cached or shared
"""

from enum import IntEnum
from typing import Any


class StatusCode(IntEnum):
    """Closed status-code vocabulary shared by every handler."""
    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    UNPROCESSABLE_ENTITY = 422
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503


def build_envelope(
    status: StatusCode, data: Any, meta: dict | None = None,
) -> dict:
    """Wrap a payload in the response envelope."""
    envelope = {"status": int(status), "data": data}
    if meta is not None:
        envelope["meta"] = meta
    return envelope
