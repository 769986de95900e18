"""API Response — per-request sender of the {status, data, meta?} envelope.

Invariants:
    - One ApiResponse per request (FastAPI dependency, not cached across requests)
    - send() succeeds at most once; a second call raises ResponseAlreadySentError
    - Only StatusCode members are accepted; raw ints are a programming error

Design Decisions:
    - send() returns the JSONResponse instead of writing to a socket: the route
      returns it, so "terminate the response" is the route's return
    - Diagnostic text for 500s carries the traceback only in development
"""

import traceback
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from harmonia.config import Environment
from harmonia.core.envelope import StatusCode, build_envelope
from harmonia.core.errors import ResponseAlreadySentError


class ApiResponse:
    """Envelope sender bound to a single request."""

    codes = StatusCode

    def __init__(self):
        self._sent = False

    @property
    def sent(self) -> bool:
        return self._sent

    def send(
        self, payload: Any, code: StatusCode, meta: dict | None = None,
    ) -> JSONResponse:
        if self._sent:
            raise ResponseAlreadySentError()
        if not isinstance(code, StatusCode):
            raise TypeError(f"send() requires a StatusCode, got {code!r}")
        self._sent = True
        return JSONResponse(
            status_code=int(code),
            content=jsonable_encoder(build_envelope(code, payload, meta)),
        )


def get_api(request: Request) -> ApiResponse:
    """FastAPI dependency — fresh sender, also reachable as request.state.api."""
    api = ApiResponse()
    request.state.api = api
    return api


def diagnostic_text(exc: BaseException, environment: Environment) -> str:
    """Text placed under `data` for 500-class envelopes."""
    if environment.is_development:
        return "".join(traceback.format_exception(exc))
    return str(exc)
