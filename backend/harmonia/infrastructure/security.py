"""Security Layer — hardening headers, CORS policy, and response compression.

Invariants:
    - Applied exactly once, before validation setup and route registration
    - Every response carries the hardening headers, including error responses
    - Strict-Transport-Security only when the server is configured secure
    - Public-Key-Pins only when pin hashes are configured
    - X-Powered-By advertises the application name, never the framework

Design Decisions:
    - Pure ASGI middleware over BaseHTTPMiddleware: headers injected on
      http.response.start without buffering bodies
    - CORS added last so it is the outermost layer: preflight requests are
      answered before anything else runs
    - GZip threshold from config (100 bytes by default)
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from harmonia.config import Environment

logger = logging.getLogger(__name__)

_BASE_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}


def build_security_headers(environment: Environment) -> dict[str, str]:
    """Headers added to every response for this environment."""
    server = environment.server
    headers = dict(_BASE_HEADERS)
    headers["X-Powered-By"] = environment.app.name
    if server.secure:
        headers["Strict-Transport-Security"] = (
            f"max-age={server.ssl.hsts_max_age}; includeSubDomains"
        )
    if server.ssl.hpkp_keys:
        pins = "; ".join(f'pin-sha256="{key}"' for key in server.ssl.hpkp_keys)
        headers["Public-Key-Pins"] = f"{pins}; max-age={server.ssl.hsts_max_age}"
    return headers


class SecurityHeadersMiddleware:
    """Adds a fixed header set to every HTTP response."""

    def __init__(self, app: ASGIApp, headers: dict[str, str]):
        self.app = app
        self.headers = dict(headers)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = MutableHeaders(scope=message)
                for name, value in self.headers.items():
                    response_headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_headers)


def apply_security(app: FastAPI, environment: Environment) -> None:
    """Install compression, hardening headers and CORS on the app."""
    if getattr(app.state, "security_applied", False):
        raise RuntimeError("Security layer already applied")
    cors = environment.server.cors
    app.add_middleware(
        GZipMiddleware, minimum_size=environment.server.compression_min_size,
    )
    app.add_middleware(
        SecurityHeadersMiddleware, headers=build_security_headers(environment),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors.allow_origins),
        allow_methods=list(cors.allow_methods),
        allow_headers=list(cors.allow_headers),
        expose_headers=list(cors.expose_headers),
        allow_credentials=cors.allow_credentials,
    )
    app.state.security_applied = True
    logger.debug("Security layer applied")
