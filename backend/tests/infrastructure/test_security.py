"""Security Layer — hardening headers, HSTS/HPKP gating, compression, CORS."""

import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from httpx import ASGITransport, AsyncClient

from harmonia.infrastructure.security import apply_security, build_security_headers

from tests.services.fakes import make_environment


def _app(environment) -> FastAPI:
    app = FastAPI()
    apply_security(app, environment)

    @app.get("/small")
    async def small():
        return PlainTextResponse("ok")

    @app.get("/large")
    async def large():
        return PlainTextResponse("a" * 2_000)

    return app


async def _get(app, path, **headers):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as client:
        return await client.get(path, headers=headers)


def test_plain_server_has_no_hsts():
    headers = build_security_headers(make_environment())
    assert "Strict-Transport-Security" not in headers
    assert "Public-Key-Pins" not in headers
    assert headers["X-Powered-By"] == "Harmonia API"


def test_secure_server_gets_hsts():
    env = make_environment(server={"secure": True, "ssl": {"hsts_max_age": 60}})
    headers = build_security_headers(env)
    assert headers["Strict-Transport-Security"] == "max-age=60; includeSubDomains"


def test_pins_only_when_configured():
    env = make_environment(server={"ssl": {"hpkp_keys": ["AAA=", "BBB="]}})
    pins = build_security_headers(env)["Public-Key-Pins"]
    assert 'pin-sha256="AAA="' in pins
    assert 'pin-sha256="BBB="' in pins


async def test_headers_on_responses():
    env = make_environment(app={"name": "Studio"})
    resp = await _get(_app(env), "/small")

    assert resp.headers["x-frame-options"] == "SAMEORIGIN"
    assert resp.headers["x-powered-by"] == "Studio"
    assert resp.headers["referrer-policy"] == "no-referrer"


async def test_headers_on_not_found():
    resp = await _get(_app(make_environment()), "/missing")

    assert resp.status_code == 404
    assert resp.headers["x-content-type-options"] == "nosniff"


async def test_large_bodies_compressed():
    app = _app(make_environment())

    large = await _get(app, "/large", **{"accept-encoding": "gzip"})
    small = await _get(app, "/small", **{"accept-encoding": "gzip"})

    assert large.headers.get("content-encoding") == "gzip"
    assert "content-encoding" not in small.headers


async def test_cors_preflight_for_allowed_origin():
    env = make_environment(server={"cors": {"allow_origins": ["https://app.example"]}})
    async with AsyncClient(
        transport=ASGITransport(app=_app(env)), base_url="http://test",
    ) as client:
        resp = await client.options(
            "/small",
            headers={
                "origin": "https://app.example",
                "access-control-request-method": "GET",
            },
        )

    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "https://app.example"


def test_applied_once():
    app = _app(make_environment())
    with pytest.raises(RuntimeError):
        apply_security(app, make_environment())
