"""Transport Selector — plain HTTP or TLS, decided from the server section.

Invariants:
    - Selection refuses to run before the security layer has been applied
    - Secure transport requires both certfile and keyfile; missing material is a
      ConfigurationError at startup, never a silent downgrade to plain HTTP
    - Access logging is off under the test profile, on everywhere else

Design Decisions:
    - uvicorn is the SecureTransport collaborator: TLS material is handed to
      uvicorn.Config, this module never touches certificates itself
"""

from dataclasses import dataclass, field
from typing import Any

import uvicorn
from fastapi import FastAPI

from harmonia.config import Environment, ServerSection
from harmonia.core.errors import TransportError


@dataclass(frozen=True)
class TransportPlan:
    secure: bool
    host: str
    port: int
    ssl_options: dict[str, Any] = field(default_factory=dict)

    @property
    def scheme(self) -> str:
        return "https" if self.secure else "http"

    def uvicorn_config(self, app: FastAPI, environment: Environment) -> uvicorn.Config:
        return uvicorn.Config(
            app,
            host=self.host,
            port=self.port,
            access_log=not environment.is_test,
            log_config=None,  # keep the handlers installed by setup_logging
            lifespan="off",   # lifecycle is driven by LifecycleOrchestrator
            **self.ssl_options,
        )


def select_transport(app: FastAPI, server: ServerSection) -> TransportPlan:
    """Choose plain or encrypted transport for the configured host/port."""
    if not getattr(app.state, "security_applied", False):
        raise TransportError("Transport selected before security layer was applied")
    if not server.secure:
        return TransportPlan(secure=False, host=server.host, port=server.port)

    ssl = server.ssl
    if not ssl.certfile or not ssl.keyfile:
        raise TransportError(
            "server.secure is set but server.ssl.certfile/keyfile are missing",
        )
    options: dict[str, Any] = {
        "ssl_certfile": ssl.certfile,
        "ssl_keyfile": ssl.keyfile,
    }
    if ssl.ca_certs:
        options["ssl_ca_certs"] = ssl.ca_certs
    if ssl.password:
        options["ssl_keyfile_password"] = ssl.password
    return TransportPlan(
        secure=True, host=server.host, port=server.port, ssl_options=options,
    )
