"""Lifecycle Orchestrator — drives the process from cold start to serving.

Invariants:
    - Stages run strictly in order, once: SECURING_TRANSPORT_HEADERS ->
      CONFIGURING_VALIDATION -> CONNECTING_DATASTORE -> REGISTERING_ROUTES ->
      SERVING (core/lifecycle_transitions.py holds the legal moves)
    - Validation is configured before any router is mounted
    - CONNECTING_DATASTORE is skipped, with a note, when no databases are
      configured; the connect primitive is then never called
    - A connect failure moves to FAILED and raises StartupFault; no route is
      registered and SERVING is never reached
    - The datastore is exposed to routes (app.state.datastore) only after it
      connected, so no handler can reach an unconnected datastore
    - SERVING means the transport is bound; status lines are logged unless the
      profile is test
    - One orchestrator lifecycle per process: run() refuses while another is active

Design Decisions:
    - async stages instead of chained callbacks: the sequence reads top to bottom
    - Connect deadline (server.connect_timeout_seconds): expiry is a connect
      failure like any other
    - uvicorn.Server driven directly (lifespan off) so SERVING is entered only
      once the socket is bound
    - uvicorn's SystemExit on a failed bind is caught inside the serving task;
      the event loop re-raises SystemExit out of a Task and would skip FAILED
      and shutdown()
"""

import asyncio
import logging
import os
import time
from typing import Any, Callable, ClassVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import uvicorn
from fastapi import FastAPI

from harmonia import __version__
from harmonia.api.router_registry import RouterRegistry
from harmonia.config import Environment
from harmonia.core import language_strings
from harmonia.core.domain_types import LifecycleState
from harmonia.core.errors import (
    ConfigurationError, DatastoreConnectionError, InvalidTransitionError,
    StartupFault, TransportError,
)
from harmonia.core.lifecycle_transitions import next_state
from harmonia.core.locale_catalog import LocaleCatalog
from harmonia.core.repository_protocols import FaultLogger
from harmonia.core.validation import Validator
from harmonia.infrastructure.datastore import SQLDatastore
from harmonia.infrastructure.observability import FaultLog
from harmonia.infrastructure.security import apply_security
from harmonia.infrastructure.transport import TransportPlan, select_transport
from harmonia.services.fault_supervisor import FaultSupervisor

logger = logging.getLogger(__name__)

S = LifecycleState
_BIND_POLL_SECONDS = 0.05


def create_app(environment: Environment) -> FastAPI:
    """Bare FastAPI instance; the orchestrator adds everything else."""
    return FastAPI(title=environment.app.name, version=__version__)


def apply_timezone(name: str) -> None:
    """Set the process timezone (TZ) for naive time functions."""
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown timezone '{name}'") from e
    os.environ["TZ"] = name
    if hasattr(time, "tzset"):
        time.tzset()


class LifecycleOrchestrator:
    """State machine: Idle -> ... -> Serving, with Failed reachable from any step."""

    _active: ClassVar["LifecycleOrchestrator | None"] = None

    def __init__(
        self,
        environment: Environment,
        app: FastAPI | None = None,
        datastore: Any = None,
        validator: Validator | None = None,
        registry: RouterRegistry | None = None,
        fault_log: FaultLogger | None = None,
        server_factory: Callable[[uvicorn.Config], Any] = uvicorn.Server,
    ):
        self.environment = environment
        self.app = app or create_app(environment)
        self.datastore = datastore if datastore is not None else SQLDatastore()
        self.validator = validator or Validator()
        self.registry = registry or RouterRegistry()
        self.fault_log = fault_log or FaultLog(environment.log.fault_log_path)
        self.supervisor = FaultSupervisor(environment, self.fault_log)
        self.catalog: LocaleCatalog | None = None
        self.transport: TransportPlan | None = None
        self.server: Any = None
        self._server_factory = server_factory
        self.state = S.IDLE
        self.history: list[LifecycleState] = [S.IDLE]

    # ─── State machine ──────────────────────────────────────────

    def _transition(self, target: LifecycleState) -> None:
        self.state = next_state(self.state, target)
        self.history.append(target)
        self.supervisor.observe(target)
        logger.debug(f"Lifecycle -> {target.value}", extra={"stage": target.value})

    def _fail(self, exc: BaseException) -> StartupFault:
        """Move to FAILED and return the StartupFault to raise."""
        fault = self.supervisor.escalate_startup(self.state.value, exc)
        if self.state is not S.FAILED:
            self._transition(S.FAILED)
        logger.critical(fault.message, extra={"stage": fault.stage})
        return fault

    def _app_log(self, key: str, **params) -> None:
        """Human-readable status line; silent under the test profile."""
        if self.environment.is_test:
            return
        if self.catalog is not None:
            logger.info(self.catalog.text(language_strings.APP, key, **params))
        else:
            logger.info(key)

    # ─── Startup ────────────────────────────────────────────────

    async def start(self) -> None:
        """Run every stage up to (not including) SERVING."""
        if self.state is not S.IDLE:
            raise InvalidTransitionError(self.state.value, S.SECURING_TRANSPORT_HEADERS.value)
        try:
            apply_timezone(self.environment.app.timezone)

            self._transition(S.SECURING_TRANSPORT_HEADERS)
            self._secure_transport_headers()
            self.supervisor.raise_pending()

            self._transition(S.CONFIGURING_VALIDATION)
            self._configure_validation()
            self.supervisor.raise_pending()

            if self.environment.databases:
                self._transition(S.CONNECTING_DATASTORE)
                await self._connect_datastore()
                self.supervisor.raise_pending()
            else:
                self._app_log("no_database")

            self._transition(S.REGISTERING_ROUTES)
            self._register_routes()
            self.supervisor.raise_pending()
        except Exception as exc:
            fault = self._fail(exc)
            if fault is exc:
                raise
            raise fault from exc

    def _secure_transport_headers(self) -> None:
        self.app.state.environment = self.environment
        apply_security(self.app, self.environment)

    def _configure_validation(self) -> None:
        self.catalog = LocaleCatalog(self.environment.app.locale)
        self.validator.set_locale(
            self.catalog.locale,
            self.catalog.get_table(language_strings.VALIDATION),
        )
        self.validator.sync_settings()
        self.app.state.locale_catalog = self.catalog
        self.app.state.validator = self.validator

    async def _connect_datastore(self) -> None:
        self.datastore.set_messages(
            self.catalog.get_table(language_strings.DATASTORE),
        )
        timeout = self.environment.server.connect_timeout_seconds
        try:
            await asyncio.wait_for(
                self.datastore.connect(
                    self.environment.databases, not self.environment.is_test,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            names = ", ".join(self.environment.databases)
            raise DatastoreConnectionError(
                names,
                self.catalog.text(
                    language_strings.DATASTORE, "connect.timeout",
                    name=names, seconds=timeout,
                ),
            ) from e

    def _register_routes(self) -> None:
        self.app.state.datastore = self.datastore
        self.registry.sync_routers(self.app, self.validator, self.environment)

    # ─── Serving ────────────────────────────────────────────────

    async def serve(self) -> None:
        """Bind the transport, enter SERVING, block until the server exits."""
        if self.state is not S.REGISTERING_ROUTES:
            raise InvalidTransitionError(self.state.value, S.SERVING.value)
        try:
            self.transport = select_transport(self.app, self.environment.server)
            self.server = self._server_factory(
                self.transport.uvicorn_config(self.app, self.environment),
            )
            serving = asyncio.create_task(self._serve_transport())
            while not self.server.started and not serving.done():
                await asyncio.sleep(_BIND_POLL_SECONDS)
            if serving.done():
                serving.result()
                raise ConfigurationError(
                    f"Server exited before binding "
                    f"{self.transport.host}:{self.transport.port}",
                )
        except Exception as exc:
            fault = self._fail(exc)
            if fault is exc:
                raise
            raise fault from exc

        self._transition(S.SERVING)
        self.supervisor.enter_serving(on_fatal=self._request_exit)
        self._app_log(
            "listening", name=self.environment.app.name,
            host=self.transport.host, port=self.transport.port,
        )
        self._app_log("ssl_on" if self.transport.secure else "ssl_off")

        await serving
        self.supervisor.raise_pending()

    async def _serve_transport(self) -> None:
        """uvicorn exits the process (sys.exit) when it cannot bind; that
        becomes a TransportError so the task ends like any failed stage."""
        try:
            await self.server.serve()
        except SystemExit as e:
            raise TransportError(
                f"Server could not bind {self.transport.host}:{self.transport.port} "
                f"(exit status {e.code})",
            ) from e

    def _request_exit(self) -> None:
        if self.server is not None:
            self.server.should_exit = True
        if self.state is S.SERVING:
            self._transition(S.FAILED)

    async def shutdown(self) -> None:
        if getattr(self.datastore, "is_connected", False):
            await self.datastore.disconnect()
        logger.info(f"{self.environment.app.name} shutting down")

    # ─── Process entry ──────────────────────────────────────────

    async def run(self) -> None:
        """Supervised start + serve + shutdown. The process-level entry."""
        if LifecycleOrchestrator._active is not None:
            raise InvalidTransitionError("active", "run")
        LifecycleOrchestrator._active = self
        self.supervisor.install(asyncio.get_running_loop())
        try:
            await self.start()
            await self.serve()
        finally:
            self.supervisor.uninstall()
            await self.shutdown()
            LifecycleOrchestrator._active = None
