"""Fault Supervisor — the single process-level fault policy, owned by the orchestrator.

Invariants:
    - Installed (as the event loop's exception handler) before any stage runs
    - Before SERVING every fault is a StartupFault and is escalated: the
      orchestrator re-raises it and the process terminates
    - After SERVING, faults that escape every request boundary (orphaned task
      errors, callback errors) become RuntimeFaults:
        * development profile: re-raised. The server is asked to exit and the
          fault is raised again from serve() (fail fast)
        * any other profile: the trace is written to the fault log and the
          process keeps serving
    - Faults inside a request never reach here; the request's own error
      handlers answer them with an envelope

Design Decisions:
    - Explicit supervisor object over an implicit sys.excepthook: the startup vs
      serving distinction needs lifecycle state
    - Known risk: log-and-continue leaves the faulting code path in an
      undefined state (availability over crash-and-restart)
"""

import asyncio
import logging
import traceback
from typing import Any, Callable

from harmonia.config import Environment
from harmonia.core.domain_types import LifecycleState
from harmonia.core.errors import RuntimeFault, StartupFault
from harmonia.core.lifecycle_transitions import is_startup_stage
from harmonia.core.repository_protocols import FaultLogger

logger = logging.getLogger(__name__)


def format_trace(exc: BaseException) -> str:
    return "".join(traceback.format_exception(exc))


class FaultSupervisor:
    """Routes faults by lifecycle phase and profile."""

    def __init__(self, environment: Environment, fault_log: FaultLogger):
        self._environment = environment
        self._fault_log = fault_log
        self._state = LifecycleState.IDLE
        self._on_fatal: Callable[[], None] | None = None
        self._pending: BaseException | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._previous_handler: Any = None

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def pending(self) -> BaseException | None:
        return self._pending

    # ─── Installation ───────────────────────────────────────────

    def install(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._previous_handler = loop.get_exception_handler()
        loop.set_exception_handler(self._loop_exception_handler)

    def uninstall(self) -> None:
        if self._loop is not None:
            self._loop.set_exception_handler(self._previous_handler)
            self._loop = None

    def _loop_exception_handler(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any],
    ) -> None:
        exc = context.get("exception")
        if exc is None:
            exc = RuntimeError(context.get("message", "unknown event loop fault"))
        self.report(exc)

    # ─── Policy ─────────────────────────────────────────────────

    def observe(self, state: LifecycleState) -> None:
        """Track the orchestrator's lifecycle state; it picks the fault policy."""
        self._state = state

    def enter_serving(self, on_fatal: Callable[[], None] | None = None) -> None:
        self._state = LifecycleState.SERVING
        self._on_fatal = on_fatal

    def escalate_startup(self, stage: str, exc: BaseException) -> StartupFault:
        """Wrap any startup failure as a StartupFault (idempotent)."""
        if isinstance(exc, StartupFault):
            return exc
        return StartupFault(stage, str(exc) or type(exc).__name__, cause=exc)

    def report(self, exc: BaseException) -> None:
        """Entry point for faults outside any request boundary."""
        if is_startup_stage(self._state):
            logger.critical(f"Fault during startup: {exc}", exc_info=exc)
            if self._pending is None:
                self._pending = self.escalate_startup("startup", exc)
            return

        fault = exc if isinstance(exc, RuntimeFault) else RuntimeFault(
            f"Uncaught fault: {exc}", cause=exc,
        )
        if self._environment.is_development:
            logger.critical(f"Runtime fault (development, failing fast): {exc}")
            if self._pending is None:
                self._pending = fault
            if self._on_fatal is not None:
                self._on_fatal()
            return

        self._fault_log.log(format_trace(exc))
        logger.error(
            f"Runtime fault logged, serving continues: {exc}",
            extra={"error_code": fault.code, "profile": self._environment.profile.value},
        )

    def raise_pending(self) -> None:
        """Re-raise a fault recorded by report() that must terminate the process."""
        if self._pending is not None:
            pending, self._pending = self._pending, None
            cause = getattr(pending, "cause", None)
            if cause is not None and cause is not pending:
                raise pending from cause
            raise pending
