"""Harmonia API — process entry point.

Invariants:
    - The Environment snapshot is resolved exactly once, here, and handed to the
      orchestrator; nothing else reads process configuration
    - Logging is configured before the first lifecycle stage
    - A StartupFault terminates the process with a non-zero exit status

Usage:
    harmonia-api                      # console script
    python -m harmonia.main
"""

import asyncio
import logging

from fastapi import FastAPI

from harmonia.config import Environment, load_environment
from harmonia.core.errors import StartupFault
from harmonia.infrastructure.observability import setup_logging
from harmonia.services.lifecycle import LifecycleOrchestrator

logger = logging.getLogger(__name__)


async def build_app(environment: Environment, **collaborators) -> FastAPI:
    """Run every startup stage and return the app without binding a socket.

    Used by tests and by ASGI hosts that bind the transport themselves.
    """
    orchestrator = LifecycleOrchestrator(environment, **collaborators)
    await orchestrator.start()
    orchestrator.app.state.orchestrator = orchestrator
    return orchestrator.app


def run() -> None:
    environment = load_environment()
    setup_logging(environment.log.level, environment.log.format)
    orchestrator = LifecycleOrchestrator(environment)
    try:
        asyncio.run(orchestrator.run())
    except StartupFault as fault:
        logger.critical(
            f"{environment.app.name} failed to start: {fault.message}",
            extra={"stage": fault.stage, "error_code": fault.code},
        )
        raise SystemExit(1) from fault


if __name__ == "__main__":
    run()
