"""Router Registry — mounts every resource route group onto the app, once.

Invariants:
    - Refuses to run until the Validator has a bound locale catalog: routes
      attach validation dependencies that read it on every request
    - Runs exactly once per app; a second sync is a startup fault
    - Error handlers are registered together with the routes so every
      mounted route answers failures with the envelope

Design Decisions:
    - Explicit tuple of routers over package scanning: every mounted group is
      visible in one place
"""

import logging
from typing import Iterable

from fastapi import APIRouter, FastAPI

from harmonia.api.error_handlers import register_error_handlers
from harmonia.api.routes import artists, courses, health
from harmonia.config import Environment
from harmonia.core.domain_types import LifecycleState
from harmonia.core.errors import StartupFault
from harmonia.core.validation import Validator

logger = logging.getLogger(__name__)

DEFAULT_ROUTE_GROUPS: tuple[APIRouter, ...] = (
    health.router,
    artists.router,
    courses.router,
)

_STAGE = LifecycleState.REGISTERING_ROUTES.value


class RouterRegistry:
    """Holds the route groups and mounts them when the app is ready for them."""

    def __init__(self, groups: Iterable[APIRouter] = DEFAULT_ROUTE_GROUPS):
        self._groups = tuple(groups)
        self._synced = False

    @property
    def groups(self) -> tuple[APIRouter, ...]:
        return self._groups

    def sync_routers(
        self, app: FastAPI, validator: Validator, environment: Environment,
    ) -> None:
        if self._synced:
            raise StartupFault(_STAGE, "routers already registered")
        if not validator.is_configured:
            raise StartupFault(_STAGE, "validator has no bound locale catalog")
        register_error_handlers(app, environment)
        for router in self._groups:
            app.include_router(router)
            logger.debug(f"Mounted route group {router.prefix or '/'}")
        self._synced = True
