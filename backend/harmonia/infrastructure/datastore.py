"""Datastore — SQLAlchemy async implementation of the persistence collaborator.

Invariants:
    - One async engine per configured database name; the first one is primary
    - connect() verifies every engine with SELECT 1 before returning; on any
      failure all engines opened so far are disposed (no half-connected state)
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions mapped to Datastore* errors (core/errors.py)
    - Filters are SQLAlchemy Select statements, passed in unmodified

Design Decisions:
    - Instance owned by the orchestrator and exposed via app.state.datastore:
      no module-level singleton, tests construct their own
    - expire_on_commit=False: prevents lazy-load issues in async context
    - Pool sizing ignored for SQLite (its async pools take no size arguments)
    - No retries: a failed read surfaces immediately to the caller
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Mapping, Sequence

from fastapi import Request
from sqlalchemy import Select, func, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from harmonia.core import language_strings
from harmonia.core.domain_types import Locale
from harmonia.core.errors import DatastoreConnectionError, DatastoreQueryError
from harmonia.core.repository_protocols import DatabaseSpecLike

logger = logging.getLogger(__name__)


class SQLDatastore:
    """Async engines for every configured database plus count/fetch primitives."""

    def __init__(self):
        self._engines: dict[str, AsyncEngine] = {}
        self._session_factories: dict[str, async_sessionmaker[AsyncSession]] = {}
        self._primary: str | None = None
        self._messages = language_strings.get_table(
            language_strings.DATASTORE, Locale.EN,
        )

    # ─── Lifecycle ──────────────────────────────────────────────

    def set_messages(self, table: Mapping[str, str]) -> None:
        """Localised failure messages (from the active LocaleCatalog)."""
        self._messages = {**self._messages, **table}

    @property
    def is_connected(self) -> bool:
        return bool(self._engines)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._engines)

    async def connect(
        self, specs: Mapping[str, DatabaseSpecLike], verbose: bool = True,
    ) -> None:
        """Open and verify an engine per spec. Raises DatastoreConnectionError."""
        names = list(specs)
        engines = {name: _create_engine(specs[name]) for name in names}
        results = await asyncio.gather(
            *(_ping(engines[name]) for name in names), return_exceptions=True,
        )
        failures = [
            (name, exc) for name, exc in zip(names, results)
            if isinstance(exc, BaseException)
        ]
        if failures:
            await asyncio.gather(*(e.dispose() for e in engines.values()))
            name, exc = failures[0]
            raise DatastoreConnectionError(
                name, self._message("connect.failed", name=name),
            ) from exc

        for name in names:
            self._engines[name] = engines[name]
            self._session_factories[name] = async_sessionmaker(
                engines[name], class_=AsyncSession, expire_on_commit=False,
            )
            if verbose:
                logger.info(
                    self._message("connect.ok", name=name), extra={"database": name},
                )
        if self._primary is None and names:
            self._primary = names[0]

    async def disconnect(self) -> None:
        engines = list(self._engines.values())
        self._engines.clear()
        self._session_factories.clear()
        self._primary = None
        await asyncio.gather(*(e.dispose() for e in engines))

    def engine(self, name: str | None = None) -> AsyncEngine:
        return self._engines[self._resolve(name)]

    def _resolve(self, name: str | None) -> str:
        if name is None:
            name = self._primary
        if name is None or name not in self._engines:
            raise DatastoreQueryError(self._message("not_connected"), "resolve")
        return name

    def _message(self, key: str, **params) -> str:
        template = self._messages.get(key, key)
        return template.format(**params) if params else template

    # ─── Sessions ───────────────────────────────────────────────

    @asynccontextmanager
    async def session(self, name: str | None = None) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factories[self._resolve(name)]()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatastoreQueryError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatastoreQueryError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatastoreQueryError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatastoreQueryError("Database operation failed", "unknown") from e
        finally:
            await session.close()

    # ─── Query primitives ───────────────────────────────────────

    async def count_matching(self, filter: Select) -> int:
        stmt = select(func.count()).select_from(filter.order_by(None).subquery())
        async with self.session() as db:
            result = await db.execute(stmt)
            return int(result.scalar_one())

    async def fetch(self, filter: Select, skip: int, limit: int) -> Sequence[Any]:
        async with self.session() as db:
            result = await db.execute(filter.offset(skip).limit(limit))
            return result.scalars().all()

    async def health_check(self) -> bool:
        """Check connectivity of the primary database (readiness probe)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False


def _create_engine(spec: DatabaseSpecLike) -> AsyncEngine:
    kwargs: dict[str, Any] = {"echo": spec.echo}
    if make_url(spec.url).get_backend_name() != "sqlite":
        kwargs.update(
            pool_size=spec.pool_size,
            max_overflow=spec.max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
    return create_async_engine(spec.url, **kwargs)


async def _ping(engine: AsyncEngine) -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


def get_datastore(request: Request) -> SQLDatastore:
    """FastAPI dependency — the datastore the orchestrator connected."""
    return request.app.state.datastore
