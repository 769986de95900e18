"""Boundary Protocols — contracts between core/services and infrastructure.

Invariants:
    - Core NEVER imports from infrastructure — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by the shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
    - Filters are opaque (Any): the pagination engine passes them through unmodified
"""

from typing import Any, Mapping, Protocol, Sequence


class DatabaseSpecLike(Protocol):
    url: str
    pool_size: int
    max_overflow: int
    echo: bool


class Datastore(Protocol):
    """Persistence collaborator consumed by the lifecycle and pagination engine."""

    async def connect(
        self, specs: Mapping[str, DatabaseSpecLike], verbose: bool = True,
    ) -> None: ...

    async def disconnect(self) -> None: ...

    async def count_matching(self, filter: Any) -> int: ...

    async def fetch(self, filter: Any, skip: int, limit: int) -> Sequence[Any]: ...


class FaultLogger(Protocol):
    """Fire-and-forget sink for diagnostic traces. No return contract."""

    def log(self, trace_text: str) -> None: ...
