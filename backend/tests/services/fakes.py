"""Lifecycle test doubles — datastore, fault log and server fakes.

Invariants:
    - Fakes record the order of calls they receive
    - FakeDatastore refuses reads before its connect() resolved
"""

import asyncio
import sys

from harmonia.config import Environment

MEMORY_DB = {"main": {"url": "sqlite+aiosqlite:///:memory:"}}


def make_environment(**overrides) -> Environment:
    values = {"profile": "test", "databases": MEMORY_DB, "_env_file": None}
    values.update(overrides)
    return Environment(**values)


class FakeDatastore:
    """Datastore double that records the order of calls it receives."""

    def __init__(self, fail: BaseException | None = None, delay: float = 0.0):
        self.fail = fail
        self.delay = delay
        self.calls: list[str] = []
        self.connected = False
        self.messages: dict = {}
        self.on_connect = None
        self.total = 0
        self.rows: list = []

    @property
    def is_connected(self) -> bool:
        return self.connected

    def set_messages(self, table):
        self.calls.append("set_messages")
        self.messages = dict(table)

    async def connect(self, specs, verbose=True):
        self.calls.append("connect")
        if self.on_connect is not None:
            self.on_connect()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail is not None:
            raise self.fail
        self.connected = True

    async def disconnect(self):
        self.calls.append("disconnect")
        self.connected = False

    async def count_matching(self, filter):
        assert self.connected, "count_matching before connect resolved"
        self.calls.append("count_matching")
        return self.total

    async def fetch(self, filter, skip, limit):
        assert self.connected, "fetch before connect resolved"
        self.calls.append("fetch")
        return self.rows[skip:skip + limit]


class FakeFaultLog:
    def __init__(self):
        self.entries: list[str] = []

    def log(self, trace_text: str) -> None:
        self.entries.append(trace_text)


class FakeServer:
    """Stands in for uvicorn.Server: 'binds' at once, runs until told to exit."""

    def __init__(self, config):
        self.config = config
        self.started = False
        self.should_exit = False

    async def serve(self):
        self.started = True
        while not self.should_exit:
            await asyncio.sleep(0.01)


class FailingBindServer(FakeServer):
    async def serve(self):
        # uvicorn logs the bind error, then exits with STARTUP_FAILURE
        sys.exit(3)


async def wait_for_state(orchestrator, state, timeout: float = 2.0):
    async def _poll():
        while orchestrator.state is not state:
            await asyncio.sleep(0.01)
    await asyncio.wait_for(_poll(), timeout)
