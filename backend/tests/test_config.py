"""Environment — immutable snapshot resolved from HARMONIA_* variables."""

import pydantic
import pytest

from harmonia.config import Environment, load_environment
from harmonia.core.domain_types import Profile


def test_defaults(monkeypatch):
    monkeypatch.delenv("HARMONIA_ENV", raising=False)
    env = Environment(_env_file=None)

    assert env.profile is Profile.DEVELOPMENT
    assert env.is_development
    assert env.server.port == 8000
    assert env.server.secure is False
    assert env.app.locale == "en"


def test_profile_from_harmonia_env(monkeypatch):
    monkeypatch.setenv("HARMONIA_ENV", "production")
    assert load_environment(_env_file=None).profile is Profile.PRODUCTION


def test_nested_sections_from_env(monkeypatch):
    monkeypatch.setenv("HARMONIA_SERVER__PORT", "9443")
    monkeypatch.setenv("HARMONIA_SERVER__SECURE", "true")
    monkeypatch.setenv("HARMONIA_APP__LOCALE", "pt-BR")

    env = load_environment(_env_file=None)

    assert env.server.port == 9443
    assert env.server.secure is True
    assert env.app.locale == "pt-BR"


def test_databases_from_json(monkeypatch):
    monkeypatch.setenv(
        "HARMONIA_DATABASES",
        '{"main": {"url": "postgresql://u:p@db/harmonia", "pool_size": 5}}',
    )

    env = load_environment(_env_file=None)

    assert env.databases["main"].url == "postgresql+asyncpg://u:p@db/harmonia"
    assert env.databases["main"].pool_size == 5


def test_zero_databases_is_valid():
    assert dict(Environment(databases={}, _env_file=None).databases) == {}


def test_snapshot_is_frozen():
    env = Environment(databases={"main": {"url": "sqlite+aiosqlite:///x.db"}}, _env_file=None)

    with pytest.raises(pydantic.ValidationError):
        env.profile = Profile.PRODUCTION
    with pytest.raises(pydantic.ValidationError):
        env.server.port = 1
    with pytest.raises(TypeError):
        env.databases["other"] = env.databases["main"]


def test_port_out_of_range_rejected():
    with pytest.raises(pydantic.ValidationError):
        Environment(server={"port": 70000}, _env_file=None)
