from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable, Protocol

import redis
from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session

from modelscopes.core.config import settings
from modelscopes.services.naming import table_name

_LOG = logging.getLogger("modelscopes.db_driver")

DRIVER_NAMES = {
    "mysql": "mysql",
    "mariadb": "mariadb",
    "postgresql": "pgsql",
    "sqlite": "sqlite",
    "mssql": "sqlsrv",
}


class DriverNameCache(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str, *, ttl_seconds: int) -> None:
        ...


class InMemoryDriverNameCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._data: dict[str, tuple[str, float]] = {}
        self._lock = Lock()
        self._clock = clock

    def get(self, key: str) -> str | None:
        now = self._clock()
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            value, expires_at = item
            if expires_at <= now:
                self._data.pop(key, None)
                return None
            return value

    def set(self, key: str, value: str, *, ttl_seconds: int) -> None:
        expires_at = self._clock() + max(int(ttl_seconds), 1)
        with self._lock:
            self._data[key] = (value, expires_at)


class RedisDriverNameCache:
    def __init__(self, client: redis.Redis):
        self.client = client

    def get(self, key: str) -> str | None:
        value = self.client.get(key)
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode(settings.APP_CHARSET)
        return str(value)

    def set(self, key: str, value: str, *, ttl_seconds: int) -> None:
        self.client.set(key, value, ex=int(max(ttl_seconds, 1)))


_cached_cache: DriverNameCache | None = None


def _build_cache() -> DriverNameCache:
    if not settings.REDIS_URL:
        return InMemoryDriverNameCache()
    try:
        client = redis.Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=0.4,
            socket_connect_timeout=0.4,
        )
        client.ping()
        return RedisDriverNameCache(client)
    except redis.RedisError:
        _LOG.warning("Redis driver-name cache unavailable; fallback to in-memory cache")
        return InMemoryDriverNameCache()


def get_driver_cache() -> DriverNameCache:
    global _cached_cache
    if _cached_cache is None:
        _cached_cache = _build_cache()
    return _cached_cache


def reset_driver_cache_for_tests() -> None:
    global _cached_cache
    _cached_cache = None


def _engine_of(bind, model: type | None = None) -> Engine:
    if isinstance(bind, type):
        raise TypeError(
            f"{bind.__name__} is a class; pass an Engine, Connection or Session as bind and the model as model="
        )
    if isinstance(bind, Session):
        bind = bind.get_bind(mapper=model) if model is not None else bind.get_bind()
    if isinstance(bind, Connection):
        return bind.engine
    if isinstance(bind, Engine):
        return bind
    raise TypeError(f"Cannot detect database driver for {type(bind).__name__}")


def cache_key(bind, model: type | None = None) -> str:
    engine = _engine_of(bind, model)
    if model is not None:
        return f"{settings.DRIVER_CACHE_KEY_PREFIX}model-{table_name(model)}"
    return f"{settings.DRIVER_CACHE_KEY_PREFIX}{engine.url.render_as_string(hide_password=True)}"


def _server_version(bind, engine: Engine) -> str:
    query = text("SELECT VERSION()")
    if isinstance(bind, (Connection, Session)):
        return str(bind.execute(query).scalar() or "")
    with engine.connect() as conn:
        return str(conn.execute(query).scalar() or "")


def detect_driver_name(bind, model: type | None = None) -> str:
    engine = _engine_of(bind, model)
    dialect = engine.dialect.name
    name = DRIVER_NAMES.get(dialect, dialect)
    # MariaDB servers are reached through the MySQL dialect as well
    if name == "mysql" and "mariadb" in _server_version(bind, engine).lower():
        name = "mariadb"
    return name


def driver_name(
    bind,
    model: type | None = None,
    cache: DriverNameCache | None = None,
    ttl_seconds: int | None = None,
) -> str:
    """Database driver of ``bind``: mysql, mariadb, pgsql, sqlite or sqlsrv.

    ``bind`` is an ``Engine``, ``Connection`` or ``Session`` (with ``model``
    picking the bind of a multi-bind session). The answer is cached per
    model table when ``model`` is given, per connection URL otherwise, for
    ``ttl_seconds``, and may be stale for that long.
    """
    cache = cache if cache is not None else get_driver_cache()
    ttl_seconds = settings.DRIVER_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
    key = cache_key(bind, model)
    cached = cache.get(key)
    if cached:
        return cached
    name = detect_driver_name(bind, model)
    cache.set(key, name, ttl_seconds=ttl_seconds)
    _LOG.debug("Detected database driver %s for %s", name, key)
    return name
