"""Application settings read from the environment, and storage configuration."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum, auto
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import load_dotenv

log = logging.getLogger(__name__)

DEFAULT_PORT = "8080"
DEFAULT_REPLICA_SET = "rs0"
DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_MAX_POOL_SIZE = 100
DEFAULT_MIN_POOL_SIZE = 5
DEFAULT_CONN_IDLE_MINUTES = 30

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class Environment(str, Enum):
    """The deployment environment the application runs in."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"

    def __str__(self) -> str:
        return self.value


class EnvVar(str, Enum):
    """Names of the environment variables the application reads."""

    def _generate_next_value_(name, start, count, last_values):  # noqa: N805
        return name

    AUTH_SECRET = auto()
    GO_ENV = auto()
    PORT = auto()
    MONGODB_URI = auto()
    MONGODB_NAME = auto()
    MONGODB_REPLICA_SET = auto()
    TIMEOUT = auto()
    MAX_POOL_SIZE = auto()
    MIN_POOL_SIZE = auto()
    CONN_IDLE_TIME = auto()
    MONGODB_RETRY_WRITES = auto()
    MONGODB_RETRY_READS = auto()
    POSTGRES_URI = auto()

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Settings:
    """Values the application reads from its environment."""

    auth_secret: str
    environment: Union[Environment, str]
    port: str = DEFAULT_PORT
    mongodb_uri: str = ""
    mongodb_name: str = ""
    mongodb_replica_set: str = DEFAULT_REPLICA_SET
    timeout: timedelta = timedelta(seconds=DEFAULT_TIMEOUT_SECONDS)
    max_pool_size: int = DEFAULT_MAX_POOL_SIZE
    min_pool_size: int = DEFAULT_MIN_POOL_SIZE
    conn_idle_time: timedelta = timedelta(minutes=DEFAULT_CONN_IDLE_MINUTES)
    mongodb_retry_writes: bool = True
    mongodb_retry_reads: bool = True
    postgres_uri: str = ""


def load_env_file(path: Union[str, Path]) -> bool:
    """Load variables from a dotenv file without overriding set ones."""
    env_path = Path(path)
    if not env_path.is_file():
        log.warning(".env file not found or failed to load")
        return False
    load_dotenv(env_path, override=False)
    return True


class _Reader:
    def __init__(self, environ: Mapping[str, str]) -> None:
        self._environ = environ

    def get(self, key: Union[EnvVar, str]) -> str:
        return self._environ.get(str(key).strip(), "")

    def with_default(self, key: Union[EnvVar, str], default: str) -> str:
        return self.get(key) or default

    def required(self, key: Union[EnvVar, str]) -> str:
        value = self.get(key)
        if not value:
            raise ValueError(f"{key} environment variable is not set")
        return value

    def integer(self, key: Union[EnvVar, str], default: int) -> int:
        value = self.get(key)
        if not value:
            return default
        if not _INT_PATTERN.fullmatch(value):
            raise ValueError(f"{key} environment variable is not a valid integer")
        return int(value)

    def boolean(self, key: Union[EnvVar, str], default: bool) -> bool:
        value = self.get(key)
        if not value:
            return default
        if value in _TRUE_WORDS:
            return True
        if value in _FALSE_WORDS:
            return False
        raise ValueError(f"{key} environment variable is not a valid boolean")


def _environment(value: str) -> Union[Environment, str]:
    try:
        return Environment(value)
    except ValueError:
        return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (the process environment by default)."""
    read = _Reader(os.environ if environ is None else environ)
    return Settings(
        auth_secret=read.required(EnvVar.AUTH_SECRET),
        environment=_environment(read.required(EnvVar.GO_ENV)),
        port=read.with_default(EnvVar.PORT, DEFAULT_PORT),
        mongodb_uri=read.get(EnvVar.MONGODB_URI),
        mongodb_name=read.get(EnvVar.MONGODB_NAME),
        mongodb_replica_set=read.with_default(
            EnvVar.MONGODB_REPLICA_SET, DEFAULT_REPLICA_SET
        ),
        timeout=timedelta(
            seconds=read.integer(EnvVar.TIMEOUT, DEFAULT_TIMEOUT_SECONDS)
        ),
        max_pool_size=read.integer(EnvVar.MAX_POOL_SIZE, DEFAULT_MAX_POOL_SIZE),
        min_pool_size=read.integer(EnvVar.MIN_POOL_SIZE, DEFAULT_MIN_POOL_SIZE),
        conn_idle_time=timedelta(
            minutes=read.integer(EnvVar.CONN_IDLE_TIME, DEFAULT_CONN_IDLE_MINUTES)
        ),
        mongodb_retry_writes=read.boolean(EnvVar.MONGODB_RETRY_WRITES, True),
        mongodb_retry_reads=read.boolean(EnvVar.MONGODB_RETRY_READS, True),
        postgres_uri=read.get(EnvVar.POSTGRES_URI),
    )


class StorageEngine(str, Enum):
    """Storage back ends the application can run on."""

    MONGODB = "mongodb"
    POSTGRESQL = "postgresql"

    def __str__(self) -> str:
        return self.value


class UnsupportedEngineError(ValueError):
    """Raised for a storage engine the application does not support."""

    def __init__(self, message: str = "unsupported storage engine") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class MongoConfig:
    """Connection settings for MongoDB."""

    uri: str
    database_name: str
    timeout: timedelta
    replica_set: str
    max_pool_size: int
    min_pool_size: int
    conn_idle_time: timedelta
    retry_writes: bool
    retry_reads: bool

    @property
    def engine(self) -> StorageEngine:
        return StorageEngine.MONGODB


@dataclass(frozen=True)
class PostgresConfig:
    """Connection settings for PostgreSQL."""

    uri: str
    max_pool_size: int
    min_pool_size: int
    conn_idle_time: timedelta
    timeout: timedelta

    @property
    def engine(self) -> StorageEngine:
        return StorageEngine.POSTGRESQL


def storage_engine_config(
    engine: Union[StorageEngine, str], settings: Optional[Settings] = None
) -> Union[MongoConfig, PostgresConfig]:
    """Build the configuration for ``engine`` from ``settings``."""
    current = settings if settings is not None else load_settings()
    try:
        chosen = StorageEngine(engine)
    except ValueError:
        raise UnsupportedEngineError() from None

    if chosen is StorageEngine.MONGODB:
        if not current.mongodb_uri:
            raise ValueError(
                f"MongoDbURI is required for the selected storage engine: {chosen}"
            )
        if not current.mongodb_name:
            raise ValueError(
                f"MongoDbName is required for the selected storage engine: {chosen}"
            )
        return MongoConfig(
            uri=current.mongodb_uri,
            database_name=current.mongodb_name,
            timeout=current.timeout,
            replica_set=current.mongodb_replica_set,
            max_pool_size=current.max_pool_size,
            min_pool_size=current.min_pool_size,
            conn_idle_time=current.conn_idle_time,
            retry_writes=current.mongodb_retry_writes,
            retry_reads=current.mongodb_retry_reads,
        )

    if not current.postgres_uri:
        raise ValueError(
            f"PostgresURI is required for the selected storage engine: {chosen}"
        )
    return PostgresConfig(
        uri=current.postgres_uri,
        max_pool_size=current.max_pool_size,
        min_pool_size=current.min_pool_size,
        conn_idle_time=current.conn_idle_time,
        timeout=current.timeout,
    )