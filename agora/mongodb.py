"""Opening and closing the MongoDB connection."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Tuple

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from agora.config import MongoConfig

log = logging.getLogger(__name__)


def _milliseconds(delta: Any) -> int:
    return int(delta.total_seconds() * 1000)


def client_options(config: MongoConfig) -> Dict[str, Any]:
    """Keyword options for ``MongoClient`` taken from ``config``."""
    timeout_ms = _milliseconds(config.timeout)
    return {
        "maxPoolSize": config.max_pool_size,
        "minPoolSize": config.min_pool_size,
        "maxIdleTimeMS": _milliseconds(config.conn_idle_time),
        "retryWrites": config.retry_writes,
        "retryReads": config.retry_reads,
        "replicaSet": config.replica_set,
        "connectTimeoutMS": timeout_ms,
        "serverSelectionTimeoutMS": timeout_ms,
    }


def connect_mongodb(config: MongoConfig) -> Tuple[Database, Callable[[], None]]:
    """Connect, check the primary answers, and return the database and a closer.

    Raises ``ConnectionError`` when the server cannot be reached.
    """
    log.info("Connecting to MongoDB...")
    client: MongoClient = MongoClient(config.uri, **client_options(config))
    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        client.close()
        raise ConnectionError(f"failed to connect to MongoDB: {exc}") from exc
    log.info("Connected to MongoDB")
    return client.get_database(config.database_name), client.close