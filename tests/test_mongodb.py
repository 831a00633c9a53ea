from datetime import timedelta

import pytest
from pymongo import MongoClient

from agora.config import MongoConfig
from agora.mongodb import client_options, connect_mongodb


def make_config(**overrides):
    fields = dict(
        uri="mongodb://localhost:1",
        database_name="board",
        timeout=timedelta(seconds=10),
        replica_set="rs0",
        max_pool_size=100,
        min_pool_size=5,
        conn_idle_time=timedelta(minutes=30),
        retry_writes=True,
        retry_reads=False,
    )
    fields.update(overrides)
    return MongoConfig(**fields)


def test_client_options_carry_config_values():
    options = client_options(make_config())
    assert options["maxPoolSize"] == 100
    assert options["minPoolSize"] == 5
    assert options["replicaSet"] == "rs0"
    assert options["retryWrites"] is True
    assert options["retryReads"] is False
    assert options["maxIdleTimeMS"] == 30 * 60 * 1000
    assert options["serverSelectionTimeoutMS"] == options["connectTimeoutMS"]


def test_client_accepts_options():
    config = make_config()
    client = MongoClient(config.uri, connect=False, **client_options(config))
    try:
        assert client.options.pool_options.max_pool_size == 100
        assert client.options.pool_options.min_pool_size == 5
        assert client.options.replica_set_name == "rs0"
        assert client.options.retry_reads is False
        assert client.options.retry_writes is True
    finally:
        client.close()


def test_connect_to_unreachable_server_raises():
    config = make_config(timeout=timedelta(milliseconds=200), min_pool_size=0)
    with pytest.raises(ConnectionError):
        connect_mongodb(config)