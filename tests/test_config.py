import os
from datetime import timedelta

import pytest

from agora.config import (
    Environment,
    MongoConfig,
    PostgresConfig,
    Settings,
    StorageEngine,
    UnsupportedEngineError,
    load_env_file,
    load_settings,
    storage_engine_config,
)

BASE = {"AUTH_SECRET": "secret", "GO_ENV": "development"}


def test_required_values_are_read():
    settings = load_settings(BASE)
    assert settings.auth_secret == "secret"
    assert settings.environment is Environment.DEVELOPMENT


def test_defaults_applied():
    settings = load_settings(BASE)
    assert settings.port == "8080"
    assert settings.mongodb_replica_set == "rs0"
    assert settings.timeout == timedelta(seconds=10)
    assert settings.mongodb_uri == ""


def test_explicit_values_override_defaults():
    environ = dict(
        BASE,
        PORT="9000",
        TIMEOUT="7",
        CONN_IDLE_TIME="3",
        MAX_POOL_SIZE="42",
        MONGODB_RETRY_READS="false",
    )
    settings = load_settings(environ)
    assert settings.port == "9000"
    assert settings.timeout == timedelta(seconds=7)
    assert settings.conn_idle_time == timedelta(minutes=3)
    assert settings.max_pool_size == 42
    assert settings.mongodb_retry_reads is False


@pytest.mark.parametrize("missing", ["AUTH_SECRET", "GO_ENV"])
def test_missing_required_variable_raises(missing):
    environ = {k: v for k, v in BASE.items() if k != missing}
    with pytest.raises(ValueError, match=f"{missing} environment variable is not set"):
        load_settings(environ)


def test_invalid_integer_raises():
    with pytest.raises(ValueError, match="TIMEOUT environment variable is not a valid integer"):
        load_settings(dict(BASE, TIMEOUT="ten"))


def test_invalid_boolean_raises():
    with pytest.raises(ValueError, match="MONGODB_RETRY_WRITES environment variable is not a valid boolean"):
        load_settings(dict(BASE, MONGODB_RETRY_WRITES="yes"))


def test_unknown_environment_name_is_kept():
    settings = load_settings(dict(BASE, GO_ENV="staging"))
    assert settings.environment == "staging"


def test_mongodb_config_built_from_settings():
    settings = load_settings(
        dict(BASE, MONGODB_URI="mongodb://localhost:27017", MONGODB_NAME="board")
    )
    config = storage_engine_config(StorageEngine.MONGODB, settings)
    assert isinstance(config, MongoConfig)
    assert config.uri == "mongodb://localhost:27017"
    assert config.database_name == "board"
    assert config.replica_set == settings.mongodb_replica_set
    assert config.timeout == settings.timeout
    assert config.engine is StorageEngine.MONGODB


def test_mongodb_config_requires_uri():
    settings = Settings(auth_secret="secret", environment=Environment.TEST, mongodb_name="board")
    with pytest.raises(ValueError, match="MongoDbURI is required"):
        storage_engine_config("mongodb", settings)


def test_mongodb_config_requires_name():
    settings = Settings(
        auth_secret="secret",
        environment=Environment.TEST,
        mongodb_uri="mongodb://localhost:27017",
    )
    with pytest.raises(ValueError, match="MongoDbName is required"):
        storage_engine_config(StorageEngine.MONGODB, settings)


def test_postgres_config_built_from_settings():
    settings = load_settings(dict(BASE, POSTGRES_URI="postgres://localhost/board"))
    config = storage_engine_config("postgresql", settings)
    assert isinstance(config, PostgresConfig)
    assert config.uri == "postgres://localhost/board"
    assert config.max_pool_size == settings.max_pool_size
    assert config.engine is StorageEngine.POSTGRESQL


def test_postgres_config_requires_uri():
    with pytest.raises(ValueError, match="PostgresURI is required"):
        storage_engine_config(StorageEngine.POSTGRESQL, load_settings(BASE))


def test_unsupported_engine_raises():
    with pytest.raises(UnsupportedEngineError, match="unsupported storage engine"):
        storage_engine_config("inmemory", load_settings(BASE))


def test_load_env_file_sets_variables(tmp_path, monkeypatch):
    key = "AGORA_CONFIG_TEST_VALUE"
    monkeypatch.setenv(key, "placeholder")
    monkeypatch.delenv(key)
    env_file = tmp_path / ".env"
    env_file.write_text(f"{key}=from-file\n")
    assert load_env_file(env_file) is True
    assert os.environ[key] == "from-file"


def test_load_env_file_does_not_override(tmp_path, monkeypatch):
    key = "AGORA_CONFIG_TEST_KEEP"
    monkeypatch.setenv(key, "original")
    env_file = tmp_path / ".env"
    env_file.write_text(f"{key}=from-file\n")
    loaded = load_env_file(env_file)
    assert loaded is True
    assert os.environ[key] == "original"


def test_load_env_file_missing_returns_false(tmp_path):
    assert load_env_file(tmp_path / "absent.env") is False