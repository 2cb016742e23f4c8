from unittest.mock import patch

import pydantic
import pytest

from xpoll.config import DatabaseConfig, configure_logging


def test_defaults_match_local_postgres():
    config = DatabaseConfig()
    assert config.host == "localhost"
    assert config.port == 5432
    assert config.user == "postgres"
    assert config.dbname == "xpoll"


def test_from_env_reads_db_variables(monkeypatch):
    monkeypatch.delenv("DB_POOL_MIN", raising=False)
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_PORT", "5433")
    monkeypatch.setenv("DB_NAME", "polls")
    monkeypatch.setenv("DB_POOL_MAX", "4")
    monkeypatch.setenv("DB_ACQUIRE_TIMEOUT", "2.5")

    config = DatabaseConfig.from_env()

    assert config.host == "db.internal"
    assert config.port == 5433
    assert config.dbname == "polls"
    assert config.max_pool_size == 4
    assert config.acquire_timeout == 2.5


def test_from_env_rejects_bad_values(monkeypatch):
    monkeypatch.setenv("DB_ACQUIRE_TIMEOUT", "0")
    with pytest.raises(pydantic.ValidationError):
        DatabaseConfig.from_env()


def test_pool_bounds_are_checked():
    with pytest.raises(pydantic.ValidationError):
        DatabaseConfig(min_pool_size=5, max_pool_size=2)


def test_conninfo_contains_connection_parameters():
    conninfo = DatabaseConfig(host="db", port=5433, dbname="polls", connect_timeout=7).conninfo()
    assert "host=db" in conninfo
    assert "port=5433" in conninfo
    assert "dbname=polls" in conninfo
    assert "connect_timeout=7" in conninfo


def test_repr_and_str_hide_password():
    config = DatabaseConfig(password="s3cret")
    assert "s3cret" not in repr(config)
    assert "s3cret" not in str(config)
    assert "password=s3cret" in config.conninfo()


def test_configure_logging_uses_config_values():
    config = DatabaseConfig(log_file="xpoll-test.log", log_level="debug")
    with patch("xpoll.config.logging.basicConfig") as basic_config:
        configure_logging(config)
    basic_config.assert_called_once_with(filename="xpoll-test.log", level="DEBUG")
