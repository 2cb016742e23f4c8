import os
import logging
from typing import Optional
from pydantic import BaseModel, Field, SecretStr, model_validator
from psycopg.conninfo import make_conninfo


class DatabaseConfig(BaseModel):
    """
    Connection and pool settings for the PostgreSQL store.

    Passed explicitly into DatabaseManager; nothing is read from the
    environment after construction.
    """
    host: str = "localhost"
    port: int = Field(5432, gt=0, le=65535)
    user: str = "postgres"
    password: SecretStr = SecretStr("postgres")
    dbname: str = "xpoll"
    min_pool_size: int = Field(1, ge=0)
    max_pool_size: int = Field(10, ge=1)
    acquire_timeout: float = Field(10.0, gt=0, description="Seconds to wait for a pooled connection")
    connect_timeout: int = Field(5, gt=0, description="Seconds to wait when opening a new connection")
    log_file: Optional[str] = "myapp.log"
    log_level: str = "INFO"

    @model_validator(mode="after")
    def validate_pool_bounds(self) -> "DatabaseConfig":
        """Ensure the pool can actually hold min_pool_size connections."""
        if self.max_pool_size < self.min_pool_size:
            raise ValueError("max_pool_size must be greater than or equal to min_pool_size")
        return self

    def conninfo(self) -> str:
        """
        Build a libpq connection string for this configuration.

        Returns:
            str: Connection string accepted by psycopg.connect and ConnectionPool
        """
        return make_conninfo(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password.get_secret_value(),
            dbname=self.dbname,
            connect_timeout=self.connect_timeout,
        )

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """
        Create a DatabaseConfig from environment variables.

        Reads DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME, DB_POOL_MIN,
        DB_POOL_MAX, DB_ACQUIRE_TIMEOUT, DB_CONNECT_TIMEOUT, LOG_FILE and
        LOG_LEVEL. Unset variables fall back to the field defaults.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        env_map = {
            "host": "DB_HOST",
            "port": "DB_PORT",
            "user": "DB_USER",
            "password": "DB_PASSWORD",
            "dbname": "DB_NAME",
            "min_pool_size": "DB_POOL_MIN",
            "max_pool_size": "DB_POOL_MAX",
            "acquire_timeout": "DB_ACQUIRE_TIMEOUT",
            "connect_timeout": "DB_CONNECT_TIMEOUT",
            "log_file": "LOG_FILE",
            "log_level": "LOG_LEVEL",
        }
        values = {field: os.environ[var] for field, var in env_map.items() if var in os.environ}
        return cls(**values)


def configure_logging(config: DatabaseConfig) -> None:
    """
    Configure root logging for an application embedding xpoll.

    Args:
        config (DatabaseConfig): Supplies log_file (None logs to stderr) and log_level
    """
    logging.basicConfig(filename=config.log_file, level=config.log_level.upper())
