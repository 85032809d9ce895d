"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields and are
only suitable for local development.  In a production deployment you
must override every credential-bearing value (``DB_USER``,
``DB_PASSWORD``, ``DB_HOST``) via environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "User Records API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file written alongside console output.
    log_file: str = os.getenv("LOG_FILE", "")

    # Address the HTTP server binds to.  Port 3000 matches the historic
    # deployment of this service.
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # PostgreSQL connection.  The users table is expected to exist
    # already; this service never creates or migrates it.
    db_host: str = os.getenv("DB_HOST", "localhost")
    db_port: int = int(os.getenv("DB_PORT", "5432"))
    db_user: str = os.getenv("DB_USER", "postgres")
    db_password: str = os.getenv("DB_PASSWORD", "postgres")
    db_name: str = os.getenv("DB_NAME", "users_db")
    db_pool_min_size: int = int(os.getenv("DB_POOL_MIN_SIZE", "1"))
    db_pool_max_size: int = int(os.getenv("DB_POOL_MAX_SIZE", "10"))
    db_pool_timeout: float = float(os.getenv("DB_POOL_TIMEOUT", "10"))

    # Table holding the records and the active record shape.  ``user_schema``
    # is either a built-in variant key (see ``schemas.fields.SCHEMA_VARIANTS``)
    # or a compact field list such as ``name:string,age:number,address2:string?``.
    users_table: str = os.getenv("USERS_TABLE", "users")
    user_schema: str = os.getenv("USER_SCHEMA", "name_age_occupation")

    @property
    def database_dsn(self) -> str:
        """Compose a libpq connection string from the individual settings."""
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class creation time, environment variables should
# be set before importing this module.
settings = Settings()
