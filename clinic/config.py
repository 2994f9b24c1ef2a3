import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from .errors import ConfigurationError

DEFAULT_DRIVER = "postgresql+psycopg2"
DEFAULT_HOST = "localhost"
DEFAULT_DATABASE = "clinic"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    driver: str = DEFAULT_DRIVER
    host: Optional[str] = DEFAULT_HOST
    port: Optional[int] = None
    database: Optional[str] = DEFAULT_DATABASE
    user: Optional[str] = None
    password: Optional[str] = None
    database_url: Optional[str] = None
    echo: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def url(self) -> URL:
        """
        SQLAlchemy URL for the configured database.
        An explicit ``database_url`` wins over the individual options.
        """
        if self.database_url:
            try:
                return make_url(self.database_url)
            except ArgumentError as e:
                raise ConfigurationError(f"Invalid database URL: {str(e)}")
        return URL.create(
            self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )


def _parse_port(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"CLINIC_DB_PORT must be an integer, got {value!r}")


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Read settings from the environment, after loading a ``.env`` file if present."""
    load_dotenv(env_file)

    return Settings(
        driver=os.getenv("CLINIC_DB_DRIVER", DEFAULT_DRIVER),
        host=os.getenv("CLINIC_DB_HOST", DEFAULT_HOST),
        port=_parse_port(os.getenv("CLINIC_DB_PORT")),
        database=os.getenv("CLINIC_DB_NAME", DEFAULT_DATABASE),
        user=os.getenv("CLINIC_DB_USER"),
        password=os.getenv("CLINIC_DB_PASSWORD"),
        database_url=os.getenv("CLINIC_DATABASE_URL") or None,
        echo=os.getenv("CLINIC_DB_ECHO", "False") == "True",
        log_level=os.getenv("CLINIC_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
