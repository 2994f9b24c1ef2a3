import logging
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, RowMapping, URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Executable

from . import models
from .errors import DatabaseConnectionError, QueryError

logger = logging.getLogger('clinic')

Statement = Union[str, Executable]


def describe_error(exc: BaseException) -> str:
    """Prefer the driver's own message over SQLAlchemy's wrapped one."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class StorageGateway:
    """
    Single connection through which every read and write is issued.

    Statements are either Core constructs or SQL strings; values are always
    passed separately as bound parameters.
    """

    def __init__(self, engine: Engine, connection: Connection):
        self.engine = engine
        self._connection: Optional[Connection] = connection

    @classmethod
    def connect(cls, url: Union[str, URL], echo: bool = False) -> "StorageGateway":
        try:
            engine = create_engine(url, echo=echo)
        except (SQLAlchemyError, ImportError) as e:
            raise DatabaseConnectionError(describe_error(e)) from e

        try:
            connection = engine.connect()
        except SQLAlchemyError as e:
            engine.dispose()
            raise DatabaseConnectionError(describe_error(e)) from e

        logger.info(f"Connected to {engine.url.render_as_string(hide_password=True)}")
        return cls(engine, connection)

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            raise QueryError("Database connection is closed")
        return self._connection

    @staticmethod
    def _prepare(statement: Statement) -> Executable:
        if isinstance(statement, str):
            return text(statement)
        return statement

    def execute(self, statement: Statement, params: Optional[Dict[str, Any]] = None) -> int:
        """Run a write statement in its own transaction and return the affected row count."""
        conn = self.connection
        try:
            with conn.begin():
                result = conn.execute(self._prepare(statement), params)
                return result.rowcount
        except SQLAlchemyError as e:
            logger.info(f"Statement failed: {describe_error(e)}")
            raise QueryError(describe_error(e)) from e

    def query(self, statement: Statement, params: Optional[Dict[str, Any]] = None) -> List[RowMapping]:
        conn = self.connection
        try:
            with conn.begin():
                result = conn.execute(self._prepare(statement), params)
                return result.mappings().all()
        except SQLAlchemyError as e:
            logger.info(f"Query failed: {describe_error(e)}")
            raise QueryError(describe_error(e)) from e

    def create_schema(self) -> None:
        """Create the doctors and patients tables when they do not exist yet."""
        conn = self.connection
        try:
            with conn.begin():
                models.Base.metadata.create_all(bind=conn)
        except SQLAlchemyError as e:
            raise QueryError(f"Failed to create database tables: {describe_error(e)}") from e

    def close(self) -> None:
        if self._connection is None:
            return
        try:
            self._connection.close()
        finally:
            self._connection = None
            self.engine.dispose()
            logger.info("Database connection closed")

    def __enter__(self) -> "StorageGateway":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
