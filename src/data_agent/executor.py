"""
Query Executor
==============

Runs validated SQL against the relational store and returns JSON-safe rows.
"""

import json
import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

logger = structlog.get_logger(__name__)

# Largest integer a JSON consumer can hold without losing precision.
MAX_SAFE_INTEGER = 2**53 - 1


class ExecutionError(Exception):
    """The store rejected or failed a statement."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def to_json_safe(value: Any) -> Any:
    """
    Coerce a database value into something json.dumps accepts losslessly.

    Integers beyond the safe range become their decimal string; integers
    within it stay numbers. Non-finite floats become "inf", "-inf" or "nan",
    which strict JSON encoders would otherwise refuse.
    """
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        if abs(value) > MAX_SAFE_INTEGER:
            return str(value)
        return value
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, dict):
        return {str(k): to_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_safe(v) for v in value]
    return value


def serialize_rows(rows: list[dict[str, Any]]) -> str:
    """Render rows as indented JSON after JSON-safe coercion."""
    return json.dumps(to_json_safe(rows), indent=2, default=str)


def _enable_read_only(engine: Engine) -> None:
    dialect = engine.dialect.name

    if dialect == "sqlite":

        @event.listens_for(engine, "connect")
        def _sqlite_query_only(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA query_only = ON")
            cursor.close()

    elif dialect == "postgresql":

        @event.listens_for(engine, "connect")
        def _postgres_read_only(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("SET SESSION CHARACTERISTICS AS TRANSACTION READ ONLY")
            cursor.close()

    else:
        logger.warning("read_only_unsupported", dialect=dialect)


class QueryExecutor:
    """
    Executes raw SQL through a pooled SQLAlchemy engine.

    Statements go through the driver unchanged (no bind-parameter parsing) and
    are never committed. Result columns are whatever the statement projects.
    """

    def __init__(
        self,
        database_url: str | None = None,
        read_only: bool = True,
        engine: Engine | None = None,
    ) -> None:
        """
        Initialize the executor.

        Args:
            database_url: SQLAlchemy URL of the store
            read_only: Open connections in read-only mode where the backend allows it
            engine: Existing engine to use instead of creating one
        """
        if engine is None and database_url is None:
            raise ValueError("Either database_url or engine is required")

        self.engine = engine or create_engine(database_url, pool_pre_ping=True)
        self.read_only = read_only
        if read_only:
            _enable_read_only(self.engine)

    def execute(self, sql: str) -> list[dict[str, Any]]:
        """
        Run one statement and return its rows.

        Args:
            sql: Statement to run, already validated

        Returns:
            Rows as dicts in column order, values coerced by to_json_safe

        Raises:
            ExecutionError: If the database rejects or fails the statement
        """
        try:
            with self.engine.connect() as conn:
                # No bind parameters: pyformat drivers would otherwise treat % as a placeholder
                result = conn.execution_options(no_parameters=True).exec_driver_sql(sql)
                if not result.returns_rows:
                    return []
                rows = [
                    {key: to_json_safe(value) for key, value in row._mapping.items()}
                    for row in result
                ]
        except DBAPIError as e:
            message = str(e.orig) if e.orig is not None else str(e)
            raise ExecutionError(message) from e
        except SQLAlchemyError as e:
            raise ExecutionError(str(e)) from e

        logger.debug("query_executed", row_count=len(rows))
        return rows

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
