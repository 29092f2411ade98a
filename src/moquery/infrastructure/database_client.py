"""
Database client for MySQL-compatible servers using SQLAlchemy.

This module provides the synchronous query interface the dispatcher needs:
statement execution with driver-level bindings, column introspection and
row iteration, with every cursor and connection released on exit.
"""

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Tuple

from sqlalchemy import create_engine
from sqlalchemy.engine import CursorResult, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from ..config import DatabaseConfig
from ..domain.errors import DatabaseConnectionError, DatabaseQueryError
from ..domain.types import QueryBindings, StringRow
from ..utils.logging import get_module_logger
from ..utils.tracing import current_trace_id


logger = get_module_logger()

NULL_DISPLAY = "NULL"


def cell_to_string(value: Any) -> str:
    """
    Render one result cell as text.

    NULL becomes "NULL", bytes are decoded as UTF-8 (invalid sequences
    replaced), everything else goes through str().
    """
    if value is None:
        return NULL_DISPLAY
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


class QueryCursor:
    """
    Open result of one executed statement.

    Only valid inside DatabaseClient.execute(); the underlying cursor is
    closed when the context exits.
    """

    def __init__(self, result: CursorResult):
        self._result = result
        self.returns_rows: bool = result.returns_rows
        self.columns: List[str] = list(result.keys()) if result.returns_rows else []
        self.rowcount: int = result.rowcount

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        if not self.returns_rows:
            return
        try:
            for row in self._result:
                yield tuple(row)
        except SQLAlchemyError as e:
            raise DatabaseQueryError(f"Failed to fetch rows: {e}") from e

    def string_rows(self) -> Iterator[StringRow]:
        """Iterate rows with every cell rendered by cell_to_string."""
        for row in self:
            yield [cell_to_string(value) for value in row]

    def close(self) -> None:
        self._result.close()


class DatabaseClient:
    """
    Low-level synchronous database client using SQLAlchemy.

    This is a thin infrastructure layer for database operations.
    Schema snapshots and plot queries are built on top of it in the
    repository and service layers.

    Features:
    - Connection pooling with pre-ping
    - Autocommit statements, as in an interactive SQL shell
    - Positional or named driver bindings
    - Structured logging with trace IDs

    Usage:
        client = DatabaseClient(config)
        client.connect()

        with client.execute("select * from nation where n_regionkey = %s", [1]) as cursor:
            print(cursor.columns)
            for row in cursor.string_rows():
                print(row)

        client.close()
    """

    def __init__(self, config: DatabaseConfig):
        """
        Initialize database client with configuration.

        Args:
            config: Database configuration
        """
        self.config = config
        self._engine: Optional[Engine] = None
        self._is_connected = False

        logger.info(
            "DatabaseClient initialized",
            backend=make_url(config.database_url).get_backend_name(),
            connect_timeout_seconds=config.connect_timeout_seconds,
        )

    def connect(self) -> None:
        """
        Create the engine and verify the server answers.

        Raises:
            DatabaseConnectionError: If connection fails
        """
        if self._is_connected:
            logger.warning("Database client already connected")
            return

        trace_id = current_trace_id()
        logger.info("Establishing database connection", trace_id=trace_id)

        url = make_url(self.config.database_url)
        connect_args = {}
        if url.get_backend_name() == "mysql":
            connect_args["connect_timeout"] = self.config.connect_timeout_seconds

        try:
            self._engine = create_engine(
                url,
                isolation_level="AUTOCOMMIT",
                pool_pre_ping=self.config.pool_pre_ping,
                echo=self.config.echo,
                connect_args=connect_args,
            )

            with self._engine.connect() as conn:
                conn.exec_driver_sql("SELECT 1").scalar()

            self._is_connected = True
            logger.info(
                "Database connection established successfully",
                database=url.database,
                trace_id=trace_id
            )

        except SQLAlchemyError as e:
            error_msg = f"Failed to connect to database: {e}"
            logger.error(error_msg, error_type=type(e).__name__, trace_id=trace_id)
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            raise DatabaseConnectionError(error_msg) from e

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        trace_id = current_trace_id()
        logger.info("Closing database connection", trace_id=trace_id)

        if self._engine is not None:
            self._engine.dispose()

        self._is_connected = False
        self._engine = None

        logger.info("Database connection closed", trace_id=trace_id)

    def is_connected(self) -> bool:
        """Check if database client is connected."""
        return self._is_connected and self._engine is not None

    @contextmanager
    def execute(self, sql: str, bindings: QueryBindings = None) -> Iterator[QueryCursor]:
        """
        Execute one statement and yield its open cursor.

        Args:
            sql: Statement text, passed to the driver unchanged
            bindings: Positional sequence or mapping of driver parameters

        Yields:
            QueryCursor with columns, rowcount and row iteration

        Raises:
            DatabaseConnectionError: If the client is not connected
            DatabaseQueryError: If execution or fetching fails
        """
        if not self.is_connected() or self._engine is None:
            raise DatabaseConnectionError("Database client is not connected")

        trace_id = current_trace_id()
        logger.debug("Executing statement", sql_length=len(sql), has_bindings=bool(bindings), trace_id=trace_id)

        with self._engine.connect() as conn:
            try:
                if bindings:
                    params = dict(bindings) if isinstance(bindings, dict) else tuple(bindings)
                    result = conn.exec_driver_sql(sql, params)
                else:
                    # No parameter set at all, so format-style drivers (PyMySQL)
                    # leave '%' in LIKE patterns and date_format() untouched
                    result = conn.exec_driver_sql(sql, execution_options={"no_parameters": True})
            except SQLAlchemyError as e:
                error_msg = f"Query failed: {e.__cause__ or e}"
                logger.error(error_msg, error_type=type(e).__name__, trace_id=trace_id)
                raise DatabaseQueryError(error_msg, details={"sql": sql}) from e

            cursor = QueryCursor(result)
            try:
                yield cursor
            finally:
                cursor.close()
