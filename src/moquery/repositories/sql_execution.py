"""
SQL Execution Repository.

Executes SQL on the direct path (no plot script) and collects the full
result set as string cells for tabular rendering.

Statements without a result set (DDL, INSERT, UPDATE) report the number
of affected rows instead.

Usage:
    repo = SQLExecutionRepository(db_client)
    result = repo.execute("select n_name from nation;")
    print(f"Returned {result.row_count} rows in {result.execution_time_ms}ms")
"""

from datetime import datetime, timezone

from moquery.domain.responses import QueryExecutionResult
from moquery.domain.types import QueryBindings
from moquery.utils.logging import get_module_logger
from moquery.utils.tracing import current_trace_id

logger = get_module_logger()


class SQLExecutionRepository:
    """
    Repository for direct SQL execution.
    """

    def __init__(self, db_client):
        self.db_client = db_client

    def execute(self, sql: str, bindings: QueryBindings = None) -> QueryExecutionResult:
        """
        Execute SQL and fetch every row.

        Args:
            sql: SQL text, sent unchanged
            bindings: Driver parameters

        Returns:
            QueryExecutionResult with rows and metadata

        Raises:
            DatabaseError if execution fails
        """
        trace_id = current_trace_id()

        logger.info("Executing SQL query", sql_length=len(sql), trace_id=trace_id)

        start_time = datetime.now(timezone.utc)

        with self.db_client.execute(sql, bindings) as cursor:
            rows = list(cursor.string_rows())
            column_names = list(cursor.columns)
            returns_rows = cursor.returns_rows
            row_count = len(rows) if returns_rows else max(cursor.rowcount, 0)

        end_time = datetime.now(timezone.utc)
        execution_time_ms = (end_time - start_time).total_seconds() * 1000

        result = QueryExecutionResult(
            column_names=column_names,
            rows=rows,
            row_count=row_count,
            execution_time_ms=execution_time_ms,
            returns_rows=returns_rows,
        )

        logger.info(
            "SQL execution successful",
            row_count=row_count,
            execution_time_ms=round(execution_time_ms, 2),
            trace_id=trace_id,
        )

        return result
