"""
Schema Repository.

Builds and caches the schema snapshot embedded in text2sql prompts:
the active database name plus the CREATE TABLE statement of every table.

The cache belongs to one session (one dispatcher / connection). It is filled
on the first natural-language request and reused until invalidate() is
called, e.g. after reconnecting. A failed fetch commits nothing, so the next
request starts over.
"""

from typing import Any, List, Optional

from moquery.config import SchemaConfig
from moquery.domain.errors import SchemaError
from moquery.domain.schema_snapshot import SchemaSnapshot
from moquery.infrastructure.database_client import cell_to_string
from moquery.utils.logging import get_module_logger
from moquery.utils.tracing import current_trace_id

logger = get_module_logger()


def _as_text(value: Any) -> str:
    return "" if value is None else cell_to_string(value)


def _first_row(db, sql: str) -> Optional[tuple]:
    with db.execute(sql) as cursor:
        for row in cursor:
            return row
    return None


def _first_column(db, sql: str) -> List[str]:
    with db.execute(sql) as cursor:
        return [_as_text(row[0]) for row in cursor]


class SchemaCache:
    """
    Lazily built, session-scoped schema snapshot.

    Database errors raised while fetching propagate unchanged.

    Usage:
        cache = SchemaCache(settings.schema_introspection)
        snapshot = cache.ensure_schema(db_client)
        print(snapshot.schema_text)
    """

    def __init__(self, config: Optional[SchemaConfig] = None):
        self.config = config or SchemaConfig()
        self._snapshot: Optional[SchemaSnapshot] = None

    @property
    def snapshot(self) -> Optional[SchemaSnapshot]:
        return self._snapshot

    def is_cached(self) -> bool:
        return self._snapshot is not None

    def invalidate(self) -> None:
        """Drop the cached snapshot; the next request refetches it."""
        if self._snapshot is not None:
            logger.info("Schema snapshot invalidated", database_name=self._snapshot.database_name)
        self._snapshot = None

    def ensure_schema(self, db) -> SchemaSnapshot:
        """
        Return the cached snapshot, fetching it on first use.

        Args:
            db: Object with an execute(sql) context manager yielding row cursors

        Returns:
            SchemaSnapshot for the active database

        Raises:
            DatabaseError: If any introspection query fails
            SchemaError: If a CREATE TABLE result has no DDL column
        """
        if self._snapshot is not None:
            return self._snapshot

        snapshot = self._fetch(db)
        self._snapshot = snapshot
        return snapshot

    def _fetch(self, db) -> SchemaSnapshot:
        trace_id = current_trace_id()
        logger.info("Fetching schema snapshot", trace_id=trace_id)

        name_row = _first_row(db, self.config.database_name_query)
        database_name = _as_text(name_row[0]) if name_row else ""

        tables = _first_column(db, self.config.list_tables_query)

        table_ddl: List[str] = []
        for table in tables:
            sql = self.config.show_create_table_template.format(table=table.replace("`", "``"))
            row = _first_row(db, sql)
            if row is None or len(row) < 2:
                raise SchemaError(
                    f"No CREATE TABLE statement returned for table {table}",
                    details={"table": table, "sql": sql},
                )
            table_ddl.append(_as_text(row[1]))

        snapshot = SchemaSnapshot(database_name=database_name, table_ddl=table_ddl)

        logger.info(
            "Schema snapshot cached",
            database_name=database_name,
            table_count=snapshot.table_count,
            schema_chars=len(snapshot.schema_text),
            trace_id=trace_id,
        )

        return snapshot
