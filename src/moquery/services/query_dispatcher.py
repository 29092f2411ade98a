"""
Query Dispatcher - entry point for every buffer submitted by the SQL client.

This service is a THIN ORCHESTRATOR that routes one input buffer:
1. No directive on the first line -> execute the buffer as ordinary SQL
2. Classify lines into plot script, NL request and SQL text
3. NL request without SQL -> SchemaCache + SQLGenerationRepository synthesize SQL
4. No plot script -> SQLExecutionRepository + tabular rendering
5. Plot script -> PlotService

Decision rules:
- SQL text counts as empty when it holds nothing but whitespace and ';'
- SQL is synthesized whenever the NL request is non-blank and the SQL
  text is empty
- Synthesized SQL always ends with exactly one ';'
- Empty SQL after all of the above is a no-op

Errors propagate to the caller unchanged; nothing is retried.
"""

import sys
from typing import Optional, TextIO

from moquery.config import AppConfig
from moquery.constants import STATEMENT_TERMINATOR
from moquery.domain.base_enums import DispatchAction
from moquery.domain.errors import MoQueryException
from moquery.domain.responses import DispatchResult
from moquery.domain.types import QueryBindings
from moquery.repositories.line_classifier import LineClassifier, should_hijack
from moquery.repositories.schema_repository import SchemaCache
from moquery.repositories.sql_execution import SQLExecutionRepository
from moquery.repositories.sql_generation import SQLGenerationRepository
from moquery.services.plot_service import PlotService
from moquery.utils.formatting import render_result
from moquery.utils.logging import get_module_logger
from moquery.utils.tracing import new_trace_id

logger = get_module_logger()


def is_blank_sql(sql: str) -> bool:
    """True when SQL text has nothing besides whitespace and terminators."""
    return not sql.replace(STATEMENT_TERMINATOR, "").strip()


def terminate_statement(sql: str) -> str:
    """Strip trailing terminators and whitespace, then append one ';'."""
    return sql.strip().rstrip(STATEMENT_TERMINATOR + " \t\r\n") + STATEMENT_TERMINATOR


class QueryDispatcher:
    """
    Routes input buffers to direct execution, text2sql or the plot pipeline.

    One dispatcher serves one database session and owns that session's
    schema cache.
    """

    def __init__(
        self,
        db_client,
        classifier: LineClassifier,
        schema_cache: SchemaCache,
        sql_generation_repository: SQLGenerationRepository,
        sql_execution_repository: SQLExecutionRepository,
        plot_service: PlotService,
        config: Optional[AppConfig] = None,
    ):
        self.db_client = db_client
        self.classifier = classifier
        self.schema_cache = schema_cache
        self.generation_repo = sql_generation_repository
        self.execution_repo = sql_execution_repository
        self.plot_service = plot_service
        self.config = config or AppConfig()

        logger.info(
            "QueryDispatcher initialized",
            echo_generated_sql=self.config.echo_generated_sql,
        )

    def handle(
        self,
        raw_query: str,
        bindings: QueryBindings = None,
        stream: Optional[TextIO] = None,
    ) -> DispatchResult:
        """
        Execute and/or render one input buffer.

        Args:
            raw_query: Raw multi-line buffer from the SQL client
            bindings: Driver parameters for the final SQL
            stream: Output stream for results and images (default stdout)

        Returns:
            DispatchResult describing the path taken

        Raises:
            MoQueryException subclasses from any stage
        """
        trace_id = new_trace_id()
        out = stream if stream is not None else sys.stdout

        try:
            if not should_hijack(raw_query):
                row_count = self._execute_direct(raw_query, bindings, out)
                return DispatchResult(
                    action=DispatchAction.PASSTHROUGH_SQL,
                    sql=raw_query,
                    row_count=row_count,
                    trace_id=trace_id,
                )

            query = self.classifier.classify(raw_query)
            sql_text = query.sql_text.strip()
            synthesized = False

            logger.debug(
                "Directive buffer classified",
                plot_script=query.plot_script,
                nl_request=query.nl_request,
                sql_text=sql_text,
                trace_id=trace_id,
            )

            if query.has_nl_request and is_blank_sql(sql_text):
                sql_text = self._synthesize(query.nl_request, out)
                synthesized = True

            if is_blank_sql(sql_text):
                logger.info("Nothing to execute", trace_id=trace_id)
                return DispatchResult(action=DispatchAction.NOOP, trace_id=trace_id)

            if not query.has_plot_script:
                row_count = self._execute_direct(sql_text, bindings, out)
                action = DispatchAction.DIRECT_SQL
            else:
                row_count = self.plot_service.render_plot(
                    self.db_client, sql_text, query.plot_script, bindings, out
                )
                action = DispatchAction.PLOT

            return DispatchResult(
                action=action,
                sql=sql_text,
                synthesized=synthesized,
                row_count=row_count,
                trace_id=trace_id,
            )

        except MoQueryException as e:
            logger.error("Dispatch failed", **e.to_dict(), trace_id=trace_id)
            raise

    def reconnect(self) -> None:
        """Reopen the database session and drop its schema snapshot."""
        self.db_client.close()
        self.db_client.connect()
        self.schema_cache.invalidate()

    def _synthesize(self, nl_request: str, out: TextIO) -> str:
        schema = self.schema_cache.ensure_schema(self.db_client)
        sql = terminate_statement(self.generation_repo.generate_sql(nl_request, schema))
        if self.config.echo_generated_sql:
            out.write(f"-- generated SQL\n{sql}\n")
        return sql

    def _execute_direct(self, sql: str, bindings: QueryBindings, out: TextIO) -> int:
        result = self.execution_repo.execute(sql, bindings)
        render_result(result, out)
        return result.row_count
