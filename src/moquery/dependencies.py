"""
Wiring for the moquery dispatcher.

Builds every client, repository and service from Settings. Clients are
created unconnected; call connect_clients() before the first query and
close_clients() on exit.
"""

from dataclasses import dataclass

from moquery.config import Settings
from moquery.infrastructure.database_client import DatabaseClient
from moquery.infrastructure.gnuplot_renderer import GnuplotRenderer
from moquery.infrastructure.llm_client import LLMClient
from moquery.infrastructure.svg_rasterizer import SVGRasterizer
from moquery.infrastructure.terminal_graphics import TerminalGraphics
from moquery.repositories.line_classifier import LineClassifier
from moquery.repositories.query_templates import build_template_map
from moquery.repositories.schema_repository import SchemaCache
from moquery.repositories.sql_execution import SQLExecutionRepository
from moquery.repositories.sql_generation import SQLGenerationRepository
from moquery.services.plot_service import PlotService
from moquery.services.query_dispatcher import QueryDispatcher


@dataclass
class AppContainer:
    """Long-lived objects of one CLI session."""

    db_client: DatabaseClient
    llm_client: LLMClient
    dispatcher: QueryDispatcher

    def connect_clients(self) -> None:
        self.db_client.connect()
        self.llm_client.connect()

    def close_clients(self) -> None:
        if self.llm_client.is_connected():
            self.llm_client.close()
        if self.db_client.is_connected():
            self.db_client.close()


def build_container(settings: Settings) -> AppContainer:
    """Create clients, repositories and the dispatcher from settings."""
    db_client = DatabaseClient(settings.database)
    llm_client = LLMClient(settings.llm)

    plot_service = PlotService(
        config=settings.plot,
        renderer=GnuplotRenderer(settings.plot.gnuplot_path, timeout_seconds=settings.plot.timeout_seconds),
        rasterizer=SVGRasterizer(),
        graphics=TerminalGraphics(settings.plot.graphics_protocol),
    )

    dispatcher = QueryDispatcher(
        db_client=db_client,
        classifier=LineClassifier(build_template_map(settings.templates)),
        schema_cache=SchemaCache(settings.schema_introspection),
        sql_generation_repository=SQLGenerationRepository(llm_client, settings.llm),
        sql_execution_repository=SQLExecutionRepository(db_client),
        plot_service=plot_service,
        config=settings.app,
    )

    return AppContainer(db_client=db_client, llm_client=llm_client, dispatcher=dispatcher)
