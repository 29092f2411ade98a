"""
Plot Service - pipes a query result set into gnuplot and shows the image inline.

Pipeline, each step depending on the previous one:
1. Check the terminal can display images
2. Execute the SQL and read columns and rows
3. Write a gnuplot script: inline $DATA block, default settings, user script
4. Run gnuplot on the script
5. Read back the SVG it wrote
6. Rasterize the SVG on a white background
7. Encode the bitmap to the output stream with the terminal's image protocol

Any failure aborts the pipeline; nothing is written to the stream unless
every step succeeded. Each call works in its own temporary directory,
removed on every exit path.
"""

import tempfile
from pathlib import Path
from typing import Iterable, List, Sequence, TextIO

from moquery.config import PlotConfig
from moquery.domain.errors import PlotOutputMissingError, PlotScriptError, TerminalGraphicsUnavailableError
from moquery.domain.plot_job import PlotJob
from moquery.domain.types import QueryBindings
from moquery.utils.logging import get_module_logger
from moquery.utils.tracing import current_trace_id

logger = get_module_logger()

SCRIPT_FILENAME = "plot.gp"
OUTPUT_FILENAME = "plot.svg"

# Applied in order; gnuplot's data parser splits on whitespace and
# treats double quotes as string delimiters
_CELL_SUBSTITUTIONS = (
    ("\r\n", "__"),
    ("\n", "__"),
    ('"', "'"),
    ("\t", "_"),
    (" ", "_"),
)


def sanitize_cell(value: str) -> str:
    """Make one cell safe for a whitespace-separated gnuplot data line."""
    for old, new in _CELL_SUBSTITUTIONS:
        value = value.replace(old, new)
    return value


def format_data_block(rows: Iterable[Sequence[str]]) -> str:
    """Render rows as a gnuplot inline data block named $DATA."""
    lines = ["$DATA << EOD\n"]
    for row in rows:
        if row:
            lines.append(" ".join(sanitize_cell(cell) for cell in row) + "\n")
    lines.append("EOD\n")
    return "".join(lines)


def gnuplot_quote(text: str) -> str:
    """Single-quoted gnuplot string literal; a quote inside is doubled."""
    return "'" + text.replace("'", "''") + "'"


def build_script(job: PlotJob, config: PlotConfig) -> str:
    """
    Full gnuplot script for a job.

    Defaults come before the user script so the user can override them.
    """
    defaults = (
        f"set term svg size {config.width},{config.height}\n"
        f"set output {gnuplot_quote(str(job.output_path))}\n"
        f"set boxwidth {config.box_width}\n"
    )
    return format_data_block(job.rows) + defaults + job.user_script


class PlotService:
    """
    Renders query results through gnuplot into the terminal.

    The renderer, rasterizer and terminal capability are injected so the
    pipeline can run without gnuplot or a graphics-capable terminal.

    Usage:
        service = PlotService(
            config=settings.plot,
            renderer=GnuplotRenderer(settings.plot.gnuplot_path),
            rasterizer=SVGRasterizer(),
            graphics=TerminalGraphics(settings.plot.graphics_protocol),
        )
        row_count = service.render_plot(db_client, "select 1, 2;", "plot $DATA using 1:2\\n", None, sys.stdout)
    """

    def __init__(self, config: PlotConfig, renderer, rasterizer, graphics):
        self.config = config
        self.renderer = renderer
        self.rasterizer = rasterizer
        self.graphics = graphics

    def render_plot(
        self,
        db,
        sql_text: str,
        plot_script: str,
        bindings: QueryBindings,
        stream: TextIO,
    ) -> int:
        """
        Run the plot pipeline for one query.

        Args:
            db: Object with an execute(sql, bindings) context manager
            sql_text: SQL producing the data to plot
            plot_script: gnuplot directives, appended verbatim
            bindings: Driver parameters for sql_text
            stream: Terminal output stream

        Returns:
            Number of data rows plotted

        Raises:
            TerminalGraphicsUnavailableError: If the terminal cannot show images
            DatabaseError: If the query fails
            PlotError: If writing, rendering, reading or rasterizing fails
        """
        trace_id = current_trace_id()

        if not self.graphics.available():
            raise TerminalGraphicsUnavailableError("graphics not available")

        with db.execute(sql_text, bindings) as cursor:
            column_names = list(cursor.columns)
            rows: List[List[str]] = list(cursor.string_rows())

        logger.info(
            "Plot data fetched",
            column_count=len(column_names),
            row_count=len(rows),
            trace_id=trace_id,
        )

        try:
            workdir = tempfile.TemporaryDirectory(prefix="moquery-", dir=self.config.tmp_dir)
        except OSError as e:
            raise PlotScriptError(f"Failed to create plot directory in {self.config.tmp_dir}: {e}") from e

        with workdir as tmp:
            job = PlotJob(
                script_path=Path(tmp) / SCRIPT_FILENAME,
                output_path=Path(tmp) / OUTPUT_FILENAME,
                user_script=plot_script,
                rows=rows,
                column_names=column_names,
            )
            image = self._render_job(job)
            self.graphics.encode(stream, image)

        logger.info("Plot rendered", row_count=len(rows), trace_id=trace_id)
        return len(rows)

    def _render_job(self, job: PlotJob):
        try:
            job.script_path.write_text(build_script(job, self.config), encoding="utf-8")
        except OSError as e:
            raise PlotScriptError(f"Failed to write gnuplot script {job.script_path}: {e}") from e

        self.renderer.render(job.script_path)

        try:
            svg = job.output_path.read_bytes()
        except FileNotFoundError as e:
            raise PlotOutputMissingError(
                f"gnuplot produced no output file {job.output_path}",
                details={"output_path": str(job.output_path)},
            ) from e
        except OSError as e:
            raise PlotOutputMissingError(f"Failed to read gnuplot output {job.output_path}: {e}") from e

        return self.rasterizer.rasterize(svg)
