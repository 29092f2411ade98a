"""
Tabular rendering of query results with rich.
"""

from typing import TextIO

from rich.console import Console
from rich.table import Table

from moquery.domain.responses import QueryExecutionResult


def render_result(result: QueryExecutionResult, stream: TextIO) -> None:
    """Print a result set as a table followed by a row-count footer."""
    console = Console(file=stream, markup=False, highlight=False, soft_wrap=False)

    if not result.returns_rows:
        console.print(f"OK, {result.row_count} row(s) affected ({result.execution_time_ms:.1f} ms)")
        return

    table = Table(show_lines=False)
    for name in result.column_names:
        table.add_column(name, overflow="fold")
    for row in result.rows:
        table.add_row(*row)

    console.print(table)
    noun = "row" if result.row_count == 1 else "rows"
    console.print(f"({result.row_count} {noun}, {result.execution_time_ms:.1f} ms)")
