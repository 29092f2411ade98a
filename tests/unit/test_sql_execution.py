"""Unit tests for direct execution and tabular rendering."""

import io

from moquery.domain.responses import QueryExecutionResult
from moquery.repositories.sql_execution import SQLExecutionRepository
from moquery.utils.formatting import render_result


def test_execute_collects_string_rows(fake_db):
    fake_db.results["select n_name, n_comment from nation;"] = (
        ["n_name", "n_comment"],
        [("ALGERIA", None), ("BRAZIL", "y")],
    )
    result = SQLExecutionRepository(fake_db).execute("select n_name, n_comment from nation;")

    assert result.column_names == ["n_name", "n_comment"]
    assert result.rows == [["ALGERIA", "NULL"], ["BRAZIL", "y"]]
    assert result.row_count == 2
    assert result.returns_rows
    assert fake_db.open_cursors == 0


def test_statement_without_rows(fake_db):
    result = SQLExecutionRepository(fake_db).execute("delete from nation;")
    assert not result.returns_rows
    assert result.row_count == 0


def test_render_table():
    stream = io.StringIO()
    render_result(
        QueryExecutionResult(
            column_names=["flag", "n"],
            rows=[["A", "1"], ["[red]R", "2"]],
            row_count=2,
            execution_time_ms=1.5,
        ),
        stream,
    )
    output = stream.getvalue()

    assert "flag" in output
    assert "[red]R" in output
    assert output.rstrip().endswith("(2 rows, 1.5 ms)")


def test_render_single_row_footer():
    stream = io.StringIO()
    render_result(
        QueryExecutionResult(column_names=["one"], rows=[["1"]], row_count=1, execution_time_ms=0.0),
        stream,
    )
    assert "(1 row, 0.0 ms)" in stream.getvalue()


def test_render_affected_rows():
    stream = io.StringIO()
    render_result(
        QueryExecutionResult(row_count=3, execution_time_ms=2.0, returns_rows=False),
        stream,
    )
    assert stream.getvalue() == "OK, 3 row(s) affected (2.0 ms)\n"
