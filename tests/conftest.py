"""Shared fixtures and fakes for the moquery test suite."""

import os
import re
from contextlib import contextmanager
from pathlib import Path

# Settings require a database URL; unit tests never open it
os.environ.setdefault("MO_DATABASE__DATABASE_URL", "sqlite://")

import pytest

from moquery.config import AppConfig, LLMConfig, PlotConfig, get_settings
from moquery.domain.errors import LLMError
from moquery.infrastructure.database_client import cell_to_string
from moquery.repositories.line_classifier import LineClassifier
from moquery.repositories.schema_repository import SchemaCache
from moquery.repositories.sql_execution import SQLExecutionRepository
from moquery.repositories.sql_generation import SQLGenerationRepository
from moquery.services.plot_service import PlotService
from moquery.services.query_dispatcher import QueryDispatcher


@pytest.fixture(autouse=True)
def reset_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeCursor:
    def __init__(self, columns, rows, rowcount=-1):
        self.columns = list(columns)
        self.returns_rows = bool(columns)
        self._rows = [tuple(row) for row in rows]
        self.rowcount = len(self._rows) if self.returns_rows else rowcount

    def __iter__(self):
        return iter(self._rows)

    def string_rows(self):
        for row in self:
            yield [cell_to_string(value) for value in row]


class FakeDatabase:
    """In-memory stand-in for DatabaseClient.execute()."""

    def __init__(self, results=None, errors=None):
        self.results = dict(results or {})
        self.errors = dict(errors or {})
        self.executed = []
        self.open_cursors = 0
        self.connect_calls = 0
        self.close_calls = 0

    @contextmanager
    def execute(self, sql, bindings=None):
        self.executed.append((sql, bindings))
        if sql in self.errors:
            raise self.errors[sql]
        columns, rows = self.results.get(sql, ([], []))
        self.open_cursors += 1
        try:
            yield FakeCursor(columns, rows)
        finally:
            self.open_cursors -= 1

    def count(self, sql):
        return sum(1 for executed_sql, _ in self.executed if executed_sql == sql)

    def connect(self):
        self.connect_calls += 1

    def close(self):
        self.close_calls += 1


class FakeLLM:
    """Records prompts and returns canned replies."""

    def __init__(self, reply="```sql\nSELECT 1;\n```", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate(self, messages, temperature=None):
        self.calls.append((list(messages), temperature))
        if self.error is not None:
            raise self.error
        return self.reply


class FakeRenderer:
    """Writes a tiny SVG to the path named by the script's `set output` line."""

    OUTPUT_RE = re.compile(r"^set output '(.+)'$", re.MULTILINE)

    def __init__(self, write_output=True, error=None):
        self.write_output = write_output
        self.error = error
        self.scripts = []
        self.script_paths = []

    def render(self, script_path):
        script = Path(script_path).read_text(encoding="utf-8")
        self.scripts.append(script)
        self.script_paths.append(Path(script_path))
        if self.error is not None:
            raise self.error
        if self.write_output:
            output = self.OUTPUT_RE.search(script).group(1).replace("''", "'")
            Path(output).write_bytes(b"<svg xmlns='http://www.w3.org/2000/svg'/>")


class FakeRasterizer:
    def __init__(self):
        self.inputs = []

    def rasterize(self, svg):
        self.inputs.append(svg)
        return ("image", svg)


class FakeGraphics:
    def __init__(self, available=True):
        self._available = available
        self.encoded = []

    def available(self):
        return self._available

    def encode(self, stream, image):
        self.encoded.append(image)
        stream.write("<image>\n")


SCHEMA_RESULTS = {
    "select database()": (["database()"], [("tpch",)]),
    "show tables": (["Tables_in_tpch"], [("nation",), ("region",)]),
    "show create table `nation`": (
        ["Table", "Create Table"],
        [("nation", "CREATE TABLE `nation` (\n  `n_nationkey` int NOT NULL,\n  `n_name` char(25) NOT NULL\n)")],
    ),
    "show create table `region`": (
        ["Table", "Create Table"],
        [("region", "CREATE TABLE `region` (\n  `r_regionkey` int NOT NULL,\n  `r_name` char(25) NOT NULL\n)")],
    ),
}


@pytest.fixture
def schema_results():
    return dict(SCHEMA_RESULTS)


@pytest.fixture
def fake_db(schema_results):
    return FakeDatabase(results=schema_results)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def fake_rasterizer():
    return FakeRasterizer()


@pytest.fixture
def fake_graphics():
    return FakeGraphics()


@pytest.fixture
def plot_config(tmp_path):
    return PlotConfig(tmp_dir=str(tmp_path))


@pytest.fixture
def plot_service(plot_config, fake_renderer, fake_rasterizer, fake_graphics):
    return PlotService(
        config=plot_config,
        renderer=fake_renderer,
        rasterizer=fake_rasterizer,
        graphics=fake_graphics,
    )


@pytest.fixture
def dispatcher(fake_db, fake_llm, plot_service):
    return QueryDispatcher(
        db_client=fake_db,
        classifier=LineClassifier(),
        schema_cache=SchemaCache(),
        sql_generation_repository=SQLGenerationRepository(fake_llm, LLMConfig()),
        sql_execution_repository=SQLExecutionRepository(fake_db),
        plot_service=plot_service,
        config=AppConfig(echo_generated_sql=False),
    )


@pytest.fixture
def failing_llm():
    return FakeLLM(error=LLMError("connection refused"))
