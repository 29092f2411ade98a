"""Unit tests for prompt building, SQL extraction and SQLGenerationRepository."""

import pytest

from moquery.config import LLMConfig
from moquery.domain.base_enums import MessageRole
from moquery.domain.errors import LLMError, SQLGenerationError
from moquery.domain.schema_snapshot import SchemaSnapshot
from moquery.repositories.sql_generation import (
    SQLGenerationRepository,
    build_prompt,
    extract_sql,
)


@pytest.fixture
def schema():
    return SchemaSnapshot(
        database_name="tpch",
        table_ddl=[
            "CREATE TABLE `nation` (`n_nationkey` int, `n_name` char(25))",
            "CREATE TABLE `region` (`r_regionkey` int, `r_name` char(25))",
        ],
    )


class TestBuildPrompt:

    def test_system_then_human(self, schema):
        messages = build_prompt("how many nations?", schema)
        assert [m.role for m in messages] == [MessageRole.SYSTEM, MessageRole.HUMAN]

    def test_human_message_embeds_question_and_ddl(self, schema):
        human = build_prompt("how many nations?", schema)[1].content
        assert human.count("`how many nations?`") == 2
        assert "CREATE TABLE `nation` (`n_nationkey` int, `n_name` char(25))\n" in human
        assert "CREATE TABLE `region`" in human
        assert "MySQL database schema" in human

    def test_prompt_ends_with_open_sql_fence(self, schema):
        human = build_prompt("how many nations?", schema)[1].content
        assert human.endswith("```sql\n")

    def test_question_is_stripped(self, schema):
        human = build_prompt("\n  count regions \n", schema)[1].content
        assert "`count regions`" in human

    def test_braces_in_question_are_kept(self, schema):
        human = build_prompt("rows where name = '{x}'", schema)[1].content
        assert "`rows where name = '{x}'`" in human

    def test_dialect(self, schema):
        human = build_prompt("count regions", schema, dialect="PostgreSQL")[1].content
        assert "PostgreSQL database schema" in human


class TestExtractSql:

    def test_fenced_block(self):
        assert extract_sql("```sql\nSELECT 1;\n```") == "SELECT 1;\n"

    def test_prose_before_fence_is_dropped(self):
        reply = "Here is the query:\n```sql\nSELECT n_name\nFROM nation;\n```\nHope it helps."
        assert extract_sql(reply) == "SELECT n_name\nFROM nation;\n"

    def test_missing_closing_fence_keeps_rest(self):
        assert extract_sql("```sql\nSELECT 1;") == "SELECT 1;\n"

    def test_no_fence_keeps_whole_reply(self):
        assert extract_sql("SELECT 1;\n") == "SELECT 1;\n\n"

    def test_closing_fence_without_opening(self):
        """Continuation replies start inside the block opened by the prompt."""
        assert extract_sql("SELECT 1;\n```\nexplanation") == "SELECT 1;\n"

    def test_last_opening_fence_wins(self):
        reply = "```sql\nSELECT 0;\n```sql\nSELECT 1;\n```"
        assert extract_sql(reply) == "SELECT 1;\n"


class TestSQLGenerationRepository:

    def test_generates_sql(self, fake_llm, schema):
        repo = SQLGenerationRepository(fake_llm, LLMConfig(temperature=0.2))
        assert repo.generate_sql("count nations", schema) == "SELECT 1;\n"

        messages, temperature = fake_llm.calls[0]
        assert temperature == 0.2
        assert "`count nations`" in messages[1].content

    def test_blank_reply_raises(self, fake_llm, schema):
        fake_llm.reply = "```sql\n\n```"
        repo = SQLGenerationRepository(fake_llm, LLMConfig())
        with pytest.raises(SQLGenerationError):
            repo.generate_sql("count nations", schema)

    def test_llm_error_propagates(self, failing_llm, schema):
        repo = SQLGenerationRepository(failing_llm, LLMConfig())
        with pytest.raises(LLMError):
            repo.generate_sql("count nations", schema)
