"""
Integration tests for LLMClient connection and SQL synthesis.

This module verifies connectivity to the OpenAI-compatible endpoint in
MO_LLM__BASE_URL (a local Ollama server by default). Set MO_RUN_LLM_TESTS=1
to run them.

Usage:
    MO_RUN_LLM_TESTS=1 pytest tests/integration/test_llm_connection.py -v -m integration
"""

import os

import pytest

from moquery.config import get_settings
from moquery.domain.base_enums import MessageRole
from moquery.domain.prompt import PromptMessage
from moquery.domain.schema_snapshot import SchemaSnapshot
from moquery.infrastructure.llm_client import LLMClient
from moquery.repositories.sql_generation import SQLGenerationRepository

pytestmark = pytest.mark.skipif(
    os.environ.get("MO_RUN_LLM_TESTS") != "1",
    reason="set MO_RUN_LLM_TESTS=1 to call the configured LLM endpoint",
)


@pytest.fixture
def llm_config():
    """Get LLM configuration from settings."""
    return get_settings().llm


@pytest.fixture
def llm_client(llm_config):
    """Create and connect LLM client."""
    client = LLMClient(llm_config)
    client.connect()
    yield client
    if client.is_connected():
        client.close()


@pytest.mark.integration
class TestLLMConnection:
    """Integration tests for LLM client connectivity."""

    def test_basic_connection(self, llm_config):
        client = LLMClient(llm_config)

        client.connect()
        assert client.is_connected()

        client.close()
        assert not client.is_connected()

    def test_generate_simple_text(self, llm_client):
        response = llm_client.generate(
            [PromptMessage(role=MessageRole.HUMAN, content="What is 2 + 2? Answer with just the number.")]
        )

        assert isinstance(response, str)
        assert len(response) > 0


@pytest.mark.integration
class TestSQLSynthesis:
    """End-to-end synthesis against a tiny TPC-H style schema."""

    def test_generates_select(self, llm_config, llm_client):
        schema = SchemaSnapshot(
            database_name="tpch",
            table_ddl=["CREATE TABLE `nation` (`n_nationkey` int NOT NULL, `n_name` char(25) NOT NULL)"],
        )
        sql = SQLGenerationRepository(llm_client, llm_config).generate_sql("How many nations are there?", schema)

        assert "select" in sql.lower()
        assert "nation" in sql.lower()
