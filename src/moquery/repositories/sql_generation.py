"""
SQL Generation Repository.

Handles LLM-based SQL synthesis:
- Prompt building with the schema snapshot
- LLM interaction
- Extraction of the SQL code block from the reply
"""

from typing import List

from moquery.config import LLMConfig
from moquery.domain.base_enums import MessageRole
from moquery.domain.errors import SQLGenerationError
from moquery.domain.prompt import PromptMessage
from moquery.domain.schema_snapshot import SchemaSnapshot
from moquery.infrastructure.llm_client import LLMClient
from moquery.utils.logging import get_module_logger
from moquery.utils.tracing import current_trace_id

logger = get_module_logger()


SYSTEM_PROMPT = "You are a SQL/Database expert that helps user to convert a question into a SQL query."

# Prompt layout follows the sqlcoder instruction format
PROMPT_HEADER = """
### Instructions:
Your task is to convert a question into a SQL query, given a {dialect} database schema.
Adhere to these rules:
- **Deliberately go through the question and database schema word by word** to appropriately answer the question
- **Use Table Aliases** to prevent ambiguity. For example, `SELECT table1.col1, table2.col1 FROM table1 JOIN table2 ON table1.id = table2.id`.
- When creating a ratio, always cast the numerator as float

### Input:
Generate a SQL query that answers the question `{question}`.
This query will run on a database whose schema is represented in this string:
"""

PROMPT_FOOTER = """
### Response:
Based on your instructions, here is the SQL query I have generated to answer the question `{question}`:
```sql
"""

SQL_FENCE_OPEN = "```sql"
FENCE = "```"


def build_prompt(question: str, schema: SchemaSnapshot, dialect: str = "MySQL") -> List[PromptMessage]:
    """
    Build the text2sql prompt.

    The question and DDL are only ever passed as format arguments or
    concatenated, so braces or backticks in them are sent as-is.

    Args:
        question: Natural-language request
        schema: Schema snapshot to embed
        dialect: SQL dialect named in the instructions

    Returns:
        System message followed by the instruction message
    """
    question = question.strip()
    human = (
        PROMPT_HEADER.format(dialect=dialect, question=question)
        + schema.schema_text
        + PROMPT_FOOTER.format(question=question)
    )
    return [
        PromptMessage(role=MessageRole.SYSTEM, content=SYSTEM_PROMPT),
        PromptMessage(role=MessageRole.HUMAN, content=human),
    ]


def extract_sql(reply: str) -> str:
    """
    Extract the SQL code block from a model reply.

    - Text before a ```sql line is dropped and collection starts after it
    - A closing ``` line ends collection; later text is ignored
    - Without a closing fence everything after the opening one is kept
    - Without any fence the whole reply is kept

    Every kept line is returned with a trailing newline.
    """
    collected: List[str] = []
    for line in reply.split("\n"):
        if line.startswith(SQL_FENCE_OPEN):
            collected = []
            continue
        if line.startswith(FENCE):
            break
        collected.append(line + "\n")
    return "".join(collected)


class SQLGenerationRepository:
    """
    Repository for LLM-based SQL generation.

    Handles prompt construction and LLM interaction.
    """

    def __init__(self, llm_client: LLMClient, config: LLMConfig):
        self.llm_client = llm_client
        self.config = config

    def generate_sql(self, question: str, schema: SchemaSnapshot) -> str:
        """
        Synthesize SQL for a natural-language request.

        Args:
            question: Natural-language request
            schema: Schema snapshot of the active database

        Returns:
            Extracted SQL text

        Raises:
            LLMError: If the LLM call fails or returns no completion
            SQLGenerationError: If the reply contains no SQL
        """
        trace_id = current_trace_id()

        messages = build_prompt(question, schema, dialect=self.config.sql_dialect)

        logger.debug(
            "Calling LLM for SQL generation",
            prompt_length=sum(len(m.content) for m in messages),
            table_count=schema.table_count,
            trace_id=trace_id,
        )

        reply = self.llm_client.generate(messages, temperature=self.config.temperature)
        sql = extract_sql(reply)

        if not sql.strip():
            logger.warning("LLM reply contained no SQL", reply_length=len(reply), trace_id=trace_id)
            raise SQLGenerationError(
                "LLM reply contained no SQL",
                details={"reply": reply},
            )

        logger.info("SQL synthesized", sql_length=len(sql), trace_id=trace_id)
        return sql
