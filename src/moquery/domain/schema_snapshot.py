from pydantic import BaseModel, Field
from typing import List


class SchemaSnapshot(BaseModel):
    """Database name and creation DDL of every table, as embedded in text2sql prompts."""

    database_name : str = Field(..., description="Active database name at snapshot time")
    table_ddl : List[str] = Field(default_factory=list, description="CREATE TABLE statement per table, in listing order")

    @property
    def table_count(self) -> int:
        return len(self.table_ddl)

    @property
    def schema_text(self) -> str:
        """All DDL statements, each followed by a newline."""
        return "".join(f"{ddl}\n" for ddl in self.table_ddl)
