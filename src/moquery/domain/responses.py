"""
Result models for the moquery dispatcher.

These models describe what a dispatched query did, so the CLI and tests
can inspect the chosen path without parsing terminal output.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from .base_enums import DispatchAction


class QueryExecutionResult(BaseModel):
    """Query execution result with metadata."""

    column_names: List[str] = Field(default_factory=list, description="Column names in result set")
    rows: List[List[str]] = Field(default_factory=list, description="Result rows as string cells")
    row_count: int = Field(..., description="Rows returned, or rows affected for statements without a result set")
    execution_time_ms: float = Field(..., description="Query execution time in milliseconds")
    returns_rows: bool = Field(default=True, description="Whether the statement produced a result set")


class DispatchResult(BaseModel):
    """Outcome of handling one input buffer."""

    action: DispatchAction = Field(..., description="Execution path taken")
    sql: Optional[str] = Field(default=None, description="SQL sent to the database, if any")
    synthesized: bool = Field(default=False, description="Whether the SQL was generated by the LLM")
    row_count: Optional[int] = Field(default=None, description="Rows returned or plotted")
    trace_id: Optional[str] = Field(default=None, description="Trace ID for log correlation")
