"""
Domain package for moquery.

This package contains the domain models, enums and exceptions shared by the
classifier, the text2sql path and the plot pipeline.
"""

from .base_enums import BufferKind, MessageRole, DispatchAction
from .classified_query import ClassifiedQuery, ClassifierState
from .schema_snapshot import SchemaSnapshot
from .prompt import PromptMessage
from .plot_job import PlotJob
from .responses import QueryExecutionResult, DispatchResult

__all__ = [
    # Enums
    "BufferKind",
    "MessageRole",
    "DispatchAction",

    # Classification
    "ClassifiedQuery",
    "ClassifierState",

    # text2sql
    "SchemaSnapshot",
    "PromptMessage",

    # Execution
    "PlotJob",
    "QueryExecutionResult",
    "DispatchResult",
]
