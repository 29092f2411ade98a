"""
Type aliases for moquery.

Provides reusable, descriptive type aliases for common patterns
to improve code readability and type safety.
"""

from typing import Any, Dict, List, Optional, Sequence


# Positional or named parameters passed through to the database driver
QueryBindings = Optional[Sequence[Any] | Dict[str, Any]]

# One result row rendered as strings
StringRow = List[str]

# Template key -> canonical question text
TemplateMap = Dict[str, str]
