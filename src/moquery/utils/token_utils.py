"""
Input validation utilities for LLM requests.

The text2sql prompt embeds the DDL of every table in the database, so a large
schema can silently exceed a model's context window. These checks fail fast
with a clear message instead.
"""

from typing import Sequence


class InputValidator:
    """
    Input validation utility for checking character limits.

    Uses simple character count checks against hard limits.
    """

    @staticmethod
    def validate_total_chars(
        texts: Sequence[str],
        max_chars: int,
    ) -> None:
        """
        Validate total character count for an LLM request.

        Args:
            texts: Message contents sent in one request
            max_chars: Maximum allowed total characters

        Raises:
            ValueError: If total exceeds character limit

        Example:
            >>> InputValidator.validate_total_chars(["system", "question"], max_chars=1000)  # OK
        """
        total_chars = sum(len(text) for text in texts)

        if total_chars > max_chars:
            raise ValueError(
                f"Total input too large: {total_chars} characters, "
                f"maximum allowed: {max_chars}"
            )
