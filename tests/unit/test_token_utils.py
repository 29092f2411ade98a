"""Unit tests for token_utils module."""

import pytest
from moquery.utils.token_utils import InputValidator


class TestValidateTotalChars:
    """Tests for InputValidator.validate_total_chars."""

    def test_within_limit_passes(self):
        """Inputs under the limit should not raise."""
        InputValidator.validate_total_chars(["system", "question"], max_chars=100)

    def test_exact_limit_passes(self):
        """Inputs exactly at the limit are allowed."""
        InputValidator.validate_total_chars(["a" * 60, "b" * 40], max_chars=100)

    def test_over_limit_raises(self):
        """Inputs over the limit raise with both counts in the message."""
        with pytest.raises(ValueError) as exc_info:
            InputValidator.validate_total_chars(["a" * 60, "b" * 41], max_chars=100)

        assert "101" in str(exc_info.value)
        assert "100" in str(exc_info.value)

    def test_empty_input_passes(self):
        InputValidator.validate_total_chars([], max_chars=0)
