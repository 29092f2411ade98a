"""
Custom exception hierarchy for moquery.

This module defines the exceptions raised along the three dispatch paths:
- Consistent error codes for the CLI and log records
- Detailed error messages for debugging

Exception Categories:
- Database: connection and query failures
- Schema: schema snapshot construction failures
- LLM / SQL generation: model failures and unusable replies
- Plot: every stage of the gnuplot pipeline

Classification never raises; unrecognized input is treated as SQL.

Usage:
    raise DatabaseConnectionError("Failed to connect to database")
    raise PlotRenderError("gnuplot exited with status 1", details={"stderr": "..."})
"""

from typing import Any, Dict, Optional


class MoQueryException(Exception):
    """
    Base exception for all moquery errors.

    All custom exceptions inherit from this class, providing:
    - error_code: Machine-readable error identifier
    - details: Optional structured data for debugging

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error code (e.g., "DATABASE_QUERY_ERROR")
        details: Optional dictionary with additional error context
    """

    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        result: Dict[str, Any] = {
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(MoQueryException):
    """
    Raised when configuration is invalid or missing.

    Examples:
        - Missing MO_DATABASE__DATABASE_URL
        - Invalid configuration values
    """

    error_code = "CONFIGURATION_ERROR"


class TemplateLoadError(ConfigurationError):
    """
    Raised when the query template YAML file cannot be loaded.

    Examples:
        - File not found
        - Malformed YAML
        - "templates" is not a mapping of strings
    """

    error_code = "TEMPLATE_LOAD_ERROR"


# =============================================================================
# Database Errors
# =============================================================================


class DatabaseError(MoQueryException):
    """Base class for database-related errors."""

    error_code = "DATABASE_ERROR"


class DatabaseConnectionError(DatabaseError):
    """
    Raised when database connection fails.

    Examples:
        - Connection timeout
        - Authentication failure
        - Client used before connect()
    """

    error_code = "DATABASE_CONNECTION_ERROR"


class DatabaseQueryError(DatabaseError):
    """
    Raised when database query execution fails.

    Examples:
        - SQL syntax error
        - Table/column not found
        - Row fetch failure
    """

    error_code = "DATABASE_QUERY_ERROR"


# =============================================================================
# Schema Errors
# =============================================================================


class SchemaError(MoQueryException):
    """
    Raised when the schema snapshot cannot be built.

    Nothing is cached when this is raised; the next request retries.
    """

    error_code = "SCHEMA_ERROR"


# =============================================================================
# LLM Errors
# =============================================================================


class LLMError(MoQueryException):
    """
    Raised when LLM operations fail.

    Examples:
        - LLM endpoint unreachable
        - Zero completion choices
        - Prompt exceeds the configured input size
    """

    error_code = "LLM_ERROR"


class SQLGenerationError(MoQueryException):
    """
    Raised when the model reply contains no usable SQL.
    """

    error_code = "SQL_GENERATION_ERROR"


# =============================================================================
# Plot Errors
# =============================================================================


class PlotError(MoQueryException):
    """Base class for plot pipeline errors. No partial image is ever shown."""

    error_code = "PLOT_ERROR"


class PlotScriptError(PlotError):
    """
    Raised when the gnuplot script cannot be written.

    Examples:
        - Temp directory missing or not writable
        - Disk full
    """

    error_code = "PLOT_SCRIPT_ERROR"


class PlotRenderError(PlotError):
    """
    Raised when gnuplot fails.

    Examples:
        - gnuplot executable not found
        - Non-zero exit status (script error)
        - Timeout
    """

    error_code = "PLOT_RENDER_ERROR"


class PlotOutputMissingError(PlotError):
    """
    Raised when gnuplot exits cleanly but produced no SVG file.

    Usually the user script redirected "set output" elsewhere.
    """

    error_code = "PLOT_OUTPUT_MISSING"


class RasterizationError(PlotError):
    """
    Raised when the SVG cannot be converted to a bitmap.
    """

    error_code = "RASTERIZATION_ERROR"


class TerminalGraphicsUnavailableError(PlotError):
    """
    Raised when the terminal has no supported inline image protocol.
    """

    error_code = "TERMINAL_GRAPHICS_UNAVAILABLE"
