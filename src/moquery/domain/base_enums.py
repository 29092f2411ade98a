from enum import Enum


class BufferKind(str, Enum):
    """Sub-stream a classified line is routed to."""
    PLOT = "plot"
    NL_REQUEST = "nl_request"
    SQL = "sql"


class MessageRole(str, Enum):
    SYSTEM = "system"
    HUMAN = "human"


class DispatchAction(str, Enum):
    """Execution path chosen for one input buffer."""
    # No directive on the first line; buffer executed as-is
    PASSTHROUGH_SQL = "passthrough_sql"
    # Directive block present, no plot script
    DIRECT_SQL = "direct_sql"
    # Result set piped into gnuplot
    PLOT = "plot"
    # Nothing left to execute
    NOOP = "noop"
