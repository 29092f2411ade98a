"""
Classification models for directive-prefixed input buffers.

A buffer such as

    --!gnuplot plot $DATA using 1:2 with boxes
    select l_returnflag, count(*) from lineitem group by 1;

is split into a gnuplot script, a natural-language request and SQL text.
"""

from dataclasses import dataclass
from typing import Optional

from .base_enums import BufferKind


@dataclass(frozen=True)
class ClassifierState:
    """
    Routing state carried from one line to the next.

    target is None only before the first line has been seen. Once locked,
    target is SQL and never changes again.
    """

    target: Optional[BufferKind] = None
    locked: bool = False


@dataclass(frozen=True)
class ClassifiedQuery:
    """The three ordered text buffers produced by the line classifier."""

    plot_script: str = ""
    nl_request: str = ""
    sql_text: str = ""

    @property
    def has_plot_script(self) -> bool:
        return bool(self.plot_script.strip())

    @property
    def has_nl_request(self) -> bool:
        return bool(self.nl_request.strip())
