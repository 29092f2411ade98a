"""
Plot job model for the gnuplot pipeline.

A PlotJob lives for exactly one render_plot call. Its files sit in a
temporary directory that is removed when the call returns or raises.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass
class PlotJob:
    """Everything needed to write and run one gnuplot script."""

    # Generated gnuplot script (inline data + defaults + user script)
    script_path: Path

    # SVG file gnuplot is told to write
    output_path: Path

    # User-supplied gnuplot directives, appended verbatim
    user_script: str

    # Query result, one list of string cells per row
    rows: List[List[str]] = field(default_factory=list)

    # Column names of the query result, for logging only
    column_names: List[str] = field(default_factory=list)
