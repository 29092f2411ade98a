"""
Infrastructure layer for external integrations.

This module contains clients for the database, the LLM endpoint, the
gnuplot executable, the SVG rasterizer and the terminal's image protocol.
"""

from .database_client import DatabaseClient
from .gnuplot_renderer import GnuplotRenderer
from .llm_client import LLMClient
from .svg_rasterizer import SVGRasterizer
from .terminal_graphics import TerminalGraphics

__all__ = ["DatabaseClient", "GnuplotRenderer", "LLMClient", "SVGRasterizer", "TerminalGraphics"]
