"""moquery: SQL shell preprocessing for text2sql and gnuplot directives."""

__version__ = "0.1.0"
