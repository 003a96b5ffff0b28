"""Command-line interface for streaming HTML rendering.

This module provides the ``streaming-html`` tool for re-indenting markup and
benchmarking builder strategies.
"""

from .main import main

__all__ = ["main"]
