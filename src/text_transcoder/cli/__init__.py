"""Command-line interface module for text transcoding.

This module provides the ``txu`` tool for converting files between encodings
and for reporting the encoding a file would be auto-detected as.
"""

from .main import main

__all__ = ["main"]
