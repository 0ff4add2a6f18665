"""Command-line interface module for Text Resource XML.

This module provides CLI tools to check, show, normalize, export and import
text resource files.
"""

from .main import main

__all__ = ["main"]
