"""
Command-line interface for tidyfolder.
"""

from .main import cli

__all__ = ["cli"]
