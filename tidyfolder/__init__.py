"""
tidyfolder - rule-based folder organizer with journaled, undoable moves.
"""

from .version import __version__

__all__ = ["__version__"]
