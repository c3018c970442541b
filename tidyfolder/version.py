"""Version information for tidyfolder."""

__version__ = "2.0.0"
