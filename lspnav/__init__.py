"""Turn language-server navigation answers into selectable entries."""

__version__ = "0.1.0"
