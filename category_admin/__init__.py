"""Category tree administration service."""

__version__ = "0.1.0"
