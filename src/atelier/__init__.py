"""Jump into a project or directory and land inside a persistent session."""

__version__ = "0.1.0"
