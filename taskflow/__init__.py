"""TaskFlow: personal task manager service."""

__version__ = "1.0.0"
