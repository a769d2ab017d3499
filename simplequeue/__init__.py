"""simplequeue: a small persistent queue of hook jobs."""

__version__ = "1.0.0"
