"""Queue typed background tasks, run them one at a time per type, and serve them over HTTP."""

__version__ = "0.1.0"