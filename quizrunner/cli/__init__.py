"""
Terminal interface for the quiz runner.
"""

from .app import app, main

__all__ = ["app", "main"]
