"""Command-line interface for PageSnap."""

from .main import app

__all__ = ["app"]
