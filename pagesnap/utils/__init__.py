"""Utility modules for PageSnap."""

from .url_normalizer import normalize_url

__all__ = ["normalize_url"]
