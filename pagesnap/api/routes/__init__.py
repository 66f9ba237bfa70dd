"""API routes for PageSnap."""

from .snapshots import router as snapshots_router

__all__ = ["snapshots_router"]
