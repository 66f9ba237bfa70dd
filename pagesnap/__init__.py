"""PageSnap - on-demand web page screenshots and brand snapshots."""

__version__ = "1.0.0"
