"""PageSnap REST API."""
