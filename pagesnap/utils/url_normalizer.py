"""URL normalization for user-supplied capture targets."""

import re
from typing import Optional

_SCHEME_RE = re.compile(r'^https?://', re.IGNORECASE)


def normalize_url(raw: Optional[str]) -> Optional[str]:
    """Turn raw user input into an absolute http(s) URL.

    Args:
        raw: URL as typed by the user

    Returns:
        None for empty input, otherwise the trimmed URL with ``https://``
        prepended when it has no http(s) scheme

    Example:
        >>> normalize_url("  example.com ")
        'https://example.com'
        >>> normalize_url("HTTP://example.com")
        'HTTP://example.com'
    """
    if raw is None:
        return None
    url = str(raw).strip()
    if not url:
        return None
    if not _SCHEME_RE.match(url):
        url = "https://" + url
    return url
