"""Exception hierarchy for the capture engine."""


class PageSnapError(Exception):
    """Base class for all capture engine errors."""
    pass


class InvalidInputError(PageSnapError):
    """Raised when a capture request is rejected before touching the browser."""
    pass


class NavigationError(PageSnapError):
    """Raised when the target page cannot be reached within the timeout."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(message)


class CaptureError(PageSnapError):
    """Raised when screenshot or metadata extraction fails after navigation."""
    pass
