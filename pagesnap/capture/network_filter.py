"""Network policy filter for page sessions.

This module provides the NetworkFilter class that hooks into Playwright
request routing to abort heavy or non-visual sub-resources (fonts, media)
and known analytics/advertising endpoints before they reach the network.
"""

import logging
import re
from typing import Dict, Iterable, Optional, Pattern, Union

from playwright.async_api import BrowserContext, Page, Request, Route

from ..models.capture import NetworkDecision

logger = logging.getLogger(__name__)


DEFAULT_BLOCKED_RESOURCE_TYPES = frozenset({'font', 'media'})

DEFAULT_TRACKING_PATTERNS = (
    'google-analytics.com',
    'gtag/js',
    'doubleclick.net',
    'googletagmanager.com',
    'facebook.com/tr',
    'hotjar.com',
    'mixpanel.com',
    'segment.com',
)


def compile_tracking_patterns(patterns: Iterable[str]) -> Optional[Pattern]:
    """Compile hostname/path fragments into one case-insensitive matcher.

    Args:
        patterns: Literal hostname or path fragments

    Returns:
        Compiled pattern, or None if no fragments were given
    """
    fragments = [re.escape(p) for p in patterns if p]
    if not fragments:
        return None
    return re.compile('|'.join(fragments), re.IGNORECASE)


_DEFAULT_MATCHER = compile_tracking_patterns(DEFAULT_TRACKING_PATTERNS)


def classify_request(
    url: str,
    resource_type: str,
    blocked_types: Iterable[str] = DEFAULT_BLOCKED_RESOURCE_TYPES,
    tracking_matcher: Optional[Pattern] = _DEFAULT_MATCHER,
) -> NetworkDecision:
    """Decide whether a request may proceed.

    Either rule matching is sufficient to abort.

    Args:
        url: Request URL
        resource_type: Playwright resource type (document, script, font, ...)
        blocked_types: Resource types that are always aborted
        tracking_matcher: Pattern matching tracking hosts or paths

    Returns:
        NetworkDecision.ABORT or NetworkDecision.CONTINUE
    """
    if resource_type in blocked_types:
        return NetworkDecision.ABORT
    if tracking_matcher is not None and tracking_matcher.search(url or ''):
        return NetworkDecision.ABORT
    return NetworkDecision.CONTINUE


class NetworkFilter:
    """Aborts blocked sub-resource requests for a single page."""

    def __init__(
        self,
        blocked_resource_types: Optional[Iterable[str]] = None,
        tracking_patterns: Optional[Iterable[str]] = None,
    ):
        """Initialize network filter.

        Args:
            blocked_resource_types: Resource types to abort (defaults to font, media)
            tracking_patterns: Tracking hostname/path fragments to abort
        """
        if blocked_resource_types is None:
            blocked_resource_types = DEFAULT_BLOCKED_RESOURCE_TYPES
        if tracking_patterns is None:
            tracking_patterns = DEFAULT_TRACKING_PATTERNS

        self.blocked_resource_types = frozenset(blocked_resource_types)
        self.tracking_patterns = tuple(tracking_patterns)
        self._matcher = compile_tracking_patterns(self.tracking_patterns)
        self.stats: Dict[str, int] = {'allowed': 0, 'blocked': 0}

    def decide(self, url: str, resource_type: str) -> NetworkDecision:
        """Classify a request against this filter's rules."""
        return classify_request(
            url,
            resource_type,
            blocked_types=self.blocked_resource_types,
            tracking_matcher=self._matcher,
        )

    async def install(self, target: Union[Page, BrowserContext]) -> None:
        """Route every request of a page or browser context through this filter.

        Must be awaited before navigation starts.
        """
        await target.route("**/*", self._handle_route)
        logger.debug("Network filter installed")

    async def _handle_route(self, route: Route, request: Request) -> None:
        decision = self.decide(request.url, request.resource_type)
        try:
            if decision == NetworkDecision.ABORT:
                self.stats['blocked'] += 1
                await route.abort()
            else:
                self.stats['allowed'] += 1
                await route.continue_()
        except Exception as e:
            # Page or context closed while the request was in flight
            logger.debug(f"Route handling failed for {request.url}: {e}")

    def get_stats(self) -> Dict[str, int]:
        """Get allowed/blocked request counts."""
        return dict(self.stats)

    def __repr__(self) -> str:
        return (
            f"NetworkFilter(types={sorted(self.blocked_resource_types)}, "
            f"patterns={len(self.tracking_patterns)}, "
            f"blocked={self.stats['blocked']})"
        )
