"""Brand metadata extraction from a rendered page.

A single in-page script collects raw candidates: the title, description and
favicon sources, and one computed-style read per element. Each element read
reports either ``{"ok": true, "values": [...]}`` or ``{"ok": false}`` so an
unreadable node is skipped instead of failing the whole extraction. Field
resolution (fallback order, de-duplication, caps) happens here in Python.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .errors import CaptureError
from ..models.capture import MAX_COLORS, MAX_FONTS, PageMetadata

logger = logging.getLogger(__name__)


# Candidate sources per field, highest priority first
FALLBACK_CHAINS: Dict[str, Sequence[str]] = {
    'title': ('title_element', 'og_title', 'twitter_title'),
    'description': ('meta_description', 'og_description', 'twitter_description'),
    'favicon': ('icon', 'shortcut_icon', 'apple_touch_icon'),
}

TRANSPARENT_COLORS = frozenset({'transparent', 'rgba(0, 0, 0, 0)'})

EXTRACT_SCRIPT = """
() => {
    const content = (selector) => {
        const el = document.querySelector(selector);
        return el ? (el.getAttribute('content') || '').trim() : '';
    };
    const href = (selector) => {
        const el = document.querySelector(selector);
        return el && el.href ? el.href : '';
    };
    const titleEl = document.querySelector('title');

    const sources = {
        title_element: titleEl ? (titleEl.textContent || '').trim() : '',
        og_title: content('meta[property="og:title"]'),
        twitter_title: content('meta[name="twitter:title"]'),
        meta_description: content('meta[name="description"]'),
        og_description: content('meta[property="og:description"]'),
        twitter_description: content('meta[name="twitter:description"]'),
        icon: href('link[rel="icon"]'),
        shortcut_icon: href('link[rel="shortcut icon"]'),
        apple_touch_icon: href('link[rel="apple-touch-icon"]'),
    };

    const read = (el, props) => {
        try {
            const cs = window.getComputedStyle(el);
            return { ok: true, values: props.map((p) => cs.getPropertyValue(p)) };
        } catch (e) {
            return { ok: false };
        }
    };
    const collect = (selector, props) => {
        const els = [document.body, ...document.querySelectorAll(selector)];
        return els.filter(Boolean).map((el) => read(el, props));
    };

    return {
        sources,
        colors: collect('a, button, h1, h2, h3, h4, h5, h6', ['background-color', 'color']),
        fonts: collect('h1, h2, h3, h4, h5, h6, p, a, button', ['font-family']),
    };
}
"""


def first_non_empty(sources: Mapping[str, Any], chain: Iterable[str]) -> str:
    """Return the first non-empty candidate in priority order, or ''."""
    for key in chain:
        value = sources.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ''


def fold_style_reads(
    reads: Iterable[Mapping[str, Any]],
    limit: int,
    skip: Iterable[str] = (),
) -> List[str]:
    """Fold per-element style reads into a de-duplicated, capped list.

    Failed reads and empty or skipped values contribute nothing.

    Args:
        reads: Per-element results from the in-page script
        limit: Maximum number of distinct values
        skip: Values to ignore

    Returns:
        Distinct values in discovery order
    """
    skip = set(skip)
    values: List[str] = []
    for read in reads:
        if not read or not read.get('ok'):
            continue
        for raw in read.get('values') or ():
            value = raw.strip() if isinstance(raw, str) else ''
            if not value or value in skip or value in values:
                continue
            values.append(value)
            if len(values) >= limit:
                return values
    return values


def build_metadata(raw: Mapping[str, Any]) -> PageMetadata:
    """Resolve raw in-page candidates into PageMetadata."""
    sources = raw.get('sources') or {}
    fields = {
        name: first_non_empty(sources, chain)
        for name, chain in FALLBACK_CHAINS.items()
    }
    return PageMetadata(
        # Unset backgrounds compute to rgba(0, 0, 0, 0) and are not brand colors
        colors=fold_style_reads(raw.get('colors') or (), MAX_COLORS, skip=TRANSPARENT_COLORS),
        fonts=fold_style_reads(raw.get('fonts') or (), MAX_FONTS),
        **fields,
    )


async def extract_metadata(page: Page) -> PageMetadata:
    """Harvest title, description, favicon, colors and fonts from the page.

    Args:
        page: Settled page, still open

    Returns:
        PageMetadata

    Raises:
        CaptureError: If the in-page script cannot run at all
    """
    try:
        raw = await page.evaluate(EXTRACT_SCRIPT)
    except PlaywrightError as e:
        raise CaptureError(f"Metadata extraction failed: {e.message}") from e

    metadata = build_metadata(raw or {})
    logger.debug(
        f"Extracted metadata: title={metadata.title!r}, "
        f"{len(metadata.colors)} colors, {len(metadata.fonts)} fonts"
    )
    return metadata
