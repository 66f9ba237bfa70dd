"""Sample data shared across PageSnap tests."""

# Minimal PNG signature followed by an IHDR chunk header; enough for byte checks
FAKE_PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" + b"\x00" * 17

SAMPLE_RAW_METADATA = {
    "sources": {
        "title_element": "Example Domain",
        "og_title": "OG Example",
        "twitter_title": "",
        "meta_description": "",
        "og_description": "An example page",
        "twitter_description": "Tweet description",
        "icon": "",
        "shortcut_icon": "https://example.com/favicon.ico",
        "apple_touch_icon": "https://example.com/apple.png",
    },
    "colors": [
        {"ok": True, "values": ["rgba(0, 0, 0, 0)", "rgb(0, 0, 0)"]},
        {"ok": False},
        {"ok": True, "values": ["rgb(255, 255, 255)", "rgb(56, 72, 143)"]},
    ],
    "fonts": [
        {"ok": True, "values": ["Inter, sans-serif"]},
        {"ok": True, "values": ["Georgia, serif"]},
        {"ok": False},
    ],
}
