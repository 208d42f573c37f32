"""
HTML helpers built on bleach for turning stored body content into plain text.
"""
from __future__ import annotations

import html

import bleach


def strip_tags(html_content: str | None) -> str:
    """
    Remove every HTML tag and comment, keeping the text between them.

    Entities escaped by bleach are decoded again so the result is plain text
    suitable for excerpts and JSON output.
    """
    if not html_content:
        return ""

    cleaned = bleach.clean(
        html_content,
        tags=[],
        attributes={},
        strip=True,
        strip_comments=True,
    )
    return html.unescape(cleaned).strip()
