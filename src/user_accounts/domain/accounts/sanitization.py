"""Sanitization helpers for free-text account fields."""

from __future__ import annotations

import html


def sanitize_text(value: str) -> str:
    """Trim surrounding whitespace and HTML-escape one field value.

    The value is unescaped before escaping so that sanitizing text that was
    already sanitized leaves it unchanged.
    """

    return html.escape(html.unescape(value.strip()), quote=True)
