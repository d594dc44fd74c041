"""Mustache-style micro template renderer.

``{{name}}`` substitutes the HTML-escaped value of ``name``; ``{{&name}}``
substitutes it raw. Unknown names render as an empty string and anything that
is not a complete token (``{{title``, ``{{ title }}``) is left untouched.
"""

import html
import re
from typing import Any, Mapping

_TOKEN_RE = re.compile(r"\{\{(&?)(\w+)\}\}")


def escape_html(value: str) -> str:
    """Escape ``& < > " '`` so *value* is safe as HTML text content."""
    return html.escape(value, quote=True)


def render(template: str, data: Mapping[str, Any]) -> str:
    """Return *template* with every placeholder token resolved against *data*."""

    def _substitute(match: re.Match) -> str:
        raw, key = match.group(1), match.group(2)
        value = data.get(key)
        text = "" if value is None else str(value)
        return text if raw else escape_html(text)

    return _TOKEN_RE.sub(_substitute, template)
