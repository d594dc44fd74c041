"""Map free-form copy-function source onto the closest catalog entry.

Classification is an ordered rule table evaluated top to bottom; the first
rule whose predicate matches decides the template. It only looks at the
source text, so exotic but valid functions may land on ``custom-template``.
"""

import re
from collections.abc import Callable
from typing import Dict, List, Optional, Tuple

from app.models.copy_function import ClassificationOutcome

_MARKDOWN_LINK_RE = re.compile(r"\[[^\]]*\]\(")

# render('<literal>' ... : the first argument of a render() call
_RENDER_LITERAL_RE = re.compile(r"render\(\s*['\"`]([^'\"`]+)['\"`]")

# page.title + ' - ' + page.url
_CONCAT_RE = re.compile(r"page\.title\s*\+\s*['\"`]([^'\"`]+)['\"`]\s*\+\s*page\.url")

Rule = Tuple[str, Callable[[str], bool]]

RULES: List[Rule] = [
    ("rich-text-link", lambda code: "render(" in code and "<a href=" in code),
    ("markdown-link", lambda code: _MARKDOWN_LINK_RE.search(code) is not None),
    ("selected-text", lambda code: "page.selection" in code),
    ("title-and-url", lambda code: "page.title" in code and "page.url" in code),
]

FALLBACK_TEMPLATE_ID = "custom-template"


def extract_template(code: str) -> Optional[str]:
    """Best-effort guess of the template string a custom function renders."""
    match = _RENDER_LITERAL_RE.search(code)
    if match:
        return match.group(1)

    match = _CONCAT_RE.search(code)
    if match:
        return "{{title}}" + match.group(1) + "{{url}}"

    return None


def classify(code: Optional[str]) -> ClassificationOutcome:
    code = code or ""
    for template_id, matches in RULES:
        if matches(code):
            return ClassificationOutcome(template_id=template_id)

    options: Optional[Dict[str, str]] = None
    template = extract_template(code)
    if template is not None:
        options = {"template": template}
    return ClassificationOutcome(template_id=FALLBACK_TEMPLATE_ID, custom_options=options)
