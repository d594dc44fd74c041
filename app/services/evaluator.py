"""Resolve the expression of a returned ``text``/``html`` field to a string.

Only a closed set of forms is understood: template literals, string literals,
the known ``page`` field references and ``render('<template>', page)`` calls,
joined with ``+`` and chained with ``||``. Nothing is executed; an operand in
any other shape degrades to its own text with one layer of quotes removed
and any known field references substituted.
"""

import logging
import re
from collections.abc import Callable
from typing import Dict, List, Optional, Tuple

from app.models.page import PageContext
from app.services.renderer import render
from app.services.scanner import find_closing, split_top_level

logger = logging.getLogger(__name__)

FieldGetter = Callable[[PageContext], str]

FIELDS: Dict[str, FieldGetter] = {
    "page.title": lambda page: page.title,
    "page.url": lambda page: page.url,
    "page.selection": lambda page: page.selection or "",
    "page.meta.description": lambda page: page.meta_value("description"),
    "page.meta?.description": lambda page: page.meta_value("description"),
}

_TEMPLATE_LITERAL_RE = re.compile(r"^`([\s\S]*)`$")
_STRING_LITERAL_RE = re.compile(r"^(['\"])([\s\S]*)\1$")
_INTERPOLATION_RE = re.compile(r"\\(.)|\$\{\s*([^}]*?)\s*\}")
_FIELD_REF_RE = re.compile(r"page\.(?:title|url|selection|meta\??\.description)\b")
_RENDER_CALL_RE = re.compile(r"^render\(\s*(['\"`])([\s\S]*?)\1\s*,\s*page\s*\)$")
_ESCAPE_RE = re.compile(r"\\(.)")

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


def _unescape(body: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def _template_literal(operand: str, page: PageContext) -> Optional[str]:
    match = _TEMPLATE_LITERAL_RE.match(operand)
    if not match:
        return None

    # One left-to-right pass: an escaped \$ is consumed before it can start
    # an interpolation, and substituted page values are never unescaped.
    def _interpolate(m: re.Match) -> str:
        escaped = m.group(1)
        if escaped is not None:
            return _ESCAPES.get(escaped, escaped)
        getter = FIELDS.get(m.group(2))
        return getter(page) if getter else m.group(0)

    return _INTERPOLATION_RE.sub(_interpolate, match.group(1))


def _string_literal(operand: str, page: PageContext) -> Optional[str]:
    match = _STRING_LITERAL_RE.match(operand)
    if not match:
        return None
    return _unescape(match.group(2))


def _field_reference(operand: str, page: PageContext) -> Optional[str]:
    getter = FIELDS.get(operand)
    return getter(page) if getter else None


def _render_call(operand: str, page: PageContext) -> Optional[str]:
    match = _RENDER_CALL_RE.match(operand)
    if not match:
        return None
    return render(_unescape(match.group(2)), page.template_data())


def _group(operand: str, page: PageContext) -> Optional[str]:
    if not operand.startswith("(") or find_closing(operand, 0) != len(operand) - 1:
        return None
    return evaluate(operand[1:-1], page)


Form = Tuple[str, Callable[[str, PageContext], Optional[str]]]

# Resolution order for a single operand.
FORMS: List[Form] = [
    ("template-literal", _template_literal),
    ("string-literal", _string_literal),
    ("field", _field_reference),
    ("render-call", _render_call),
    ("group", _group),
]


def _strip_quotes(operand: str) -> str:
    if len(operand) >= 2 and operand[0] in "'\"`" and operand[-1] == operand[0]:
        return operand[1:-1]
    return operand


def evaluate_operand(operand: str, page: PageContext) -> str:
    operand = operand.strip()
    for _, resolve in FORMS:
        value = resolve(operand, page)
        if value is not None:
            return value
    logger.warning("Unrecognised expression %r, using it literally", operand)
    # Known field references are still resolved inside the literal text.
    return _FIELD_REF_RE.sub(lambda m: FIELDS[m.group(0)](page), _strip_quotes(operand))


def _concatenation(expression: str, page: PageContext) -> str:
    return "".join(
        evaluate_operand(operand, page) for operand in split_top_level(expression, "+")
    )


def evaluate(expression: str, page: PageContext) -> str:
    """Resolve *expression* against *page* without executing it.

    ``a || b`` yields the first non-empty alternative, or the last one when
    all are empty.
    """
    alternatives = split_top_level(expression.strip().rstrip(";"), "||")
    value = ""
    for alternative in alternatives:
        value = _concatenation(alternative, page)
        if value:
            break
    return value
