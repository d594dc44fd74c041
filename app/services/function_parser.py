"""Recognise the ``(page) => { return { ... } }`` shape of a user copy function.

The source is matched structurally: the function literal, then the returned
object literal, then its ``text`` and ``html`` entries. Each entry's
expression is handed to :mod:`app.services.evaluator`.
"""

import re
from dataclasses import dataclass, field
from typing import Dict

from app.models.copy_function import FunctionResult
from app.models.page import PageContext
from app.services.errors import InvalidFormat, MissingReturn
from app.services.evaluator import evaluate
from app.services.scanner import find_closing, split_top_level, strip_comments

_FUNCTION_RE = re.compile(r"^\s*\(\s*page\s*\)\s*=>\s*\{(?P<body>[\s\S]*)\}\s*;?\s*$")
_RETURN_RE = re.compile(r"\breturn\s*(?=\{)")
_ENTRY_RE = re.compile(r"^\s*(['\"]?)(?P<key>\w+)\1\s*:\s*(?P<expr>[\s\S]*?)\s*$")

RESULT_FIELDS = ("text", "html")


@dataclass(frozen=True)
class RecognizedFunction:
    """Field expressions found in the returned object, keyed by field name."""

    fields: Dict[str, str] = field(default_factory=dict)


def parse_function(code: str) -> RecognizedFunction:
    """Locate the ``text``/``html`` expressions of *code* without evaluating them.

    Raises:
        InvalidFormat: if *code* is not a ``(page) => { ... }`` literal.
        MissingReturn: if the body has no ``return { ... }`` statement.
    """
    match = _FUNCTION_RE.match(strip_comments(code))
    if not match:
        raise InvalidFormat("Function must have the form (page) => { ... }")
    body = match.group("body")

    fields_source = None
    for ret in _RETURN_RE.finditer(body):
        open_index = ret.end()
        close_index = find_closing(body, open_index)
        if close_index is not None:
            fields_source = body[open_index + 1 : close_index]
            break
    if fields_source is None:
        raise MissingReturn("Function must return an object literal: return { ... }")

    fields: Dict[str, str] = {}
    for entry in split_top_level(fields_source, ","):
        entry_match = _ENTRY_RE.match(entry)
        if not entry_match:
            continue
        key = entry_match.group("key")
        if key in RESULT_FIELDS and key not in fields:
            fields[key] = entry_match.group("expr")
    return RecognizedFunction(fields=fields)


def extract(code: str, page: PageContext) -> FunctionResult:
    """Produce the :class:`FunctionResult` described by *code* for *page*.

    Fields missing from the returned object are left unset; a function that
    returns neither ``text`` nor ``html`` yields an empty result.
    """
    recognized = parse_function(code)
    return FunctionResult(
        **{name: evaluate(expr, page) for name, expr in recognized.fields.items()}
    )
