"""Quote- and bracket-aware scanning over copy-function source text.

These helpers never interpret the source; they only find separators and
closing brackets that sit outside string literals and nested brackets.
"""

from typing import Iterator, List, Optional, Tuple

_QUOTES = "'\"`"
_OPENERS = "([{"
_CLOSERS = ")]}"


def _walk(source: str, start: int = 0) -> Iterator[Tuple[int, int]]:
    """Yield ``(index, depth)`` for every character outside string literals.

    Depth is the bracket nesting level *before* the character is applied.
    """
    depth = 0
    quote: Optional[str] = None
    i = start
    while i < len(source):
        ch = source[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        else:
            yield i, depth
            if ch in _OPENERS:
                depth += 1
            elif ch in _CLOSERS:
                depth -= 1
        i += 1


def split_top_level(source: str, separator: str) -> List[str]:
    """Split *source* on *separator* where it is not quoted or bracketed."""
    parts: List[str] = []
    start = 0
    skip_until = 0
    for i, depth in _walk(source):
        if i < skip_until or depth != 0:
            continue
        if source.startswith(separator, i):
            parts.append(source[start:i])
            start = i + len(separator)
            skip_until = start
    parts.append(source[start:])
    return parts


def find_closing(source: str, open_index: int) -> Optional[int]:
    """Return the index of the bracket closing the one at *open_index*.

    ``None`` when the bracket is never closed.
    """
    for i, depth in _walk(source, open_index):
        if source[i] in _CLOSERS and depth == 1:
            return i
    return None


def strip_comments(source: str) -> str:
    """Remove ``// ...`` and ``/* ... */`` comments that sit outside string literals.

    Line comments keep their terminating newline; a block comment becomes a
    single space.
    """
    out: List[str] = []
    quote: Optional[str] = None
    i = 0
    while i < len(source):
        ch = source[i]
        if quote:
            out.append(ch)
            if ch == "\\" and i + 1 < len(source):
                out.append(source[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
        elif source.startswith("//", i):
            end = source.find("\n", i)
            if end == -1:
                break
            i = end
            continue
        elif source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end == -1:
                break
            out.append(" ")
            i = end + 2
            continue
        else:
            if ch in _QUOTES:
                quote = ch
            out.append(ch)
        i += 1
    return "".join(out)
