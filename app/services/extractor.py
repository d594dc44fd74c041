"""Build a :class:`PageContext` from a fetched HTML document."""

from typing import Dict, Optional

from bs4 import BeautifulSoup

from app.models.page import PageContext

# Subtrees whose text never shows up in the rendered page
_INVISIBLE_TAGS = ("script", "style", "noscript", "template", "svg", "canvas")

# Normalised meta key -> tag names to try, in order
_META_ALIASES = {
    "description": ("description", "og:description"),
    "keywords": ("keywords",),
    "author": ("author", "article:author"),
}


def _collect_meta_tags(soup: BeautifulSoup) -> Dict[str, str]:
    tags: Dict[str, str] = {}
    for meta in soup.find_all("meta"):
        name = meta.get("name") or meta.get("property")
        content = meta.get("content")
        if name and content:
            tags[str(name)] = str(content)
    return tags


def _normalise_meta(tags: Dict[str, str]) -> Dict[str, Optional[str]]:
    meta: Dict[str, Optional[str]] = {}
    for key, aliases in _META_ALIASES.items():
        meta[key] = next((tags[a] for a in aliases if tags.get(a)), None)
    # Raw tags are layered on top, so an explicit tag wins over an alias.
    meta.update(tags)
    return meta


def _extract_title(soup: BeautifulSoup) -> str:
    title_tag = soup.find("title")
    if title_tag:
        return title_tag.get_text(strip=True)
    return ""


def _extract_text(soup: BeautifulSoup) -> str:
    for tag in soup.find_all(_INVISIBLE_TAGS):
        tag.decompose()
    body = soup.find("body") or soup
    lines = (line.strip() for line in body.get_text("\n").splitlines())
    return "\n".join(line for line in lines if line)


def extract_page_context(html: str, url: str, selection: str = "") -> PageContext:
    """Snapshot *html* (served from *url*) as the context copy functions see.

    *selection* stands in for the user's text selection, which a fetched
    document cannot carry.
    """
    soup = BeautifulSoup(html, "lxml")
    title = _extract_title(soup)
    meta = _normalise_meta(_collect_meta_tags(soup))

    return PageContext(
        title=title,
        url=url,
        selection=selection,
        content=_extract_text(soup),
        meta=meta,
    )
