import ipaddress
import socket
from typing import Optional
from urllib.parse import urljoin, urlparse

import httpx

from app.config import FETCH_TIMEOUT, MAX_CONTENT_SIZE, MAX_REDIRECTS

ALLOWED_SCHEMES = {"http", "https"}
USER_AGENT = "concopy/1.0 (+page-context)"
HTML_CONTENT_TYPES = {"text/html", "application/xhtml+xml"}


def _resolves_to_internal(hostname: str) -> bool:
    """Return True if any address *hostname* resolves to is private or local."""
    try:
        infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False

    for info in infos:
        # Drop IPv6 zone ids ("fe80::1%eth0")
        raw_ip = info[4][0].split("%")[0]
        try:
            addr = ipaddress.ip_address(raw_ip)
        except ValueError:
            continue
        if addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved:
            return True
    return False


def check_url(url: str) -> None:
    """Raise ValueError unless *url* is a public http(s) address."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")
    if not parsed.hostname:
        raise ValueError("URL must have a valid hostname.")
    if _resolves_to_internal(parsed.hostname):
        raise ValueError("Requests to private/internal addresses are not allowed.")


def check_content_type(content_type: str) -> None:
    """Raise RuntimeError unless *content_type* names an HTML document.

    A missing header is accepted; servers commonly omit it for HTML.
    """
    if not content_type:
        return
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type not in HTML_CONTENT_TYPES:
        raise RuntimeError(f"Expected an HTML page, got '{media_type}'.")


async def _read_html(response: httpx.Response) -> str:
    check_content_type(response.headers.get("content-type", ""))

    declared = response.headers.get("content-length")
    if declared and int(declared) > MAX_CONTENT_SIZE:
        raise RuntimeError("Page exceeds the maximum allowed size.")

    body = bytearray()
    async for chunk in response.aiter_bytes():
        body.extend(chunk)
        if len(body) > MAX_CONTENT_SIZE:
            raise RuntimeError("Page exceeds the maximum allowed size.")

    return bytes(body).decode(response.encoding or "utf-8", errors="replace")


async def fetch_html(url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """Download the HTML document at *url*.

    Redirects are followed by hand so every hop passes :func:`check_url`.
    *transport* replaces the network layer, e.g. with ``httpx.MockTransport``.

    Raises:
        ValueError: if a URL on the redirect chain is not allowed.
        httpx.HTTPError: on network or HTTP errors.
        RuntimeError: if the response is not HTML, is larger than
            ``MAX_CONTENT_SIZE``, or the redirect chain is too long.
    """
    check_url(url)

    current_url = url
    headers = {"User-Agent": USER_AGENT, "Accept": "text/html,application/xhtml+xml"}
    async with httpx.AsyncClient(
        follow_redirects=False, timeout=FETCH_TIMEOUT, headers=headers, transport=transport
    ) as client:
        for _ in range(MAX_REDIRECTS + 1):
            async with client.stream("GET", current_url) as response:
                if not response.is_redirect:
                    response.raise_for_status()
                    return await _read_html(response)

                current_url = urljoin(current_url, response.headers.get("location", ""))
                check_url(current_url)

    raise RuntimeError("Too many redirects.")
