"""Tests for app.services.fetcher.

The network is replaced with ``httpx.MockTransport`` and DNS resolution is
patched out, so nothing leaves the process.
"""

import asyncio
from unittest.mock import patch

import httpx
import pytest

from app.services.fetcher import check_content_type, check_url, fetch_html


def _fetch(handler, url: str = "https://example.com/post") -> str:
    with patch("app.services.fetcher._resolves_to_internal", return_value=False):
        return asyncio.run(fetch_html(url, transport=httpx.MockTransport(handler)))


class TestCheckContentType:
    def test_html_with_charset(self):
        check_content_type("text/html; charset=utf-8")

    def test_xhtml(self):
        check_content_type("application/xhtml+xml")

    def test_missing_header_is_accepted(self):
        check_content_type("")

    def test_case_insensitive(self):
        check_content_type("Text/HTML")

    @pytest.mark.parametrize("content_type", ["application/json", "image/png", "text/plain"])
    def test_non_html_rejected(self, content_type):
        with pytest.raises(RuntimeError, match="Expected an HTML page"):
            check_content_type(content_type)


class TestCheckUrl:
    def test_rejects_non_http_scheme(self):
        with pytest.raises(ValueError, match="not allowed"):
            check_url("ftp://example.com/file")

    def test_rejects_missing_hostname(self):
        with pytest.raises(ValueError, match="hostname"):
            check_url("http:///path")

    def test_rejects_internal_address(self):
        with patch("app.services.fetcher._resolves_to_internal", return_value=True):
            with pytest.raises(ValueError, match="private/internal"):
                check_url("http://intranet.example/")


class TestFetchHtml:
    def test_returns_decoded_html(self):
        def handler(request):
            return httpx.Response(
                200, headers={"content-type": "text/html; charset=utf-8"}, content="<p>café</p>".encode()
            )

        assert _fetch(handler) == "<p>café</p>"

    def test_follows_redirect(self):
        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(301, headers={"location": "/new"})
            return httpx.Response(200, headers={"content-type": "text/html"}, content=b"new")

        assert _fetch(handler, "https://example.com/old") == "new"

    def test_non_html_response_is_rejected(self):
        def handler(request):
            return httpx.Response(200, headers={"content-type": "application/pdf"}, content=b"%PDF")

        with pytest.raises(RuntimeError, match="application/pdf"):
            _fetch(handler)

    def test_http_error_status_raises(self):
        def handler(request):
            return httpx.Response(404, headers={"content-type": "text/html"}, content=b"missing")

        with pytest.raises(httpx.HTTPStatusError):
            _fetch(handler)

    def test_redirect_loop_is_bounded(self):
        def handler(request):
            return httpx.Response(302, headers={"location": "/again"})

        with pytest.raises(RuntimeError, match="Too many redirects"):
            _fetch(handler)
