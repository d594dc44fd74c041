"""Tests for the HTTP API.

The page fetcher is replaced with mocks so the tests run without network
access.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers import context as context_router
from app.routers import execute as execute_router

client = TestClient(app)

_PAGE_HTML = """
<html>
<head>
  <title>Fetched Page</title>
  <meta name="description" content="Fetched description">
</head>
<body><p>Hello</p></body>
</html>
"""

_CONTEXT = {"title": "T", "url": "U", "selection": "", "content": "", "meta": {}}


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Clear the slowapi in-memory counters before every test."""
    execute_router.limiter._storage.reset()
    context_router.limiter._storage.reset()
    yield


def _patch_fetch(**kwargs):
    return patch("app.routers.context.fetch_html", new=AsyncMock(**kwargs))


# ---------------------------------------------------------------------------
# /execute
# ---------------------------------------------------------------------------

class TestExecute:
    def test_template_function(self):
        payload = {"function": {"id": "f", "code": "", "templateId": "markdown-link"}, "context": _CONTEXT}
        resp = client.post("/execute", json=payload)

        assert resp.status_code == 200
        assert resp.json() == {"text": "[T](U)"}

    def test_user_code(self):
        payload = {
            "function": {"id": "f", "code": '(page) => { return { text: page.title + "\\n" + page.url } }'},
            "context": _CONTEXT,
        }
        resp = client.post("/execute", json=payload)

        assert resp.status_code == 200
        assert resp.json() == {"text": "T\nU"}

    def test_invalid_code_is_422(self):
        payload = {"function": {"id": "f", "code": "alert(1)"}, "context": _CONTEXT}
        resp = client.post("/execute", json=payload)

        assert resp.status_code == 422
        assert "Failed to execute function" in resp.json()["detail"]

    def test_nothing_to_execute_is_422(self):
        resp = client.post("/execute", json={"function": {"id": "f"}, "context": _CONTEXT})
        assert resp.status_code == 422

    def test_missing_context_is_rejected(self):
        resp = client.post("/execute", json={"function": {"id": "f"}})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# /templates, /classify, /validate, /render
# ---------------------------------------------------------------------------

class TestTemplates:
    def test_list(self):
        resp = client.get("/templates")

        assert resp.status_code == 200
        ids = [t["id"] for t in resp.json()]
        assert ids[0] == "rich-text-link"
        assert "page-summary" in ids

    def test_detail(self):
        resp = client.get("/templates/title-and-url")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Title and URL"

    def test_unknown_template_is_404(self):
        assert client.get("/templates/nope").status_code == 404

    def test_evaluate_with_options(self):
        resp = client.post(
            "/templates/custom-template/evaluate",
            json={"context": _CONTEXT, "customOptions": {"template": "{{url}}!"}},
        )
        assert resp.status_code == 200
        assert resp.json() == {"text": "U!"}


class TestEditorHelpers:
    def test_classify(self):
        resp = client.post("/classify", json={"code": "render('{{title}}', page)"})

        assert resp.status_code == 200
        assert resp.json() == {"templateId": "custom-template", "customOptions": {"template": "{{title}}"}}

    def test_validate_valid(self):
        resp = client.post("/validate", json={"code": "(page) => { return { text: page.url } }"})
        assert resp.json() == {"valid": True, "fields": {"text": "page.url"}, "error": None}

    def test_validate_invalid(self):
        data = client.post("/validate", json={"code": "(page) => { }"}).json()
        assert data["valid"] is False
        assert data["error"]

    def test_render(self):
        resp = client.post("/render", json={"template": "{{a}} {{&a}}", "data": {"a": "<i>"}})
        assert resp.json() == {"output": "&lt;i&gt; <i>"}


# ---------------------------------------------------------------------------
# /context and /execute/url
# ---------------------------------------------------------------------------

class TestContext:
    def test_extracts_fetched_page(self):
        with _patch_fetch(return_value=_PAGE_HTML):
            resp = client.post("/context", json={"url": "https://example.com/post", "selection": "sel"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Fetched Page"
        assert data["selection"] == "sel"
        assert data["meta"]["description"] == "Fetched description"

    def test_blocked_url_is_400(self):
        with _patch_fetch(side_effect=ValueError("Requests to private/internal addresses are not allowed.")):
            resp = client.post("/context", json={"url": "http://localhost/"})
        assert resp.status_code == 400

    def test_timeout_is_504(self):
        with _patch_fetch(side_effect=httpx.ReadTimeout("slow")):
            resp = client.post("/context", json={"url": "https://example.com/slow"})
        assert resp.status_code == 504

    def test_oversized_page_is_502(self):
        with _patch_fetch(side_effect=RuntimeError("Page exceeds the maximum allowed size.")):
            resp = client.post("/context", json={"url": "https://example.com/big"})
        assert resp.status_code == 502


class TestExecuteUrl:
    def test_runs_function_on_fetched_page(self):
        payload = {
            "url": "https://example.com/post",
            "function": {"id": "f", "templateId": "page-summary"},
        }
        with _patch_fetch(return_value=_PAGE_HTML):
            resp = client.post("/execute/url", json=payload)

        assert resp.status_code == 200
        data = resp.json()
        assert data["context"]["title"] == "Fetched Page"
        assert data["result"]["text"] == (
            "Title: Fetched Page\nURL: https://example.com/post\nDescription: Fetched description"
        )

    def test_fetch_error_skips_execution(self):
        payload = {"url": "https://example.com/post", "function": {"id": "f", "code": "bad"}}
        with _patch_fetch(side_effect=httpx.ConnectError("refused")):
            resp = client.post("/execute/url", json=payload)
        assert resp.status_code == 502


def test_health_check():
    assert client.get("/").json() == {"message": "Hello from Concopy"}
