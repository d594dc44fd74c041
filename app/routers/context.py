import logging

import httpx
from fastapi import APIRouter, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import CONTEXT_RATE_LIMIT
from app.models.page import PageContext
from app.models.request import ContextRequest
from app.services.extractor import extract_page_context
from app.services.fetcher import fetch_html

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["Page context"])


@router.post("/context", response_model=PageContext, summary="Extract the page context of a URL")
@limiter.limit(CONTEXT_RATE_LIMIT)
async def page_context(request: Request, body: ContextRequest) -> PageContext:
    """Fetch *url* and return the title, text, and meta tags copy functions see."""
    url = str(body.url)
    logger.info("Context request received", extra={"url": url})
    return await load_page_context(url, body.selection)


async def load_page_context(url: str, selection: str = "") -> PageContext:
    """Fetch *url* and extract its context, mapping fetch errors to HTTP errors."""
    try:
        html = await fetch_html(url)
    except ValueError as exc:
        logger.warning("Invalid or blocked URL: %s (%s)", url, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except httpx.TimeoutException:
        logger.error("Timeout fetching URL: %s", url)
        raise HTTPException(status_code=504, detail="The target URL timed out.")
    except httpx.HTTPStatusError as exc:
        logger.error("HTTP error fetching URL %s: %s", url, exc)
        raise HTTPException(
            status_code=502, detail=f"Target URL returned HTTP {exc.response.status_code}."
        )
    except (httpx.RequestError, RuntimeError) as exc:
        logger.error("Error fetching URL %s: %s", url, exc)
        raise HTTPException(status_code=502, detail=str(exc))

    return extract_page_context(html, url, selection=selection)
