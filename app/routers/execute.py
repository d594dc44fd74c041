"""Copy-function execution endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import CONTEXT_RATE_LIMIT, EXECUTE_RATE_LIMIT
from app.models.copy_function import CopyFunction, FunctionResult
from app.models.page import PageContext
from app.models.request import ExecuteRequest, UrlExecuteRequest
from app.models.response import UrlExecuteResponse
from app.routers.context import load_page_context
from app.services.dispatcher import execute_copy_function
from app.services.errors import CopyFunctionError

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["Execute"])


@router.post(
    "/execute",
    response_model=FunctionResult,
    response_model_exclude_none=True,
    summary="Run a copy function against a page context",
)
@limiter.limit(EXECUTE_RATE_LIMIT)
async def execute(request: Request, body: ExecuteRequest) -> FunctionResult:
    return _run(body.function, body.context)


@router.post(
    "/execute/url",
    response_model=UrlExecuteResponse,
    summary="Fetch a page and run a copy function against it",
    description=(
        "Fetches `url`, extracts its page context (title, text, meta tags) "
        "and runs `function` against it. `selection` is passed through as "
        "the page's selected text."
    ),
)
@limiter.limit(CONTEXT_RATE_LIMIT)
async def execute_url(request: Request, body: UrlExecuteRequest) -> UrlExecuteResponse:
    url = str(body.url)
    logger.info("Execute-by-URL request received", extra={"url": url, "function_id": body.function.id})
    context = await load_page_context(url, body.selection)
    return UrlExecuteResponse(context=context, result=_run(body.function, context))


def _run(func: CopyFunction, context: PageContext) -> FunctionResult:
    """Execute *func* and surface engine errors as 422 responses."""
    try:
        return execute_copy_function(func, context)
    except CopyFunctionError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
