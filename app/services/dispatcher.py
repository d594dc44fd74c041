"""Run a stored copy function against a page context.

Non-empty ``code`` always wins and goes through the structural extractor;
otherwise the function's ``templateId`` selects a catalog entry.
"""

import logging

from app.models.copy_function import CopyFunction, FunctionResult
from app.models.page import PageContext
from app.services.catalog import execute_template
from app.services.errors import CopyFunctionError, ExecutionFailed, NoExecutableFunction
from app.services.function_parser import extract

logger = logging.getLogger(__name__)


def execute_copy_function(func: CopyFunction, page: PageContext) -> FunctionResult:
    """Return the clipboard payload *func* produces for *page*.

    Raises:
        ExecutionFailed: wrapping the extractor or catalog error that stopped
            execution (available as ``reason``).
        NoExecutableFunction: if *func* has neither code nor a template id.
    """
    if func.code and func.code.strip():
        logger.info("Executing user function", extra={"function_id": func.id, "url": page.url})
        try:
            return extract(func.code, page)
        except CopyFunctionError as exc:
            logger.warning("User function %s rejected: %s", func.id, exc)
            raise ExecutionFailed(exc) from exc

    if func.template_id:
        logger.info(
            "Executing template function",
            extra={"function_id": func.id, "template_id": func.template_id, "url": page.url},
        )
        try:
            return execute_template(func.template_id, page, func.custom_options)
        except CopyFunctionError as exc:
            logger.warning("Template function %s failed: %s", func.id, exc)
            raise ExecutionFailed(exc) from exc

    raise NoExecutableFunction(f"Function {func.id!r} has no code and no template")
