"""Catalog, classification and rendering endpoints used by the function editor."""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from app.models.copy_function import ClassificationOutcome, FunctionResult
from app.models.request import RenderRequest, SourceRequest, TemplateEvaluateRequest
from app.models.response import RenderResponse, TemplateInfo, ValidateResponse
from app.services.catalog import TemplateDescriptor, get_template, list_templates
from app.services.classifier import classify
from app.services.errors import CopyFunctionError, UnknownTemplate
from app.services.function_parser import parse_function
from app.services.renderer import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Templates"])


def _info(template: TemplateDescriptor) -> TemplateInfo:
    return TemplateInfo(
        id=template.id,
        name=template.name,
        description=template.description,
        code=template.code,
    )


def _lookup(template_id: str) -> TemplateDescriptor:
    try:
        return get_template(template_id)
    except UnknownTemplate as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get("/templates", response_model=List[TemplateInfo], summary="List built-in copy functions")
async def templates() -> List[TemplateInfo]:
    return [_info(t) for t in list_templates()]


@router.get("/templates/{template_id}", response_model=TemplateInfo)
async def template_detail(template_id: str) -> TemplateInfo:
    return _info(_lookup(template_id))


@router.post(
    "/templates/{template_id}/evaluate",
    response_model=FunctionResult,
    response_model_exclude_none=True,
)
async def evaluate_template(template_id: str, body: TemplateEvaluateRequest) -> FunctionResult:
    return _lookup(template_id).evaluate(body.context, body.custom_options)


@router.post(
    "/classify",
    response_model=ClassificationOutcome,
    response_model_by_alias=True,
    summary="Guess which built-in copy function some source text corresponds to",
)
async def classify_source(body: SourceRequest) -> ClassificationOutcome:
    outcome = classify(body.code)
    logger.debug("Classified source as %s", outcome.template_id)
    return outcome


@router.post("/validate", response_model=ValidateResponse, summary="Check a function's shape")
async def validate_source(body: SourceRequest) -> ValidateResponse:
    """Report whether *code* has the supported shape, without running it."""
    try:
        recognized = parse_function(body.code)
    except CopyFunctionError as exc:
        return ValidateResponse(valid=False, error=str(exc))
    return ValidateResponse(valid=True, fields=recognized.fields)


@router.post("/render", response_model=RenderResponse, summary="Render a template")
async def render_template(body: RenderRequest) -> RenderResponse:
    return RenderResponse(output=render(body.template, body.data))
