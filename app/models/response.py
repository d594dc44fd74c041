from typing import Dict, Optional

from pydantic import BaseModel

from app.models.copy_function import FunctionResult
from app.models.page import PageContext


class TemplateInfo(BaseModel):
    id: str
    name: str
    description: str
    code: str
    """Canonical source text, for display in an editor."""


class RenderResponse(BaseModel):
    output: str


class ValidateResponse(BaseModel):
    valid: bool
    fields: Dict[str, str] = {}
    """Expression source of each recognised ``text`` / ``html`` field."""
    error: Optional[str] = None


class UrlExecuteResponse(BaseModel):
    context: PageContext
    result: FunctionResult
