from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from app.models.copy_function import CopyFunction
from app.models.page import PageContext


class ExecuteRequest(BaseModel):
    function: CopyFunction
    context: PageContext


class ContextRequest(BaseModel):
    url: HttpUrl
    selection: str = Field(
        default="",
        description="Text to expose as the user's selection on the fetched page.",
    )


class UrlExecuteRequest(ContextRequest):
    function: CopyFunction


class TemplateEvaluateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    context: PageContext
    custom_options: Optional[Dict[str, Any]] = Field(default=None, alias="customOptions")


class SourceRequest(BaseModel):
    code: str = Field(description="Copy-function source text, e.g. (page) => { return { ... } }")


class RenderRequest(BaseModel):
    template: str
    data: Dict[str, Any] = {}
