from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class FunctionResult(BaseModel):
    """Clipboard payload produced by a copy function.

    Callers prefer ``html`` and use ``text`` as the plain-text fallback.
    """

    text: Optional[str] = None
    html: Optional[str] = None

    def is_empty(self) -> bool:
        return self.text is None and self.html is None


class CopyFunction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    description: str = ""
    code: str = ""
    template_id: Optional[str] = Field(default=None, alias="templateId")
    custom_options: Optional[Dict[str, Any]] = Field(default=None, alias="customOptions")
    # Presentation and bookkeeping fields, ignored by the engine.
    url_pattern: Optional[str] = Field(default=None, alias="urlPattern")
    background_color: Optional[str] = Field(default=None, alias="backgroundColor")
    text_color: Optional[str] = Field(default=None, alias="textColor")
    created_at: Optional[int] = Field(default=None, alias="createdAt")
    updated_at: Optional[int] = Field(default=None, alias="updatedAt")


class ClassificationOutcome(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    template_id: str = Field(alias="templateId")
    custom_options: Optional[Dict[str, Any]] = Field(default=None, alias="customOptions")
