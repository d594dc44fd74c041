from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

_CORE_FIELDS = ("title", "url", "selection", "content")


class PageContext(BaseModel):
    """Read-only snapshot of the page a copy function runs against."""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    selection: str = ""
    content: str = ""
    meta: Dict[str, Optional[str]] = {}
    """Values collected from ``<meta name>`` / ``<meta property>`` tags.

    ``description``, ``keywords`` and ``author`` are normalised from their
    common alternate tag names; every raw tag is kept as well.
    """

    def meta_value(self, key: str) -> str:
        return self.meta.get(key) or ""

    def template_data(self) -> Dict[str, str]:
        """Flat mapping used when a template is rendered against this page.

        Meta keys are merged in when they are plain identifiers and do not
        shadow one of the core fields.
        """
        data = {name: getattr(self, name) for name in _CORE_FIELDS}
        for key, value in self.meta.items():
            if key.isidentifier() and key not in data:
                data[key] = value or ""
        return data
