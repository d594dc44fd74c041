"""Built-in copy functions users can pick instead of writing their own.

Each entry pairs the source text shown in the editor with a plain Python
evaluator. The source text is only displayed and classified, never run.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, List, Optional

from app.models.copy_function import FunctionResult
from app.models.page import PageContext
from app.services.errors import UnknownTemplate
from app.services.renderer import render

Options = Optional[Mapping[str, Any]]
Evaluator = Callable[[PageContext, Options], FunctionResult]

DEFAULT_CUSTOM_TEMPLATE = "{{title}} - {{url}}"
_LINK_TEMPLATE = '<a href="{{&url}}">{{title}}</a>'


@dataclass(frozen=True)
class TemplateDescriptor:
    id: str
    name: str
    description: str
    code: str
    evaluate: Evaluator


def _rich_text_link(page: PageContext, options: Options = None) -> FunctionResult:
    return FunctionResult(html=render(_LINK_TEMPLATE, page.template_data()), text=page.title)


def _markdown_link(page: PageContext, options: Options = None) -> FunctionResult:
    return FunctionResult(text=f"[{page.title}]({page.url})")


def _title_and_url(page: PageContext, options: Options = None) -> FunctionResult:
    return FunctionResult(text=page.title + "\n" + page.url)


def _custom_template(page: PageContext, options: Options = None) -> FunctionResult:
    template = (options or {}).get("template")
    if not isinstance(template, str) or not template:
        template = DEFAULT_CUSTOM_TEMPLATE
    return FunctionResult(text=render(template, page.template_data()))


def _selected_text(page: PageContext, options: Options = None) -> FunctionResult:
    return FunctionResult(text=page.selection or page.title)


def _page_summary(page: PageContext, options: Options = None) -> FunctionResult:
    summary = [
        "Title: " + page.title,
        "URL: " + page.url,
    ]
    description = page.meta_value("description")
    if description:
        summary.append("Description: " + description)
    return FunctionResult(text="\n".join(summary))


_CATALOG: List[TemplateDescriptor] = [
    TemplateDescriptor(
        id="rich-text-link",
        name="Rich Text Link",
        description="Create a rich text link with title and URL",
        code=(
            "(page) => {\n"
            "  return {\n"
            "    html: render('<a href=\"{{&url}}\">{{title}}</a>', page),\n"
            "    text: page.title,\n"
            "  };\n"
            "}"
        ),
        evaluate=_rich_text_link,
    ),
    TemplateDescriptor(
        id="markdown-link",
        name="Markdown Link",
        description="Create a markdown-formatted link",
        code=(
            "(page) => {\n"
            "  return {\n"
            "    text: `[${page.title}](${page.url})`,\n"
            "  };\n"
            "}"
        ),
        evaluate=_markdown_link,
    ),
    TemplateDescriptor(
        id="title-and-url",
        name="Title and URL",
        description="Copy page title and URL separately",
        code=(
            "(page) => {\n"
            "  return {\n"
            '    text: page.title + "\\n" + page.url,\n'
            "  };\n"
            "}"
        ),
        evaluate=_title_and_url,
    ),
    TemplateDescriptor(
        id="custom-template",
        name="Custom Template",
        description="Use a custom template with page data",
        code=(
            "(page) => {\n"
            "  // Custom template - edit this\n"
            '  const template = "{{title}} - {{url}}";\n'
            "  return {\n"
            "    text: render(template, page),\n"
            "  };\n"
            "}"
        ),
        evaluate=_custom_template,
    ),
    TemplateDescriptor(
        id="selected-text",
        name="Selected Text",
        description="Copy selected text or page title if nothing selected",
        code=(
            "(page) => {\n"
            "  return {\n"
            "    text: page.selection || page.title,\n"
            "  };\n"
            "}"
        ),
        evaluate=_selected_text,
    ),
    TemplateDescriptor(
        id="page-summary",
        name="Page Summary",
        description="Create a summary with title, URL, and description",
        code=(
            "(page) => {\n"
            "  const summary = [\n"
            '    "Title: " + page.title,\n'
            '    "URL: " + page.url,\n'
            "  ];\n"
            "\n"
            "  if (page.meta?.description) {\n"
            '    summary.push("Description: " + page.meta.description);\n'
            "  }\n"
            "\n"
            "  return {\n"
            '    text: summary.join("\\n"),\n'
            "  };\n"
            "}"
        ),
        evaluate=_page_summary,
    ),
]

TEMPLATES: Mapping[str, TemplateDescriptor] = MappingProxyType({t.id: t for t in _CATALOG})


def get_template(template_id: str) -> TemplateDescriptor:
    """Return the catalog entry for *template_id* or raise :class:`UnknownTemplate`."""
    try:
        return TEMPLATES[template_id]
    except KeyError:
        raise UnknownTemplate(template_id) from None


def list_templates() -> List[TemplateDescriptor]:
    return list(TEMPLATES.values())


def execute_template(
    template_id: str, page: PageContext, custom_options: Options = None
) -> FunctionResult:
    """Run the catalog entry *template_id* against *page*."""
    return get_template(template_id).evaluate(page, custom_options)
