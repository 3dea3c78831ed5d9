"""
Render structured content as display markup.

Templates are autoescaped, so every string coming from the user or a
content source is escaped on the way out. Interactive pieces (day
toggles, document previews) are plain data attributes; the page script
decides what they do.
"""

import uuid
from pathlib import Path
from urllib.parse import urlsplit

from jinja2 import Environment, FileSystemLoader, select_autoescape

from content.models import ExamSet, MaterialList, Timetable

TEMPLATE_DIR = Path(__file__).parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

PREVIEW_SCHEMES = ("", "http", "https")


def document_ref(ref):
    """Return `ref` when it is safe to open in a new tab, else None."""
    if not ref:
        return None
    try:
        scheme = urlsplit(ref).scheme
    except ValueError:
        return None
    return ref if scheme in PREVIEW_SCHEMES else None


_env.filters["document_ref"] = document_ref

TEMPLATES = {
    Timetable: "timetable.html",
    ExamSet: "exams.html",
    MaterialList: "materials.html",
}


def render_content(content, element_prefix=None) -> str:
    """
    `element_prefix` keeps element ids unique across messages on one page.
    """
    template_name = TEMPLATES.get(type(content))
    if template_name is None:
        raise TypeError(f"No template for {type(content).__name__}")

    prefix = element_prefix or f"c{uuid.uuid4().hex[:8]}"
    template = _env.get_template(template_name)
    return template.render(content=content, prefix=prefix).strip()
