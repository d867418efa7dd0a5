"""
Services package - business logic.
"""

from app.services.document import HostDocument
from app.services.converter import (
    convert_paragraph,
    build_html_lines,
    export_to_html,
    strip_html,
    import_from_html,
    import_from_document,
)
from app.services.wireframe import read_wireframe, insert_prompt, build_html_page, page_filename
from app.services.copywriter import LLMCopywriter, CopyDraft, draft_copy

__all__ = [
    "HostDocument",
    "convert_paragraph",
    "build_html_lines",
    "export_to_html",
    "strip_html",
    "import_from_html",
    "import_from_document",
    "read_wireframe",
    "insert_prompt",
    "build_html_page",
    "page_filename",
    "LLMCopywriter",
    "CopyDraft",
    "draft_copy",
]
