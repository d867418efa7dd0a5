"""
Wireframe helpers.
AI-friendly readouts of a wireframe, prompt insertion, and standalone HTML
page generation.
"""

import re
import time
import logging
from datetime import date
from html import escape

from app.errors import PipewriterError, InvalidInputError
from app.models import HeadingLevel, WireframeReadout, PromptResult
from app.services.converter import TAG_MAP, build_html_lines
from app.services.document import HostDocument

logger = logging.getLogger(__name__)


# Role label put in front of each heading in the UX rendering
UX_LABELS = {
    HeadingLevel.H1: "",
    HeadingLevel.H2: "h2: ",
    HeadingLevel.H3: "h3: ",
    HeadingLevel.H4: "feature or button: ",
    HeadingLevel.H5: "eyebrow: ",
    HeadingLevel.H6: "p: ",
}


def read_wireframe(doc: HostDocument, up_to: int | None = None) -> WireframeReadout:
    """
    Collect the heading content of a wireframe.

    Walks the top-level blocks up to and including index up_to (the block
    holding the cursor), or the whole document when up_to is None. Tables
    are read cell by cell.

    Returns:
        WireframeReadout with the plain text, the role-labelled text and the
        HTML rendering, one line per heading
    """
    blocks = doc.blocks()
    if up_to is not None:
        if up_to < 0:
            raise InvalidInputError(f"Invalid cursor position: {up_to}")
        blocks = blocks[:up_to + 1]

    readout = WireframeReadout()
    text_lines, ux_lines, html_lines = [], [], []

    for block in blocks:
        for paragraph in doc.paragraphs_of(block):
            heading = doc.heading_of(paragraph)
            if heading is HeadingLevel.NORMAL:
                continue

            text = paragraph.text
            mapping = TAG_MAP[heading]
            text_lines.append(text)
            ux_lines.append(UX_LABELS[heading] + text)
            html_lines.append(mapping.open_tag + text + mapping.close_tag)
            readout.headings.append(heading)

    readout.text = "".join(line + "\n" for line in text_lines)
    readout.ux = "".join(line + "\n" for line in ux_lines)
    readout.html = "".join(line + "\n" for line in html_lines)
    return readout


def insert_prompt(
    doc: HostDocument,
    content: str,
    title: str | None = None,
    after: int | None = None,
) -> PromptResult:
    """
    Insert a prompt block after top-level block `after`, or at the end.

    The block is framed by blank paragraphs. A title becomes a Heading 3
    followed by a "---" separator; every content line is trimmed and kept,
    empty lines included.
    """
    start_time = time.time()

    try:
        if not content:
            raise InvalidInputError("No prompt content provided")
        if after is not None and after < 0:
            raise InvalidInputError(f"Invalid insertion point: {after}")

        with doc.transaction():
            anchor = None if after is None else doc.block_at(after + 1)

            doc.insert_paragraph("", before=anchor)
            if title:
                doc.insert_paragraph(title, HeadingLevel.H3, before=anchor)
                doc.insert_paragraph("---", before=anchor)

            inserted = 0
            for line in content.split("\n"):
                doc.insert_paragraph(line.strip(), before=anchor)
                inserted += 1

            doc.insert_paragraph("", before=anchor)

    except PipewriterError as e:
        logger.error("Error in insert_prompt: %s", e)
        return PromptResult(
            success=False,
            error=str(e),
            execution_time_ms=int((time.time() - start_time) * 1000),
        )

    return PromptResult(
        success=True,
        inserted_paragraphs=inserted,
        execution_time_ms=int((time.time() - start_time) * 1000),
    )


# ============================================================
# STANDALONE HTML PAGE
# ============================================================

PAGE_STYLE = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6;
            max-width: 1200px;
            margin: 0 auto;
            padding: 20px;
            background-color: #f8f9fa;
        }

        h1, h2, h3 {
            color: #333;
            margin-top: 2em;
            margin-bottom: 1em;
        }

        h1 {
            font-size: 2.5em;
            border-bottom: 3px solid #007bff;
            padding-bottom: 0.3em;
        }

        h2 {
            font-size: 2em;
            color: #495057;
        }

        h3 {
            font-size: 1.5em;
            color: #6c757d;
        }

        button {
            background-color: #007bff;
            color: white;
            border: none;
            padding: 12px 24px;
            border-radius: 6px;
            cursor: pointer;
            font-size: 16px;
            margin: 10px 5px;
        }

        label {
            display: inline-block;
            background-color: #e9ecef;
            padding: 8px 16px;
            border-radius: 4px;
            margin: 5px;
            color: #495057;
            font-weight: 500;
        }

        p {
            color: #6c757d;
            margin: 1em 0;
        }

        .wireframe-header {
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
            padding: 20px;
            border-radius: 8px;
            margin-bottom: 30px;
            text-align: center;
        }

        .wireframe-header h1 {
            margin: 0;
            border: none;
            color: white;
        }

        .wireframe-footer {
            margin-top: 40px;
            padding: 20px;
            background-color: #e9ecef;
            border-radius: 8px;
            text-align: center;
            color: #6c757d;
            font-size: 14px;
        }
"""


def build_html_page(
    doc: HostDocument,
    title: str | None = None,
    generated_on: date | None = None,
) -> str:
    """
    Render the document's heading content as a complete HTML page.

    Raises:
        InvalidInputError: The document has no heading content
    """
    lines = build_html_lines(doc)
    if not lines:
        raise InvalidInputError(
            "No HTML content found. Add some heading content first."
        )

    title = escape(title or doc.title or "wireframe")
    generated_on = generated_on or date.today()
    content = "\n".join(line.text for line in lines)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>{PAGE_STYLE}    </style>
</head>
<body>
    <div class="wireframe-header">
        <h1>{title}</h1>
        <p>Wireframe generated by Pipewriter</p>
    </div>

    <main>
{content}
    </main>

    <div class="wireframe-footer">
        <p>Generated on {generated_on.isoformat()} &bull; Made with Pipewriter</p>
    </div>
</body>
</html>"""


def page_filename(title: str) -> str:
    """Safe download name for a page title."""
    safe = re.sub(r"[^a-zA-Z0-9_-]", "_", title)
    return (safe or "wireframe") + ".html"
