"""
Heading/HTML conversion service.
Turns heading-styled paragraphs into HTML lines and back, and removes
generated markup again.
"""

import re
import time
import logging
from typing import Iterable, List

from app.errors import PipewriterError, InvalidInputError
from app.models import (
    HeadingLevel,
    InsertPosition,
    StripMode,
    TagMapping,
    ConvertedLine,
    ExportResult,
    StripResult,
    ImportResult,
)
from app.services.document import HostDocument

logger = logging.getLogger(__name__)


# ============================================================
# LOOKUP TABLES
# ============================================================

TAG_MAP = {
    HeadingLevel.H1: TagMapping("<h1>", "</h1>", True),
    HeadingLevel.H2: TagMapping("<h2>", "</h2>", True),
    HeadingLevel.H3: TagMapping("<h3>", "</h3>", True),
    HeadingLevel.H4: TagMapping("<button>", "</button>", False),
    HeadingLevel.H5: TagMapping("<label>", "</label>", False),
    HeadingLevel.H6: TagMapping("<p>", "</p>", False),
}

# Tried in order, first match wins
COMMENT_PATTERNS = [
    re.compile(r'^//(.*)'),       # JS single line
    re.compile(r'^/\*(.*)'),      # JS multi line
    re.compile(r'^#(.*)'),        # Python/Ruby style
    re.compile(r'^<!--(.*)$'),    # HTML style
]

HTML_TO_HEADING = {
    "h1": HeadingLevel.H1,
    "h2": HeadingLevel.H2,
    "h3": HeadingLevel.H3,
    "h4": HeadingLevel.H4,
    "h5": HeadingLevel.H5,
    "p": HeadingLevel.H6,
}

# Imported headings that get a blank paragraph in front of them
SPACED_IMPORT_HEADINGS = (HeadingLevel.H1, HeadingLevel.H2, HeadingLevel.H3)

HTML_TAG_RE = re.compile(r'<[^>]+>')
JSX_COMMENT_RE = re.compile(r'\{/\*.*?\*/\}')
JSX_COMMENT_MARKER = "{/*"


def _elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)


# ============================================================
# DOCUMENT -> HTML
# ============================================================

def to_react_comment(text: str) -> str | None:
    """Render text as a JSX comment if it uses a comment syntax, else None."""
    for pattern in COMMENT_PATTERNS:
        match = pattern.match(text)
        if match:
            return f"{{/* {match.group(1).strip()} */}}"
    return None


def convert_paragraph(heading: HeadingLevel, text: str) -> ConvertedLine | None:
    """
    Convert one paragraph to its HTML line.

    Returns None for non-heading paragraphs and for headings that are blank
    after trimming.
    """
    mapping = TAG_MAP.get(heading)
    text = text.strip()
    if mapping is None or not text:
        return None

    comment = to_react_comment(text)
    if comment is not None:
        return ConvertedLine(
            text=comment,
            heading=heading,
            is_comment=True,
            blank_line_before=mapping.blank_line_before,
        )

    return ConvertedLine(
        text=mapping.open_tag + text + mapping.close_tag,
        heading=heading,
        blank_line_before=mapping.blank_line_before,
    )


def build_html_lines(doc: HostDocument) -> List[ConvertedLine]:
    """Convert every heading paragraph of the document, tables included."""
    lines = []
    for paragraph in doc.iter_paragraphs():
        line = convert_paragraph(doc.heading_of(paragraph), paragraph.text)
        if line is not None:
            lines.append(line)
    return lines


def export_to_html(
    doc: HostDocument,
    position: InsertPosition | str = InsertPosition.END,
    copy_to_clipboard: bool = False,
) -> ExportResult:
    """
    Export heading paragraphs as HTML.

    With copy_to_clipboard the joined HTML is returned as content and the
    document is left untouched. Otherwise each line is inserted as a plain
    paragraph at the start or end of the document: a blank paragraph goes
    before H1/H2 lines, the tag content of H1-H3 lines is bolded, and one
    blank paragraph closes the block. Comment lines get neither.

    Args:
        doc: Document to read (and write, unless copying)
        position: "start" or "end"
        copy_to_clipboard: Return the HTML instead of inserting it

    Returns:
        ExportResult; success is False when options are invalid or the
        document rejects an edit, in which case no edit is kept
    """
    start_time = time.time()

    try:
        position = _parse_enum(InsertPosition, position, "position")
        lines = build_html_lines(doc)

        if copy_to_clipboard:
            content = "\n".join(line.text for line in lines).strip()
            return ExportResult(
                success=True,
                content=content,
                execution_time_ms=_elapsed_ms(start_time),
            )

        with doc.transaction():
            anchor = doc.block_at(0) if position is InsertPosition.START else None

            for line in lines:
                if line.needs_spacing:
                    doc.insert_paragraph("", before=anchor)

                paragraph = doc.insert_paragraph(line.text, before=anchor)
                span = line.bold_span
                if span is not None:
                    doc.set_bold(paragraph, *span)

            doc.insert_paragraph("", before=anchor)

        logger.info("Exported %d heading(s) to HTML at %s", len(lines), position.value)
        return ExportResult(success=True, execution_time_ms=_elapsed_ms(start_time))

    except PipewriterError as e:
        logger.error("Error in export_to_html: %s", e)
        return ExportResult(
            success=False,
            error=str(e),
            execution_time_ms=_elapsed_ms(start_time),
        )


# ============================================================
# STRIP GENERATED HTML
# ============================================================

def has_markup(text: str) -> bool:
    """True if text holds an HTML tag or a JSX comment marker."""
    return bool(HTML_TAG_RE.search(text)) or JSX_COMMENT_MARKER in text


def strip_markup(text: str) -> str:
    """Remove HTML tags and JSX comments from text."""
    return JSX_COMMENT_RE.sub('', HTML_TAG_RE.sub('', text))


def strip_html(doc: HostDocument, remove_all: bool = False) -> StripResult:
    """
    Remove generated HTML from the document.

    remove_all=True deletes every top-level paragraph holding markup along with the
    blank paragraphs around it. Otherwise it removes the tags from every
    paragraph and keeps the text, deleting paragraphs left empty.
    """
    start_time = time.time()
    mode = StripMode.ALL if remove_all else StripMode.TAGS

    try:
        if mode is StripMode.ALL:
            with doc.transaction():
                removed = _strip_all(doc)
            logger.info("Removed %d HTML paragraph(s)", removed)
            return StripResult(
                success=True,
                mode=mode,
                removed_count=removed,
                execution_time_ms=_elapsed_ms(start_time),
            )

        with doc.transaction():
            replaced = _strip_tags(doc)
        logger.info("Stripped tags from %d paragraph(s)", replaced)
        return StripResult(
            success=True,
            mode=mode,
            replaced_count=replaced,
            execution_time_ms=_elapsed_ms(start_time),
        )

    except PipewriterError as e:
        logger.error("Error in strip_html: %s", e)
        return StripResult(
            success=False,
            mode=mode,
            error=str(e),
            execution_time_ms=_elapsed_ms(start_time),
        )


def _strip_all(doc: HostDocument) -> int:
    """
    Backward sweep over top-level paragraphs.

    A blank paragraph goes when markup has already been seen further down,
    when it follows another blank, or when the blank run it belongs to
    ends directly at a markup paragraph.
    """
    removed = 0
    saw_html = False
    consecutive_empty = 0
    pending_blanks = []  # kept blanks of the current run

    for paragraph in reversed(doc.top_level_paragraphs()):
        text = paragraph.text

        if has_markup(text):
            for blank in pending_blanks:
                doc.remove_paragraph(blank)
                removed += 1
            pending_blanks = []
            doc.remove_paragraph(paragraph)
            removed += 1
            saw_html = True
            consecutive_empty = 0

        elif not text.strip():
            if saw_html or consecutive_empty > 0:
                doc.remove_paragraph(paragraph)
                removed += 1
            else:
                pending_blanks.append(paragraph)
            consecutive_empty += 1

        else:
            consecutive_empty = 0
            pending_blanks = []

    return removed


def _strip_tags(doc: HostDocument) -> int:
    """Forward sweep over all paragraphs; returns the number rewritten."""
    replaced = 0

    for paragraph in list(doc.iter_paragraphs()):
        text = paragraph.text
        if not has_markup(text):
            continue

        clean_text = strip_markup(text)
        if not clean_text.strip():
            doc.remove_paragraph(paragraph)
        elif clean_text != text:
            doc.set_text(paragraph, clean_text)
            replaced += 1

    return replaced


# ============================================================
# HTML -> DOCUMENT
# ============================================================

def parse_html_line(line: str) -> tuple[str, str] | None:
    """
    Split "<tag>inner</tag>" into (tag name, inner text).

    Returns None when the line does not start with a tag.
    """
    line = line.strip()
    if not line.startswith("<"):
        return None

    tag_end = line.find(">")
    if tag_end < 0:
        return None

    tag_name = line[1:tag_end].lower()
    close_start = line.rfind("<")
    if close_start <= tag_end:
        # no closing tag, keep everything after the opening one
        close_start = len(line)
    return tag_name, line[tag_end + 1:close_start].strip()


def import_from_html(doc: HostDocument, lines: Iterable[str]) -> ImportResult:
    """
    Append a heading paragraph for every recognised HTML line.

    H1-H3 get a blank paragraph in front of them, except the first heading
    produced by this call. Lines without a leading tag, or with an unknown
    tag, are skipped.
    """
    start_time = time.time()
    imported = 0
    if isinstance(lines, str):
        lines = lines.splitlines()

    try:
        with doc.transaction():
            for line in lines:
                parsed = parse_html_line(line)
                if parsed is None:
                    continue

                tag_name, inner_text = parsed
                heading = HTML_TO_HEADING.get(tag_name)
                if heading is None:
                    continue

                if heading in SPACED_IMPORT_HEADINGS and imported:
                    doc.append_paragraph("")
                doc.append_paragraph(inner_text, heading)
                imported += 1

    except PipewriterError as e:
        logger.error("Error in import_from_html: %s", e)
        return ImportResult(
            success=False,
            error=str(e),
            execution_time_ms=_elapsed_ms(start_time),
        )

    logger.info("Imported %d heading(s) from HTML", imported)
    return ImportResult(
        success=True,
        imported_count=imported,
        execution_time_ms=_elapsed_ms(start_time),
    )


def import_from_document(doc: HostDocument) -> ImportResult:
    """Import the HTML lines already written in the document's own text."""
    return import_from_html(doc, doc.text_lines())


def _parse_enum(enum_cls, value, option: str):
    try:
        return enum_cls(value)
    except ValueError as e:
        raise InvalidInputError(f"Invalid {option}: {value!r}") from e
