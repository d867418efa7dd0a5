"""
Host document service.
Wraps a Word document (.docx) behind the small set of paragraph operations
the converters need.
"""

import io
import copy
from contextlib import contextmanager
from typing import Iterator, List

from docx import Document
from docx.oxml import OxmlElement
from docx.table import Table, _Cell
from docx.text.paragraph import Paragraph

from app.errors import HostMutationError
from app.models import HeadingLevel


Block = Paragraph | Table


def _tag(element) -> str:
    """Tag name without namespace."""
    return element.tag.split('}')[-1]


class HostDocument:
    """
    Ordered body of a Word document.

    Paragraphs and tables are handed out as python-docx objects bound to
    their XML elements, so a handle stays valid while other paragraphs are
    inserted or removed around it.
    """

    def __init__(self, document=None):
        self._document = document if document is not None else Document()

    @classmethod
    def from_bytes(cls, file_bytes: bytes) -> "HostDocument":
        """Load a document from raw .docx bytes."""
        return cls(Document(io.BytesIO(file_bytes)))

    def to_bytes(self) -> bytes:
        """Serialize the document back to .docx bytes."""
        output = io.BytesIO()
        self._document.save(output)
        output.seek(0)
        return output.getvalue()

    @property
    def docx(self):
        """The underlying python-docx Document."""
        return self._document

    @property
    def title(self) -> str:
        return self._document.core_properties.title or ""

    def __len__(self) -> int:
        return len(self.blocks())

    # ------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------

    def blocks(self) -> List[Block]:
        """Top-level paragraphs and tables, in body order."""
        container = self._document._body
        blocks = []
        for element in self._document.element.body:
            tag = _tag(element)
            if tag == 'p':
                blocks.append(Paragraph(element, container))
            elif tag == 'tbl':
                blocks.append(Table(element, container))
        return blocks

    def block_at(self, index: int) -> Block | None:
        """Top-level block at index, or None past the end."""
        blocks = self.blocks()
        if 0 <= index < len(blocks):
            return blocks[index]
        return None

    def top_level_paragraphs(self) -> List[Paragraph]:
        return [b for b in self.blocks() if isinstance(b, Paragraph)]

    def iter_paragraphs(self) -> Iterator[Paragraph]:
        """
        Every paragraph in document order.

        A table contributes the paragraphs of its cells at its own position,
        row by row and cell by cell; nested tables are walked the same way.
        """
        yield from _walk(self._document.element.body, self._document._body)

    def paragraphs_of(self, block: Block) -> Iterator[Paragraph]:
        """Paragraphs of one top-level block; a table yields its cell paragraphs."""
        if isinstance(block, Paragraph):
            yield block
        else:
            yield from _walk([block._element], block._parent)

    def text_lines(self) -> List[str]:
        """Plain text of the document, one entry per line."""
        lines = []
        for paragraph in self.iter_paragraphs():
            lines.extend(paragraph.text.split("\n"))
        return lines

    def heading_of(self, paragraph: Paragraph) -> HeadingLevel:
        style = paragraph.style
        return HeadingLevel.from_style_name(style.name if style is not None else None)

    # ------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------

    def insert_paragraph(
        self,
        text: str = "",
        heading: HeadingLevel = HeadingLevel.NORMAL,
        before: Block | None = None,
    ) -> Paragraph:
        """Insert a paragraph before a block, or append it when before is None."""
        if before is None:
            paragraph = self._document.add_paragraph()
        else:
            p = OxmlElement('w:p')
            before._element.addprevious(p)
            paragraph = Paragraph(p, before._parent)

        if text:
            paragraph.add_run(text)
        if heading is not HeadingLevel.NORMAL:
            self.set_heading(paragraph, heading)
        return paragraph

    def insert_paragraph_at(
        self,
        index: int,
        text: str = "",
        heading: HeadingLevel = HeadingLevel.NORMAL,
    ) -> Paragraph:
        """Insert a paragraph so that it becomes top-level block number index."""
        if index < 0 or index > len(self):
            raise HostMutationError(f"Insert index {index} out of range")
        return self.insert_paragraph(text, heading, before=self.block_at(index))

    def append_paragraph(
        self, text: str = "", heading: HeadingLevel = HeadingLevel.NORMAL
    ) -> Paragraph:
        return self.insert_paragraph(text, heading)

    def remove_paragraph(self, paragraph: Paragraph) -> bool:
        """
        Remove a paragraph from its container.

        A table cell must keep at least one paragraph, so the last paragraph
        of a cell is emptied instead. Returns True when the paragraph was
        actually removed.
        """
        element = paragraph._element
        parent = element.getparent()
        if parent is None:
            raise HostMutationError("Paragraph is no longer part of the document")

        if _tag(parent) == 'tc' and len([c for c in parent if _tag(c) == 'p']) == 1:
            paragraph.text = ""
            return False

        parent.remove(element)
        return True

    def set_heading(self, paragraph: Paragraph, heading: HeadingLevel) -> None:
        style = None if heading is HeadingLevel.NORMAL else heading.style_name
        try:
            paragraph.style = style
        except KeyError as e:
            raise HostMutationError(
                f"Document has no '{heading.style_name}' paragraph style"
            ) from e
        except ValueError as e:
            # style exists under that name but is not a paragraph style
            raise HostMutationError(
                f"Cannot apply '{heading.style_name}' as a paragraph style: {e}"
            ) from e

    def set_text(self, paragraph: Paragraph, text: str) -> None:
        paragraph.text = text

    def set_bold(self, paragraph: Paragraph, start: int, end: int) -> None:
        """
        Bold the characters in [start, end).

        The paragraph is rebuilt as plain runs, so existing run formatting
        is not preserved.
        """
        text = paragraph.text
        if not 0 <= start < end <= len(text):
            raise HostMutationError(
                f"Bold range {start}:{end} outside paragraph of length {len(text)}"
            )

        paragraph.clear()
        for chunk, bold in (
            (text[:start], False),
            (text[start:end], True),
            (text[end:], False),
        ):
            if chunk:
                run = paragraph.add_run(chunk)
                if bold:
                    run.bold = True

    @contextmanager
    def transaction(self):
        """
        Restore the body to its state at entry if the block raises.

        The exception is re-raised after the rollback.
        """
        body = self._document.element.body
        snapshot = copy.deepcopy(body)
        try:
            yield self
        except Exception:
            for child in list(body):
                body.remove(child)
            for child in list(snapshot):
                body.append(child)
            raise


def _walk(container_element, parent) -> Iterator[Paragraph]:
    for element in container_element:
        tag = _tag(element)
        if tag == 'p':
            yield Paragraph(element, parent)
        elif tag == 'tbl':
            table = Table(element, parent)
            for tr in element.tr_lst:
                for tc in tr.tc_lst:
                    yield from _walk(tc, _Cell(tc, table))
