"""
Data models and schemas for heading/HTML conversion.
"""

from dataclasses import dataclass, field
from typing import List
from pydantic import BaseModel

from app.models.enums import HeadingLevel, StripMode


@dataclass(frozen=True)
class TagMapping:
    """HTML tag pair emitted for one heading level."""
    open_tag: str
    close_tag: str
    blank_line_before: bool


@dataclass
class ConvertedLine:
    """One heading paragraph rendered as HTML (or as a JSX comment)."""
    text: str
    heading: HeadingLevel
    is_comment: bool = False
    blank_line_before: bool = False

    @property
    def needs_spacing(self) -> bool:
        """True when a blank paragraph goes before this line on insertion."""
        return (
            not self.is_comment
            and self.blank_line_before
            and self.heading in (HeadingLevel.H1, HeadingLevel.H2)
        )

    @property
    def bold_span(self) -> tuple[int, int] | None:
        """Character range [start, end) to bold, or None."""
        if self.is_comment or self.heading not in (
            HeadingLevel.H1, HeadingLevel.H2, HeadingLevel.H3
        ):
            return None
        start = self.text.find(">") + 1
        end = self.text.rfind("<")
        if start <= 0 or end <= start:
            return None
        return start, end


@dataclass
class ExportResult:
    """Result of exporting headings to HTML."""
    success: bool
    content: str | None = None      # set on the clipboard path only
    error: str | None = None
    execution_time_ms: int = 0


@dataclass
class StripResult:
    """Result of removing generated HTML."""
    success: bool
    mode: StripMode | None = None
    removed_count: int = 0          # "all" mode
    replaced_count: int = 0         # "tags" mode
    error: str | None = None
    execution_time_ms: int = 0


@dataclass
class ImportResult:
    """Result of turning HTML lines back into heading paragraphs."""
    success: bool
    imported_count: int = 0
    error: str | None = None
    execution_time_ms: int = 0


@dataclass
class WireframeReadout:
    """Heading content of a wireframe in three parallel renderings."""
    text: str = ""
    ux: str = ""
    html: str = ""
    headings: List[HeadingLevel] = field(default_factory=list)


@dataclass
class PromptResult:
    """Result of inserting a prompt block."""
    success: bool
    inserted_paragraphs: int = 0
    error: str | None = None
    execution_time_ms: int = 0


# ============================================================
# API RESPONSES
# ============================================================

class ExportResponse(BaseModel):
    """Response from the export endpoint."""
    success: bool
    content: str | None = None
    error: str | None = None
    execution_time_ms: int
    document_id: str | None = None


class StripResponse(BaseModel):
    """Response from the strip endpoint."""
    success: bool
    mode: str | None = None
    removed_count: int = 0
    replaced_count: int = 0
    error: str | None = None
    execution_time_ms: int
    document_id: str | None = None


class ImportResponse(BaseModel):
    """Response from the import and AI draft endpoints."""
    success: bool
    imported_count: int = 0
    error: str | None = None
    execution_time_ms: int
    document_id: str | None = None


class WireframeResponse(BaseModel):
    """Response from the wireframe read endpoint."""
    text: str
    ux: str
    html: str
    heading_count: int


class PromptResponse(BaseModel):
    """Response from the prompt insertion endpoint."""
    success: bool
    inserted_paragraphs: int = 0
    error: str | None = None
    execution_time_ms: int
    document_id: str | None = None
