"""
Models package - data structures and schemas.
"""

from app.models.enums import HeadingLevel, InsertPosition, StripMode
from app.models.schemas import (
    TagMapping,
    ConvertedLine,
    ExportResult,
    StripResult,
    ImportResult,
    WireframeReadout,
    PromptResult,
    ExportResponse,
    StripResponse,
    ImportResponse,
    WireframeResponse,
    PromptResponse,
)

__all__ = [
    "HeadingLevel",
    "InsertPosition",
    "StripMode",
    "TagMapping",
    "ConvertedLine",
    "ExportResult",
    "StripResult",
    "ImportResult",
    "WireframeReadout",
    "PromptResult",
    "ExportResponse",
    "StripResponse",
    "ImportResponse",
    "WireframeResponse",
    "PromptResponse",
]
