"""
Enums for heading conversion.
"""

from enum import Enum


class HeadingLevel(str, Enum):
    """Paragraph heading level. NORMAL means "not a heading"."""
    NORMAL = "normal"
    H1 = "h1"
    H2 = "h2"
    H3 = "h3"
    H4 = "h4"
    H5 = "h5"
    H6 = "h6"

    @property
    def style_name(self) -> str:
        """Name of the Word paragraph style carrying this level."""
        if self is HeadingLevel.NORMAL:
            return "Normal"
        return f"Heading {self.value[1]}"

    @classmethod
    def from_style_name(cls, name: str | None) -> "HeadingLevel":
        """Map a paragraph style name to a level; anything unknown is NORMAL."""
        if not name:
            return cls.NORMAL
        parts = name.strip().lower().split()
        if len(parts) == 2 and parts[0] == "heading" and parts[1] in ("1", "2", "3", "4", "5", "6"):
            return cls("h" + parts[1])
        return cls.NORMAL


class InsertPosition(str, Enum):
    """Where exported HTML lines are inserted."""
    START = "start"
    END = "end"


class StripMode(str, Enum):
    """How generated markup is removed."""
    ALL = "all"     # delete HTML paragraphs and the blank runs around them
    TAGS = "tags"   # remove tags, keep the text
