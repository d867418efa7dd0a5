from app.models import HeadingLevel
from app.services import HostDocument


def texts(doc: HostDocument) -> list[str]:
    return [p.text for p in doc.top_level_paragraphs()]


def headings(doc: HostDocument) -> list[HeadingLevel]:
    return [doc.heading_of(p) for p in doc.top_level_paragraphs()]
