import pytest

from app.services import HostDocument


def _clear_body(doc: HostDocument) -> None:
    body = doc.docx.element.body
    for element in list(body):
        if element.tag.split('}')[-1] in ('p', 'tbl'):
            body.remove(element)


@pytest.fixture
def make_doc():
    """
    Build a document from (text, heading) pairs.

    A bare string is a NORMAL paragraph.
    """
    def _make(*paragraphs):
        doc = HostDocument()
        _clear_body(doc)
        for item in paragraphs:
            if isinstance(item, str):
                doc.append_paragraph(item)
            else:
                text, heading = item
                doc.append_paragraph(text, heading)
        return doc
    return _make
