from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.main import app, get_copywriter
from app.models import HeadingLevel
from app.services import HostDocument, LLMCopywriter
from app.utils import document_storage

from helpers import texts


H = HeadingLevel
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

client = TestClient(app)


@pytest.fixture
def wireframe_bytes(make_doc):
    doc = make_doc(("Title", H.H2), ("Body text", H.H6))
    return doc.to_bytes()


def _upload(data: bytes, name: str = "wire.docx"):
    return {"file": (name, data, DOCX)}


def _download(doc_id: str) -> HostDocument:
    response = client.get(f"/api/download/{doc_id}")
    assert response.status_code == 200
    assert response.headers["content-type"] == DOCX
    return HostDocument.from_bytes(response.content)


# --- health ---

def test_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


# --- uploads ---

def test_rejects_non_docx(wireframe_bytes):
    response = client.post("/api/html/export", files=_upload(wireframe_bytes, "wire.pdf"))
    assert response.status_code == 400


def test_rejects_unreadable_docx():
    response = client.post("/api/html/export", files=_upload(b"not a zip"))
    assert response.status_code == 400


# --- export ---

def test_export_to_clipboard(wireframe_bytes):
    response = client.post(
        "/api/html/export",
        files=_upload(wireframe_bytes),
        data={"copy_to_clipboard": "true"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["content"] == "<h2>Title</h2>\n<p>Body text</p>"
    assert data["document_id"] is None


def test_export_into_document(wireframe_bytes):
    response = client.post(
        "/api/html/export",
        files=_upload(wireframe_bytes),
        data={"position": "start"},
    )

    data = response.json()
    assert data["success"] is True
    converted = _download(data["document_id"])
    assert texts(converted) == ["", "<h2>Title</h2>", "<p>Body text</p>", "", "Title", "Body text"]


def test_export_rejects_unknown_position(wireframe_bytes):
    response = client.post(
        "/api/html/export",
        files=_upload(wireframe_bytes),
        data={"position": "middle"},
    )
    assert response.status_code == 422


# --- strip ---

def test_strip_all(make_doc):
    data = make_doc("Intro", "<h2>Title</h2>", "", "", "Outro").to_bytes()
    response = client.post("/api/html/strip", files=_upload(data), data={"all": "true"})

    body = response.json()
    assert body["success"] is True
    assert body["mode"] == "all"
    assert body["removed_count"] == 3
    assert texts(_download(body["document_id"])) == ["Intro", "Outro"]


def test_strip_tags(make_doc):
    data = make_doc("<h2>Title</h2>", "{/* note */}").to_bytes()
    response = client.post("/api/html/strip", files=_upload(data))

    body = response.json()
    assert body["mode"] == "tags"
    assert body["replaced_count"] == 1
    assert texts(_download(body["document_id"])) == ["Title"]


# --- import ---

def test_import_lines(make_doc):
    data = make_doc("Intro").to_bytes()
    response = client.post(
        "/api/html/import",
        files=_upload(data),
        data={"html": "<h2>One</h2>\n<h3>Two</h3>"},
    )

    body = response.json()
    assert body["imported_count"] == 2
    assert texts(_download(body["document_id"])) == ["Intro", "One", "", "Two"]


def test_import_from_document_text(make_doc):
    data = make_doc("<h2>One</h2>", "<p>Two</p>").to_bytes()
    response = client.post("/api/html/import", files=_upload(data))

    body = response.json()
    assert body["imported_count"] == 2
    assert texts(_download(body["document_id"]))[-2:] == ["One", "Two"]


# --- page ---

def test_html_page(wireframe_bytes):
    response = client.post(
        "/api/html/page",
        files=_upload(wireframe_bytes),
        data={"title": "Landing page"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "filename=Landing_page.html" in response.headers["content-disposition"]
    assert "<h2>Title</h2>" in response.text


def test_html_page_without_headings(make_doc):
    response = client.post("/api/html/page", files=_upload(make_doc("plain").to_bytes()))
    assert response.status_code == 400


# --- wireframe / prompts ---

def test_read_wireframe(wireframe_bytes):
    response = client.post("/api/wireframe/read", files=_upload(wireframe_bytes))

    body = response.json()
    assert body["ux"] == "h2: Title\np: Body text\n"
    assert body["heading_count"] == 2


def test_insert_prompt(make_doc):
    data = make_doc("A").to_bytes()
    response = client.post(
        "/api/prompts/insert",
        files=_upload(data),
        data={"prompt_content": "write copy", "prompt_title": "Prompt"},
    )

    body = response.json()
    assert body["success"] is True
    assert texts(_download(body["document_id"])) == ["A", "", "Prompt", "---", "write copy", ""]


# --- ai ---

def test_ai_draft_unavailable(wireframe_bytes):
    writer = LLMCopywriter(api_key="k")
    writer.client = None
    app.dependency_overrides[get_copywriter] = lambda: writer
    try:
        response = client.post(
            "/api/ai/draft", files=_upload(wireframe_bytes), data={"prompt": "x"}
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503


def test_ai_draft(wireframe_bytes):
    writer = LLMCopywriter(api_key="k")
    writer.client = MagicMock()
    message = MagicMock(content="<h2>Better title</h2>")
    writer.client.chat.completions.create.return_value = MagicMock(
        choices=[MagicMock(message=message)]
    )
    app.dependency_overrides[get_copywriter] = lambda: writer
    try:
        response = client.post(
            "/api/ai/draft", files=_upload(wireframe_bytes), data={"prompt": "punchier"}
        )
    finally:
        app.dependency_overrides.clear()

    body = response.json()
    assert body["success"] is True
    assert body["imported_count"] == 1
    assert texts(_download(body["document_id"]))[-1] == "Better title"


# --- download ---

def test_download_unknown_document():
    assert client.get("/api/download/missing").status_code == 404


def test_download_expired_document(wireframe_bytes):
    doc_id = document_storage.store(wireframe_bytes, filename="old.docx")
    document_storage.get(doc_id).created -= document_storage.max_age_seconds + 1

    assert client.get(f"/api/download/{doc_id}").status_code == 404
