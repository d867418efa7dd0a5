"""
Pipewriter HTML Service
FastAPI application entry point.
"""

import logging

from fastapi import FastAPI, UploadFile, File, HTTPException, Form, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from app.config import settings
from app.errors import InvalidInputError
from app.models import (
    InsertPosition,
    ExportResponse,
    StripResponse,
    ImportResponse,
    WireframeResponse,
    PromptResponse,
)
from app.services import (
    HostDocument,
    export_to_html,
    strip_html,
    import_from_html,
    import_from_document,
    read_wireframe,
    insert_prompt,
    build_html_page,
    page_filename,
    LLMCopywriter,
    draft_copy,
)
from app.utils import document_storage

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

app = FastAPI(
    title=settings.APP_NAME,
    description="Convert heading-styled wireframe documents to HTML and back",
    version=settings.APP_VERSION,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_copywriter() -> LLMCopywriter:
    return LLMCopywriter()


async def _load_document(file: UploadFile) -> HostDocument:
    """Read an uploaded .docx into a HostDocument."""
    if not file.filename or not file.filename.endswith('.docx'):
        raise HTTPException(400, f"File must be .docx, got: {file.filename}")

    file_bytes = await file.read()
    try:
        return HostDocument.from_bytes(file_bytes)
    except Exception as e:
        logger.warning("Could not read %s: %s", file.filename, e)
        raise HTTPException(400, f"Could not read document: {file.filename}") from e


def _store(doc: HostDocument, filename: str) -> str:
    return document_storage.store(doc.to_bytes(), filename=f"pipewriter_{filename}")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/health")
async def health():
    """Health check for deployment."""
    return {"status": "ok"}


@app.post("/api/html/export", response_model=ExportResponse)
async def export_html(
    file: UploadFile = File(..., description="Wireframe document (.docx)"),
    position: InsertPosition = Form(
        default=InsertPosition.END,
        description="Where to insert the HTML: start or end",
    ),
    copy_to_clipboard: bool = Form(
        default=False,
        description="Return the HTML instead of inserting it",
    ),
):
    """
    Convert heading paragraphs to HTML.

    Returns the HTML as content when copying, otherwise the ID of the
    converted document.
    """
    doc = await _load_document(file)
    result = export_to_html(doc, position=position, copy_to_clipboard=copy_to_clipboard)

    document_id = None
    if result.success and not copy_to_clipboard:
        document_id = _store(doc, file.filename)

    return ExportResponse(
        success=result.success,
        content=result.content,
        error=result.error,
        execution_time_ms=result.execution_time_ms,
        document_id=document_id,
    )


@app.post("/api/html/strip", response_model=StripResponse)
async def strip_html_markup(
    file: UploadFile = File(..., description="Document with generated HTML (.docx)"),
    remove_all: bool = Form(
        default=False,
        alias="all",
        description="Delete HTML paragraphs entirely instead of removing tags",
    ),
):
    """Remove generated HTML tags, or whole HTML paragraphs."""
    doc = await _load_document(file)
    result = strip_html(doc, remove_all=remove_all)

    return StripResponse(
        success=result.success,
        mode=result.mode.value if result.mode else None,
        removed_count=result.removed_count,
        replaced_count=result.replaced_count,
        error=result.error,
        execution_time_ms=result.execution_time_ms,
        document_id=_store(doc, file.filename) if result.success else None,
    )


@app.post("/api/html/import", response_model=ImportResponse)
async def import_html(
    file: UploadFile = File(..., description="Target document (.docx)"),
    html: str | None = Form(
        default=None,
        description="HTML lines to import; the document's own text when omitted",
    ),
):
    """Turn HTML lines into heading paragraphs appended to the document."""
    doc = await _load_document(file)
    if html is None:
        result = import_from_document(doc)
    else:
        result = import_from_html(doc, html.splitlines())

    return ImportResponse(
        success=result.success,
        imported_count=result.imported_count,
        error=result.error,
        execution_time_ms=result.execution_time_ms,
        document_id=_store(doc, file.filename) if result.success else None,
    )


@app.post("/api/html/page")
async def download_html_page(
    file: UploadFile = File(..., description="Wireframe document (.docx)"),
    title: str | None = Form(default=None, description="Page title"),
):
    """Download the wireframe as a standalone HTML page."""
    doc = await _load_document(file)
    page_title = title or doc.title or file.filename.rsplit('.', 1)[0]

    try:
        page = build_html_page(doc, title=page_title)
    except InvalidInputError as e:
        raise HTTPException(400, str(e)) from e

    return Response(
        content=page,
        media_type="text/html; charset=utf-8",
        headers={
            "Content-Disposition": f"attachment; filename={page_filename(page_title)}"
        },
    )


@app.post("/api/wireframe/read", response_model=WireframeResponse)
async def read_wireframe_text(
    file: UploadFile = File(..., description="Wireframe document (.docx)"),
    up_to: int | None = Form(
        default=None,
        description="Index of the last top-level block to read (cursor position)",
    ),
):
    """Read the wireframe as plain, role-labelled and HTML text."""
    doc = await _load_document(file)
    try:
        readout = read_wireframe(doc, up_to=up_to)
    except InvalidInputError as e:
        raise HTTPException(400, str(e)) from e

    return WireframeResponse(
        text=readout.text,
        ux=readout.ux,
        html=readout.html,
        heading_count=len(readout.headings),
    )


@app.post("/api/prompts/insert", response_model=PromptResponse)
async def insert_prompt_block(
    file: UploadFile = File(..., description="Target document (.docx)"),
    prompt_content: str = Form(..., description="Prompt text, one paragraph per line"),
    prompt_title: str | None = Form(default=None, description="Optional title"),
    after: int | None = Form(
        default=None,
        description="Insert after this top-level block; at the end when omitted",
    ),
):
    """Insert a prompt block into the document."""
    doc = await _load_document(file)
    result = insert_prompt(doc, prompt_content, title=prompt_title, after=after)

    return PromptResponse(
        success=result.success,
        inserted_paragraphs=result.inserted_paragraphs,
        error=result.error,
        execution_time_ms=result.execution_time_ms,
        document_id=_store(doc, file.filename) if result.success else None,
    )


@app.post("/api/ai/draft", response_model=ImportResponse)
async def draft_ai_copy(
    file: UploadFile = File(..., description="Wireframe document (.docx)"),
    prompt: str = Form(..., description="What the copy should say"),
    copywriter: LLMCopywriter = Depends(get_copywriter),
):
    """Draft copy for the wireframe with the LLM and append it as headings."""
    if not copywriter.available:
        raise HTTPException(503, "AI drafting is not configured")

    doc = await _load_document(file)
    result = draft_copy(doc, prompt, copywriter=copywriter)

    return ImportResponse(
        success=result.success,
        imported_count=result.imported_count,
        error=result.error,
        execution_time_ms=result.execution_time_ms,
        document_id=_store(doc, file.filename) if result.success else None,
    )


@app.get("/api/download/{doc_id}")
async def download_document(doc_id: str):
    """Download a converted document."""
    stored = document_storage.get(doc_id)

    if not stored:
        raise HTTPException(404, "Document not found. It may have expired.")

    return Response(
        content=stored.doc_bytes,
        media_type=DOCX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename={stored.filename}"
        },
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
