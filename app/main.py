"""
FastAPI application for the PDF Chat API.
"""

from typing import List, Optional
from fastapi import FastAPI, File, UploadFile, HTTPException, Depends, Path, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from .config import settings, validate_required_settings
from .errors import UploadError, UploadErrorKind, DocumentNotFoundError, ChatGenerationError
from .models import (
    UploadResponse, SearchRequest, SearchResult, ChatRequest, ChatResponse,
    HealthResponse, ErrorResponse
)
from .services import DocumentService
from .utils import format_timestamp, validate_mime_type, handle_processing_error

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Validate required settings on startup
try:
    validate_required_settings()
except ValueError as e:
    logger.error(f"Configuration validation failed: {e}")
    raise

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A RESTful API for uploading, processing, and chatting with PDF documents using AI",
    docs_url="/api-docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
document_service = DocumentService()

PDF_NOT_FOUND = "PDF not found"


def get_document_service() -> DocumentService:
    return document_service


def _error_body(error: str, details=None) -> dict:
    body = ErrorResponse(error=error, details=details if settings.debug else None)
    return body.model_dump(exclude_none=True)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {"error": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"error": "Validation error", "details": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error", str(exc))
    )


def _not_found(exc: DocumentNotFoundError) -> HTTPException:
    logger.info(f"Lookup for unknown PDF {exc.document_id}")
    return HTTPException(status_code=404, detail=PDF_NOT_FOUND)


@app.get("/", response_model=dict)
async def root():
    """Root endpoint."""
    return {
        "message": "PDF Chat API is running",
        "version": settings.app_version,
        "timestamp": format_timestamp()
    }


@app.post("/api/upload-pdf", response_model=UploadResponse, tags=["PDF Management"])
async def upload_pdf(
    pdf: Optional[UploadFile] = File(None, description="PDF file to upload (max 50MB)"),
    service: DocumentService = Depends(get_document_service)
):
    """
    Upload a PDF file for processing and text extraction.

    The file is kept on disk and can be used for chat and search. A PDF whose
    text cannot be extracted is still accepted.
    """
    if pdf is None:
        raise HTTPException(status_code=400, detail="No PDF file uploaded")

    logger.info(f"File received: {pdf.filename} ({pdf.content_type})")

    try:
        if not validate_mime_type(pdf.content_type):
            raise UploadError(UploadErrorKind.INVALID_TYPE, f"Rejected content type {pdf.content_type}")

        record = service.upload(pdf.filename, pdf.file)
        return UploadResponse.from_record(record)

    except UploadError as e:
        handle_processing_error("pdf_upload", e, {"filename": pdf.filename, "kind": e.kind.value})
        return JSONResponse(status_code=e.status_code, content=_error_body(e.message, e.detail))
    finally:
        await pdf.close()


@app.get(
    "/api/pdf/{pdf_id}/file",
    response_class=FileResponse,
    responses={200: {"content": {"application/pdf": {}}}, 404: {"model": ErrorResponse}},
    tags=["PDF Management"]
)
async def get_pdf_file(pdf_id: str, service: DocumentService = Depends(get_document_service)):
    """Return the stored PDF for inline viewing."""
    try:
        record = service.get_record(pdf_id)
        path = service.get_file_path(pdf_id)
    except DocumentNotFoundError as e:
        raise _not_found(e)

    if path is None:
        raise HTTPException(status_code=404, detail="PDF file not found on disk")

    return FileResponse(
        path,
        media_type="application/pdf",
        filename=record.filename,
        content_disposition_type="inline"
    )


@app.get("/api/pdf/{pdf_id}/text", response_model=str, responses={404: {"model": ErrorResponse}}, tags=["PDF Management"])
async def get_pdf_text(pdf_id: str, service: DocumentService = Depends(get_document_service)):
    """Return the extracted text of a PDF."""
    try:
        return service.get_text(pdf_id)
    except DocumentNotFoundError as e:
        raise _not_found(e)


@app.post("/api/pdf/{pdf_id}/search", response_model=List[SearchResult], responses={404: {"model": ErrorResponse}}, tags=["PDF Search"])
async def search_pdf(pdf_id: str, request: SearchRequest, service: DocumentService = Depends(get_document_service)):
    """Find lines of the PDF containing the query, with their line and estimated page."""
    try:
        return service.search(pdf_id, request.query)
    except DocumentNotFoundError as e:
        raise _not_found(e)


@app.get("/api/pdf/{pdf_id}/page/{page_number}", response_model=str, responses={404: {"model": ErrorResponse}}, tags=["PDF Management"])
async def get_pdf_page(
    pdf_id: str,
    page_number: int = Path(..., ge=1, description="Page number (1-based)"),
    service: DocumentService = Depends(get_document_service)
):
    """Return the text of one page; pages past the end are empty."""
    try:
        return service.get_page(pdf_id, page_number)
    except DocumentNotFoundError as e:
        raise _not_found(e)


@app.post("/api/chat", response_model=ChatResponse, tags=["AI Chat"])
async def chat(request: ChatRequest, service: DocumentService = Depends(get_document_service)):
    """
    Send a message to the AI assistant.

    If a PDF ID is given, matching lines of that PDF are used as context.
    """
    try:
        return service.chat(request.message, request.pdf_id)
    except ChatGenerationError as e:
        logger.error(f"Chat error: {str(e)}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to process chat request",
                "message": "Sorry, I encountered an error. Please try again."
            }
        )


@app.get("/api/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check if the API server is running."""
    return HealthResponse(status="OK", timestamp=format_timestamp())


if __name__ == "__main__":
    import uvicorn
    logger.info(f"PDF Chat API running on port {settings.port}")
    logger.info(f"API Documentation: http://localhost:{settings.port}/api-docs")
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
