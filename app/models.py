"""
Pydantic models for request/response validation.
"""

from typing import List, Optional, Any
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field


# Fixed placeholder stored when text extraction fails
EXTRACTION_FAILED_TEXT = "Text extraction failed for this PDF. The file can still be viewed."


class PDFRecord(BaseModel):
    """Stored metadata and extracted text for one uploaded PDF."""
    id: str = Field(..., description="Unique identifier for the uploaded PDF")
    filename: str = Field(..., description="Original filename of the uploaded PDF")
    file_path: str = Field(..., description="Location of the stored PDF on disk")
    text: str = Field(default="", description="Extracted text, or the extraction-failed placeholder")
    pages: int = Field(default=1, ge=1, description="Number of pages in the PDF")
    upload_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Upload timestamp")
    vectors: List[Any] = Field(default_factory=list, description="Vector embeddings of the text (for future use)")

    @property
    def extraction_failed(self) -> bool:
        return self.text == EXTRACTION_FAILED_TEXT


class UploadResponse(BaseModel):
    """Response model for PDF upload."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique identifier for the uploaded PDF")
    filename: str = Field(..., description="Original filename of the uploaded PDF")
    pages: int = Field(..., description="Number of pages in the PDF")
    text: str = Field(..., description="Extracted text from the PDF")
    vectors: List[Any] = Field(default_factory=list, description="Vector embeddings of the text (for future use)")
    upload_date: datetime = Field(..., alias="uploadDate", description="Timestamp when the PDF was uploaded")

    @classmethod
    def from_record(cls, record: PDFRecord) -> "UploadResponse":
        return cls(
            id=record.id,
            filename=record.filename,
            pages=record.pages,
            text=record.text,
            vectors=list(record.vectors),
            upload_date=record.upload_date,
        )


class SearchRequest(BaseModel):
    """Request model for searching inside a PDF."""
    query: str = Field(..., description="Search term to find in the PDF")


class SearchResult(BaseModel):
    """A single matching line."""
    model_config = ConfigDict(populate_by_name=True)

    line: str = Field(..., description="Matching line of text")
    line_number: int = Field(..., alias="lineNumber", description="Line number in the document")
    page: int = Field(..., description="Estimated page number")


class ChatRequest(BaseModel):
    """Request model for chat queries."""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="The user's question or message")
    pdf_id: Optional[str] = Field(default=None, alias="pdfId", description="Optional PDF ID to provide context from a specific document")


class Citation(BaseModel):
    """A line of the document quoted as context for an answer."""
    page: int = Field(..., description="Page number where the citation was found")
    text: str = Field(..., description="Relevant text snippet")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence score of the citation")


class ChatResponse(BaseModel):
    """Response model for chat queries."""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="AI-generated response")
    citations: List[Citation] = Field(default_factory=list, description="Lines of the PDF used as context")
    token_usage: int = Field(default=0, alias="tokenUsage", description="Number of tokens used in the AI request")


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = Field(..., description="Health status")
    timestamp: str = Field(..., description="Current timestamp")


class ErrorResponse(BaseModel):
    """Response model for errors."""
    error: str = Field(..., description="Error message")
    details: Optional[Any] = Field(default=None, description="Additional error details (only in debug mode)")
